"""
Unit tests for API request/response models.

Tests Pydantic model validation and camelCase serialization.
"""

import pytest
from pydantic import ValidationError

from src.api.models import (
    AccountResponse,
    AccountWithCodesResponse,
    LoginRequest,
    NewPasswordRequest,
    RegisterRequest,
    UpdateAccountRequest,
)
from src.domain.ports import Account, CodePurpose, OneTimeCode


def register_fields(**overrides) -> dict:
    fields = {
        "email": "user@example.com",
        "password": "secure123",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "frontBaseUrl": "https://front.example.com",
    }
    fields.update(overrides)
    return fields


class TestRegisterRequest:
    """Tests for RegisterRequest model."""

    def test_valid_register_request(self) -> None:
        request = RegisterRequest(**register_fields())
        assert request.email == "user@example.com"
        assert request.first_name == "Ada"
        assert request.front_base_url == "https://front.example.com"
        assert request.country is None
        assert request.image is None

    def test_accepts_snake_case_names(self) -> None:
        request = RegisterRequest(
            email="user@example.com",
            password="secure123",
            first_name="Ada",
            last_name="Lovelace",
            front_base_url="https://front.example.com",
        )
        assert request.last_name == "Lovelace"

    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**register_fields(email="not-an-email"))
        assert "email" in str(exc_info.value)

    def test_empty_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(**register_fields(password=""))

    def test_short_password_accepted(self) -> None:
        """No strength policy: any non-empty password is accepted."""
        assert RegisterRequest(**register_fields(password="pw1")).password == "pw1"

    def test_password_longer_than_bcrypt_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(**register_fields(password="x" * 73))

    def test_password_limit_counts_bytes_not_characters(self) -> None:
        """72 two-byte characters are 144 bytes, beyond what bcrypt accepts."""
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(**register_fields(password="\u00e9" * 72))
        assert "72 bytes" in str(exc_info.value)

    def test_multibyte_password_within_limit_accepted(self) -> None:
        password = "\u00e9" * 36
        assert RegisterRequest(**register_fields(password=password)).password == password


class TestLoginRequest:
    def test_invalid_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email="nope", password="secure123")

    def test_password_over_byte_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email="user@example.com", password="\u00e9" * 72)


class TestNewPasswordRequest:
    def test_password_over_byte_limit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            NewPasswordRequest(password="\u00e9" * 72)

    def test_exactly_72_bytes_accepted(self) -> None:
        assert NewPasswordRequest(password="\u00e9" * 36).password == "\u00e9" * 36


class TestUpdateAccountRequest:
    def test_optional_fields_default_to_none(self) -> None:
        request = UpdateAccountRequest(firstName="Ada", lastName="Lovelace")
        assert request.country is None
        assert request.image is None


class TestAccountResponse:
    """Tests for AccountResponse serialization."""

    def test_dumps_camel_case_without_password_hash(self) -> None:
        account = Account(
            id=3,
            email="user@example.com",
            password_hash="$2b$10$secret",
            first_name="Ada",
            last_name="Lovelace",
            is_verified=True,
        )

        data = AccountResponse.from_account(account).model_dump(by_alias=True)

        assert data["firstName"] == "Ada"
        assert data["isVerified"] is True
        assert "passwordHash" not in data
        assert "password_hash" not in data

    def test_with_codes(self) -> None:
        account = Account(
            id=3,
            email="user@example.com",
            password_hash="$2b$10$secret",
            first_name="Ada",
            last_name="Lovelace",
            codes=[OneTimeCode(code="c0de", account_id=3, purpose=CodePurpose.VERIFICATION)],
        )

        data = AccountWithCodesResponse.from_account(account).model_dump(by_alias=True, mode="json")

        assert data["codes"] == [{"code": "c0de", "purpose": "VERIFICATION", "createdAt": None}]
        assert data["email"] == "user@example.com"
