"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON keys are camelCase; Python attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from src.domain.accounts import MAX_PASSWORD_BYTES
from src.domain.ports import Account, CodePurpose, OneTimeCode


def check_password_bytes(password: str) -> str:
    """Reject passwords bcrypt cannot hash (its input limit is in bytes, not characters)."""
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return password


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(ApiModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(..., min_length=1, description="User password")
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    country: str | None = None
    image: str | None = None
    front_base_url: str = Field(
        ..., min_length=1, description="Frontend URL the verification link is built on"
    )

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class LoginRequest(ApiModel):
    """Request model for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class ResetPasswordRequest(ApiModel):
    """Request model for asking a password reset link."""

    email: EmailStr
    front_base_url: str = Field(
        ..., min_length=1, description="Frontend URL the reset link is built on"
    )


class NewPasswordRequest(ApiModel):
    """Request model for completing a password reset."""

    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return check_password_bytes(value)


class UpdateAccountRequest(ApiModel):
    """Request model for updating profile fields."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    country: str | None = None
    image: str | None = None


class AccountResponse(ApiModel):
    """Public view of an account. The password hash is never exposed."""

    id: int
    email: str
    first_name: str
    last_name: str
    country: str | None = None
    image: str | None = None
    is_verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            email=account.email,
            first_name=account.first_name,
            last_name=account.last_name,
            country=account.country,
            image=account.image,
            is_verified=account.is_verified,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )


class OneTimeCodeResponse(ApiModel):
    """Pending one-time code attached to an account listing."""

    code: str
    purpose: CodePurpose
    created_at: datetime | None = None

    @classmethod
    def from_code(cls, code: OneTimeCode) -> "OneTimeCodeResponse":
        return cls(code=code.code, purpose=code.purpose, created_at=code.created_at)


class AccountWithCodesResponse(AccountResponse):
    """Account listing entry with its pending codes."""

    codes: list[OneTimeCodeResponse] = []

    @classmethod
    def from_account(cls, account: Account) -> "AccountWithCodesResponse":
        base = AccountResponse.from_account(account)
        return cls(
            **base.model_dump(),
            codes=[OneTimeCodeResponse.from_code(code) for code in account.codes],
        )


class LoginResponse(BaseModel):
    """Response model for successful login."""

    user: AccountResponse
    token: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    message: str
