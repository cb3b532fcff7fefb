"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the domain records and the interfaces (ports) that the
domain requires from infrastructure. Adapters implement these protocols.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol


class CodePurpose(str, Enum):
    """
    What a one-time code authorizes.

    Codes of one purpose never authorize the other purpose's effect:
    - VERIFICATION: mark the owning account's email as verified
    - PASSWORD_RESET: overwrite the owning account's password hash
    """

    VERIFICATION = "VERIFICATION"
    PASSWORD_RESET = "PASSWORD_RESET"


@dataclass
class OneTimeCode:
    """Pending single-use code bound to an account."""

    code: str
    account_id: int
    purpose: CodePurpose
    created_at: datetime | None = None


@dataclass
class Account:
    """Registered user with credentials and profile data."""

    id: int
    email: str
    password_hash: str
    first_name: str
    last_name: str
    country: str | None = None
    image: str | None = None
    is_verified: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    codes: list[OneTimeCode] = field(default_factory=list)


@dataclass
class NewAccount:
    """Account fields supplied at registration, before an id is assigned."""

    email: str
    password_hash: str
    first_name: str
    last_name: str
    country: str | None = None
    image: str | None = None


class AccountRepository(Protocol):
    """Port interface for account and one-time code persistence."""

    def create_account(self, account: NewAccount, code: str) -> Account | None:
        """
        Insert an unverified account and its VERIFICATION code atomically.

        Returns:
            The created account, or None if the email is already registered
        """
        ...

    def find_by_email(self, email: str) -> Account | None:
        """Look up an account by normalized email."""
        ...

    def get_account(self, account_id: int) -> Account | None:
        """Look up an account by id."""
        ...

    def list_accounts(self) -> list[Account]:
        """Return all accounts with their pending codes attached."""
        ...

    def update_profile(
        self,
        account_id: int,
        first_name: str,
        last_name: str,
        country: str | None,
        image: str | None,
    ) -> Account | None:
        """Overwrite mutable profile fields. Returns None if no row matched."""
        ...

    def delete_account(self, account_id: int) -> None:
        """Delete an account and its codes. Missing ids are ignored."""
        ...

    def create_code(self, account_id: int, code: str, purpose: CodePurpose) -> None:
        """Store a new one-time code for an existing account."""
        ...

    def verify_email(self, code: str) -> Account | None:
        """
        Consume a VERIFICATION code and mark its account verified.

        Consumption and the state change happen in one transaction, so a code
        is accepted at most once even under concurrent use.

        Returns:
            The updated account, or None if the code is unknown, expired,
            already consumed, or was issued for another purpose
        """
        ...

    def reset_password(self, code: str, password_hash: str) -> Account | None:
        """
        Consume a PASSWORD_RESET code and store the new password hash.

        Same atomicity and return contract as verify_email().
        """
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_link(self, email: str, first_name: str, last_name: str, link: str) -> None:
        """Send the email verification link to a newly registered address."""
        ...

    def send_password_reset_link(self, email: str, link: str) -> None:
        """Send the password reset link."""
        ...


class TokenIssuer(Protocol):
    """Port interface for bearer token signing."""

    def issue(self, account_id: int) -> str:
        """Sign a token identifying the account."""
        ...

    def read(self, token: str) -> int:
        """
        Verify a token and return the account id it identifies.

        Raises:
            InvalidToken: If the signature, format or expiry check fails
        """
        ...
