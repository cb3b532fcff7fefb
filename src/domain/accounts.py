"""
Account workflow domain service.

This module contains the core business logic for the account lifecycle:

    register ──► (unverified) ──verify_email──► (verified) ──login──► token
                                                     │
          request_password_reset ──► reset_password ─┘

Each privileged state change (marking an email verified, replacing a
password) is authorized by a single-use one-time code. Codes carry an
explicit purpose and are consumed by the repository in the same
transaction as the change they authorize.
"""

import logging
import secrets
from dataclasses import dataclass

import bcrypt

from .exceptions import (
    AccountNotFound,
    EmailAlreadyRegistered,
    EmailNotVerified,
    InvalidCode,
    InvalidCredentials,
    InvalidToken,
    PasswordTooLong,
)
from .ports import Account, AccountRepository, CodePurpose, EmailSender, NewAccount, TokenIssuer

logger = logging.getLogger(__name__)

# Compared against when the email is unknown so login always pays the bcrypt cost.
_DUMMY_BCRYPT_HASH = bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(10))

VERIFY_EMAIL_PATH = "/auth/verify_email/"
RESET_PASSWORD_PATH = "/auth/reset_password/"

# bcrypt only accepts this many bytes of input.
MAX_PASSWORD_BYTES = 72


@dataclass
class AccountService:
    """
    Domain service for registration, verification, login and password reset.

    Orchestrates email normalization, password hashing, one-time code
    generation, persistence, notification and token issuance.
    """

    repository: AccountRepository
    email_sender: EmailSender
    token_issuer: TokenIssuer
    bcrypt_cost: int = 10

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        country: str | None,
        image: str | None,
        base_url: str,
    ) -> Account:
        """
        Create an unverified account and email it a verification link.

        Args:
            email: User's email address (will be normalized)
            password: Plaintext password (will be hashed)
            first_name: Display first name
            last_name: Display last name
            country: Optional profile country
            image: Optional profile image URL
            base_url: Frontend base URL the link is built on

        Returns:
            The created account

        Raises:
            EmailAlreadyRegistered: If the email already has an account
        """
        normalized_email = self._normalize_email(email)
        code = self._generate_code()
        new_account = NewAccount(
            email=normalized_email,
            password_hash=self._hash_password(password),
            first_name=first_name,
            last_name=last_name,
            country=country,
            image=image,
        )

        account = self.repository.create_account(new_account, code)
        if account is None:
            raise EmailAlreadyRegistered()

        link = self._build_link(base_url, VERIFY_EMAIL_PATH, code)
        try:
            self.email_sender.send_verification_link(
                normalized_email, first_name, last_name, link
            )
        except Exception:
            # Undo the registration so the address is free to register again.
            logger.error("Verification email failed for account %s, rolling back", account.id)
            self.repository.delete_account(account.id)
            raise

        logger.info("Registered account %s", account.id)
        return account

    def verify_email(self, code: str) -> Account:
        """
        Consume a verification code and mark the account verified.

        Raises:
            InvalidCode: If the code is unknown, consumed, expired or a reset code
        """
        account = self.repository.verify_email(code)
        if account is None:
            raise InvalidCode()
        logger.info("Verified email for account %s", account.id)
        return account

    def login(self, email: str, password: str) -> tuple[Account, str]:
        """
        Check credentials and issue a bearer token.

        The password is checked before the verification flag, so the
        "not verified" answer is only given to callers who know the password.

        Returns:
            Tuple of (account, token)

        Raises:
            InvalidCredentials: Unknown email or wrong password
            EmailNotVerified: Correct password but unverified email
        """
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            # No stored hash can match a password bcrypt refuses to hash.
            bcrypt.checkpw(b"x", _DUMMY_BCRYPT_HASH)
            raise InvalidCredentials()

        account = self.repository.find_by_email(self._normalize_email(email))
        if account is None:
            bcrypt.checkpw(password.encode(), _DUMMY_BCRYPT_HASH)
            raise InvalidCredentials()

        if not self._check_password(password, account.password_hash):
            raise InvalidCredentials()

        if not account.is_verified:
            raise EmailNotVerified()

        return account, self.token_issuer.issue(account.id)

    def request_password_reset(self, email: str, base_url: str) -> Account:
        """
        Issue a password reset code and email the reset link.

        Raises:
            InvalidCredentials: If no account has this email
        """
        normalized_email = self._normalize_email(email)
        account = self.repository.find_by_email(normalized_email)
        if account is None:
            raise InvalidCredentials()

        code = self._generate_code()
        self.repository.create_code(account.id, code, CodePurpose.PASSWORD_RESET)
        self.email_sender.send_password_reset_link(
            normalized_email, self._build_link(base_url, RESET_PASSWORD_PATH, code)
        )
        logger.info("Password reset requested for account %s", account.id)
        return account

    def reset_password(self, code: str, new_password: str) -> Account:
        """
        Consume a reset code and replace the account's password.

        Raises:
            InvalidCode: If the code is unknown, consumed, expired or a verification code
        """
        account = self.repository.reset_password(code, self._hash_password(new_password))
        if account is None:
            raise InvalidCode()
        logger.info("Password reset for account %s", account.id)
        return account

    def authenticate(self, token: str) -> Account:
        """
        Resolve a bearer token to the live account it identifies.

        Raises:
            InvalidToken: Bad token, or the account no longer exists
        """
        account = self.repository.get_account(self.token_issuer.read(token))
        if account is None:
            raise InvalidToken()
        return account

    def list_accounts(self) -> list[Account]:
        return self.repository.list_accounts()

    def get_account(self, account_id: int) -> Account:
        account = self.repository.get_account(account_id)
        if account is None:
            raise AccountNotFound()
        return account

    def update_profile(
        self,
        account_id: int,
        first_name: str,
        last_name: str,
        country: str | None,
        image: str | None,
    ) -> Account:
        account = self.repository.update_profile(account_id, first_name, last_name, country, image)
        if account is None:
            raise AccountNotFound()
        return account

    def remove_account(self, account_id: int) -> None:
        self.repository.delete_account(account_id)

    def _normalize_email(self, email: str) -> str:
        """
        Normalize email address for consistent storage and lookup.

        Applies: strip whitespace + lowercase
        """
        return email.strip().lower()

    def _generate_code(self) -> str:
        """Generate a 256-bit random one-time code, hex encoded."""
        return secrets.token_hex(32)

    def _build_link(self, base_url: str, path: str, code: str) -> str:
        return f"{base_url.rstrip('/')}{path}{code}"

    def _hash_password(self, password: str) -> str:
        """
        Hash password using bcrypt with a fresh salt.

        Raises:
            PasswordTooLong: If the UTF-8 encoding exceeds bcrypt's input limit
        """
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise PasswordTooLong()
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()

    def _check_password(self, password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
