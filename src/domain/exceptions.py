"""
Domain exceptions - Semantic error types for the account workflows.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
The API layer maps each type to an HTTP status.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    message = "Account error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class EmailAlreadyRegistered(AccountError):
    """Email is already attached to an account."""

    message = "Email already registered"


class AccountNotFound(AccountError):
    """No account with the requested id."""

    message = "Account not found"


class InvalidCode(AccountError):
    """One-time code is unknown, already consumed, expired or of another purpose."""

    message = "Invalid code"


class InvalidCredentials(AccountError):
    """Email/password pair does not match an account."""

    message = "Invalid credentials"


class EmailNotVerified(AccountError):
    """Credentials are valid but the email has not been verified yet."""

    message = "Email not verified"


class InvalidToken(AccountError):
    """Bearer token is missing, malformed, expired, or names a deleted account."""

    message = "Invalid token"


class PasswordTooLong(AccountError):
    """Password encodes to more bytes than bcrypt accepts."""

    message = "Password cannot be longer than 72 bytes"
