"""
Domain layer - Account workflow business logic.

This package contains the registration, verification, login and password
reset workflows. It defines its own port interfaces for infrastructure
abstraction; adapters live under src.adapters.
"""

from .accounts import AccountService
from .exceptions import (
    AccountError,
    AccountNotFound,
    EmailAlreadyRegistered,
    EmailNotVerified,
    InvalidCode,
    InvalidCredentials,
    InvalidToken,
    PasswordTooLong,
)
from .ports import (
    Account,
    AccountRepository,
    CodePurpose,
    EmailSender,
    NewAccount,
    OneTimeCode,
    TokenIssuer,
)

__all__ = [
    "Account",
    "AccountError",
    "AccountNotFound",
    "AccountRepository",
    "AccountService",
    "CodePurpose",
    "EmailAlreadyRegistered",
    "EmailNotVerified",
    "EmailSender",
    "InvalidCode",
    "InvalidCredentials",
    "InvalidToken",
    "NewAccount",
    "OneTimeCode",
    "PasswordTooLong",
    "TokenIssuer",
]
