"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes,
plus the bearer token gate for protected routes.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.adapters.smtp.console import ConsoleEmailSender
from src.adapters.smtp.mailer import SmtpEmailSender
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from src.domain.exceptions import InvalidToken
from src.domain.ports import Account, EmailSender


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    settings = get_settings()
    return PostgresAccountRepository(get_pool(request), code_ttl_seconds=settings.code_ttl_seconds)


def get_email_sender() -> EmailSender:
    """Build the configured email sender (console or SMTP)."""
    settings = get_settings()
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.smtp_from,
        )
    return ConsoleEmailSender()


def get_token_issuer() -> JwtTokenIssuer:
    settings = get_settings()
    return JwtTokenIssuer(
        secret=settings.token_secret,
        algorithm=settings.token_algorithm,
        ttl_seconds=settings.token_ttl_seconds,
    )


def get_account_service(request: Request) -> AccountService:
    """
    Create account service with injected dependencies.

    Wires together the repository, email sender and token issuer.
    """
    return AccountService(
        repository=get_repository(request),
        email_sender=get_email_sender(),
        token_issuer=get_token_issuer(),
        bcrypt_cost=get_settings().bcrypt_cost,
    )


# Bearer scheme for OpenAPI documentation; missing headers are reported by us as 401
http_bearer = HTTPBearer(auto_error=False)


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    service: AccountService = Depends(get_account_service),
) -> Account:
    """
    Resolve the bearer token to the live account.

    Raises:
        InvalidToken: Missing header, bad token, or deleted account
    """
    if credentials is None:
        raise InvalidToken()
    return service.authenticate(credentials.credentials)
