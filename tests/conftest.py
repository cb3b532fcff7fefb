"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- An in-memory AccountRepository for service and API tests
- PostgreSQL connection pool setup for integration/adversarial tests
  (skipped when the database is unreachable)
- Test app and client setup
"""

import itertools
from collections.abc import Generator
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.api.dependencies import get_account_service
from src.api.errors import register_exception_handlers
from src.api.routes import router
from src.config.settings import get_settings
from src.domain.accounts import AccountService
from src.domain.ports import Account, CodePurpose, NewAccount, OneTimeCode

TEST_SECRET = "test-secret"


class InMemoryAccountRepository:
    """AccountRepository protocol backed by dicts, for tests without PostgreSQL."""

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self.codes: dict[str, OneTimeCode] = {}
        self._ids = itertools.count(1)

    def create_account(self, account: NewAccount, code: str) -> Account | None:
        if self.find_by_email(account.email) is not None:
            return None
        now = datetime.now(timezone.utc)
        created = Account(
            id=next(self._ids),
            email=account.email,
            password_hash=account.password_hash,
            first_name=account.first_name,
            last_name=account.last_name,
            country=account.country,
            image=account.image,
            created_at=now,
            updated_at=now,
        )
        self.accounts[created.id] = created
        self.create_code(created.id, code, CodePurpose.VERIFICATION)
        return replace(created, codes=[])

    def find_by_email(self, email: str) -> Account | None:
        for account in self.accounts.values():
            if account.email == email:
                return replace(account, codes=[])
        return None

    def get_account(self, account_id: int) -> Account | None:
        account = self.accounts.get(account_id)
        return replace(account, codes=[]) if account is not None else None

    def list_accounts(self) -> list[Account]:
        return [
            replace(
                account,
                codes=[c for c in self.codes.values() if c.account_id == account.id],
            )
            for account in sorted(self.accounts.values(), key=lambda a: a.id)
        ]

    def update_profile(self, account_id, first_name, last_name, country, image) -> Account | None:
        account = self.accounts.get(account_id)
        if account is None:
            return None
        account.first_name = first_name
        account.last_name = last_name
        account.country = country
        account.image = image
        account.updated_at = datetime.now(timezone.utc)
        return replace(account, codes=[])

    def delete_account(self, account_id: int) -> None:
        self.accounts.pop(account_id, None)
        for code in [c for c in self.codes.values() if c.account_id == account_id]:
            del self.codes[code.code]

    def create_code(self, account_id: int, code: str, purpose: CodePurpose) -> None:
        self.codes[code] = OneTimeCode(
            code=code,
            account_id=account_id,
            purpose=purpose,
            created_at=datetime.now(timezone.utc),
        )

    def verify_email(self, code: str) -> Account | None:
        account = self._consume(code, CodePurpose.VERIFICATION)
        if account is None:
            return None
        account.is_verified = True
        return replace(account, codes=[])

    def reset_password(self, code: str, password_hash: str) -> Account | None:
        account = self._consume(code, CodePurpose.PASSWORD_RESET)
        if account is None:
            return None
        account.password_hash = password_hash
        return replace(account, codes=[])

    def _consume(self, code: str, purpose: CodePurpose) -> Account | None:
        stored = self.codes.get(code)
        if stored is None or stored.purpose != purpose:
            return None
        del self.codes[code]
        return self.accounts.get(stored.account_id)


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> Mock:
    return Mock()


@pytest.fixture
def token_issuer() -> JwtTokenIssuer:
    return JwtTokenIssuer(secret=TEST_SECRET)


@pytest.fixture
def service(
    repository: InMemoryAccountRepository, email_sender: Mock, token_issuer: JwtTokenIssuer
) -> AccountService:
    """Account service over the in-memory repository (low bcrypt cost for speed)."""
    return AccountService(
        repository=repository,
        email_sender=email_sender,
        token_issuer=token_issuer,
        bcrypt_cost=4,
    )


def build_app() -> FastAPI:
    """Create a test FastAPI application with the users router and error handlers."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router)
    return test_app


@pytest.fixture
def api_client(service: AccountService) -> Generator[TestClient, None, None]:
    """Client whose routes run against the in-memory service."""
    test_app = build_app()
    test_app.dependency_overrides[get_account_service] = lambda: service
    yield TestClient(test_app, raise_server_exceptions=False)
    test_app.dependency_overrides.clear()


@pytest.fixture
def sent_code(email_sender: Mock):
    """Return a getter for the code in the last link passed to an email sender method."""

    def get(method: str = "send_verification_link") -> str:
        link = getattr(email_sender, method).call_args[0][-1]
        return link.rsplit("/", 1)[1]

    return get


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """Connection pool against the configured database; skips when unreachable."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    try:
        pool.wait(timeout=3)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not reachable")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_pg(pg_pool: ConnectionPool) -> ConnectionPool:
    """Empty both tables before a test."""
    with pg_pool.connection() as conn:
        conn.execute("DELETE FROM one_time_codes")
        conn.execute("DELETE FROM accounts")
        conn.commit()
    return pg_pool
