"""
Shared fixtures for adversarial tests.

Provides a clean PostgreSQL database and a factory that creates an account
with a pending verification code, for race condition and code-guessing tests.
"""

from collections.abc import Callable

import bcrypt
import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository
from src.domain.ports import Account, NewAccount


@pytest.fixture(autouse=True)
def pool(clean_pg: ConnectionPool) -> ConnectionPool:
    return clean_pg


@pytest.fixture
def pg_repository(pool: ConnectionPool) -> PostgresAccountRepository:
    return PostgresAccountRepository(pool)


@pytest.fixture
def create_account(pg_repository: PostgresAccountRepository) -> Callable[[str, str], Account]:
    """Factory creating an unverified account with a VERIFICATION code."""

    def create(email: str, code: str) -> Account:
        password_hash = bcrypt.hashpw(b"password123", bcrypt.gensalt(4)).decode()
        account = pg_repository.create_account(
            NewAccount(
                email=email, password_hash=password_hash, first_name="Ada", last_name="Lovelace"
            ),
            code,
        )
        assert account is not None
        return account

    return create
