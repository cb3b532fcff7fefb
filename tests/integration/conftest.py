"""
Fixtures for integration tests against PostgreSQL.

Every test starts from empty tables. The whole directory is skipped when
the configured database is unreachable.
"""

import pytest
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresAccountRepository


@pytest.fixture(autouse=True)
def pool(clean_pg: ConnectionPool) -> ConnectionPool:
    return clean_pg


@pytest.fixture
def pg_repository(pool: ConnectionPool) -> PostgresAccountRepository:
    return PostgresAccountRepository(pool, code_ttl_seconds=3600)
