"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Exactly-once code consumption
-----------------------------
verify_email() and reset_password() consume their one-time code with a
conditional ``DELETE ... RETURNING`` executed in the same transaction as the
account update it authorizes. Concurrent consumers of one code serialize on
the row lock taken by the DELETE; the loser sees zero rows and the account is
left untouched. The purpose column keeps a verification code from resetting a
password and vice versa.
"""

import logging
from pathlib import Path

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from src.domain.ports import Account, CodePurpose, NewAccount, OneTimeCode

logger = logging.getLogger(__name__)

_ACCOUNT_COLUMNS = (
    "id, email, password_hash, first_name, last_name, country, image, "
    "is_verified, created_at, updated_at"
)


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, code_ttl_seconds: int = 0) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            code_ttl_seconds: Age after which one-time codes stop being
                accepted; 0 means codes never expire
        """
        self._pool = pool
        self._code_ttl_seconds = code_ttl_seconds

    def create_account(self, account: NewAccount, code: str) -> Account | None:
        """
        Insert an unverified account and its verification code in one transaction.

        The UNIQUE constraint on email makes concurrent registrations of the
        same address race-free: ON CONFLICT DO NOTHING returns no row for
        every loser.

        Returns:
            The created account, or None if the email is already registered
        """
        insert_account_sql = f"""
            INSERT INTO accounts (email, password_hash, first_name, last_name, country, image)
            VALUES (%s, %s, %s, %s, %s, %s)
            ON CONFLICT (email) DO NOTHING
            RETURNING {_ACCOUNT_COLUMNS}
        """
        insert_code_sql = """
            INSERT INTO one_time_codes (code, account_id, purpose)
            VALUES (%s, %s, %s)
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(
                insert_account_sql,
                (
                    account.email,
                    account.password_hash,
                    account.first_name,
                    account.last_name,
                    account.country,
                    account.image,
                ),
            )
            row = cursor.fetchone()
            if row is None:
                conn.rollback()
                return None

            cursor.execute(insert_code_sql, (code, row["id"], CodePurpose.VERIFICATION.value))
            conn.commit()
            return Account(**row)

    def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE email = %s"
        return self._fetch_account(sql, (email,))

    def get_account(self, account_id: int) -> Account | None:
        sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts WHERE id = %s"
        return self._fetch_account(sql, (account_id,))

    def list_accounts(self) -> list[Account]:
        """Return all accounts ordered by id, each with its pending codes."""
        accounts_sql = f"SELECT {_ACCOUNT_COLUMNS} FROM accounts ORDER BY id"
        codes_sql = """
            SELECT code, account_id, purpose, created_at
            FROM one_time_codes
            ORDER BY created_at
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(accounts_sql)
            accounts = [Account(**row) for row in cursor.fetchall()]
            cursor.execute(codes_sql)
            code_rows = cursor.fetchall()
            conn.commit()

        by_id = {account.id: account for account in accounts}
        for row in code_rows:
            owner = by_id.get(row["account_id"])
            if owner is not None:
                owner.codes.append(
                    OneTimeCode(
                        code=row["code"],
                        account_id=row["account_id"],
                        purpose=CodePurpose(row["purpose"]),
                        created_at=row["created_at"],
                    )
                )
        return accounts

    def update_profile(
        self,
        account_id: int,
        first_name: str,
        last_name: str,
        country: str | None,
        image: str | None,
    ) -> Account | None:
        sql = f"""
            UPDATE accounts
            SET first_name = %s, last_name = %s, country = %s, image = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING {_ACCOUNT_COLUMNS}
        """
        return self._fetch_account(sql, (first_name, last_name, country, image, account_id))

    def delete_account(self, account_id: int) -> None:
        """Delete an account; its codes go with it via ON DELETE CASCADE."""
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM accounts WHERE id = %s", (account_id,))
            conn.commit()

    def create_code(self, account_id: int, code: str, purpose: CodePurpose) -> None:
        sql = """
            INSERT INTO one_time_codes (code, account_id, purpose)
            VALUES (%s, %s, %s)
        """
        with self._pool.connection() as conn:
            conn.execute(sql, (code, account_id, purpose.value))
            conn.commit()

    def verify_email(self, code: str) -> Account | None:
        """Consume a VERIFICATION code and set is_verified in one transaction."""
        sql = f"""
            UPDATE accounts
            SET is_verified = TRUE, updated_at = NOW()
            WHERE id = %s
            RETURNING {_ACCOUNT_COLUMNS}
        """
        return self._consume_code(code, CodePurpose.VERIFICATION, sql, ())

    def reset_password(self, code: str, password_hash: str) -> Account | None:
        """Consume a PASSWORD_RESET code and store the new hash in one transaction."""
        sql = f"""
            UPDATE accounts
            SET password_hash = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING {_ACCOUNT_COLUMNS}
        """
        return self._consume_code(code, CodePurpose.PASSWORD_RESET, sql, (password_hash,))

    def _consume_code(
        self,
        code: str,
        purpose: CodePurpose,
        effect_sql: str,
        effect_params: tuple,
    ) -> Account | None:
        """
        Delete a live code of the given purpose and apply effect_sql to its owner.

        effect_sql receives effect_params followed by the owning account id.
        Nothing is changed if the code does not match.
        """
        delete_sql = """
            DELETE FROM one_time_codes
            WHERE code = %s
              AND purpose = %s
              AND (%s = 0 OR created_at > NOW() - %s * INTERVAL '1 second')
            RETURNING account_id
        """
        ttl = self._code_ttl_seconds

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(delete_sql, (code, purpose.value, ttl, ttl))
            consumed = cursor.fetchone()
            if consumed is None:
                conn.rollback()
                return None

            cursor.execute(effect_sql, (*effect_params, consumed["account_id"]))
            row = cursor.fetchone()
            conn.commit()

        return Account(**row) if row is not None else None

    def _fetch_account(self, sql: str, params: tuple) -> Account | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            conn.commit()
        return Account(**row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
                conn.commit()
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info("Migration complete: %s", sql_file.name)
