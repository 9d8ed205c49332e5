"""Credential stores for the regular and privileged account partitions."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from threading import Lock
from typing import Protocol

from psycopg import OperationalError, sql
from psycopg.errors import UniqueViolation
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account, NewAccount
from .domain.errors import DuplicateEmailError, StoreUnavailableError

logger = logging.getLogger(__name__)

REGULAR_TABLE = "users"
PRIVILEGED_TABLE = "admin_users"

_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL,
    full_name TEXT NOT NULL,
    mobile_phone TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL,
    CONSTRAINT {constraint} UNIQUE (email)
)
"""


class CredentialStore(Protocol):
    """Capability set a partition must offer to the authenticator."""

    def find_by_email(self, email: str) -> Account | None: ...

    def insert(self, account: NewAccount) -> str: ...


@dataclass(slots=True, frozen=True)
class CredentialStores:
    """The two independently addressed partitions."""

    regular: CredentialStore
    privileged: CredentialStore


class PostgresCredentialStore:
    """Postgres-backed partition; uniqueness is enforced by the table constraint."""

    def __init__(self, pool: ConnectionPool, table: str) -> None:
        """Store the connection pool and the table backing this partition."""
        self._pool = pool
        self._table = table

    @property
    def table(self) -> str:
        return self._table

    def create_schema(self) -> None:
        """Create the partition table if it does not already exist."""
        statement = sql.SQL(_SCHEMA_SQL).format(
            table=sql.Identifier(self._table),
            constraint=sql.Identifier(f"{self._table}_email_key"),
        )
        try:
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(statement)
                conn.commit()
        except OperationalError as exc:
            logger.exception("schema creation failed for %s", self._table)
            raise StoreUnavailableError() from exc

    def find_by_email(self, email: str) -> Account | None:
        """Return the account registered under ``email`` or ``None``."""
        query = sql.SQL(
            """
            SELECT id, email, full_name, mobile_phone, password_hash, created_at
            FROM {table}
            WHERE email = %s
            """
        ).format(table=sql.Identifier(self._table))
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(query, (email,))
                    row = cur.fetchone()
        except OperationalError as exc:
            logger.exception("lookup failed on %s", self._table)
            raise StoreUnavailableError() from exc
        if not row:
            return None
        return self._map_record(row)

    def insert(self, account: NewAccount) -> str:
        """Persist a new account and return its id.

        Raises ``DuplicateEmailError`` when the email is already taken, as
        reported by the unique constraint at insert time.
        """
        account_id = str(uuid.uuid4())
        statement = sql.SQL(
            """
            INSERT INTO {table} (id, email, full_name, mobile_phone, password_hash, created_at)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id
            """
        ).format(table=sql.Identifier(self._table))
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        statement,
                        (
                            account_id,
                            account.email,
                            account.full_name,
                            account.mobile_phone,
                            account.password_hash,
                            account.created_at,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except UniqueViolation as exc:
            raise DuplicateEmailError() from exc
        except OperationalError as exc:
            logger.exception("insert failed on %s", self._table)
            raise StoreUnavailableError() from exc
        return row[0]

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            id=row[0],
            email=row[1],
            full_name=row[2],
            mobile_phone=row[3],
            password_hash=row[4],
            created_at=row[5],
        )


class InMemoryCredentialStore:
    """Thread-safe dict-backed partition for local development and tests."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = Lock()

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            return self._accounts.get(email)

    def insert(self, account: NewAccount) -> str:
        with self._lock:
            if account.email in self._accounts:
                raise DuplicateEmailError()
            account_id = str(uuid.uuid4())
            self._accounts[account.email] = Account(
                id=account_id,
                email=account.email,
                full_name=account.full_name,
                mobile_phone=account.mobile_phone,
                password_hash=account.password_hash,
                created_at=account.created_at,
            )
        return account_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)


def build_postgres_stores(pool: ConnectionPool) -> CredentialStores:
    """Return both partitions backed by tables in the same database."""
    return CredentialStores(
        regular=PostgresCredentialStore(pool, REGULAR_TABLE),
        privileged=PostgresCredentialStore(pool, PRIVILEGED_TABLE),
    )


def build_memory_stores() -> CredentialStores:
    return CredentialStores(
        regular=InMemoryCredentialStore(),
        privileged=InMemoryCredentialStore(),
    )
