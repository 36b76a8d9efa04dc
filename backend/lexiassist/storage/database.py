from __future__ import annotations

import json
import logging
from datetime import datetime

import asyncpg
from pydantic_core import to_jsonable_python

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    bar_council_id TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS clients (
    id TEXT PRIMARY KEY,
    lawyer_id TEXT NOT NULL REFERENCES users(id),
    name TEXT NOT NULL,
    email TEXT,
    phone TEXT NOT NULL,
    address TEXT NOT NULL DEFAULT '',
    id_proof TEXT NOT NULL DEFAULT '',
    notes TEXT NOT NULL DEFAULT '',
    case_ids TEXT[] NOT NULL DEFAULT '{}',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS cases (
    id TEXT PRIMARY KEY,
    lawyer_id TEXT NOT NULL REFERENCES users(id),
    case_number TEXT NOT NULL,
    title TEXT NOT NULL,
    client_id TEXT,
    case_type TEXT NOT NULL,
    court TEXT NOT NULL DEFAULT '',
    filing_date TIMESTAMPTZ,
    status TEXT NOT NULL DEFAULT 'filed'
        CHECK (status IN ('filed', 'ongoing', 'hearing', 'closed', 'won', 'lost')),
    description TEXT NOT NULL DEFAULT '',
    documents JSONB NOT NULL DEFAULT '[]',
    similar_cases JSONB NOT NULL DEFAULT '[]',
    summary TEXT NOT NULL DEFAULT '',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS hearings (
    id TEXT PRIMARY KEY,
    lawyer_id TEXT NOT NULL REFERENCES users(id),
    case_id TEXT NOT NULL,
    date TIMESTAMPTZ NOT NULL,
    time TEXT NOT NULL DEFAULT '',
    court TEXT NOT NULL DEFAULT '',
    judge TEXT NOT NULL DEFAULT '',
    type TEXT NOT NULL DEFAULT 'hearing'
        CHECK (type IN ('hearing', 'filing', 'argument', 'judgment')),
    status TEXT NOT NULL DEFAULT 'scheduled'
        CHECK (status IN ('scheduled', 'completed', 'postponed')),
    notes TEXT NOT NULL DEFAULT '',
    reminder_sent BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS cases_lawyer_idx ON cases (lawyer_id, created_at DESC);
CREATE INDEX IF NOT EXISTS clients_lawyer_idx ON clients (lawyer_id, created_at DESC);
CREATE INDEX IF NOT EXISTS hearings_lawyer_idx ON hearings (lawyer_id, date);
"""


def encode_jsonb(value) -> str:
    # postgres rejects the NaN and Infinity tokens json.dumps would otherwise emit
    return json.dumps(to_jsonable_python(value), allow_nan=False)


async def _init_connection(conn: asyncpg.Connection):
    await conn.set_type_codec(
        "jsonb",
        encoder=encode_jsonb,
        decoder=json.loads,
        schema="pg_catalog",
    )


def insert_sql(table: str, columns: list[str]) -> str:
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *"


def update_sql(table: str, owner_column: str, columns: list[str]) -> str:
    """$1 is the record id, $2 the owner, then one placeholder per column"""
    assignments = ", ".join(f"{col} = ${i}" for i, col in enumerate(columns, start=3))
    return (
        f"UPDATE {table} SET {assignments} "
        f"WHERE id = $1 AND {owner_column} = $2 RETURNING *"
    )


class OwnedTable:
    """find/insert/update/delete on one table, every statement filtered on the owner.
    a row that exists under another owner behaves exactly like a missing row."""

    owner_column = "lawyer_id"

    def __init__(self, db: "Database", table: str, order_by: str):
        self._db = db
        self.table = table
        self.order_by = order_by

    async def list(self, owner_id: str) -> list[dict]:
        rows = await self._db.pool.fetch(
            f"SELECT * FROM {self.table} WHERE {self.owner_column} = $1 ORDER BY {self.order_by}",
            owner_id,
        )
        return [dict(r) for r in rows]

    async def get(self, owner_id: str, record_id: str) -> dict | None:
        row = await self._db.pool.fetchrow(
            f"SELECT * FROM {self.table} WHERE id = $1 AND {self.owner_column} = $2",
            record_id, owner_id,
        )
        return dict(row) if row else None

    async def get_many(self, owner_id: str, record_ids: list[str]) -> list[dict]:
        if not record_ids:
            return []
        rows = await self._db.pool.fetch(
            f"SELECT * FROM {self.table} WHERE id = ANY($1::text[]) AND {self.owner_column} = $2",
            list(record_ids), owner_id,
        )
        return [dict(r) for r in rows]

    async def insert(self, record: dict) -> dict:
        columns = list(record)
        row = await self._db.pool.fetchrow(
            insert_sql(self.table, columns), *(record[c] for c in columns),
        )
        return dict(row)

    async def update(self, owner_id: str, record_id: str, changes: dict) -> dict | None:
        if not changes:
            return await self.get(owner_id, record_id)
        columns = list(changes)
        row = await self._db.pool.fetchrow(
            update_sql(self.table, self.owner_column, columns),
            record_id, owner_id, *(changes[c] for c in columns),
        )
        return dict(row) if row else None

    async def delete(self, owner_id: str, record_id: str) -> bool:
        row = await self._db.pool.fetchrow(
            f"DELETE FROM {self.table} WHERE id = $1 AND {self.owner_column} = $2 RETURNING id",
            record_id, owner_id,
        )
        return row is not None


class HearingTable(OwnedTable):
    async def upcoming(self, owner_id: str, now: datetime, limit: int) -> list[dict]:
        rows = await self._db.pool.fetch(
            "SELECT * FROM hearings WHERE lawyer_id = $1 AND date >= $2 AND status = 'scheduled' "
            "ORDER BY date ASC LIMIT $3",
            owner_id, now, limit,
        )
        return [dict(r) for r in rows]


class UserTable:
    def __init__(self, db: "Database"):
        self._db = db

    async def get(self, user_id: str) -> dict | None:
        row = await self._db.pool.fetchrow("SELECT * FROM users WHERE id = $1", user_id)
        return dict(row) if row else None

    async def get_by_email(self, email: str) -> dict | None:
        row = await self._db.pool.fetchrow("SELECT * FROM users WHERE email = $1", email)
        return dict(row) if row else None

    async def insert(self, record: dict) -> dict:
        columns = list(record)
        row = await self._db.pool.fetchrow(
            insert_sql("users", columns), *(record[c] for c in columns),
        )
        return dict(row)


class Database:
    """asyncpg pool plus one accessor per record kind.
    constructed from settings at startup and handed to the routers through app.state"""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._pool: asyncpg.Pool | None = None
        self.users = UserTable(self)
        self.cases = OwnedTable(self, "cases", order_by="created_at DESC")
        self.clients = OwnedTable(self, "clients", order_by="created_at DESC")
        self.hearings = HearingTable(self, "hearings", order_by="date ASC")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("database not initialized")
        return self._pool

    async def connect(self):
        self._pool = await asyncpg.create_pool(self.database_url, init=_init_connection)
        async with self._pool.acquire() as conn:
            await conn.execute(SCHEMA)
        logger.info("database pool ready")

    async def close(self):
        if self._pool:
            await self._pool.close()
            self._pool = None
