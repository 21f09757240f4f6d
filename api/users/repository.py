"""
User persistence (raw SQL).

Every function takes the pool as its first argument. Storage errors are
raised as-is; translation happens in `service.py`.
"""

from __future__ import annotations

import asyncpg

from core import db

# Postgres int4 maximum; the default LIMIT when the caller sets none.
MAX_LIMIT = 2_147_483_647


async def get_user(pool: asyncpg.Pool, username: str) -> dict | None:
    return await db.fetch_one(
        pool,
        """
        SELECT username, email, bio
        FROM users
        WHERE username = $1
        """,
        username,
    )


async def list_users(pool: asyncpg.Pool, *, offset: int = 0, limit: int = MAX_LIMIT) -> list[dict]:
    return await db.fetch_all(
        pool,
        """
        SELECT username, email, bio
        FROM users
        ORDER BY username
        OFFSET $1
        LIMIT $2
        """,
        offset,
        limit,
    )


async def insert_user(pool: asyncpg.Pool, *, username: str, email: str, bio: str) -> None:
    await db.execute(
        pool,
        """
        INSERT INTO users (username, email, bio)
        VALUES ($1, $2, $3)
        """,
        username,
        email,
        bio,
    )


async def update_user(
    pool: asyncpg.Pool,
    username: str,
    *,
    email: str | None = None,
    bio: str | None = None,
) -> int:
    """
    Overwrite the supplied fields, keep the rest. Returns matched row count.
    """
    status = await db.execute(
        pool,
        """
        UPDATE users
        SET email = coalesce($1, users.email),
            bio = coalesce($2, users.bio)
        WHERE username = $3
        """,
        email,
        bio,
        username,
    )
    return db.affected_rows(status)
