"""
User business logic.

Scope:
- lookups and paged listing
- create with uniqueness conflicts mapped to field errors
- partial update (absent fields keep their stored value)
"""

from __future__ import annotations

import logging

import asyncpg

from core import config, errors

from . import repository, schemas

logger = logging.getLogger(__name__)

ALREADY_TAKEN = "already taken"


def user_constraints() -> dict[str, tuple[str, str]]:
    """
    Unique-constraint name -> (field, message) for the users table.
    """
    return {
        config.env_str("USERNAME_CONSTRAINT", "users_username_key"): ("username", ALREADY_TAKEN),
        config.env_str("EMAIL_CONSTRAINT", "users_email_key"): ("email", ALREADY_TAKEN),
    }


def _to_user(row: dict) -> schemas.User:
    return schemas.User(
        username=str(row["username"]),
        email=str(row["email"]),
        bio=str(row["bio"]),
    )


async def get_user(pool: asyncpg.Pool, username: str) -> schemas.User:
    with errors.storage_errors():
        row = await repository.get_user(pool, username)
    if row is None:
        raise errors.NotFound("user")
    return _to_user(row)


async def list_users(
    pool: asyncpg.Pool,
    *,
    offset: int = 0,
    limit: int = repository.MAX_LIMIT,
) -> list[schemas.User]:
    with errors.storage_errors():
        rows = await repository.list_users(pool, offset=offset, limit=limit)
    return [_to_user(row) for row in rows]


async def create_user(pool: asyncpg.Pool, payload: schemas.User) -> None:
    with errors.storage_errors(user_constraints()):
        await repository.insert_user(
            pool,
            username=payload.username,
            email=payload.email,
            bio=payload.bio,
        )
    logger.info("user_created username=%s", payload.username)


async def update_user(pool: asyncpg.Pool, username: str, payload: schemas.UserUpdate) -> None:
    # A missing username is not an error here: the update matches nothing
    # and the caller still gets 202.
    with errors.storage_errors(user_constraints()):
        matched = await repository.update_user(
            pool,
            username,
            email=payload.email,
            bio=payload.bio,
        )
    if matched == 0:
        logger.info("user_update_unmatched username=%s", username)
    else:
        logger.info("user_updated username=%s", username)
