"""
Shared fixtures: an in-memory stand-in for the asyncpg pool and a TestClient
wired to it through the `get_pool` dependency override.
"""

from __future__ import annotations

import asyncio

import asyncpg
import pytest
from fastapi.testclient import TestClient

import main
from core import db


def unique_violation(constraint_name: str) -> asyncpg.UniqueViolationError:
    exc = asyncpg.UniqueViolationError(
        f'duplicate key value violates unique constraint "{constraint_name}"'
    )
    exc.constraint_name = constraint_name
    return exc


class FakePool:
    """
    Emulates the four statements `users/repository.py` sends, with the same
    unique constraints as `sql/schema.sql`.
    """

    def __init__(self) -> None:
        self.rows: dict[str, dict] = {}
        self.calls: list[tuple[str, tuple]] = []
        self.fail_with: BaseException | None = None

    def _record(self, sql: str, args: tuple) -> None:
        self.calls.append((" ".join(sql.split()), args))
        if self.fail_with is not None:
            raise self.fail_with

    def _email_owner(self, email: str) -> str | None:
        for username, row in self.rows.items():
            if row["email"] == email:
                return username
        return None

    async def fetchrow(self, sql: str, *args):
        self._record(sql, args)
        row = self.rows.get(args[0])
        return dict(row) if row is not None else None

    async def fetch(self, sql: str, *args):
        self._record(sql, args)
        offset, limit = args
        ordered = [dict(self.rows[name]) for name in sorted(self.rows)]
        return ordered[offset:offset + limit]

    async def execute(self, sql: str, *args) -> str:
        self._record(sql, args)
        # Let concurrent callers interleave before the atomic check-and-write.
        await asyncio.sleep(0)
        if sql.lstrip().startswith("INSERT"):
            username, email, bio = args
            if username in self.rows:
                raise unique_violation("users_username_key")
            if self._email_owner(email) is not None:
                raise unique_violation("users_email_key")
            self.rows[username] = {"username": username, "email": email, "bio": bio}
            return "INSERT 0 1"

        email, bio, username = args
        row = self.rows.get(username)
        if row is None:
            return "UPDATE 0"
        if email is not None and self._email_owner(email) not in (None, username):
            raise unique_violation("users_email_key")
        if email is not None:
            row["email"] = email
        if bio is not None:
            row["bio"] = bio
        return "UPDATE 1"


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def client(fake_pool: FakePool):
    main.app.dependency_overrides[db.get_pool] = lambda: fake_pool
    try:
        yield TestClient(main.app)
    finally:
        main.app.dependency_overrides.clear()


@pytest.fixture
def seeded(fake_pool: FakePool) -> FakePool:
    for username, email, bio in [
        ("alice", "alice@example.com", "likes tea"),
        ("bob", "bob@example.com", "likes coffee"),
        ("carol", "carol@example.com", ""),
    ]:
        fake_pool.rows[username] = {"username": username, "email": email, "bio": bio}
    return fake_pool
