"""
Pydantic schemas for user endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class User(BaseModel):
    username: str
    email: str
    bio: str


class UserUpdate(BaseModel):
    # Absent and null both mean "keep the stored value".
    email: str | None = None
    bio: str | None = None
