"""
User API endpoints.
"""

from __future__ import annotations

import asyncpg
from fastapi import APIRouter, Depends, Query, Response, status

from core import db

from . import repository, schemas, service

router = APIRouter()


@router.get("/user/{username}")
async def get_user(
    username: str,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> schemas.User:
    return await service.get_user(pool, username)


@router.get("/user")
async def list_users(
    offset: int = Query(0, ge=0, le=repository.MAX_LIMIT),
    limit: int = Query(repository.MAX_LIMIT, ge=1, le=repository.MAX_LIMIT),
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> list[schemas.User]:
    """
    Page through users ordered by username. An offset past the end yields [].
    """
    return await service.list_users(pool, offset=offset, limit=limit)


@router.post("/user", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: schemas.User,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> Response:
    await service.create_user(pool, payload)
    return Response(status_code=status.HTTP_201_CREATED)


@router.put("/user/{username}", status_code=status.HTTP_202_ACCEPTED)
async def update_user(
    username: str,
    payload: schemas.UserUpdate,
    pool: asyncpg.Pool = Depends(db.get_pool),
) -> Response:
    await service.update_user(pool, username, payload)
    return Response(status_code=status.HTTP_202_ACCEPTED)
