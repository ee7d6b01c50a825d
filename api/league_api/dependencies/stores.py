"""Draft store providers for HTTP requests and long-lived WebSocket sessions."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import Depends

from ..db import AsyncSession, get_async_session, get_db
from ..services.draft.store import DraftStore, SqlDraftStore

StoreFactory = Callable[[], AbstractAsyncContextManager[DraftStore]]


async def get_draft_store(session: AsyncSession = Depends(get_db)) -> DraftStore:
    return SqlDraftStore(session)


@asynccontextmanager
async def sql_store_session() -> AsyncIterator[DraftStore]:
    async with get_async_session() as session:
        yield SqlDraftStore(session)


def get_store_factory() -> StoreFactory:
    """Short-lived stores for WebSocket handlers, one session per read."""
    return sql_store_session
