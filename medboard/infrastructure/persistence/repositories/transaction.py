"""Transaction manager: all-or-nothing multi-step writes on the request session."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medboard.domain.exceptions import InternalStorageException
from medboard.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlAlchemyTransactionManager:
    """ITransactionManager for an AsyncSession.

    Opens a SAVEPOINT when the session is already in a transaction (request
    sessions from get_db_transactional), otherwise a new transaction. Any
    exception rolls the block back; SQLAlchemy errors surface as
    InternalStorageException, domain errors propagate unchanged.

    Callbacks passed to after_commit run once the outermost transaction
    commits and are dropped if it rolls back.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._after_commit: list[Callable[[], None]] = []
        self._listening = False

    @asynccontextmanager
    async def atomic(self, operation: str = "write") -> AsyncIterator[None]:
        ctx = (
            self._session.begin_nested()
            if self._session.in_transaction()
            else self._session.begin()
        )
        try:
            async with ctx:
                yield
        except SQLAlchemyError as e:
            logger.error("Atomic %s rolled back: %s", operation, type(e).__name__)
            raise InternalStorageException(operation, type(e).__name__) from e

    def after_commit(self, callback: Callable[[], None]) -> None:
        if not self._session.in_transaction():
            callback()
            return
        if not self._listening:
            sync_session = self._session.sync_session
            event.listen(sync_session, "after_commit", self._run_after_commit)
            event.listen(sync_session, "after_rollback", self._discard_after_commit)
            self._listening = True
        self._after_commit.append(callback)

    def _run_after_commit(self, _session: Any) -> None:
        callbacks, self._after_commit = self._after_commit, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                # The commit already happened; nothing left to undo.
                logger.exception("Post-commit callback failed")

    def _discard_after_commit(self, _session: Any) -> None:
        if self._after_commit:
            logger.warning(
                "Dropping %d post-commit callback(s) after rollback", len(self._after_commit)
            )
        self._after_commit = []
