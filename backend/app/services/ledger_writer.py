"""
backend/app/services/ledger_writer.py

Purpose:
    Apply precomputed settlement and cancellation outcomes to the store.
    Removal from pending_wagers runs first; if it removes nothing, another
    request already resolved the records and nothing is appended.

Dependencies:
    - app.services.ledger_repository
"""

from __future__ import annotations

import logging

from app.services.ledger_errors import NotFoundError
from app.services.ledger_repository import (
    DEFICITS,
    PENDING_WAGERS,
    SETTLED_ENTRIES,
    LedgerRepository,
)

logger = logging.getLogger("wagerbook.ledger_writer")


class LedgerWriter:
    def __init__(self, repository: LedgerRepository | None = None):
        self.repository = repository or LedgerRepository()

    async def write_settlement(
        self,
        removal_query: dict,
        expected_removed: int,
        settled: list[dict],
        deficits: list[dict],
    ) -> int:
        """Remove the settled game from pending, then append its outcomes."""
        repo = self.repository

        async def _apply(session) -> int:
            removed = await repo.delete_where(PENDING_WAGERS, removal_query, session=session)
            if removed == 0:
                raise NotFoundError("Game is no longer pending; it was settled or removed concurrently.")
            if removed != expected_removed:
                if session is not None:
                    # Part of the game was resolved concurrently; abort rolls back the delete.
                    raise NotFoundError(
                        f"Game changed while settling: removed {removed} of {expected_removed} pending wagers."
                    )
                logger.warning(
                    "Settlement removed %d pending wagers, expected %d (query=%s)",
                    removed, expected_removed, removal_query,
                )
            await repo.append(SETTLED_ENTRIES, settled, session=session)
            await repo.append(DEFICITS, deficits, session=session)
            return removed

        return await repo.run_atomic(_apply)

    async def write_cancellation(self, wager: dict, deficit: dict) -> None:
        """Remove one pending wager by identity and record its deficit."""
        repo = self.repository

        async def _apply(session) -> None:
            removed = await repo.delete_where(
                PENDING_WAGERS, {"_id": wager["_id"]}, just_one=True, session=session,
            )
            if removed == 0:
                raise NotFoundError("Wager is no longer pending.")
            await repo.append(DEFICITS, [deficit], session=session)

        await repo.run_atomic(_apply)
