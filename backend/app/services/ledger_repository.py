"""
backend/app/services/ledger_repository.py

Purpose:
    Record store access for the three ledger collections. Exposes the
    read-all / append / replace-all / delete-by-predicate primitives plus an
    ``run_atomic`` seam that runs a write callback inside a MongoDB transaction
    when enabled, or sequentially otherwise.

Dependencies:
    - app.database
    - app.config
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from bson.errors import InvalidBSON

import app.database as _db
from app.config import settings
from app.services.ledger_errors import StoreCorruptError

logger = logging.getLogger("wagerbook.ledger_repository")

PENDING_WAGERS = "pending_wagers"
SETTLED_ENTRIES = "settled_entries"
DEFICITS = "deficits"
COLLECTIONS = (PENDING_WAGERS, SETTLED_ENTRIES, DEFICITS)

_NUMERIC_FIELDS = ("risk", "to_win", "amount", "deficit")


def _coerce_record(collection: str, doc: Any) -> dict:
    """Normalize numeric fields to float. Legacy rows stored form input as strings."""
    if not isinstance(doc, dict):
        raise StoreCorruptError(f"Malformed record in {collection}: {type(doc).__name__}")
    for field in _NUMERIC_FIELDS:
        if field not in doc:
            continue
        value = doc[field]
        if value is None or value == "":
            doc[field] = None
            continue
        if isinstance(value, bool):
            raise StoreCorruptError(f"Malformed {field} in {collection}: {value!r}")
        try:
            doc[field] = float(value)
        except (TypeError, ValueError):
            raise StoreCorruptError(f"Malformed {field} in {collection}: {value!r}") from None
    return doc


class LedgerRepository:
    def _collection(self, name: str):
        if name not in COLLECTIONS:
            raise ValueError(f"Unknown ledger collection: {name}")
        return getattr(_db.db, name)

    async def read_all(self, name: str, *, session=None) -> list[dict]:
        """All records of a collection in insertion order.

        A collection that does not exist yet reads as empty.
        """
        try:
            docs = await self._collection(name).find({}, session=session).sort("_id", 1).to_list(length=None)
        except InvalidBSON as exc:
            logger.error("Corrupt documents in %s: %s", name, exc)
            raise StoreCorruptError(f"Could not read {name}.") from exc
        return [_coerce_record(name, doc) for doc in docs]

    async def append(self, name: str, records: list[dict], *, session=None) -> list[dict]:
        """Append records; each dict gains its ``_id`` in place."""
        if not records:
            return []
        await self._collection(name).insert_many(records, ordered=True, session=session)
        return records

    async def replace_all(self, name: str, records: list[dict], *, session=None) -> int:
        """Replace the whole collection. Returns the number of removed records."""
        result = await self._collection(name).delete_many({}, session=session)
        if records:
            await self._collection(name).insert_many(records, ordered=True, session=session)
        return result.deleted_count

    async def delete_where(
        self, name: str, query: dict, *, just_one: bool = False, session=None,
    ) -> int:
        coll = self._collection(name)
        if just_one:
            result = await coll.delete_one(query, session=session)
        else:
            result = await coll.delete_many(query, session=session)
        return result.deleted_count

    async def run_atomic(self, callback: Callable[[Any], Awaitable[Any]]) -> Any:
        """Run ``callback(session)`` as one unit.

        With MONGO_TRANSACTIONS_ENABLED the callback runs inside a transaction
        and is retried by the driver on transient errors. Otherwise it runs
        with ``session=None`` and a crash between writes leaves a partial,
        but detectable, result.
        """
        if not settings.MONGO_TRANSACTIONS_ENABLED:
            return await callback(None)
        async with await _db.client.start_session() as session:
            return await session.with_transaction(callback)
