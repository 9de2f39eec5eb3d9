"""Deficit ledger - listing, manual entries and deletion by position or timestamp."""

import logging

from app.models.ledger import DeficitCreate
from app.services.ledger_aggregator import sort_for_reapply
from app.services.ledger_errors import ValidationError
from app.services.ledger_repository import DEFICITS, LedgerRepository
from app.utils import utc_iso

logger = logging.getLogger("wagerbook.deficit_service")


async def list_deficits(
    repository: LedgerRepository | None = None, *, sort: bool = True,
) -> list[dict]:
    repo = repository or LedgerRepository()
    deficits = await repo.read_all(DEFICITS)
    return sort_for_reapply(deficits) if sort else deficits


async def add_deficit(body: DeficitCreate, repository: LedgerRepository | None = None) -> dict:
    repo = repository or LedgerRepository()
    doc = body.model_dump()
    doc["settled_at"] = utc_iso()
    await repo.append(DEFICITS, [doc])
    return doc


async def delete_deficit_at(index: int, repository: LedgerRepository | None = None) -> None:
    """Delete by stored position. Prefer ``delete_deficit_by_timestamp``: positions
    shift under concurrent deletes."""
    repo = repository or LedgerRepository()
    deficits = await repo.read_all(DEFICITS)
    if index < 0 or index >= len(deficits):
        raise ValidationError("Invalid index")
    await repo.delete_where(DEFICITS, {"_id": deficits[index]["_id"]}, just_one=True)


async def delete_deficit_by_timestamp(
    settled_at: str, repository: LedgerRepository | None = None,
) -> None:
    repo = repository or LedgerRepository()
    if not settled_at or not settled_at.strip():
        raise ValidationError("Invalid timestamp")
    removed = await repo.delete_where(DEFICITS, {"settled_at": settled_at}, just_one=True)
    if removed == 0:
        raise ValidationError(f"No deficit with timestamp {settled_at}")


async def delete_selected(
    timestamps: list[str], repository: LedgerRepository | None = None,
) -> int:
    """Delete every deficit whose ``settled_at`` is listed. Unknown ones are ignored."""
    repo = repository or LedgerRepository()
    wanted = [t for t in timestamps if t]
    if not wanted:
        raise ValidationError("No timestamps given")
    removed = await repo.delete_where(DEFICITS, {"settled_at": {"$in": wanted}})
    logger.info("Deficits deleted: requested=%d removed=%d", len(wanted), removed)
    return removed


async def clear_deficits(repository: LedgerRepository | None = None) -> int:
    repo = repository or LedgerRepository()
    return await repo.replace_all(DEFICITS, [])
