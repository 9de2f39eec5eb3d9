"""Deficits API - listing, manual entries and deletion."""

from fastapi import APIRouter, status

from app.models.ledger import (
    DeficitCreate,
    DeficitListResponse,
    DeficitResponse,
    DeleteResponse,
    DeleteSelectedRequest,
    deficit_to_response,
)
from app.services.deficit_service import (
    add_deficit,
    clear_deficits,
    delete_deficit_at,
    delete_deficit_by_timestamp,
    delete_selected,
    list_deficits,
)
from app.services.ledger_aggregator import reapply_amount, total_deficit

router = APIRouter(prefix="/api/deficits", tags=["deficits"])


@router.get("", response_model=DeficitListResponse)
async def get_deficits(sort: bool = True):
    """Deficits, highest combined risk + to-win first unless ``sort=false``."""
    deficits = await list_deficits(sort=sort)
    return DeficitListResponse(
        deficits=[deficit_to_response(d, reapply_amount(d)) for d in deficits],
        total_deficit=round(total_deficit(deficits), 2),
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=DeficitResponse)
async def create_deficit(body: DeficitCreate):
    doc = await add_deficit(body)
    return deficit_to_response(doc, reapply_amount(doc))


@router.delete("/by-timestamp/{settled_at}", response_model=DeleteResponse)
async def delete_by_timestamp(settled_at: str):
    await delete_deficit_by_timestamp(settled_at)
    return DeleteResponse(deleted=1)


@router.post("/delete-selected", response_model=DeleteResponse)
async def delete_many(body: DeleteSelectedRequest):
    return DeleteResponse(deleted=await delete_selected(body.settled_at))


@router.delete("/{index}", response_model=DeleteResponse)
async def delete_at(index: int):
    """Delete by stored (unsorted) position."""
    await delete_deficit_at(index)
    return DeleteResponse(deleted=1)


@router.delete("", response_model=DeleteResponse)
async def delete_all():
    return DeleteResponse(deleted=await clear_deficits())
