from fastapi import APIRouter, Depends, status

from src.presentation.api.dependencies import StorageDep, require_maintenance
from src.presentation.api.v1.schemas.lifecycle import (HistoryResponse,
                                                       NextIdResponse)

router = APIRouter()


@router.get("/next-id/{table}", response_model=NextIdResponse)
async def get_next_available_id(table: str, storage: StorageDep):
    """Smallest free id of a table (unknown tables are 404)"""
    next_id = await storage.get_next_available_id(table)
    return NextIdResponse(table=table, next_id=next_id)


@router.post(
    "/resequence/{table}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_maintenance)],
)
async def resequence_ids(table: str, storage: StorageDep):
    """
    Renumber a table's ids to 1..N.

    Operator-only: refused unless MAINTENANCE_ENABLED is set, and with 409
    when a dependent table references an id that would move.
    """
    await storage.resequence_ids(table)


@router.get("/history/{entity_type}/{entity_id}", response_model=list[HistoryResponse])
async def get_history(entity_type: str, entity_id: int, storage: StorageDep):
    return await storage.get_history(entity_type, entity_id)
