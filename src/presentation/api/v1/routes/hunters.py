from fastapi import APIRouter, HTTPException, Query, status

from src.application.dtos import HunterCreate, HunterPatch
from src.domain.enums import EntityType, LifecycleOperation
from src.presentation.api.dependencies import StorageDep
from src.presentation.api.errors import raise_on_rejection
from src.presentation.api.v1.schemas.hunter import HunterResponse
from src.presentation.api.v1.schemas.lifecycle import (BatchResultResponse,
                                                       CascadeReportResponse)
from src.presentation.api.v1.schemas.permit import (PermitResponse,
                                                    TaxResponse)

router = APIRouter()


@router.post("/", response_model=HunterResponse, status_code=status.HTTP_201_CREATED)
async def create_hunter(data: HunterCreate, storage: StorageDep):
    return await storage.create_hunter(data)


@router.get("/", response_model=list[HunterResponse])
async def list_hunters(
    storage: StorageDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    return await storage.list_hunters(skip=skip, limit=limit)


@router.get("/{hunter_id}", response_model=HunterResponse)
async def get_hunter(hunter_id: int, storage: StorageDep):
    hunter = await storage.get_hunter(hunter_id)
    if not hunter:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hunter not found")
    return hunter


@router.patch("/{hunter_id}", response_model=HunterResponse)
async def patch_hunter(hunter_id: int, patch: HunterPatch, storage: StorageDep):
    hunter = await storage.patch_hunter(hunter_id, patch)
    if not hunter:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hunter not found")
    return hunter


@router.delete("/{hunter_id}", response_model=CascadeReportResponse)
async def delete_hunter(hunter_id: int, storage: StorageDep, force: bool = False):
    """
    Delete a hunter and its dependents.

    Refused with 409 while the hunter holds an active permit, unless
    force=true. Permits are suspended and kept, never removed.
    """
    report = await storage.run_lifecycle(
        EntityType.HUNTER, hunter_id, LifecycleOperation.DELETE, force=force
    )
    raise_on_rejection(report)
    return CascadeReportResponse.from_report(report)


@router.delete("/", response_model=BatchResultResponse)
async def delete_all_hunters(storage: StorageDep, force: bool = False):
    result = await storage.delete_all_hunters(force=force)
    return BatchResultResponse(**vars(result))


@router.post("/{hunter_id}/suspend", response_model=HunterResponse)
async def suspend_hunter(hunter_id: int, storage: StorageDep):
    """Suspend the hunter, its active permits and its accounts"""
    report = await storage.run_lifecycle(EntityType.HUNTER, hunter_id, LifecycleOperation.SUSPEND)
    raise_on_rejection(report)
    return await storage.get_hunter(hunter_id)


@router.post("/{hunter_id}/reactivate", response_model=HunterResponse)
async def reactivate_hunter(hunter_id: int, storage: StorageDep):
    """Reactivate the hunter and its accounts (permits must be renewed separately)"""
    report = await storage.run_lifecycle(
        EntityType.HUNTER, hunter_id, LifecycleOperation.REACTIVATE
    )
    raise_on_rejection(report)
    return await storage.get_hunter(hunter_id)


@router.get("/{hunter_id}/permits", response_model=list[PermitResponse])
async def get_hunter_permits(hunter_id: int, storage: StorageDep, state: str | None = None):
    """Permits of a hunter, optionally filtered by state=active|expired"""
    if state == "active":
        permits = await storage.get_active_permits_by_hunter(hunter_id)
    elif state == "expired":
        permits = await storage.get_expired_permits_by_hunter(hunter_id)
    elif state is None:
        permits = await storage.get_permits_by_hunter(hunter_id)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="state must be 'active' or 'expired'"
        )
    return [PermitResponse.from_orm_model(p) for p in permits]


@router.get("/{hunter_id}/taxes", response_model=list[TaxResponse])
async def get_hunter_taxes(hunter_id: int, storage: StorageDep):
    return await storage.get_taxes_by_hunter(hunter_id)
