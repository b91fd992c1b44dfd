from fastapi import APIRouter, HTTPException, Query, status

from src.application.dtos import HuntingGuideCreate, HuntingGuidePatch
from src.domain.enums import EntityType, LifecycleOperation
from src.presentation.api.dependencies import StorageDep
from src.presentation.api.errors import raise_on_rejection
from src.presentation.api.v1.schemas.hunting_guide import (
    GuideAssociationResponse, HuntingGuideResponse)
from src.presentation.api.v1.schemas.lifecycle import (BatchResultResponse,
                                                       CascadeReportResponse)

router = APIRouter()


@router.post("/", response_model=HuntingGuideResponse, status_code=status.HTTP_201_CREATED)
async def create_hunting_guide(data: HuntingGuideCreate, storage: StorageDep):
    return await storage.create_hunting_guide(data)


@router.get("/", response_model=list[HuntingGuideResponse])
async def list_hunting_guides(
    storage: StorageDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    return await storage.list_hunting_guides(skip=skip, limit=limit)


@router.get("/{guide_id}", response_model=HuntingGuideResponse)
async def get_hunting_guide(guide_id: int, storage: StorageDep):
    guide = await storage.get_hunting_guide(guide_id)
    if not guide:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hunting guide not found")
    return guide


@router.patch("/{guide_id}", response_model=HuntingGuideResponse)
async def patch_hunting_guide(guide_id: int, patch: HuntingGuidePatch, storage: StorageDep):
    guide = await storage.patch_hunting_guide(guide_id, patch)
    if not guide:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hunting guide not found")
    return guide


@router.delete("/{guide_id}", response_model=CascadeReportResponse)
async def delete_hunting_guide(guide_id: int, storage: StorageDep):
    """Delete a guide together with its account and hunter associations"""
    report = await storage.run_lifecycle(
        EntityType.HUNTING_GUIDE, guide_id, LifecycleOperation.DELETE
    )
    raise_on_rejection(report)
    return CascadeReportResponse.from_report(report)


@router.delete("/", response_model=BatchResultResponse)
async def delete_all_hunting_guides(storage: StorageDep):
    result = await storage.delete_all_hunting_guides()
    return BatchResultResponse(**vars(result))


@router.get("/{guide_id}/hunters", response_model=list[GuideAssociationResponse])
async def get_guide_hunters(guide_id: int, storage: StorageDep):
    return await storage.get_guide_hunter_associations(guide_id)


@router.put("/{guide_id}/hunters/{hunter_id}", response_model=GuideAssociationResponse)
async def associate_hunter(guide_id: int, hunter_id: int, storage: StorageDep):
    """Link a hunter to a guide (idempotent)"""
    return await storage.associate_hunter_to_guide(guide_id, hunter_id)


@router.delete("/{guide_id}/hunters/{hunter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_hunter(guide_id: int, hunter_id: int, storage: StorageDep):
    if not await storage.remove_hunter_association(guide_id, hunter_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Association not found")
