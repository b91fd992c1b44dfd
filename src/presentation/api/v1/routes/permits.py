from fastapi import APIRouter, HTTPException, Query, status

from src.application.dtos import PermitCreate, PermitPatch, PermitRenewal, TaxCreate, TaxPatch
from src.domain.enums import EntityType, LifecycleOperation
from src.presentation.api.dependencies import StorageDep
from src.presentation.api.errors import raise_on_rejection
from src.presentation.api.v1.schemas.lifecycle import (BatchResultResponse,
                                                       CascadeReportResponse)
from src.presentation.api.v1.schemas.permit import PermitResponse, TaxResponse

router = APIRouter()
taxes_router = APIRouter()


@router.post("/", response_model=PermitResponse, status_code=status.HTTP_201_CREATED)
async def create_permit(data: PermitCreate, storage: StorageDep):
    permit = await storage.create_permit(data)
    return PermitResponse.from_orm_model(permit)


@router.get("/", response_model=list[PermitResponse])
async def list_permits(
    storage: StorageDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    return [PermitResponse.from_orm_model(p) for p in await storage.list_permits(skip, limit)]


@router.get("/suspended", response_model=list[PermitResponse])
async def list_suspended_permits(storage: StorageDep):
    return [PermitResponse.from_orm_model(p) for p in await storage.get_suspended_permits()]


@router.delete("/suspended", response_model=BatchResultResponse)
async def delete_suspended_permits(storage: StorageDep):
    """Delete every suspended permit that no tax references"""
    result = await storage.delete_all_suspended_permits()
    return BatchResultResponse(**vars(result))


@router.get("/{permit_id}", response_model=PermitResponse)
async def get_permit(permit_id: int, storage: StorageDep):
    permit = await storage.get_permit(permit_id)
    if not permit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit not found")
    return PermitResponse.from_orm_model(permit)


@router.patch("/{permit_id}", response_model=PermitResponse)
async def patch_permit(permit_id: int, patch: PermitPatch, storage: StorageDep):
    permit = await storage.patch_permit(permit_id, patch)
    if not permit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit not found")
    return PermitResponse.from_orm_model(permit)


@router.post("/{permit_id}/suspend", response_model=PermitResponse)
async def suspend_permit(permit_id: int, storage: StorageDep):
    permit = await storage.suspend_permit(permit_id)
    if not permit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit not found")
    return PermitResponse.from_orm_model(permit)


@router.post("/{permit_id}/renew", response_model=PermitResponse)
async def renew_permit(permit_id: int, renewal: PermitRenewal, storage: StorageDep):
    permit = await storage.renew_permit(permit_id, renewal.expiry_date)
    if not permit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit not found")
    return PermitResponse.from_orm_model(permit)


@router.delete("/{permit_id}", response_model=CascadeReportResponse)
async def delete_permit(permit_id: int, storage: StorageDep):
    """Delete a permit; refused with 409 while any tax references it"""
    report = await storage.run_lifecycle(EntityType.PERMIT, permit_id, LifecycleOperation.DELETE)
    raise_on_rejection(report)
    return CascadeReportResponse.from_report(report)


@taxes_router.post("/", response_model=TaxResponse, status_code=status.HTTP_201_CREATED)
async def create_tax(data: TaxCreate, storage: StorageDep):
    return await storage.create_tax(data)


@taxes_router.get("/{tax_id}", response_model=TaxResponse)
async def get_tax(tax_id: int, storage: StorageDep):
    tax = await storage.get_tax(tax_id)
    if not tax:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tax not found")
    return tax


@taxes_router.patch("/{tax_id}", response_model=TaxResponse)
async def patch_tax(tax_id: int, patch: TaxPatch, storage: StorageDep):
    tax = await storage.patch_tax(tax_id, patch)
    if not tax:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tax not found")
    return tax
