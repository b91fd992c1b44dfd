from fastapi import APIRouter, HTTPException, status

from src.application.dtos import (HuntingReportCreate, HuntingReportPatch,
                                  PermitRequestCreate, PermitRequestPatch)
from src.presentation.api.dependencies import StorageDep
from src.presentation.api.v1.schemas.report import (HuntedSpeciesResponse,
                                                    HuntingReportResponse,
                                                    PermitRequestResponse)

permit_requests_router = APIRouter()
hunting_reports_router = APIRouter()


@permit_requests_router.post(
    "/", response_model=PermitRequestResponse, status_code=status.HTTP_201_CREATED
)
async def create_permit_request(data: PermitRequestCreate, storage: StorageDep):
    return await storage.create_permit_request(data)


@permit_requests_router.get("/{request_id}", response_model=PermitRequestResponse)
async def get_permit_request(request_id: int, storage: StorageDep):
    request = await storage.get_permit_request(request_id)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit request not found")
    return request


@permit_requests_router.patch("/{request_id}", response_model=PermitRequestResponse)
async def patch_permit_request(request_id: int, patch: PermitRequestPatch, storage: StorageDep):
    request = await storage.patch_permit_request(request_id, patch)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit request not found")
    return request


async def _report_response(storage, report) -> HuntingReportResponse:
    species = await storage.get_hunted_species(report.id)
    response = HuntingReportResponse.model_validate(report)
    response.species = [HuntedSpeciesResponse.model_validate(s) for s in species]
    return response


@hunting_reports_router.post(
    "/", response_model=HuntingReportResponse, status_code=status.HTTP_201_CREATED
)
async def create_hunting_report(data: HuntingReportCreate, storage: StorageDep):
    """File a report; 422 when report_date is outside the current campaign"""
    report = await storage.create_hunting_report(data)
    return await _report_response(storage, report)


@hunting_reports_router.get("/{report_id}", response_model=HuntingReportResponse)
async def get_hunting_report(report_id: int, storage: StorageDep):
    report = await storage.get_hunting_report(report_id)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hunting report not found")
    return await _report_response(storage, report)


@hunting_reports_router.patch("/{report_id}", response_model=HuntingReportResponse)
async def patch_hunting_report(report_id: int, patch: HuntingReportPatch, storage: StorageDep):
    report = await storage.patch_hunting_report(report_id, patch)
    if not report:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Hunting report not found")
    return await _report_response(storage, report)
