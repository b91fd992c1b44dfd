from datetime import date

from fastapi import APIRouter, HTTPException, status

from src.application.dtos import CampaignSettings
from src.presentation.api.dependencies import StorageDep
from src.presentation.api.v1.schemas.lifecycle import (
    CampaignPeriodQuery, CampaignValidationResponse)

router = APIRouter()


@router.get("/", response_model=CampaignSettings)
async def get_campaign(storage: StorageDep):
    settings = await storage.get_hunting_campaign_settings()
    if settings is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No hunting campaign is configured"
        )
    return settings


@router.put("/", response_model=CampaignSettings)
async def save_campaign(settings: CampaignSettings, storage: StorageDep):
    return await storage.save_hunting_campaign_settings(settings)


@router.get("/validate", response_model=CampaignValidationResponse)
async def validate_date(candidate: date, storage: StorageDep):
    result = await storage.validate_campaign_date(candidate)
    return CampaignValidationResponse(accepted=result.accepted, reason=result.reason)


@router.post("/validate-period", response_model=CampaignValidationResponse)
async def validate_period(period: CampaignPeriodQuery, storage: StorageDep):
    """Check a species sub-season against the campaign window"""
    result = await storage.validate_campaign_period(period.start_date, period.end_date)
    return CampaignValidationResponse(accepted=result.accepted, reason=result.reason)
