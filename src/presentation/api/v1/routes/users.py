from fastapi import APIRouter, HTTPException, Query, status

from src.application.dtos import UserCreate, UserPatch
from src.domain.enums import EntityType, LifecycleOperation
from src.presentation.api.dependencies import StorageDep
from src.presentation.api.errors import raise_on_rejection
from src.presentation.api.v1.schemas.lifecycle import CascadeReportResponse
from src.presentation.api.v1.schemas.user import UserResponse

router = APIRouter()


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(data: UserCreate, storage: StorageDep):
    """Create a user account, optionally linked to a hunter"""
    return await storage.create_user(data)


@router.get("/", response_model=list[UserResponse])
async def list_users(
    storage: StorageDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    return await storage.list_users(skip=skip, limit=limit)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, storage: StorageDep):
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def patch_user(user_id: int, patch: UserPatch, storage: StorageDep):
    user = await storage.patch_user(user_id, patch)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.delete("/{user_id}", response_model=CascadeReportResponse)
async def delete_user(user_id: int, storage: StorageDep):
    """Delete an account; the hunter it references is detached, never deleted"""
    report = await storage.run_lifecycle(EntityType.USER, user_id, LifecycleOperation.DELETE)
    raise_on_rejection(report)
    return CascadeReportResponse.from_report(report)
