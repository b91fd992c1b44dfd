from typing import Annotated

from fastapi import Depends, Request

from src.application.storage import RegistryStorage
from src.domain.exceptions import MaintenanceDisabledException
from src.infrastructure.config.settings import Settings, get_settings


def get_storage(request: Request) -> RegistryStorage:
    """
    Storage dependency.

    The storage object is built once in main.lifespan and kept on
    app.state; tests override this dependency with their own instance.
    """
    return request.app.state.storage


def require_maintenance(settings: Annotated[Settings, Depends(get_settings)]) -> None:
    """Refuse maintenance routes unless MAINTENANCE_ENABLED is set"""
    if not settings.maintenance_enabled:
        raise MaintenanceDisabledException("resequence_ids")


StorageDep = Annotated[RegistryStorage, Depends(get_storage)]
