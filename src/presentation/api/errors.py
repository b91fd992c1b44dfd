"""Translate registry exceptions into HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.domain.exceptions import (CampaignWindowException,
                                   CascadeIntegrityException,
                                   ConcurrentModificationException,
                                   MaintenanceDisabledException,
                                   PreconditionFailedException,
                                   ReferentialIntegrityException,
                                   RegistryException,
                                   ResourceNotFoundException,
                                   ValidationException)
from src.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES: dict[type[RegistryException], int] = {
    ResourceNotFoundException: status.HTTP_404_NOT_FOUND,
    PreconditionFailedException: status.HTTP_409_CONFLICT,
    ConcurrentModificationException: status.HTTP_409_CONFLICT,
    ReferentialIntegrityException: status.HTTP_409_CONFLICT,
    ValidationException: status.HTTP_400_BAD_REQUEST,
    CampaignWindowException: status.HTTP_422_UNPROCESSABLE_ENTITY,
    MaintenanceDisabledException: status.HTTP_403_FORBIDDEN,
    CascadeIntegrityException: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: RegistryException) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def registry_exception_handler(request: Request, exc: RegistryException) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        # Store errors stay in the logs
        logger.error("%s %s failed: %s %s", request.method, request.url.path, exc.message, exc.details)
        body = {
            "error": exc.error_code,
            "message": "The operation could not be completed and was rolled back",
            "details": {},
        }
    else:
        body = exc.to_dict()
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistryException, registry_exception_handler)


def raise_on_rejection(report) -> None:
    """Surface a rejected cascade plan as its exception"""
    if report.rejection is not None:
        raise report.rejection
