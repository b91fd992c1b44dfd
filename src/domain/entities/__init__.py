"""Domain entities."""

from src.domain.entities.permit import PermitEntity

__all__ = [
    "PermitEntity",
]
