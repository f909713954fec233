"""Service orchestrators."""

from .material_service import MaterialService

__all__ = ["MaterialService"]
