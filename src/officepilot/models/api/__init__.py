"""API models package."""

from officepilot.models.api.deployment import CatalogVersionInfo, ErrorDetail, PlanResponse, ValidateResponse

__all__ = [
    "CatalogVersionInfo",
    "ErrorDetail",
    "PlanResponse",
    "ValidateResponse",
]
