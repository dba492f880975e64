"""API request/response models for deployment planning."""

from pydantic import BaseModel

from officepilot.models.deployment import InstallSpec, Operation, ResolvedVariant, Violation


class ValidateResponse(BaseModel):
    """Result of validating an install request."""

    valid: bool
    violations: list[Violation] = []
    spec: InstallSpec | None = None


class PlanResponse(BaseModel):
    """Resolved variant and ordered operations for an install request."""

    spec: InstallSpec
    variant: ResolvedVariant
    operations: list[Operation]


class ErrorDetail(BaseModel):
    """Error body for domain failures."""

    error: str
    message: str
    violations: list[Violation] = []


class CatalogVersionInfo(BaseModel):
    """Summary of one catalog generation."""

    version: str
    version_tag: str
    editions: list[str]
    service_packs: dict[int, str]
    default_language: str
    default_products: list[str]
    components: list[str]
