"""Deployment planning API endpoints."""

from fastapi import APIRouter, HTTPException

from officepilot.config import get_config
from officepilot.exceptions import AppBaseError, SpecValidationError
from officepilot.logger import get_logger
from officepilot.models.api import CatalogVersionInfo, ErrorDetail, PlanResponse, ValidateResponse
from officepilot.models.deployment import InstallRequest
from officepilot.services.catalog import get_catalog
from officepilot.services.deployment import OperationPlanner, SpecValidator, VariantResolver

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["deployments"])


def _http_error(e: AppBaseError) -> HTTPException:
    violations = e.violations if isinstance(e, SpecValidationError) else []
    detail = ErrorDetail(error=e.error_key, message=str(e), violations=violations)
    return HTTPException(status_code=e.status_code, detail=detail.model_dump(mode="json"))


@router.get("/catalog/versions", response_model=list[CatalogVersionInfo])
async def list_catalog_versions() -> list[CatalogVersionInfo]:
    """
    List Office generations known to the catalog.

    Returns:
        One entry per version with editions and service-pack builds
    """
    catalog = get_catalog()
    return [
        CatalogVersionInfo(
            version=version,
            version_tag=entry.version_tag,
            editions=sorted(entry.editions),
            service_packs=entry.service_packs,
            default_language=entry.default_language,
            default_products=entry.default_products,
            components=sorted(entry.components),
        )
        for version, entry in sorted(catalog.versions.items())
    ]


@router.post("/deployments/validate", response_model=ValidateResponse)
async def validate_request(request: InstallRequest) -> ValidateResponse:
    """
    Validate an install request, reporting every violation at once.
    """
    validator = SpecValidator(get_catalog(), get_config().deployment)
    try:
        spec = validator.validate(request)
    except SpecValidationError as e:
        return ValidateResponse(valid=False, violations=e.violations)
    return ValidateResponse(valid=True, spec=spec)


@router.post("/deployments/plan", response_model=PlanResponse)
async def plan_deployment(request: InstallRequest) -> PlanResponse:
    """
    Resolve and plan an install request without touching any machine.
    """
    catalog = get_catalog()
    try:
        spec = SpecValidator(catalog, get_config().deployment).validate(request)
        variant = VariantResolver(catalog).resolve(spec)
    except AppBaseError as e:
        logger.info("Plan request rejected", error=e.error_key)
        raise _http_error(e) from e

    operations = OperationPlanner().plan(spec, variant)
    return PlanResponse(spec=spec, variant=variant, operations=operations)
