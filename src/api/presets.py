"""
POST /v1/presets/resolve - resolve a preset reference on a hosting platform.

Error mapping:
- PresetNotFoundError      -> 404
- InvalidPresetJSONError   -> 422
- PresetReferenceError     -> 400
- UnsupportedPlatformError -> 400
- PlatformFailureError     -> 502 (upstream host down, retry later)

Patterns Applied:
- FastAPI router pattern
- Pydantic request/response models
- Dependency injection for PresetService (app.state, overridable in tests)
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from src.core.exceptions import (
    InvalidPresetJSONError,
    PlatformFailureError,
    PresetNotFoundError,
    PresetReferenceError,
    PresetServiceError,
    UnsupportedPlatformError,
)
from src.core.logging import get_logger
from src.presets.models import PresetReference
from src.presets.service import PresetService

logger = get_logger(__name__)

# =============================================================================
# Request/Response Models
# =============================================================================


class ResolvePresetRequest(BaseModel):
    """Request body for preset resolution."""

    platform: str | None = Field(default=None, description="github, gitlab or gitea")
    package_name: str = Field(..., min_length=1, description="Repository, e.g. owner/repo")
    preset_name: str | None = Field(
        default=None, description="file[/name[/subname]]; omitted for the default preset"
    )
    endpoint: str | None = Field(default=None, description="API base URL override")
    tag: str | None = Field(default=None, description="Branch, tag or commit")
    preset_path: str | None = Field(default=None, description="Directory holding presets")


class ResolvePresetResponse(BaseModel):
    """Resolved preset value."""

    platform: str
    package_name: str
    preset_name: str | None = None
    preset: Any


# =============================================================================
# Dependencies
# =============================================================================


def get_preset_service(request: Request) -> PresetService:
    """Return the PresetService created by the lifespan handler.

    Raises:
        HTTPException: 503 while the service is not initialized
    """
    service = getattr(request.app.state, "preset_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="preset service not initialized",
        )
    return service


_STATUS_BY_ERROR: list[tuple[type[PresetServiceError], int]] = [
    (PresetNotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidPresetJSONError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PresetReferenceError, status.HTTP_400_BAD_REQUEST),
    (UnsupportedPlatformError, status.HTTP_400_BAD_REQUEST),
    (PlatformFailureError, status.HTTP_502_BAD_GATEWAY),
]


def _status_for(error: PresetServiceError) -> int:
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


# =============================================================================
# Router
# =============================================================================

presets_router = APIRouter(prefix="/v1/presets", tags=["presets"])


@presets_router.post("/resolve", response_model=ResolvePresetResponse)
async def resolve_preset(
    request: ResolvePresetRequest,
    service: PresetService = Depends(get_preset_service),
) -> ResolvePresetResponse:
    """Resolve a preset and return its JSON value.

    Args:
        request: ResolvePresetRequest
        service: Injected PresetService

    Returns:
        ResolvePresetResponse with the located preset
    """
    try:
        reference = PresetReference(
            package_name=request.package_name,
            preset_name=request.preset_name,
            endpoint=request.endpoint,
            tag=request.tag,
            preset_path=request.preset_path,
        )
        resolver = service.resolver_for(request.platform)
        preset = await service.resolve(resolver.adapter.platform, reference)
    except PresetServiceError as e:
        status_code = _status_for(e)
        logger.info(
            "preset_resolve_failed",
            package_name=request.package_name,
            preset_name=request.preset_name,
            error_type=type(e).__name__,
            status_code=status_code,
        )
        raise HTTPException(status_code=status_code, detail=str(e)) from e

    return ResolvePresetResponse(
        platform=resolver.adapter.platform.value,
        package_name=request.package_name,
        preset_name=request.preset_name,
        preset=preset,
    )
