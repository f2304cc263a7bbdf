"""
Preset Resolution Service - OpenTelemetry Tracing Module

Patterns Applied:
- One-time configure_tracing() at startup
- Manual spans around each preset resolution (see src/presets/resolver.py)
- preset.* span attributes; failures tagged with their error kind

Until configure_tracing() runs, get_tracer() hands out the no-op tracer, so
library use without the FastAPI app emits nothing.
"""

from typing import Any, Final

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import Status, StatusCode

# Module-level flag for one-time configuration
_configured: bool = False

SERVICE_NAME = "preset-resolution-service"

RESOLVE_SPAN_NAME: Final[str] = "preset.resolve"
ATTRIBUTE_PREFIX: Final[str] = "preset."


def configure_tracing(
    service_name: str = SERVICE_NAME,
    console_export: bool = False,
    version: str = "0.1.0",
) -> None:
    """Configure OpenTelemetry tracing for the application.

    This function must be called exactly ONCE at application startup.

    Args:
        service_name: Name of the service for trace attribution
        console_export: Whether to export spans to console (for development)
        version: Service version recorded on the resource
    """
    global _configured

    if _configured:
        return

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": version,
        }
    )

    provider = TracerProvider(resource=resource)

    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)

    _configured = True


def get_tracer(name: str) -> Any:
    """Get a tracer instance for creating spans.

    Args:
        name: Tracer name (typically module name)

    Returns:
        OpenTelemetry Tracer instance
    """
    return trace.get_tracer(name)


def reset_tracing() -> None:
    """Reset tracing configuration for testing."""
    global _configured
    _configured = False


def set_preset_attributes(span: Any, **attributes: Any) -> None:
    """Set preset.<key> attributes on span, skipping None values."""
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(f"{ATTRIBUTE_PREFIX}{key}", value)


def record_preset_error(span: Any, error: Exception) -> None:
    """Mark span as failed and tag it with the error kind.

    Args:
        span: Active span
        error: PresetServiceError (or any exception) that ended the resolution
    """
    set_preset_attributes(
        span,
        error_kind=type(error).__name__,
        status_code=getattr(error, "status_code", None),
    )
    span.set_status(Status(StatusCode.ERROR, str(error)))
