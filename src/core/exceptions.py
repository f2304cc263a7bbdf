"""
Preset Resolution Service - Custom Exceptions

Error taxonomy for preset resolution. Callers branch on the class, never on
provider-specific status codes or parse errors:

- PresetNotFoundError: the file or nested preset does not exist (drives fallback)
- InvalidPresetJSONError: content fetched but empty or not parseable
- PlatformFailureError: upstream host failed (5xx, network), retry later

Anti-Patterns Avoided:
- #7, #13 (Exception Shadowing): namespaced exceptions instead of
  ConnectionError / LookupError / ValueError
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

# =============================================================================
# Message Constants (S1192 compliance)
# =============================================================================

PRESET_DEP_NOT_FOUND: Final[str] = "dep not found"
PRESET_NOT_FOUND: Final[str] = "preset not found"
PRESET_INVALID_JSON: Final[str] = "invalid preset JSON"
PLATFORM_FAILURE: Final[str] = "platform-failure"


class PresetServiceError(Exception):
    """Base exception for the preset resolution service.

    Carries the resolution context so operators can locate the
    misconfiguration from the message alone.

    Attributes:
        message: Short error kind (one of the message constants above)
        package_name: Repository or namespace being resolved
        preset_name: Preset name as requested by the caller
        file_path: File path (or paths) attempted
    """

    def __init__(
        self,
        message: str,
        *,
        package_name: str | None = None,
        preset_name: str | None = None,
        file_path: str | Sequence[str] | None = None,
    ) -> None:
        self.message = message
        self.package_name = package_name
        self.preset_name = preset_name
        if file_path is not None and not isinstance(file_path, str):
            file_path = ", ".join(file_path)
        self.file_path = file_path
        super().__init__(self._format())

    def _format(self) -> str:
        context = []
        if self.package_name:
            context.append(f"package={self.package_name}")
        if self.preset_name:
            context.append(f"preset={self.preset_name}")
        if self.file_path:
            context.append(f"file={self.file_path}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class PresetNotFoundError(PresetServiceError):
    """Raised when a preset file or a nested preset does not exist.

    Expected during fallback; only fatal once every candidate is exhausted.
    """


class InvalidPresetJSONError(PresetServiceError):
    """Raised when preset content is empty, undecodable or not valid JSON."""

    def __init__(self, message: str = PRESET_INVALID_JSON, **kwargs: str | None) -> None:
        super().__init__(message, **kwargs)


class PlatformFailureError(PresetServiceError):
    """Raised when the hosting platform is unavailable.

    Short-circuits fallback: a host that is down is not a missing preset.

    Attributes:
        status_code: HTTP status returned by the host, None for network failures
    """

    def __init__(
        self,
        message: str = PLATFORM_FAILURE,
        *,
        status_code: int | None = None,
        **kwargs: str | None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, **kwargs)

    def _format(self) -> str:
        base = super()._format()
        if self.status_code is None:
            return base
        return f"{base} [status={self.status_code}]"


class PresetReferenceError(PresetServiceError):
    """Raised when a preset reference is malformed (empty package or file name)."""


class UnsupportedPlatformError(PresetServiceError):
    """Raised when no provider adapter is registered for a platform key."""


class TransportError(PresetServiceError):
    """Raised by a transport when the request never produced an HTTP response.

    Adapters translate this into PlatformFailureError.
    """
