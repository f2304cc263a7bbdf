"""
Preset resolution: fallback chain, fetch, decode, extract.

Resolution of "owner/repo" + "file/name/subname":
1. Choose candidate files. The default preset ("default" or no name) tries
   default.json then renovate.json (custom.json first in app mode); any
   other name fetches exactly <file>.json.
2. Discover the default branch once if the adapter needs an explicit ref.
3. Try candidates in order. PresetNotFoundError moves to the next one;
   PlatformFailureError and InvalidPresetJSONError stop immediately.
4. Walk the remaining name segments inside the parsed document.

Patterns Applied:
- Protocol for duck typing: generic over ProviderAdapterProtocol
- No module-level mutable state; one resolver may serve concurrent calls
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Final, Protocol

from src.core.exceptions import (
    PRESET_DEP_NOT_FOUND,
    PRESET_NOT_FOUND,
    PresetNotFoundError,
    PresetReferenceError,
    PresetServiceError,
)
from src.core.logging import get_logger
from src.core.tracing import (
    RESOLVE_SPAN_NAME,
    get_tracer,
    record_preset_error,
    set_preset_attributes,
)
from src.presets.content_decoder import decode_content
from src.presets.models import (
    DEFAULT_PRESET_NAME,
    JSONValue,
    ParsedPresetName,
    PresetReference,
)
from src.presets.path_resolver import extract_preset, parse_preset_name

if TYPE_CHECKING:
    from src.providers.base import ProviderAdapterProtocol

# =============================================================================
# Constants
# =============================================================================

FALLBACK_FILE_NAMES: Final[tuple[str, ...]] = ("default", "renovate")
APP_MODE_FILE_NAME: Final[str] = "custom"
DEPRECATED_FALLBACK_FILE_NAME: Final[str] = "renovate"

logger = get_logger(__name__)
tracer = get_tracer(__name__)


# =============================================================================
# Protocol
# =============================================================================


class PresetResolverProtocol(Protocol):
    """Produced interface consumed by configuration loading."""

    async def get_preset(self, reference: PresetReference) -> JSONValue:
        ...

    async def get_preset_from_endpoint(
        self,
        package_name: str,
        preset_name: str | None = None,
        endpoint: str | None = None,
        *,
        tag: str | None = None,
        preset_path: str | None = None,
    ) -> JSONValue:
        ...

    async def fetch_json_file(
        self,
        repo: str,
        file_name: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> JSONValue:
        ...


# =============================================================================
# Implementation
# =============================================================================


def build_file_path(file_name: str, preset_path: str | None = None) -> str:
    """Join an optional repository directory and a preset file name."""
    file_path = ParsedPresetName(file_name=file_name).file_path
    if not preset_path:
        return file_path
    return f"{preset_path.strip('/')}/{file_path}"


class PresetResolver:
    """Resolve preset references against one hosting platform.

    Usage:
        resolver = PresetResolver(GitHubAdapter(transport))
        preset = await resolver.get_preset(PresetReference("owner/repo", "file/name"))
    """

    def __init__(
        self,
        adapter: ProviderAdapterProtocol,
        *,
        app_mode: bool = False,
        fallback_file_names: Sequence[str] = FALLBACK_FILE_NAMES,
    ) -> None:
        """Initialize the resolver.

        Args:
            adapter: Hosting platform adapter
            app_mode: Try custom.json before the fallback chain for the
                default preset
            fallback_file_names: Candidate files for the default preset
        """
        self._adapter = adapter
        self.app_mode = app_mode
        self.fallback_file_names = tuple(fallback_file_names)

    @property
    def adapter(self) -> ProviderAdapterProtocol:
        return self._adapter

    async def get_preset(self, reference: PresetReference) -> JSONValue:
        """Resolve a PresetReference.

        Raises:
            PresetNotFoundError: No candidate file exists, or a nested
                preset is missing
            InvalidPresetJSONError: A fetched file is empty or malformed
            PlatformFailureError: The hosting platform failed
        """
        return await self.get_preset_from_endpoint(
            reference.package_name,
            reference.preset_name,
            reference.endpoint,
            tag=reference.tag,
            preset_path=reference.preset_path,
        )

    async def get_preset_from_endpoint(
        self,
        package_name: str,
        preset_name: str | None = None,
        endpoint: str | None = None,
        *,
        tag: str | None = None,
        preset_path: str | None = None,
    ) -> JSONValue:
        """Resolve a preset with an explicit endpoint (None: platform default)."""
        if not package_name or not package_name.strip():
            raise PresetReferenceError("package name must not be empty", preset_name=preset_name)

        parsed = parse_preset_name(preset_name or DEFAULT_PRESET_NAME)
        endpoint = self._adapter.normalize_endpoint(endpoint)

        with tracer.start_as_current_span(RESOLVE_SPAN_NAME) as span:
            set_preset_attributes(
                span,
                package_name=package_name,
                name=preset_name or DEFAULT_PRESET_NAME,
                endpoint=endpoint,
                tag=tag,
                preset_path=preset_path,
            )
            try:
                return await self._resolve(
                    span, package_name, preset_name, parsed, endpoint, tag, preset_path
                )
            except PresetServiceError as e:
                record_preset_error(span, e)
                raise

    async def _resolve(
        self,
        span: Any,
        package_name: str,
        preset_name: str | None,
        parsed: ParsedPresetName,
        endpoint: str,
        tag: str | None,
        preset_path: str | None,
    ) -> JSONValue:
        ref = tag
        if ref is None and self._adapter.requires_explicit_ref:
            ref = await self._adapter.resolve_default_branch(package_name, endpoint)

        file_path, document = await self._fetch_first(
            package_name, self._candidates(parsed), endpoint, ref, preset_path
        )
        set_preset_attributes(span, file_path=file_path, ref=ref)

        if not parsed.segments:
            return document

        try:
            return extract_preset(document, parsed.segments)
        except PresetNotFoundError as e:
            raise PresetNotFoundError(
                PRESET_NOT_FOUND,
                package_name=package_name,
                preset_name=preset_name,
                file_path=file_path,
            ) from e

    async def fetch_json_file(
        self,
        repo: str,
        file_name: str,
        endpoint: str | None = None,
        ref: str | None = None,
    ) -> JSONValue:
        """Fetch and decode one file; no fallback, no traversal."""
        raw = await self._adapter.fetch_file(repo, file_name, endpoint, ref)
        return decode_content(raw)

    def _candidates(self, parsed: ParsedPresetName) -> tuple[str, ...]:
        if parsed.file_name != DEFAULT_PRESET_NAME:
            return (parsed.file_name,)
        if self.app_mode:
            return (APP_MODE_FILE_NAME, *self.fallback_file_names)
        return self.fallback_file_names

    async def _fetch_first(
        self,
        package_name: str,
        candidates: Sequence[str],
        endpoint: str,
        ref: str | None,
        preset_path: str | None,
    ) -> tuple[str, JSONValue]:
        tried: list[str] = []
        for file_name in candidates:
            file_path = build_file_path(file_name, preset_path)
            tried.append(file_path)
            try:
                document = await self.fetch_json_file(package_name, file_path, endpoint, ref)
            except PresetNotFoundError:
                logger.debug(
                    "preset_candidate_missing",
                    package_name=package_name,
                    file_path=file_path,
                )
                continue

            if file_name == DEPRECATED_FALLBACK_FILE_NAME and len(tried) > 1:
                logger.warning(
                    "preset_fallback_deprecated",
                    package_name=package_name,
                    file_path=file_path,
                    hint="rename renovate.json to default.json",
                )
            return file_path, document

        raise PresetNotFoundError(
            PRESET_DEP_NOT_FOUND, package_name=package_name, file_path=tried
        )
