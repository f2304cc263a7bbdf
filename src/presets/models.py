"""
Preset resolution data model.

All entities are frozen dataclasses; a resolution call never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Union

from src.core.exceptions import PresetReferenceError

# =============================================================================
# Constants
# =============================================================================

DEFAULT_PRESET_NAME: Final[str] = "default"
JSON_SUFFIX: Final[str] = ".json"

# Parsed JSON document: dict, list, str, int, float, bool or None
JSONValue = Union[dict[str, Any], list[Any], str, int, float, bool, None]


class ContentEncoding(str, Enum):
    """Transport encoding of a fetched file payload."""

    BASE64 = "base64"
    RAW = "raw"


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class PresetReference:
    """A request to resolve one preset.

    Attributes:
        package_name: Repository or namespace (e.g. "owner/repo"); opaque here
        preset_name: "file", "file/name" or "file/name/subname"; None means the
            implicit default preset
        endpoint: API base URL overriding the provider default
        tag: Branch, tag or commit to read from instead of the default branch
        preset_path: Directory inside the repository holding the preset files
    """

    package_name: str
    preset_name: str | None = None
    endpoint: str | None = None
    tag: str | None = None
    preset_path: str | None = None

    def __post_init__(self) -> None:
        if not self.package_name or not self.package_name.strip():
            raise PresetReferenceError(
                "package name must not be empty", preset_name=self.preset_name
            )


@dataclass(frozen=True, slots=True)
class ParsedPresetName:
    """A preset name split into the file to fetch and the keys to traverse.

    Attributes:
        file_name: Base name of the preset file (without .json)
        segments: Nested keys to walk inside the parsed document
    """

    file_name: str
    segments: tuple[str, ...] = ()

    @property
    def file_path(self) -> str:
        """File name with the .json suffix."""
        if self.file_name.endswith(JSON_SUFFIX):
            return self.file_name
        return f"{self.file_name}{JSON_SUFFIX}"


@dataclass(frozen=True, slots=True)
class RawFileContent:
    """Provider payload before decoding.

    Attributes:
        payload: File body (raw bytes/text, or base64 text); None when the
            provider envelope carried no content
        encoding: How payload is encoded
        package_name: Repository the file was fetched from
        file_path: Path of the file inside the repository
        source_url: URL that produced the payload
    """

    payload: bytes | str | None
    encoding: ContentEncoding
    package_name: str
    file_path: str
    source_url: str = ""


@dataclass(frozen=True, slots=True)
class BranchInfo:
    """A repository branch as listed by the hosting API."""

    name: str
    is_default: bool = False

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> BranchInfo:
        """Build from a GitLab-style branch object ({"name", "default"})."""
        return cls(name=str(data.get("name", "")), is_default=bool(data.get("default", False)))
