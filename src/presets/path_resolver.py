"""
Preset name parsing and nested value extraction.

A preset name has the form "file[/name[/subname...]]". The first part names
the file (file.json) and the rest are keys walked inside the parsed document:

    >>> parse_preset_name("somefile/somename/somesubname")
    ParsedPresetName(file_name='somefile', segments=('somename', 'somesubname'))
    >>> extract_preset({"somename": {"somesubname": {"foo": "bar"}}}, ("somename", "somesubname"))
    {'foo': 'bar'}

No I/O happens here.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from src.core.exceptions import PRESET_NOT_FOUND, PresetNotFoundError, PresetReferenceError
from src.presets.models import JSONValue, ParsedPresetName

SEPARATOR = "/"


def parse_preset_name(preset_name: str) -> ParsedPresetName:
    """Split a preset name into file name and traversal segments.

    Empty segments (from "a//b" or a trailing slash) are ignored.

    Args:
        preset_name: Preset name such as "default", "custom" or "file/name"

    Returns:
        ParsedPresetName

    Raises:
        PresetReferenceError: If the file name part is empty
    """
    file_name, *rest = preset_name.split(SEPARATOR)
    if not file_name.strip():
        raise PresetReferenceError("preset file name must not be empty", preset_name=preset_name)
    segments = tuple(segment for segment in rest if segment)
    return ParsedPresetName(file_name=file_name, segments=segments)


def extract_preset(document: JSONValue, segments: Sequence[str]) -> JSONValue:
    """Walk a parsed document along segments.

    Args:
        document: Parsed preset file
        segments: Keys to look up in order

    Returns:
        The located value; the document itself when segments is empty

    Raises:
        PresetNotFoundError: If a key is missing, a non-mapping is reached
            before the last key, or the located value is null
    """
    current = document
    for depth, segment in enumerate(segments):
        if not isinstance(current, Mapping) or segment not in current:
            raise PresetNotFoundError(
                PRESET_NOT_FOUND, preset_name=SEPARATOR.join(segments[: depth + 1])
            )
        current = current[segment]
        if current is None:
            raise PresetNotFoundError(
                PRESET_NOT_FOUND, preset_name=SEPARATOR.join(segments[: depth + 1])
            )
    return current
