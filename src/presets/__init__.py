"""Preset resolution: name parsing, content decoding, fallback and extraction."""
from src.presets.content_decoder import decode_content
from src.presets.models import (
    DEFAULT_PRESET_NAME,
    BranchInfo,
    ContentEncoding,
    JSONValue,
    ParsedPresetName,
    PresetReference,
    RawFileContent,
)
from src.presets.path_resolver import extract_preset, parse_preset_name
from src.presets.resolver import (
    FALLBACK_FILE_NAMES,
    PresetResolver,
    PresetResolverProtocol,
    build_file_path,
)

__all__ = [
    "DEFAULT_PRESET_NAME",
    "FALLBACK_FILE_NAMES",
    "BranchInfo",
    "ContentEncoding",
    "JSONValue",
    "ParsedPresetName",
    "PresetReference",
    "PresetResolver",
    "PresetResolverProtocol",
    "RawFileContent",
    "build_file_path",
    "decode_content",
    "extract_preset",
    "parse_preset_name",
]
