"""
Decoding of fetched preset files into JSON values.

Every provider hands its payload over as RawFileContent, so malformed content
surfaces as one error kind (InvalidPresetJSONError) regardless of the host.
"""

from __future__ import annotations

import base64
import binascii
import json

from src.core.exceptions import InvalidPresetJSONError
from src.presets.models import ContentEncoding, JSONValue, RawFileContent


def decode_content(raw: RawFileContent) -> JSONValue:
    """Decode a provider payload and parse it as JSON.

    Args:
        raw: Payload as returned by a provider adapter

    Returns:
        Parsed JSON value

    Raises:
        InvalidPresetJSONError: If the payload is absent or empty, fails
            base64/UTF-8 decoding, or is not a JSON document
    """
    context = {"package_name": raw.package_name, "file_path": raw.file_path}

    if not raw.payload:
        raise InvalidPresetJSONError(**context)

    try:
        text = _to_text(raw.payload, raw.encoding)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidPresetJSONError(**context) from e

    if not text.strip():
        raise InvalidPresetJSONError(**context)

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidPresetJSONError(**context) from e

    # A bare `null` document carries no preset
    if document is None:
        raise InvalidPresetJSONError(**context)
    return document


def _to_text(payload: bytes | str, encoding: ContentEncoding) -> str:
    if encoding is ContentEncoding.BASE64:
        if isinstance(payload, str):
            payload = payload.encode("ascii")
        # GitHub wraps base64 content at 60 columns
        payload = base64.b64decode(b"".join(payload.split()), validate=True)

    if isinstance(payload, bytes):
        return payload.decode("utf-8-sig")
    return payload.lstrip("\ufeff")
