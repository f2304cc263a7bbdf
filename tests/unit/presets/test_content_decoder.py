"""
Tests for decode_content().

- Base64 envelopes (GitHub/Gitea) and raw bodies (GitLab)
- Uniform InvalidPresetJSONError for empty, undecodable and malformed content
"""

import base64
import json

import pytest

from src.core.exceptions import PRESET_INVALID_JSON, InvalidPresetJSONError
from src.presets.content_decoder import decode_content
from src.presets.models import ContentEncoding, RawFileContent


def _raw(payload: bytes | str | None, encoding: ContentEncoding = ContentEncoding.BASE64) -> RawFileContent:
    return RawFileContent(
        payload=payload,
        encoding=encoding,
        package_name="some/repo",
        file_path="default.json",
    )


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class TestDecodeBase64:
    """Base64 payloads."""

    def test_decodes_object(self) -> None:
        document = {"extends": ["config:base"], "labels": ["deps"]}

        assert decode_content(_raw(_b64(json.dumps(document)))) == document

    def test_tolerates_line_wrapped_base64(self) -> None:
        """GitHub wraps content at 60 columns with newlines."""
        encoded = _b64(json.dumps({"description": "x" * 120}))
        wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60)) + "\n"

        assert decode_content(_raw(wrapped)) == {"description": "x" * 120}

    def test_accepts_bytes_payload(self) -> None:
        assert decode_content(_raw(base64.b64encode(b'{"from":"api"}'))) == {"from": "api"}

    def test_strips_utf8_bom(self) -> None:
        payload = base64.b64encode("\ufeff{\"a\": \"ä\"}".encode("utf-8"))

        assert decode_content(_raw(payload)) == {"a": "ä"}

    def test_not_json_raises_invalid(self) -> None:
        with pytest.raises(InvalidPresetJSONError) as exc_info:
            decode_content(_raw(_b64("not json")))

        assert PRESET_INVALID_JSON in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_invalid_base64_raises_invalid(self) -> None:
        with pytest.raises(InvalidPresetJSONError):
            decode_content(_raw("%%% not base64 %%%"))

    def test_invalid_utf8_raises_invalid(self) -> None:
        with pytest.raises(InvalidPresetJSONError):
            decode_content(_raw(base64.b64encode(b"\xff\xfe\xfa")))


class TestDecodeRaw:
    """Raw payloads."""

    def test_decodes_raw_bytes(self) -> None:
        raw = _raw(b'{"foo": "bar"}', ContentEncoding.RAW)

        assert decode_content(raw) == {"foo": "bar"}

    def test_decodes_raw_text(self) -> None:
        raw = _raw('["a", 1]', ContentEncoding.RAW)

        assert decode_content(raw) == ["a", 1]


class TestDecodeEmpty:
    """Empty or absent content."""

    @pytest.mark.parametrize("payload", [None, "", b""])
    def test_absent_payload_raises_invalid(self, payload: bytes | str | None) -> None:
        with pytest.raises(InvalidPresetJSONError, match="invalid preset JSON"):
            decode_content(_raw(payload))

    def test_blank_text_raises_invalid(self) -> None:
        with pytest.raises(InvalidPresetJSONError):
            decode_content(_raw(b"  \n", ContentEncoding.RAW))

    def test_null_document_raises_invalid(self) -> None:
        with pytest.raises(InvalidPresetJSONError):
            decode_content(_raw(b"null", ContentEncoding.RAW))

    def test_error_names_package_and_file(self) -> None:
        with pytest.raises(InvalidPresetJSONError) as exc_info:
            decode_content(_raw(None))

        assert exc_info.value.package_name == "some/repo"
        assert exc_info.value.file_path == "default.json"
        assert "some/repo" in str(exc_info.value)
