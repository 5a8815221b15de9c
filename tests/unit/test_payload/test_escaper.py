"""Unit tests for JSON escaping of prompt text."""

import json
from pathlib import Path

import pytest

from prompt_batch.payload.errors import EncodingError
from prompt_batch.payload.escaper import (
    escape_json_string,
    read_prompt_text,
    unescape_json_string,
)


ROUND_TRIP_SAMPLES = [
    "",
    "hello",
    "line one\nline two\n",
    'She said "hi"',
    "C:\\path\\to\\file",
    "tab\tand\rcarriage",
    "bell \x07 and nul \x00",
    "unicode: café, 日本語, emoji 🚀",
    "</script>",
]


class TestEscapeJsonString:
    """Tests for escape_json_string."""

    @pytest.mark.parametrize("text", ROUND_TRIP_SAMPLES)
    def test_round_trip(self, text: str) -> None:
        """Parsing the literal yields the original text."""
        assert json.loads(escape_json_string(text)) == text

    def test_result_is_quoted_literal(self) -> None:
        """Output is a JSON string literal."""
        literal = escape_json_string("abc")
        assert literal == '"abc"'

    def test_escapes_quotes_and_newlines(self) -> None:
        """Quotes and newlines never appear raw inside the literal."""
        literal = escape_json_string('a "b"\nc')
        assert "\n" not in literal
        assert '\\"' in literal
        assert "\\n" in literal


class TestUnescapeJsonString:
    """Tests for unescape_json_string."""

    @pytest.mark.parametrize("text", ROUND_TRIP_SAMPLES)
    def test_inverse_of_escape(self, text: str) -> None:
        """Unescape reverses escape."""
        assert unescape_json_string(escape_json_string(text)) == text

    def test_rejects_malformed_literal(self) -> None:
        """Malformed JSON raises EncodingError."""
        with pytest.raises(EncodingError, match="Invalid JSON"):
            unescape_json_string('"unterminated')

    def test_rejects_non_string_literal(self) -> None:
        """A JSON value that is not a string is rejected."""
        with pytest.raises(EncodingError, match="got int"):
            unescape_json_string("42")


class TestReadPromptText:
    """Tests for read_prompt_text."""

    def test_reads_utf8_exactly(self, tmp_path: Path) -> None:
        """File content is decoded without mutation."""
        path = tmp_path / "p.txt"
        content = "first\r\nsecond\n\nthird — ünïcode"
        path.write_bytes(content.encode("utf-8"))

        assert read_prompt_text(path) == content

    def test_empty_file(self, tmp_path: Path) -> None:
        """Empty file yields empty text."""
        path = tmp_path / "empty.txt"
        path.write_bytes(b"")

        assert read_prompt_text(path) == ""

    def test_invalid_utf8_raises_encoding_error(self, tmp_path: Path) -> None:
        """Undecodable bytes raise EncodingError carrying the path."""
        path = tmp_path / "bad.txt"
        path.write_bytes(b"ok\n\xff\xfe broken")

        with pytest.raises(EncodingError) as exc_info:
            read_prompt_text(path)

        assert exc_info.value.path == path
        assert "utf-8" in exc_info.value.message

    def test_missing_file_raises_encoding_error(self, tmp_path: Path) -> None:
        """Unreadable file raises EncodingError."""
        with pytest.raises(EncodingError, match="Cannot read"):
            read_prompt_text(tmp_path / "missing.txt")
