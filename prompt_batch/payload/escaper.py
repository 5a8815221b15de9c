"""Safe JSON string encoding of raw prompt text.

Prompt files may contain quotes, backslashes, control characters and
non-ASCII text. Everything here goes through the ``json`` encoder so the
literal always parses back to the original text.
"""

import json
from pathlib import Path

from prompt_batch.payload.errors import EncodingError


PROMPT_ENCODING = "utf-8"


def read_prompt_text(path: Path, encoding: str = PROMPT_ENCODING) -> str:
    """Read a prompt file as text.

    Decoding is strict: a file that is not valid text under ``encoding``
    is rejected instead of being silently repaired.

    Args:
        path: Prompt file or chunk piece.
        encoding: Declared text encoding.

    Returns:
        File content, byte-for-byte decoded.

    Raises:
        EncodingError: If the file cannot be read or decoded.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read prompt file {path}: {e}"
        raise EncodingError(msg, path=path) from e

    try:
        return data.decode(encoding)
    except UnicodeDecodeError as e:
        msg = f"Prompt file {path} is not valid {encoding} text: {e.reason} at byte {e.start}"
        raise EncodingError(msg, path=path) from e


def escape_json_string(text: str) -> str:
    """Encode text as a JSON string literal.

    Args:
        text: Arbitrary prompt text.

    Returns:
        JSON string literal, quotes included.
    """
    return json.dumps(text, ensure_ascii=False)


def unescape_json_string(literal: str) -> str:
    """Decode a JSON string literal produced by :func:`escape_json_string`.

    Raises:
        EncodingError: If the literal is not a JSON string.
    """
    try:
        value = json.loads(literal)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON string literal: {e.msg}"
        raise EncodingError(msg) from e

    if not isinstance(value, str):
        msg = f"Expected a JSON string literal, got {type(value).__name__}"
        raise EncodingError(msg)
    return value
