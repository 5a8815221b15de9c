"""Prompt escaping and request payload construction."""

from prompt_batch.payload.builder import PromptKey, RequestPayload, build_payload
from prompt_batch.payload.errors import EncodingError, PayloadError, PromptSourceError
from prompt_batch.payload.escaper import (
    escape_json_string,
    read_prompt_text,
    unescape_json_string,
)


__all__ = [
    "EncodingError",
    "PayloadError",
    "PromptKey",
    "PromptSourceError",
    "RequestPayload",
    "build_payload",
    "escape_json_string",
    "read_prompt_text",
    "unescape_json_string",
]
