"""Request payload construction.

API vendors disagree on where the prompt goes in the request body. The
builder keeps that variance in one place: the body always has a ``model``
key plus exactly one prompt-bearing key.
"""

import json
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from prompt_batch.config.constants import MODEL_KEY
from prompt_batch.payload.errors import PayloadError
from prompt_batch.payload.escaper import unescape_json_string


class PromptKey(str, Enum):
    """Known prompt field names.

    - INPUT: plain text under ``input``
    - PROMPT: plain text under ``prompt``
    - MESSAGES: chat-style single user message under ``messages``

    Other key names are passed through as provider-specific extensions.
    """

    INPUT = "input"
    PROMPT = "prompt"
    MESSAGES = "messages"


ChatMessage = dict[str, str]


class RequestPayload(BaseModel):
    """Serialized request body for one prompt source."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    model: str = Field(min_length=1)
    prompt_key: str = Field(min_length=1)
    prompt_value: str | list[ChatMessage]

    def to_dict(self) -> dict[str, object]:
        """Return the wire representation."""
        return {MODEL_KEY: self.model, self.prompt_key: self.prompt_value}

    def to_json(self) -> bytes:
        """Serialize the wire representation as UTF-8 JSON."""
        return json.dumps(self.to_dict(), ensure_ascii=False).encode("utf-8")


def _normalize_key(prompt_key: PromptKey | str) -> str:
    key = prompt_key.value if isinstance(prompt_key, PromptKey) else prompt_key
    if not key:
        msg = "Prompt key must not be empty"
        raise PayloadError(msg)
    if key == MODEL_KEY:
        msg = f"Prompt key must not be {MODEL_KEY!r}"
        raise PayloadError(msg)
    return key


def build_payload(
    model: str,
    prompt_key: PromptKey | str,
    prompt: str,
    *,
    escaped: bool = False,
) -> RequestPayload:
    """Build a request payload.

    Args:
        model: Model identifier.
        prompt_key: Field the prompt is placed under.
        prompt: Prompt text, or a JSON string literal when ``escaped``.
        escaped: Whether ``prompt`` is a JSON string literal.

    Returns:
        Payload with the model and exactly one prompt key.

    Raises:
        PayloadError: If the model or prompt key is invalid.
        EncodingError: If ``escaped`` is set and the literal is malformed.
    """
    if not model:
        msg = "Model identifier must not be empty"
        raise PayloadError(msg)

    key = _normalize_key(prompt_key)
    text = unescape_json_string(prompt) if escaped else prompt

    value: str | list[ChatMessage]
    if key == PromptKey.MESSAGES.value:
        value = [{"role": "user", "content": text}]
    else:
        value = text

    return RequestPayload(model=model, prompt_key=key, prompt_value=value)
