"""Unit tests for request payload construction."""

import json

import pytest

from prompt_batch.payload.builder import PromptKey, RequestPayload, build_payload
from prompt_batch.payload.errors import EncodingError, PayloadError
from prompt_batch.payload.escaper import escape_json_string


class TestBuildPayload:
    """Tests for build_payload."""

    def test_messages_key_wraps_user_message(self) -> None:
        """The messages selector produces a single user message."""
        payload = build_payload("claude-2", "messages", "Hello")

        assert payload.to_dict() == {
            "model": "claude-2",
            "messages": [{"role": "user", "content": "Hello"}],
        }

    @pytest.mark.parametrize("key", ["input", "prompt", "text_input"])
    def test_other_keys_hold_raw_text(self, key: str) -> None:
        """Any other selector holds the raw prompt text."""
        payload = build_payload("claude-2", key, "Hello")

        assert payload.to_dict() == {"model": "claude-2", key: "Hello"}

    @pytest.mark.parametrize("key", list(PromptKey))
    def test_exactly_two_keys(self, key: PromptKey) -> None:
        """Every payload has the model key plus one prompt key."""
        body = build_payload("m", key, "x").to_dict()

        assert len(body) == 2
        assert set(body) == {"model", key.value}

    def test_accepts_enum_member(self) -> None:
        """PromptKey members map to their string values."""
        payload = build_payload("m", PromptKey.PROMPT, "x")

        assert payload.prompt_key == "prompt"

    def test_escaped_prompt_is_decoded(self) -> None:
        """An escaped literal is decoded before being placed."""
        text = 'multi\nline "quoted" \\ text'
        payload = build_payload("m", "input", escape_json_string(text), escaped=True)

        assert payload.prompt_value == text

    def test_malformed_escaped_prompt_raises(self) -> None:
        """A malformed literal raises EncodingError."""
        with pytest.raises(EncodingError):
            build_payload("m", "input", "not json", escaped=True)

    def test_model_key_is_rejected(self) -> None:
        """Using 'model' as the prompt key would break the two-key shape."""
        with pytest.raises(PayloadError, match="model"):
            build_payload("m", "model", "x")

    def test_empty_key_is_rejected(self) -> None:
        """An empty prompt key is rejected."""
        with pytest.raises(PayloadError):
            build_payload("m", "", "x")

    def test_empty_model_is_rejected(self) -> None:
        """An empty model identifier is rejected."""
        with pytest.raises(PayloadError):
            build_payload("", "input", "x")


class TestRequestPayload:
    """Tests for RequestPayload serialization."""

    def test_to_json_round_trips(self) -> None:
        """Serialized body parses back to the wire dict."""
        payload = build_payload("claude-2", "messages", "héllo \"there\"\n")

        assert json.loads(payload.to_json()) == payload.to_dict()

    def test_to_json_is_utf8(self) -> None:
        """Non-ASCII text is sent as UTF-8, not escaped."""
        payload = RequestPayload(model="m", prompt_key="input", prompt_value="日本")

        assert "日本".encode() in payload.to_json()

    def test_empty_prompt_is_allowed(self) -> None:
        """An empty file still produces a valid payload."""
        payload = build_payload("m", "input", "")

        assert payload.to_dict() == {"model": "m", "input": ""}
