"""Error types for prompt reading and payload construction."""

from pathlib import Path


class PromptSourceError(Exception):
    """A prompt source could not be turned into request text.

    Attributes:
        path: File the text was read from, when known.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class EncodingError(PromptSourceError):
    """Prompt content is not valid text under the declared encoding."""


class PayloadError(Exception):
    """Request payload could not be built from the given inputs."""
