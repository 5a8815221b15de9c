"""Data models for prompt sources and chunk pieces."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class PromptPiece(BaseModel):
    """Location of one prompt source's text before it is read.

    For an unchunked file ``path`` is the file itself; for a chunk it is
    the piece written into the chunker's scratch directory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    origin: Path = Field(description="Input prompt file")
    chunk_index: int | None = Field(
        default=None, ge=1, description="1-based chunk number, None for whole file"
    )
    path: Path = Field(description="File holding this piece's text")

    @property
    def label(self) -> str:
        """Human-readable identity for logging."""
        if self.chunk_index is None:
            return self.origin.name
        return f"{self.origin.name}#part{self.chunk_index}"


class PromptSource(BaseModel):
    """One unit of input text submitted as a single request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    piece: PromptPiece
    text: str

    @classmethod
    def from_piece(cls, piece: PromptPiece, text: str) -> "PromptSource":
        """Attach text read from a piece."""
        return cls(piece=piece, text=text)

    @property
    def origin(self) -> Path:
        """Input prompt file."""
        return self.piece.origin

    @property
    def chunk_index(self) -> int | None:
        """1-based chunk number, None for whole file."""
        return self.piece.chunk_index

    @property
    def label(self) -> str:
        """Human-readable identity for logging."""
        return self.piece.label
