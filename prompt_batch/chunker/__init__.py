"""Prompt file chunking."""

from prompt_batch.chunker.chunker import PromptChunker
from prompt_batch.chunker.models import PromptPiece, PromptSource


__all__ = ["PromptChunker", "PromptPiece", "PromptSource"]
