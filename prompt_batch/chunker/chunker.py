"""Line-based splitting of oversized prompt files."""

import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import structlog

from prompt_batch.chunker.models import PromptPiece
from prompt_batch.config.constants import COMPONENT_CHUNKER
from prompt_batch.payload.errors import PromptSourceError


logger = structlog.get_logger()

_SCRATCH_PREFIX = "prompt-batch-"
_PIECE_PREFIX = "part_"


class PromptChunker:
    """Splits prompt files into contiguous pieces of at most N lines.

    Lines are delimited by ``\\n`` only and kept byte-for-byte, so the
    pieces concatenated in order reproduce the original file. The last
    piece may be shorter and may lack a trailing newline.
    """

    def __init__(self, chunk_lines: int, run_id: str | None = None) -> None:
        """Initialize the chunker.

        Args:
            chunk_lines: Lines per piece, 0 to disable chunking.
            run_id: Optional run ID for logging context.
        """
        if chunk_lines < 0:
            msg = f"chunk_lines must be >= 0, got {chunk_lines}"
            raise ValueError(msg)
        self._chunk_lines = chunk_lines
        self._log = logger.bind(component=COMPONENT_CHUNKER)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    @property
    def enabled(self) -> bool:
        """Check if files are split at all."""
        return self._chunk_lines > 0

    @contextmanager
    def split(self, path: Path) -> Iterator[list[PromptPiece]]:
        """Split a prompt file for the duration of a ``with`` block.

        With chunking disabled this yields one implicit piece pointing at
        the file itself. Otherwise pieces are written into a private
        temporary directory that is removed when the block exits, whether
        or not it raised.

        Args:
            path: Prompt file to split.

        Yields:
            Ordered pieces, numbered from 1.

        Raises:
            PromptSourceError: If the file cannot be read into pieces.
        """
        if not self.enabled:
            yield [PromptPiece(origin=path, chunk_index=None, path=path)]
            return

        with tempfile.TemporaryDirectory(prefix=_SCRATCH_PREFIX) as scratch:
            scratch_dir = Path(scratch)
            try:
                with path.open("rb") as fh:
                    pieces = self._write_pieces(path, fh, scratch_dir)
            except OSError as e:
                msg = f"Cannot split prompt file {path}: {e}"
                raise PromptSourceError(msg, path=path) from e

            self._log.debug(
                "file_split",
                file=path.name,
                chunk_lines=self._chunk_lines,
                pieces=len(pieces),
            )
            yield pieces

    def _write_pieces(
        self,
        origin: Path,
        fh: BinaryIO,
        scratch_dir: Path,
    ) -> list[PromptPiece]:
        """Stream lines from ``fh`` into piece files.

        Returns:
            Pieces in file order.
        """
        pieces: list[PromptPiece] = []
        out: BinaryIO | None = None
        lines_in_piece = 0

        try:
            for line in fh:
                if out is None or lines_in_piece == self._chunk_lines:
                    if out is not None:
                        out.close()
                    index = len(pieces) + 1
                    piece_path = scratch_dir / f"{_PIECE_PREFIX}{index:04d}"
                    pieces.append(
                        PromptPiece(origin=origin, chunk_index=index, path=piece_path)
                    )
                    out = piece_path.open("wb")
                    lines_in_piece = 0
                out.write(line)
                lines_in_piece += 1
        finally:
            if out is not None:
                out.close()

        return pieces
