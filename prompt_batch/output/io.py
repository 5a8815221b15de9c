"""Atomic file writing for response records.

Readers never observe a half-written response file: content goes to a
temporary sibling first and is then renamed over the target.
"""

import os
import tempfile
from pathlib import Path

import structlog


logger = structlog.get_logger()


class AtomicWriter:
    """Provides atomic file writing operations."""

    def __init__(self, run_id: str | None = None) -> None:
        """Initialize the atomic writer.

        Args:
            run_id: Optional run ID for logging context.
        """
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str | bytes) -> int:
        """Write content to ``path``, replacing any existing file.

        Args:
            path: Target file path.
            content: Bytes written as-is, or text encoded as UTF-8.

        Returns:
            Number of bytes written.
        """
        data = content if isinstance(content, bytes) else content.encode("utf-8")

        fd, temp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        self._log.debug("file_written", path=str(path), bytes=len(data))
        return len(data)
