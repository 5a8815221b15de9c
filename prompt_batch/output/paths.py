"""Output file naming."""

from pathlib import Path

from prompt_batch.config.constants import CHUNK_NAME_INFIX, RESPONSE_FILE_SUFFIX


def output_name(source_name: str, chunk_index: int | None = None) -> str:
    """Derive the response file name for a prompt source.

    The extension of ``source_name`` is dropped: ``a.txt`` becomes
    ``a.response.json`` and chunk 2 of ``c.txt`` becomes
    ``c_part2.response.json``.

    Args:
        source_name: Base name of the input prompt file.
        chunk_index: 1-based chunk number, None for the whole file.

    Returns:
        Output file name.
    """
    stem = Path(source_name).stem
    if chunk_index is None:
        return f"{stem}{RESPONSE_FILE_SUFFIX}"
    if chunk_index < 1:
        msg = f"chunk_index must be >= 1, got {chunk_index}"
        raise ValueError(msg)
    return f"{stem}{CHUNK_NAME_INFIX}{chunk_index}{RESPONSE_FILE_SUFFIX}"


def output_path_for(
    output_dir: Path,
    source_path: Path,
    chunk_index: int | None = None,
) -> Path:
    """Derive the response file path for a prompt source.

    Depends only on the source's base name and chunk index.
    """
    return output_dir / output_name(source_path.name, chunk_index)
