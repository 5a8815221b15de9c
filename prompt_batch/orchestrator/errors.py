"""Error types for the batch orchestrator."""

from pathlib import Path


class DiscoveryError(Exception):
    """No prompt files matched in the prompts directory.

    Attributes:
        prompts_dir: Directory that was searched.
        extension: File extension that was filtered on.
    """

    def __init__(self, prompts_dir: Path, extension: str) -> None:
        self.prompts_dir = prompts_dir
        self.extension = extension
        super().__init__(f"No {extension} files found in {prompts_dir}")
