"""Unit tests for prompt file discovery."""

from pathlib import Path

import pytest

from prompt_batch.orchestrator.errors import DiscoveryError
from prompt_batch.orchestrator.runner import discover_prompt_files


class TestDiscoverPromptFiles:
    """Tests for discover_prompt_files."""

    def test_finds_txt_files_sorted(self, tmp_path: Path) -> None:
        """Only .txt files are returned, in name order."""
        for name in ["b.txt", "a.txt", "notes.md", "c.txt.bak"]:
            (tmp_path / name).write_text("x", encoding="utf-8")

        files = discover_prompt_files(tmp_path)

        assert [f.name for f in files] == ["a.txt", "b.txt"]

    def test_not_recursive(self, tmp_path: Path) -> None:
        """Files in subdirectories are ignored."""
        (tmp_path / "a.txt").write_text("x", encoding="utf-8")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "b.txt").write_text("x", encoding="utf-8")

        assert [f.name for f in discover_prompt_files(tmp_path)] == ["a.txt"]

    def test_skips_hidden_files_and_directories(self, tmp_path: Path) -> None:
        """Dotfiles and directories named like prompts are skipped."""
        (tmp_path / ".hidden.txt").write_text("x", encoding="utf-8")
        (tmp_path / "dir.txt").mkdir()
        (tmp_path / "real.txt").write_text("x", encoding="utf-8")

        assert [f.name for f in discover_prompt_files(tmp_path)] == ["real.txt"]

    def test_no_matches_raises(self, tmp_path: Path) -> None:
        """An empty directory is a discovery error."""
        (tmp_path / "readme.md").write_text("x", encoding="utf-8")

        with pytest.raises(DiscoveryError, match=r"No \.txt files found"):
            discover_prompt_files(tmp_path)

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        """A missing directory is a discovery error."""
        with pytest.raises(DiscoveryError) as exc_info:
            discover_prompt_files(tmp_path / "nope")

        assert exc_info.value.prompts_dir == tmp_path / "nope"

    def test_custom_extension(self, tmp_path: Path) -> None:
        """The extension filter is configurable."""
        (tmp_path / "a.prompt").write_text("x", encoding="utf-8")
        (tmp_path / "b.txt").write_text("x", encoding="utf-8")

        files = discover_prompt_files(tmp_path, extension=".prompt")

        assert [f.name for f in files] == ["a.prompt"]
