"""Batch runner driving chunking and dispatch per prompt file."""

import time
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

import structlog

from prompt_batch.chunker.chunker import PromptChunker
from prompt_batch.chunker.models import PromptPiece, PromptSource
from prompt_batch.config.constants import COMPONENT_RUNNER, PROMPT_FILE_EXTENSION
from prompt_batch.config.models import RunConfig
from prompt_batch.dispatch.client import PromptDispatcher
from prompt_batch.dispatch.metrics import DispatchMetrics
from prompt_batch.dispatch.models import DispatchResult
from prompt_batch.orchestrator.errors import DiscoveryError
from prompt_batch.output.paths import output_path_for
from prompt_batch.payload.builder import build_payload
from prompt_batch.payload.errors import PayloadError, PromptSourceError
from prompt_batch.payload.escaper import escape_json_string, read_prompt_text


logger = structlog.get_logger()


def discover_prompt_files(
    prompts_dir: Path,
    extension: str = PROMPT_FILE_EXTENSION,
) -> list[Path]:
    """Find prompt files directly inside ``prompts_dir``.

    Hidden files and subdirectories are ignored. Results are sorted by
    file name so runs are reproducible.

    Args:
        prompts_dir: Directory to search (non-recursive).
        extension: File extension to match, including the dot.

    Returns:
        Matching files.

    Raises:
        DiscoveryError: If the directory is missing or nothing matches.
    """
    if not prompts_dir.is_dir():
        raise DiscoveryError(prompts_dir, extension)

    files = sorted(
        (
            p
            for p in prompts_dir.iterdir()
            if p.suffix == extension and not p.name.startswith(".") and p.is_file()
        ),
        key=lambda p: p.name,
    )
    if not files:
        raise DiscoveryError(prompts_dir, extension)
    return files


class SourceStatus(str, Enum):
    """Final status of one prompt source.

    - SUCCEEDED: response body written
    - EXHAUSTED: retries spent, failure marker written
    - SKIPPED: source could not be read or encoded, nothing sent
    - ERROR: response could not be written to the output path
    """

    SUCCEEDED = "SUCCEEDED"
    EXHAUSTED = "EXHAUSTED"
    SKIPPED = "SKIPPED"
    ERROR = "ERROR"


@dataclass
class SourceOutcome:
    """Result of processing a single prompt source."""

    origin: Path
    chunk_index: int | None
    status: SourceStatus
    output_path: Path | None = None
    attempts: int = 0
    error: str | None = None


@dataclass
class BatchResult:
    """Result of a complete batch run."""

    run_id: str
    started_at: datetime
    finished_at: datetime
    files_total: int
    outcomes: list[SourceOutcome] = field(default_factory=list)

    @property
    def sources_succeeded(self) -> int:
        """Count sources with a response written."""
        return sum(1 for o in self.outcomes if o.status == SourceStatus.SUCCEEDED)

    @property
    def sources_failed(self) -> int:
        """Count sources that exhausted their retries or failed to write."""
        return sum(
            1
            for o in self.outcomes
            if o.status in (SourceStatus.EXHAUSTED, SourceStatus.ERROR)
        )

    @property
    def sources_skipped(self) -> int:
        """Count sources that were never sent."""
        return sum(1 for o in self.outcomes if o.status == SourceStatus.SKIPPED)

    @property
    def duration_ms(self) -> float:
        """Get total duration in milliseconds."""
        return (self.finished_at - self.started_at).total_seconds() * 1000


class BatchRunner:
    """Runs every prompt file in a directory through the dispatcher.

    Provides:
    - Deterministic file discovery (fails fast when nothing matches)
    - Optional line chunking with scoped scratch directories
    - Failure isolation (one source failing doesn't stop others)
    - Sequential dispatch, or a bounded worker pool when ``workers > 1``
    """

    def __init__(
        self,
        config: RunConfig,
        dispatcher: PromptDispatcher | None = None,
        run_id: str | None = None,
    ) -> None:
        """Initialize the batch runner.

        Args:
            config: Run configuration.
            dispatcher: Dispatcher to use. One is created from ``config``
                when omitted.
            run_id: Unique run identifier.
        """
        self._config = config
        self._run_id = run_id or uuid.uuid4().hex[:12]
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or PromptDispatcher(config, run_id=self._run_id)
        self._chunker = PromptChunker(config.chunk_lines, run_id=self._run_id)
        self._log = logger.bind(component=COMPONENT_RUNNER, run_id=self._run_id)

    @property
    def run_id(self) -> str:
        """Get the run ID."""
        return self._run_id

    def run(self) -> BatchResult:
        """Process all prompt files.

        Returns:
            BatchResult with one outcome per prompt source.

        Raises:
            DiscoveryError: If no prompt files are found.
        """
        started_at = datetime.now(UTC)
        files = discover_prompt_files(
            self._config.prompts_dir, self._config.file_extension
        )
        self._config.output_dir.mkdir(parents=True, exist_ok=True)

        self._log.info(
            "batch_started",
            files=len(files),
            prompts_dir=str(self._config.prompts_dir),
            output_dir=str(self._config.output_dir),
            chunk_lines=self._config.chunk_lines,
            workers=self._config.workers,
        )

        try:
            if self._config.workers <= 1:
                outcomes = self._run_sequential(files)
            else:
                outcomes = self._run_parallel(files)
        finally:
            if self._owns_dispatcher:
                self._dispatcher.close()

        finished_at = datetime.now(UTC)
        result = BatchResult(
            run_id=self._run_id,
            started_at=started_at,
            finished_at=finished_at,
            files_total=len(files),
            outcomes=outcomes,
        )

        self._log.info(
            "batch_complete",
            duration_ms=round(result.duration_ms, 2),
            sources_succeeded=result.sources_succeeded,
            sources_failed=result.sources_failed,
            sources_skipped=result.sources_skipped,
            output_dir=str(self._config.output_dir),
            metrics=DispatchMetrics.get_instance().to_dict(),
        )
        return result

    def _run_sequential(self, files: list[Path]) -> list[SourceOutcome]:
        """Dispatch every piece in file order, one request at a time."""
        outcomes: list[SourceOutcome] = []
        for path in files:
            self._log.info("file_processing", file=path.name)
            try:
                with self._chunker.split(path) as pieces:
                    self._warn_if_empty(path, pieces)
                    for piece in pieces:
                        source = self._load_source(piece, outcomes)
                        if source is not None:
                            outcomes.append(self._dispatch_source(source))
            except PromptSourceError as e:
                self._skip_file(path, e, outcomes)
        return outcomes

    def _run_parallel(self, files: list[Path]) -> list[SourceOutcome]:
        """Dispatch pieces on a bounded worker pool.

        Piece texts are read while the chunk scratch directory exists;
        requests may still be in flight after it is removed.
        """
        outcomes: list[SourceOutcome] = []
        with ThreadPoolExecutor(max_workers=self._config.workers) as executor:
            futures: dict[Future[SourceOutcome], PromptSource] = {}
            for path in files:
                self._log.info("file_processing", file=path.name)
                try:
                    with self._chunker.split(path) as pieces:
                        self._warn_if_empty(path, pieces)
                        for piece in pieces:
                            source = self._load_source(piece, outcomes)
                            if source is not None:
                                future = executor.submit(self._dispatch_source, source)
                                futures[future] = source
                except PromptSourceError as e:
                    self._skip_file(path, e, outcomes)

            for future in as_completed(futures):
                source = futures[future]
                try:
                    outcomes.append(future.result())
                except Exception as e:  # noqa: BLE001
                    self._log.error(
                        "source_execution_error",
                        source=source.label,
                        error=str(e),
                    )
                    outcomes.append(
                        SourceOutcome(
                            origin=source.origin,
                            chunk_index=source.chunk_index,
                            status=SourceStatus.ERROR,
                            error=f"Execution error: {e}",
                        )
                    )

        outcomes.sort(key=lambda o: (o.origin.name, o.chunk_index or 0))
        return outcomes

    def _warn_if_empty(self, path: Path, pieces: list[PromptPiece]) -> None:
        if not pieces:
            self._log.warning(
                "file_has_no_chunks",
                file=path.name,
                reason="file is empty, nothing to send",
            )

    def _skip_file(
        self,
        path: Path,
        error: PromptSourceError,
        outcomes: list[SourceOutcome],
    ) -> None:
        """Record a file that could not be split into pieces."""
        self._log.warning("source_skipped", source=path.name, error=error.message)
        outcomes.append(
            SourceOutcome(
                origin=path,
                chunk_index=None,
                status=SourceStatus.SKIPPED,
                error=error.message,
            )
        )

    def _load_source(
        self,
        piece: PromptPiece,
        outcomes: list[SourceOutcome],
    ) -> PromptSource | None:
        """Read a piece's text, recording a skip when it cannot be read."""
        try:
            text = read_prompt_text(piece.path)
        except PromptSourceError as e:
            self._log.warning("source_skipped", source=piece.label, error=e.message)
            outcomes.append(
                SourceOutcome(
                    origin=piece.origin,
                    chunk_index=piece.chunk_index,
                    status=SourceStatus.SKIPPED,
                    error=e.message,
                )
            )
            return None
        return PromptSource.from_piece(piece, text)

    def _dispatch_source(self, source: PromptSource) -> SourceOutcome:
        """Escape, build and send one prompt source."""
        start_time_ns = time.perf_counter_ns()
        output_path = output_path_for(
            self._config.output_dir, source.origin, source.chunk_index
        )

        try:
            payload = build_payload(
                self._config.model,
                self._config.prompt_key,
                escape_json_string(source.text),
                escaped=True,
            )
        except (PayloadError, PromptSourceError) as e:
            self._log.warning("source_skipped", source=source.label, error=str(e))
            return SourceOutcome(
                origin=source.origin,
                chunk_index=source.chunk_index,
                status=SourceStatus.SKIPPED,
                error=str(e),
            )

        try:
            result = self._dispatcher.dispatch(payload, output_path, source.label)
        except OSError as e:
            self._log.error(
                "source_execution_error",
                source=source.label,
                output=output_path.name,
                error=str(e),
            )
            return SourceOutcome(
                origin=source.origin,
                chunk_index=source.chunk_index,
                status=SourceStatus.ERROR,
                output_path=output_path,
                error=f"Cannot write response: {e}",
            )

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000

        if not result.success:
            self._log.warning(
                "source_failed",
                source=source.label,
                output=output_path.name,
                attempts=result.attempt_count,
                duration_ms=round(duration_ms, 2),
            )
        return self._outcome_from_result(source, result)

    @staticmethod
    def _outcome_from_result(
        source: PromptSource,
        result: DispatchResult,
    ) -> SourceOutcome:
        status = SourceStatus.SUCCEEDED if result.success else SourceStatus.EXHAUSTED
        error = None if result.success else result.content.decode("utf-8").strip()
        return SourceOutcome(
            origin=source.origin,
            chunk_index=source.chunk_index,
            status=status,
            output_path=result.output_path,
            attempts=result.attempt_count,
            error=error,
        )
