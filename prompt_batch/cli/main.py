"""CLI entry point for batch prompt submission."""

import logging
import uuid
from pathlib import Path
from typing import NoReturn

import click
import structlog
from pydantic import ValidationError

from prompt_batch import __version__
from prompt_batch.config.constants import (
    COMPONENT_CLI,
    DEFAULT_BACKOFF_BASE,
    DEFAULT_CHUNK_LINES,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROMPTS_DIR,
    DEFAULT_RETRIES,
    DEFAULT_WORKERS,
)
from prompt_batch.config.errors import ConfigurationError
from prompt_batch.config.models import RunConfig
from prompt_batch.dispatch.models import SuccessMode
from prompt_batch.observability.logging import bind_run_context, configure_logging
from prompt_batch.orchestrator.errors import DiscoveryError
from prompt_batch.orchestrator.runner import BatchResult, BatchRunner
from prompt_batch.settings import AppSettings


logger = structlog.get_logger()


def _show_help(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print help and exit with status 1."""
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    ctx.exit(1)


def _fail_with_usage(ctx: click.Context, message: str) -> NoReturn:
    click.echo(f"ERROR: {message}", err=True)
    click.echo(ctx.get_help(), err=True)
    ctx.exit(1)


def _load_settings(ctx: click.Context) -> AppSettings:
    try:
        return AppSettings()
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        msg = f"Invalid environment value for {location}: {first['msg']}"
        _fail_with_usage(ctx, msg)


def _echo_summary(result: BatchResult, output_dir: Path) -> None:
    total = len(result.outcomes)
    click.echo(
        f"Processed {total} prompt source(s) from {result.files_total} file(s): "
        f"{result.sources_succeeded} succeeded, {result.sources_failed} failed, "
        f"{result.sources_skipped} skipped. Responses written to {output_dir}"
    )


@click.command(add_help_option=False)
@click.option(
    "-h",
    "--help",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_show_help,
    help="Show this help and exit.",
)
@click.option(
    "-p",
    "--prompts-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_PROMPTS_DIR,
    show_default=True,
    help="Directory with .txt prompt files.",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT_DIR,
    show_default=True,
    help="Output directory for responses.",
)
@click.option("-k", "--api-key", default=None, help="API key (or set CLAUDE_API_KEY).")
@click.option("-u", "--api-url", default=None, help="API URL (or set CLAUDE_API_URL).")
@click.option(
    "-m", "--model", default=None, help="Model name (default: $MODEL or claude-2)."
)
@click.option(
    "-q",
    "--prompt-key",
    default=None,
    help="Prompt JSON key: input | prompt | messages (default: $PROMPT_KEY or input).",
)
@click.option(
    "-t",
    "--timeout",
    "timeout_seconds",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Per-request timeout in seconds (default: $TIMEOUT or 60).",
)
@click.option(
    "-r",
    "--retries",
    type=click.IntRange(min=0),
    default=DEFAULT_RETRIES,
    show_default=True,
    help="Retries per request.",
)
@click.option(
    "-c",
    "--chunk-lines",
    type=click.IntRange(min=0),
    default=DEFAULT_CHUNK_LINES,
    show_default=True,
    help="Split prompt files into N-line pieces per request (0 disables).",
)
@click.option(
    "--backoff-base",
    type=click.FloatRange(min=0),
    default=DEFAULT_BACKOFF_BASE,
    show_default=True,
    help="Exponential backoff base in seconds.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1, max=64),
    default=DEFAULT_WORKERS,
    show_default=True,
    help="Number of requests in flight at once.",
)
@click.option(
    "--strict-status",
    is_flag=True,
    default=False,
    help="Treat non-2xx responses as failures instead of accepting any body.",
)
@click.option(
    "-v",
    "--verbose/--quiet",
    default=True,
    help="Enable progress logging (default: on).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs.",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(  # noqa: PLR0913
    ctx: click.Context,
    prompts_dir: Path,
    output_dir: Path,
    api_key: str | None,
    api_url: str | None,
    model: str | None,
    prompt_key: str | None,
    timeout_seconds: float | None,
    retries: int,
    chunk_lines: int,
    backoff_base: float,
    workers: int,
    strict_status: bool,
    verbose: bool,
    json_logs: bool,
) -> None:
    """Batch-run a directory of text prompts against a text-generation API.

    Each prompt file is sent as one request (or one request per chunk with
    -c) and the response is written to OUTPUT_DIR/<name>.response.json.
    """
    configure_logging(
        level=logging.INFO if verbose else logging.WARNING,
        json_format=json_logs,
    )

    settings = _load_settings(ctx)
    try:
        config = RunConfig.from_sources(
            settings,
            prompts_dir=prompts_dir,
            output_dir=output_dir,
            api_key=api_key,
            api_url=api_url,
            model=model,
            prompt_key=prompt_key,
            timeout_seconds=timeout_seconds,
            retries=retries,
            backoff_base=backoff_base,
            chunk_lines=chunk_lines,
            workers=workers,
            success_mode=SuccessMode.STRICT if strict_status else SuccessMode.NON_EMPTY,
            verbose=verbose,
        )
    except ConfigurationError as e:
        _fail_with_usage(ctx, e.message)

    run_id = uuid.uuid4().hex[:12]
    bind_run_context(run_id)
    log = logger.bind(component=COMPONENT_CLI, run_id=run_id)
    log.info(
        "run_started",
        model=config.model,
        prompt_key=config.prompt_key,
        retries=config.retry_policy.max_retries,
        timeout_seconds=config.timeout_seconds,
        success_mode=config.success_mode.value,
    )

    runner = BatchRunner(config, run_id=run_id)
    try:
        result = runner.run()
    except DiscoveryError as e:
        log.warning("no_prompt_files", prompts_dir=str(e.prompts_dir))
        click.echo(str(e), err=True)
        ctx.exit(1)

    _echo_summary(result, config.output_dir)
