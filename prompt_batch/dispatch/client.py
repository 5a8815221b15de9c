"""Retrying HTTP dispatcher for prompt payloads."""

import time
from collections.abc import Callable
from http import HTTPStatus
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, NamedTuple

import httpx
import structlog

from prompt_batch.config.constants import COMPONENT_DISPATCH
from prompt_batch.dispatch.metrics import DispatchMetrics
from prompt_batch.dispatch.models import (
    AttemptOutcome,
    DispatchAttempt,
    DispatchResult,
    SuccessMode,
)
from prompt_batch.dispatch.redact import redact_headers, redact_url_credentials
from prompt_batch.dispatch.state_machine import DispatchStateMachine
from prompt_batch.output.io import AtomicWriter
from prompt_batch.payload.builder import RequestPayload


if TYPE_CHECKING:
    from prompt_batch.config.models import RunConfig


logger = structlog.get_logger()

EXHAUSTED_MARKER = "ERROR: Failed to get a successful response after {retries} attempts."

# Statuses still worth retrying in strict mode
_RETRYABLE_STATUS_CODES = {
    HTTPStatus.REQUEST_TIMEOUT,
    HTTPStatus.TOO_MANY_REQUESTS,
}


class _Exchange(NamedTuple):
    outcome: AttemptOutcome
    status_code: int | None
    body: bytes
    error: str | None


class PromptDispatcher:
    """Sends payloads to the configured endpoint with bounded retries.

    Every call to :meth:`dispatch` ends with exactly one file written to
    the requested output path: the response body on success, or the
    exhaustion marker once the retry budget is spent. Transport problems
    are never raised to the caller.
    """

    def __init__(
        self,
        config: "RunConfig",
        client: httpx.Client | None = None,
        sleeper: Callable[[float], None] = time.sleep,
        run_id: str | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Run configuration (endpoint, credentials, retry policy).
            client: HTTP client to use. One is created and owned when omitted.
            sleeper: Function used for backoff sleeps.
            run_id: Optional run ID for logging context.
        """
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.timeout_seconds)
        self._sleep = sleeper
        self._writer = AtomicWriter(run_id)
        self._metrics = DispatchMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_DISPATCH)
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def __enter__(self) -> "PromptDispatcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        if self._owns_client:
            self._client.close()

    def dispatch(
        self,
        payload: RequestPayload,
        output_path: Path,
        source_label: str | None = None,
    ) -> DispatchResult:
        """Send one payload and persist the outcome.

        Args:
            payload: Request body to send.
            output_path: Where the response or failure marker is written.
            source_label: Identity of the prompt source for logging.

        Returns:
            DispatchResult in a terminal state.
        """
        label = source_label or output_path.name
        policy = self._config.retry_policy
        body = payload.to_json()
        machine = DispatchStateMachine(label)
        attempts: list[DispatchAttempt] = []
        log = self._log.bind(source=label, output=output_path.name)

        while True:
            machine.to_attempting()
            attempt = machine.attempt
            log.info(
                "dispatch_attempt",
                attempt=attempt,
                max_attempts=policy.max_attempts,
            )

            exchange = self._send_once(body, log)
            self._metrics.record_attempt(exchange.outcome)

            if exchange.outcome == AttemptOutcome.SUCCESS:
                attempts.append(
                    DispatchAttempt(
                        attempt=attempt,
                        outcome=exchange.outcome,
                        status_code=exchange.status_code,
                    )
                )
                machine.to_succeeded()
                content = exchange.body + b"\n"
                bytes_written = self._writer.write(output_path, content)
                self._metrics.record_success(bytes_written)
                log.info(
                    "dispatch_succeeded",
                    attempts=attempt,
                    status_code=exchange.status_code,
                    bytes=bytes_written,
                )
                return DispatchResult(
                    output_path=output_path,
                    state=machine.state,
                    attempts=attempts,
                    content=content,
                )

            if self._is_retryable(exchange) and policy.has_attempts_left(attempt):
                delay = policy.get_delay_seconds(attempt)
                attempts.append(
                    DispatchAttempt(
                        attempt=attempt,
                        outcome=exchange.outcome,
                        status_code=exchange.status_code,
                        delay_seconds=delay,
                        error=exchange.error,
                    )
                )
                self._metrics.record_retry()
                log.info(
                    "dispatch_retry_scheduled",
                    attempt=attempt,
                    outcome=exchange.outcome.value,
                    status_code=exchange.status_code,
                    error=exchange.error,
                    retry_delay=delay,
                )
                self._sleep(delay)
                continue

            attempts.append(
                DispatchAttempt(
                    attempt=attempt,
                    outcome=exchange.outcome,
                    status_code=exchange.status_code,
                    error=exchange.error,
                )
            )
            break

        machine.to_exhausted()
        marker = EXHAUSTED_MARKER.format(retries=policy.max_retries)
        content = f"{marker}\n".encode()
        self._writer.write(output_path, content)
        self._metrics.record_exhausted()
        last = attempts[-1]
        log.warning(
            "dispatch_exhausted",
            attempts=len(attempts),
            last_outcome=last.outcome.value,
            last_status_code=last.status_code,
            last_error=last.error,
        )
        return DispatchResult(
            output_path=output_path,
            state=machine.state,
            attempts=attempts,
            content=content,
        )

    def _build_headers(self) -> dict[str, str]:
        """Build request headers."""
        api_key = self._config.api_key.get_secret_value()
        return {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    def _send_once(
        self,
        request_body: bytes,
        log: structlog.stdlib.BoundLogger,
    ) -> _Exchange:
        """Execute a single HTTP request and classify the result."""
        headers = self._build_headers()
        log.debug(
            "dispatch_request",
            url=redact_url_credentials(self._config.api_url),
            headers=redact_headers(headers),
            bytes=len(request_body),
        )

        try:
            response = self._client.post(
                self._config.api_url,
                content=request_body,
                headers=headers,
                timeout=self._config.timeout_seconds,
            )
        except httpx.TimeoutException as e:
            return _Exchange(
                AttemptOutcome.TRANSPORT_ERROR, None, b"", f"Request timed out: {e}"
            )
        except httpx.HTTPError as e:
            return _Exchange(
                AttemptOutcome.TRANSPORT_ERROR, None, b"", f"Request failed: {e}"
            )

        # Bytes are kept as received; trailing newlines never count as content
        body = response.content.rstrip(b"\n")
        status = response.status_code

        if not body:
            return _Exchange(AttemptOutcome.EMPTY_RESPONSE, status, b"", "Empty response")

        if self._config.success_mode == SuccessMode.STRICT and not response.is_success:
            return _Exchange(
                AttemptOutcome.HTTP_ERROR, status, body, f"Endpoint returned {status}"
            )

        return _Exchange(AttemptOutcome.SUCCESS, status, body, None)

    @staticmethod
    def _is_retryable(exchange: _Exchange) -> bool:
        """Decide whether a failed exchange is worth another attempt."""
        if exchange.outcome != AttemptOutcome.HTTP_ERROR:
            return True
        status = exchange.status_code or 0
        return (
            status in _RETRYABLE_STATUS_CODES
            or status >= HTTPStatus.INTERNAL_SERVER_ERROR
        )
