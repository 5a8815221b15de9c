"""Explicit run configuration shared by the runner and dispatcher."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)

from prompt_batch.config.constants import (
    DEFAULT_CHUNK_LINES,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PROMPTS_DIR,
    DEFAULT_WORKERS,
    MODEL_KEY,
    PROMPT_FILE_EXTENSION,
)
from prompt_batch.config.errors import ConfigurationError
from prompt_batch.dispatch.models import RetryPolicy, SuccessMode


if TYPE_CHECKING:
    from prompt_batch.settings import AppSettings


class RunConfig(BaseModel):
    """Configuration for one batch run.

    Built once from environment defaults and CLI overrides, then passed
    explicitly to every component that needs it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    prompts_dir: Path = Path(DEFAULT_PROMPTS_DIR)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    api_key: SecretStr
    api_url: Annotated[str, Field(min_length=1)]
    model: Annotated[str, Field(min_length=1)]
    prompt_key: Annotated[str, Field(min_length=1)]
    timeout_seconds: Annotated[float, Field(gt=0.0)]
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    chunk_lines: Annotated[int, Field(ge=0)] = DEFAULT_CHUNK_LINES
    workers: Annotated[int, Field(ge=1, le=64)] = DEFAULT_WORKERS
    success_mode: SuccessMode = SuccessMode.NON_EMPTY
    file_extension: str = PROMPT_FILE_EXTENSION
    verbose: bool = True

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: SecretStr) -> SecretStr:
        """Reject blank API keys."""
        if not v.get_secret_value().strip():
            msg = "API key must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            msg = f"API URL must be an absolute http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("prompt_key")
    @classmethod
    def validate_prompt_key(cls, v: str) -> str:
        """The prompt key must not shadow the model key."""
        if v == MODEL_KEY:
            msg = f"Prompt key must not be {MODEL_KEY!r}"
            raise ValueError(msg)
        return v

    @property
    def chunking_enabled(self) -> bool:
        """Check if prompt files are split into line chunks."""
        return self.chunk_lines > 0

    @classmethod
    def from_sources(
        cls,
        settings: "AppSettings",
        **overrides: Any,
    ) -> "RunConfig":
        """Build a configuration from environment settings and CLI overrides.

        Environment values are applied first; any override that is not
        None replaces them. Retry options (``retries``, ``backoff_base``)
        are folded into the retry policy.

        Args:
            settings: Environment-backed settings.
            **overrides: Explicit values, typically parsed CLI flags.

        Returns:
            Validated run configuration.

        Raises:
            ConfigurationError: If credentials are missing or a value is invalid.
        """
        given = {k: v for k, v in overrides.items() if v is not None}

        api_key = given.pop("api_key", None) or settings.api_key
        api_url = given.pop("api_url", None) or settings.api_url
        if not api_key or not api_url:
            msg = (
                "CLAUDE_API_KEY and CLAUDE_API_URL must be set "
                "(or passed with -k and -u)."
            )
            raise ConfigurationError(msg, field="api_key" if not api_key else "api_url")

        policy: dict[str, Any] = {}
        if "retries" in given:
            policy["max_retries"] = given.pop("retries")
        if "backoff_base" in given:
            policy["backoff_base"] = given.pop("backoff_base")

        values: dict[str, Any] = {
            "api_key": api_key,
            "api_url": api_url,
            "model": settings.model,
            "prompt_key": settings.prompt_key,
            "timeout_seconds": settings.timeout_seconds,
        }
        values.update(given)

        try:
            if policy:
                values["retry_policy"] = RetryPolicy(**policy)
            return cls(**values)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or None
            msg = f"Invalid configuration: {location}: {first['msg']}"
            raise ConfigurationError(msg, field=location) from e
