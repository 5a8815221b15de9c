"""Run configuration.

Import ``RunConfig`` from :mod:`prompt_batch.config.models`.
"""

from prompt_batch.config.errors import ConfigurationError


__all__ = ["ConfigurationError"]
