"""Unit tests for the dispatch retry policy."""

import pytest
from pydantic import ValidationError

from prompt_batch.dispatch.models import RetryPolicy


class TestRetryPolicy:
    """Tests for RetryPolicy model."""

    def test_default_values(self) -> None:
        """Test default retry policy values."""
        policy = RetryPolicy()

        assert policy.max_retries == 3
        assert policy.backoff_base == 2.0
        assert policy.max_attempts == 4

    def test_delays_are_powers_of_base(self) -> None:
        """Delay after attempt n is base**n, without jitter."""
        policy = RetryPolicy(max_retries=4, backoff_base=3.0)

        assert [policy.get_delay_seconds(n) for n in range(1, 5)] == [
            3.0,
            9.0,
            27.0,
            81.0,
        ]

    def test_has_attempts_left(self) -> None:
        """Attempts 1..max_retries may be followed by another."""
        policy = RetryPolicy(max_retries=2)

        assert policy.has_attempts_left(1) is True
        assert policy.has_attempts_left(2) is True
        assert policy.has_attempts_left(3) is False

    def test_zero_retries_means_single_attempt(self) -> None:
        """With no retries only one attempt is made."""
        policy = RetryPolicy(max_retries=0)

        assert policy.max_attempts == 1
        assert policy.has_attempts_left(1) is False

    def test_negative_retries_rejected(self) -> None:
        """Negative retry counts fail validation."""
        with pytest.raises(ValidationError):
            RetryPolicy(max_retries=-1)

    def test_frozen(self) -> None:
        """Policies are immutable."""
        policy = RetryPolicy()

        with pytest.raises(ValidationError):
            policy.max_retries = 5  # type: ignore[misc]
