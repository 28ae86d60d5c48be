"""
Retry bookkeeping for a single logical API call.

A logical call may span several transport attempts: one forced token renewal
when the API answers 401, and up to ``max_retry`` linear backoff cycles when
it answers 5xx. RetryContext carries that state for the duration of one call
and is discarded afterwards.

Example:
    >>> retry = RetryContext(max_retry=2)
    >>> retry.can_retry()
    True
    >>> retry.backoff_seconds()
    0.0
    >>> retry = retry.next_attempt()
    >>> retry.backoff_seconds()
    1.0
"""

from __future__ import annotations

from dataclasses import dataclass, replace


class RetryableError(Exception):
    """
    Base class for exceptions that describe a transient condition.

    Callers can catch this to decide whether an operation is worth repeating
    later. The SDK itself already retried before raising it.
    """

    pass


@dataclass(frozen=True)
class RetryContext:
    """
    Attempt/renewal state for one logical call.

    Attributes:
        max_retry: Maximum number of backoff-then-resend cycles on 5xx.
            0 disables retrying (single attempt only).
        attempt: Zero-based backoff attempt counter.
        renewed: Whether the access token was already force-renewed for
            this call.
        backoff_step: Seconds multiplied by ``attempt`` to get the delay.
    """

    max_retry: int
    attempt: int = 0
    renewed: bool = False
    backoff_step: float = 1.0

    def __post_init__(self) -> None:
        assert self.max_retry >= 0, f"max_retry must be >= 0, got {self.max_retry}"
        assert self.attempt >= 0, f"attempt must be >= 0, got {self.attempt}"
        assert self.backoff_step >= 0, f"backoff_step must be >= 0, got {self.backoff_step}"

    @property
    def max_attempts(self) -> int:
        """Total transport attempts allowed for a persistently failing backend."""
        return self.max_retry + 1

    def can_retry(self) -> bool:
        """Return True if another 5xx backoff cycle is allowed."""
        return self.attempt < self.max_retry

    def backoff_seconds(self) -> float:
        """Delay before the next resend: ``attempt * backoff_step`` (attempt 0 waits 0s)."""
        return self.attempt * self.backoff_step

    def next_attempt(self) -> RetryContext:
        """Return a context for the following backoff attempt."""
        return replace(self, attempt=self.attempt + 1)

    def mark_renewed(self) -> RetryContext:
        """Return a context recording that the token was force-renewed."""
        return replace(self, renewed=True)
