"""Deadline-bound execution scopes."""

import time


class DeadlineExceeded(TimeoutError):
    """Raised when an operation is attempted after its deadline."""


class Deadline:
    """A point in monotonic time after which work must be abandoned."""

    def __init__(self, timeout: float):
        self.expires_at = time.monotonic() + timeout

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at

    def check(self, what: str = "operation") -> None:
        if self.expired():
            raise DeadlineExceeded(f"{what}: deadline exceeded")

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}s)"
