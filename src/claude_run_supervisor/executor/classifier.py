"""Terminal outcome classification for claude runs.

claude reports fatal conditions as free text rather than structured error
codes, so the classification is a substring heuristic over the last
human-readable message. Phrasing that matches no marker falls through to a
generic failure, never to success.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .models import Outcome

RATE_LIMIT_MARKERS: tuple[str, ...] = (
    "rate_limit_exceeded",
    "You have exceeded your rate limit",
    "rate limit",
)

CONTEXT_OVERFLOW_MARKERS: tuple[str, ...] = (
    "context_length_exceeded",
)


@dataclass(frozen=True)
class Classification:
    """Outcome of a finished process."""

    outcome: Outcome
    reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def limit_reached(self) -> bool:
        return self.outcome is Outcome.RATE_LIMITED


def describe_exit(exit_code: Optional[int], exit_signal: Optional[str]) -> str:
    """Human-readable exit status, e.g. ``exit code 1 (signal: SIGTERM)``."""
    parts = []
    if exit_code is not None:
        parts.append(f"exit code {exit_code}")
    if exit_signal:
        parts.append(f"(signal: {exit_signal})" if parts else f"signal {exit_signal}")
    return " ".join(parts) or "unknown exit status"


def classify_outcome(
    exit_code: Optional[int],
    exit_signal: Optional[str],
    last_message: str,
    rate_limit_markers: Iterable[str] = RATE_LIMIT_MARKERS,
    context_markers: Iterable[str] = CONTEXT_OVERFLOW_MARKERS,
) -> Classification:
    """Classify a finished run. First match wins.

    1. exit code 0 is success, whatever the last message says;
    2. a rate-limit marker in the last message means rate limited;
    3. a context-overflow marker means the context was exceeded;
    4. anything else is a generic failure.
    """
    if exit_code == 0:
        return Classification(Outcome.SUCCESS)

    message = last_message or ""
    if any(marker in message for marker in rate_limit_markers):
        return Classification(Outcome.RATE_LIMITED, "rate limit reached")
    if any(marker in message for marker in context_markers):
        return Classification(Outcome.CONTEXT_EXCEEDED, "context length exceeded")

    return Classification(Outcome.FAILED, describe_exit(exit_code, exit_signal))
