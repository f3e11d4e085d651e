"""Retry configuration."""
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MIN_TIMEOUT = 0.5
MAX_BACKOFF_INTERVAL = 10.0
INITIAL_BACKOFF_INTERVAL = 0.1


class RetryConfig(BaseModel):
    """Timing of one retry loop. All durations are in seconds.

    The total ``timeout`` dominates every other duration: no sleep ever
    extends past it.
    """
    model_config = ConfigDict(frozen=True)

    delay: float = Field(0.0, description="Delay before the first attempt")
    delay_rand: float = Field(0.0, description="Random jitter added to the initial delay")
    min_timeout: float = Field(DEFAULT_MIN_TIMEOUT, description="Minimum interval between attempts")
    poll_interval: float = Field(0.0, description="Fixed interval between attempts; 0 means exponential backoff")
    timeout: float = Field(..., description="Total time budget")

    @field_validator("delay", "delay_rand", "min_timeout", "poll_interval", "timeout")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Durations must be non-negative")
        return v


def next_backoff_interval(current: float, min_timeout: float, poll_interval: float) -> float:
    """Interval to sleep before the next attempt.

    A positive ``poll_interval`` is used verbatim; otherwise ``current`` is
    bounded below by ``min_timeout`` and above by 10 seconds.
    """
    if 0 < poll_interval < 180:
        return poll_interval
    if current < min_timeout:
        return min_timeout
    if current > MAX_BACKOFF_INTERVAL:
        return MAX_BACKOFF_INTERVAL
    return current
