"""
Time sources and relative time windows.

Time-based sifters never read the wall clock directly. They receive a Clock
and ask it for "now" each time an event is checked, so tests can pin time
with a FakeableClock instead of patching global state.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Clock(Protocol):
    """A source of the current time."""

    def now(self) -> datetime:
        """Return the current time as an aware datetime."""
        ...


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Clock that returns the current system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


SYSTEM_CLOCK = SystemClock()


class FakeableClock:
    """
    Clock whose time can be pinned.

    While no fake time is set, now() returns the wall clock. After
    set_fake(t), every read returns t until reset() is called.

    Not safe to pin from several threads at once; the owner that sets a
    fake time should also reset it.
    """

    def __init__(self) -> None:
        self._fake_now: datetime | None = None

    def now(self) -> datetime:
        if self._fake_now is None:
            return datetime.now(UTC)
        return self._fake_now

    def set_fake(self, t: datetime) -> None:
        """Pin the clock to t, which must be timezone-aware."""
        if t.tzinfo is None:
            msg = f"Fake time must be timezone-aware: {t}"
            raise ValueError(msg)
        self._fake_now = t

    def reset(self) -> None:
        """Return to wall-clock time."""
        self._fake_now = None

    @property
    def is_fake(self) -> bool:
        return self._fake_now is not None


def format_duration(delta: timedelta) -> str:
    """Render a duration compactly, e.g. 1h30m, 45s, 1.5s."""
    total = delta.total_seconds()
    whole = int(total)
    hours, rem = divmod(whole, 3600)
    minutes, seconds = divmod(rem, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    fraction = total - whole
    if seconds or fraction or not parts:
        parts.append(f"{seconds + fraction:g}s")
    return "".join(parts)


def _shifted_timestamp(now: datetime, delta: timedelta) -> float:
    """Unix seconds of now + delta, saturating to ±inf past the datetime range."""
    try:
        return (now + delta).timestamp()
    except OverflowError:
        return -math.inf if delta < timedelta(0) else math.inf


class RelativeTimeRange(BaseModel):
    """
    A time window relative to "now".

    The window is [now - max_past_delta, now + max_future_delta], both ends
    inclusive. A zero delta leaves that side unbounded: there is no way to
    express zero tolerance on a side.

    Attributes:
        max_past_delta: How far in the past a time may be (0 = unbounded)
        max_future_delta: How far in the future a time may be (0 = unbounded)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_past_delta: timedelta = Field(default=timedelta(0))
    max_future_delta: timedelta = Field(default=timedelta(0))

    @field_validator("max_past_delta", "max_future_delta")
    @classmethod
    def validate_not_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            msg = f"Time range delta must not be negative: {v}"
            raise ValueError(msg)
        return v

    def contains(self, t: datetime | int, clock: Clock = SYSTEM_CLOCK) -> bool:
        """
        Check whether t falls in the window, reading now from clock.

        Args:
            t: An aware datetime or unix seconds. Unix seconds are compared
                as numbers, so any integer works, even far outside the
                datetime range.
            clock: Source of "now"
        """
        if not self.max_past_delta and not self.max_future_delta:
            return True

        ts = t if isinstance(t, int) else t.timestamp()
        now = clock.now()

        ok_past = not self.max_past_delta or ts >= _shifted_timestamp(now, -self.max_past_delta)
        ok_future = not self.max_future_delta or ts <= _shifted_timestamp(now, self.max_future_delta)

        return ok_past and ok_future

    def __str__(self) -> str:
        left = "-∞"
        if self.max_past_delta:
            left = f"{format_duration(self.max_past_delta)} ago"
        right = "+∞"
        if self.max_future_delta:
            right = f"{format_duration(self.max_future_delta)} after"
        return f"[{left}, {right}]"
