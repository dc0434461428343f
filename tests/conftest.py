"""
Pytest configuration and fixtures for evsifter tests.

This module provides shared fixtures used across unit and integration tests.
"""

from collections.abc import Callable, Generator
from datetime import UTC, datetime
from typing import Any

import pytest

from evsifter.clock import FakeableClock
from evsifter.schema import Event


T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Return a factory for events with sensible defaults."""

    def _make(**overrides: Any) -> Event:
        data: dict[str, Any] = {
            "id": "e" * 64,
            "pubkey": "a" * 64,
            "created_at": int(T0.timestamp()),
            "kind": 1,
            "tags": [],
            "content": "hello",
            "sig": "f" * 128,
        }
        data.update(overrides)
        return Event(**data)

    return _make


@pytest.fixture
def t0() -> datetime:
    """The pinned time used by fake_clock."""
    return T0


@pytest.fixture
def fake_clock() -> Generator[FakeableClock, None, None]:
    """A clock pinned to T0, reset after the test."""
    clock = FakeableClock()
    clock.set_fake(T0)
    yield clock
    clock.reset()


@pytest.fixture
def sample_rules_yaml() -> str:
    """Return a rule file exercising every rule type."""
    return """
rules:
  - type: author_list
    mode: deny
    authors:
      - "bad"
  - type: kind_list
    mode: allow
    kinds: [0, 1, 3]
  - type: kind_class
    mode: deny
    classes: [ephemeral]
  - type: filters
    mode: deny
    filters:
      - kinds: [1]
        "#t": ["spam"]
  - type: created_at_range
    mode: allow
    max_past_seconds: 3600
    max_future_seconds: 300
"""
