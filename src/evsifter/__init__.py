"""
evsifter - Admission rules for relay event streams.

A sifter inspects one inbound event and returns a verdict: accept, reject
with a human-readable reason, or an internal error when it cannot decide.

Example usage:
    >>> from evsifter import Mode, author_list
    >>> sifter = author_list(["<pubkey>"], Mode.ALLOW)
    >>> verdict = sifter.evaluate(event)

    $ evsifter check rules.yaml event.json
"""

__version__ = "0.1.0"
__author__ = "evsifter Contributors"

from evsifter.clock import Clock, FakeableClock, RelativeTimeRange, SystemClock
from evsifter.schema import Event, Filter, MatchResult, Mode, Verdict
from evsifter.sifters import (
    SifterUnit,
    author_list,
    author_matcher,
    created_at_range,
    kind_list,
    kind_matcher,
    kinds_all_ephemeral,
    kinds_all_parameterized_replaceable,
    kinds_all_regular,
    kinds_all_replaceable,
    matches_filters,
)

__all__ = [
    "__version__",
    "__author__",
    "Clock",
    "Event",
    "FakeableClock",
    "Filter",
    "MatchResult",
    "Mode",
    "RelativeTimeRange",
    "SifterUnit",
    "SystemClock",
    "Verdict",
    "author_list",
    "author_matcher",
    "created_at_range",
    "kind_list",
    "kind_matcher",
    "kinds_all_ephemeral",
    "kinds_all_parameterized_replaceable",
    "kinds_all_regular",
    "kinds_all_replaceable",
    "matches_filters",
]
