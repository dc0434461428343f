"""
Sifter constructors.

Each constructor closes a predicate over caller data and hands it, with a
mode and the default rejection messages for its domain, to SifterUnit.
"""

from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

from evsifter.clock import SYSTEM_CLOCK, Clock, RelativeTimeRange
from evsifter.schema import Event, Filter, MatchResult, Mode, matches_any
from evsifter.sifters.unit import SifterUnit, reject_with_msg_per_mode


T = TypeVar("T", bound=Hashable)


def to_set(values: Iterable[T]) -> frozenset[T]:
    """Build an unordered membership set from a sequence."""
    return frozenset(values)


# =============================================================================
# Filters
# =============================================================================


def matches_filters(filters: Iterable[Filter], mode: Mode) -> SifterUnit:
    """Sifter on whether the event matches any of the filters."""
    filters = tuple(filters)

    def match_input(event: Event) -> MatchResult:
        return MatchResult.from_bool(matches_any(filters, event))

    reject_fn = reject_with_msg_per_mode(
        mode,
        "blocked: event must match filters to be accepted",
        "blocked: event is denied by filters",
    )
    return SifterUnit(match_input, mode, reject_fn, name="matches_filters")


# =============================================================================
# Authors
# =============================================================================

_AUTHOR_MSG_ALLOW = "blocked: event author is not in the whitelist"
_AUTHOR_MSG_DENY = "blocked: event author is in the blacklist"


def author_matcher(matcher: Callable[[str], bool], mode: Mode) -> SifterUnit:
    """Sifter on an arbitrary predicate over the author pubkey."""

    def match_input(event: Event) -> MatchResult:
        return MatchResult.from_bool(matcher(event.pubkey))

    reject_fn = reject_with_msg_per_mode(mode, _AUTHOR_MSG_ALLOW, _AUTHOR_MSG_DENY)
    return SifterUnit(match_input, mode, reject_fn, name="author_matcher")


def author_list(authors: Iterable[str], mode: Mode) -> SifterUnit:
    """Sifter on membership of the author pubkey in a fixed list."""
    author_set = to_set(authors)

    def match_input(event: Event) -> MatchResult:
        return MatchResult.from_bool(event.pubkey in author_set)

    reject_fn = reject_with_msg_per_mode(mode, _AUTHOR_MSG_ALLOW, _AUTHOR_MSG_DENY)
    return SifterUnit(match_input, mode, reject_fn, name="author_list")


# =============================================================================
# Kinds
# =============================================================================

_KIND_MSG_ALLOW = "blocked: the kind of the event is not in the whitelist"
_KIND_MSG_DENY = "blocked: the kind of the event is in the blacklist"


# Regular: kind < 10000, except the replaceable kinds 0, 3 and 41
def kinds_all_regular(k: int) -> bool:
    return k == 1 or k == 2 or 3 < k < 41 or 41 < k < 10000


# Replaceable: kinds 0, 3, 41 and 10000 <= kind < 20000
def kinds_all_replaceable(k: int) -> bool:
    return k in (0, 3, 41) or 10000 <= k < 20000


def kinds_all_ephemeral(k: int) -> bool:
    return 20000 <= k < 30000


def kinds_all_parameterized_replaceable(k: int) -> bool:
    return 30000 <= k < 40000


# Kinds >= 40000 belong to no class.
KIND_CLASSES: dict[str, Callable[[int], bool]] = {
    "regular": kinds_all_regular,
    "replaceable": kinds_all_replaceable,
    "ephemeral": kinds_all_ephemeral,
    "parameterized_replaceable": kinds_all_parameterized_replaceable,
}


def kind_matcher(matcher: Callable[[int], bool], mode: Mode) -> SifterUnit:
    """Sifter on an arbitrary predicate over the event kind."""

    def match_input(event: Event) -> MatchResult:
        return MatchResult.from_bool(matcher(event.kind))

    reject_fn = reject_with_msg_per_mode(mode, _KIND_MSG_ALLOW, _KIND_MSG_DENY)
    return SifterUnit(match_input, mode, reject_fn, name="kind_matcher")


def kind_list(kinds: Iterable[int], mode: Mode) -> SifterUnit:
    """Sifter on membership of the event kind in a fixed list."""
    kind_set = to_set(kinds)

    def match_input(event: Event) -> MatchResult:
        return MatchResult.from_bool(event.kind in kind_set)

    reject_fn = reject_with_msg_per_mode(mode, _KIND_MSG_ALLOW, _KIND_MSG_DENY)
    return SifterUnit(match_input, mode, reject_fn, name="kind_list")


# =============================================================================
# Timestamps
# =============================================================================


def created_at_range(
    time_range: RelativeTimeRange,
    mode: Mode,
    clock: Clock | None = None,
) -> SifterUnit:
    """
    Sifter on whether created_at falls in a window relative to now.

    The window is re-evaluated against clock for every event, so a
    long-lived sifter keeps tracking the current time.

    Args:
        time_range: Window relative to now
        mode: ALLOW to require timestamps inside the window, DENY to
            require them outside
        clock: Time source (defaults to the system clock)
    """
    clock = clock or SYSTEM_CLOCK

    def match_input(event: Event) -> MatchResult:
        return MatchResult.from_bool(time_range.contains(event.created_at, clock))

    reject_fn = reject_with_msg_per_mode(
        mode,
        f"invalid: event timestamp is out of the range: {time_range}",
        f"blocked: event timestamp must be out of the range: {time_range}",
    )
    return SifterUnit(match_input, mode, reject_fn, name="created_at_range")
