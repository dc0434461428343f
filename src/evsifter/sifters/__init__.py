"""
Sifters: single admission rules for inbound events.

Key concepts:
    - Mode: ALLOW (predicate defines the allowed set) or DENY (the denied set)
    - SifterUnit: predicate + mode + rejection message strategy
    - Verdict: accept, reject with reason, or internal error

Every constructor here returns a SifterUnit with default messages that
callers may replace with reject_with() or reject_with_fn().
"""

from evsifter.sifters.adapters import (
    KIND_CLASSES,
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
    to_set,
)
from evsifter.sifters.unit import SifterUnit, reject_with_msg_per_mode

__all__ = [
    "KIND_CLASSES",
    "SifterUnit",
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
    "reject_with_msg_per_mode",
    "to_set",
]
