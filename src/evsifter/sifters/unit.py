"""
The sifter unit: a predicate plus a declared mode.

A sifter runs its predicate on an event and maps (mode, match result) to a
verdict through one table, so every adapter shares the same semantics:

    mode   | matched | not matched
    -------+---------+------------
    ALLOW  | accept  | reject
    DENY   | reject  | accept

A predicate that raises yields an ERROR verdict instead of either outcome.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from evsifter.errors import PredicateError
from evsifter.schema import Action, Event, MatchResult, Mode, Verdict


logger = logging.getLogger(__name__)

MatchInput = Callable[[Event], MatchResult]
RejectFn = Callable[[Event], str]

_VERDICT_TABLE: dict[tuple[Mode, MatchResult], Action] = {
    (Mode.ALLOW, MatchResult.MATCHED): Action.ACCEPT,
    (Mode.ALLOW, MatchResult.NOT_MATCHED): Action.REJECT,
    (Mode.DENY, MatchResult.MATCHED): Action.REJECT,
    (Mode.DENY, MatchResult.NOT_MATCHED): Action.ACCEPT,
}


def reject_with_msg_per_mode(mode: Mode, msg_allow: str, msg_deny: str) -> RejectFn:
    """
    Build a rejection message strategy for a mode.

    An ALLOW sifter rejects events missing from its set, so it reports
    msg_allow; a DENY sifter rejects events found in its set and reports
    msg_deny. The event itself is not inspected.
    """
    msg = msg_allow if Mode(mode) == Mode.ALLOW else msg_deny

    def reject_fn(_event: Event) -> str:
        return msg

    return reject_fn


@dataclass(frozen=True)
class SifterUnit:
    """
    A single admission rule.

    Usage:
        sifter = author_list(["abc"], Mode.ALLOW)
        verdict = sifter.evaluate(event)
        if verdict.rejected:
            # report verdict.message

    Attributes:
        match_input: Predicate run on every event
        mode: Whether the predicate describes an allowed or denied set
        reject_fn: Produces the message for a rejection
        name: Short label used in logs and reports
    """

    match_input: MatchInput
    mode: Mode
    reject_fn: RejectFn
    name: str = "sifter"

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", Mode(self.mode))

    def evaluate(self, event: Event) -> Verdict:
        """
        Evaluate an event.

        Args:
            event: The event to check

        Returns:
            Verdict: accept, reject with message, or error if the
            predicate or the rejection message could not be computed
        """
        try:
            result = self.match_input(event)
            if isinstance(result, bool):
                result = MatchResult.from_bool(result)
            elif not isinstance(result, MatchResult):
                msg = f"predicate returned {type(result).__name__}, expected MatchResult"
                raise TypeError(msg)

            if _VERDICT_TABLE[(self.mode, result)] == Action.ACCEPT:
                return Verdict.accept()

            message = self.reject_fn(event)
        except PredicateError as e:
            logger.warning("sifter %s could not evaluate event %s: %s", self.name, event.id, e)
            return Verdict.internal_error(e)
        except Exception as e:
            err = PredicateError(sifter=self.name, cause=e)
            logger.warning("sifter %s could not evaluate event %s: %s", self.name, event.id, e)
            return Verdict.internal_error(err)

        logger.debug("sifter %s rejected event %s: %s", self.name, event.id, message)
        return Verdict.reject(message)

    def __call__(self, event: Event) -> Verdict:
        return self.evaluate(event)

    def reject_with(self, msg_allow: str, msg_deny: str | None = None) -> "SifterUnit":
        """Return a copy using custom rejection messages (one per mode)."""
        if msg_deny is None:
            msg_deny = msg_allow
        return replace(self, reject_fn=reject_with_msg_per_mode(self.mode, msg_allow, msg_deny))

    def reject_with_fn(self, reject_fn: RejectFn) -> "SifterUnit":
        """Return a copy whose rejection message is computed from the event."""
        return replace(self, reject_fn=reject_fn)
