"""
Exception hierarchy for evsifter.

All evsifter exceptions inherit from SifterError, allowing callers to catch
every evsifter-specific exception with a single except clause.

Exception Categories:
    - PredicateError: A sifter's predicate could not decide on an event
    - RuleConfigError: A rule file is malformed or fails validation
    - EventLoadError: An event document could not be loaded

A policy rejection is NOT an exception. Rejections are ordinary verdicts;
only failures to evaluate are modelled here.
"""

from dataclasses import dataclass, field
from typing import Any


# =============================================================================
# Error Codes
# =============================================================================

# Evaluation errors: 1xxx
ERROR_PREDICATE_FAILED = 1001

# Loading errors: 2xxx
ERROR_RULE_CONFIG_INVALID = 2001
ERROR_EVENT_INVALID = 2002


# =============================================================================
# Base Exception
# =============================================================================


@dataclass
class SifterError(Exception):
    """
    Base exception for all evsifter errors.

    Attributes:
        message: Human-readable error description
        code: Numeric error code for programmatic handling
        suggestion: Optional hint for how to resolve the error
        context: Optional dict with additional debugging info
    """

    message: str = ""
    code: int = 0
    suggestion: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format error for display."""
        parts = [f"[E{self.code}] {self.message}"]
        if self.suggestion:
            parts.append(f"\nSuggestion: {self.suggestion}")
        return "".join(parts)

    def __repr__(self) -> str:
        """Format error for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "suggestion": self.suggestion,
            "context": self.context,
        }


# =============================================================================
# Evaluation Errors
# =============================================================================


@dataclass
class PredicateError(SifterError):
    """
    A sifter's predicate raised while inspecting an event.

    This is neither an accept nor a reject: the sifter could not tell
    whether the event belongs to its set, usually because of a bad
    matcher or filter.

    Attributes:
        sifter: Name of the sifter whose predicate failed
        cause: The exception raised by the predicate
    """

    sifter: str = ""
    cause: BaseException | None = None

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Predicate of {self.sifter or 'sifter'} failed: {self.cause}"
        if self.code == 0:
            self.code = ERROR_PREDICATE_FAILED
        if not self.suggestion:
            self.suggestion = "Check the matcher or filters configured for this sifter"
        self.context.update({
            "sifter": self.sifter,
            "cause": repr(self.cause) if self.cause is not None else None,
        })


# =============================================================================
# Loading Errors
# =============================================================================


@dataclass
class RuleConfigError(SifterError):
    """Raised when a rule file cannot be parsed or validated."""

    source: str = ""
    details: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid rule configuration in {self.source or '<string>'}: {self.details}"
        if self.code == 0:
            self.code = ERROR_RULE_CONFIG_INVALID
        self.context.update({
            "source": self.source,
            "details": self.details,
        })


@dataclass
class EventLoadError(SifterError):
    """Raised when an event document is not valid JSON or not a valid event."""

    source: str = ""
    details: str = ""

    def __post_init__(self) -> None:
        """Set defaults after dataclass init."""
        if not self.message:
            self.message = f"Invalid event in {self.source or '<string>'}: {self.details}"
        if self.code == 0:
            self.code = ERROR_EVENT_INVALID
        self.context.update({
            "source": self.source,
            "details": self.details,
        })
