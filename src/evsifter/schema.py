"""
Schema definitions for evsifter.

This module defines the Pydantic models and enums shared by every sifter:
- Event/Filter: The inbound event and NIP-01 style structured filters
- Mode: Whether a sifter's predicate describes an allowed or a denied set
- MatchResult: Outcome of running a predicate on an event
- Verdict: Accept, reject (with reason) or internal error

Design Decisions:
    - Models are immutable (frozen=True)
    - Events tolerate unknown keys since relays add their own metadata
    - Filters reject unknown keys so typos in rule files surface early
"""

from collections.abc import Iterable
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Enums
# =============================================================================


class Mode(str, Enum):
    """
    Declared intent of a sifter.

    ALLOW means the predicate defines the set of acceptable events.
    DENY means the predicate defines the set of forbidden events.
    """

    ALLOW = "allow"
    DENY = "deny"


class MatchResult(str, Enum):
    """Whether an event matched a sifter's predicate."""

    MATCHED = "matched"
    NOT_MATCHED = "not_matched"

    @classmethod
    def from_bool(cls, matched: bool) -> "MatchResult":
        """Convert a boolean predicate outcome."""
        return cls.MATCHED if matched else cls.NOT_MATCHED


class Action(str, Enum):
    """What the host should do with an event."""

    ACCEPT = "accept"
    REJECT = "reject"
    ERROR = "error"


# =============================================================================
# Event Models
# =============================================================================


class Event(BaseModel):
    """
    An inbound event.

    Only pubkey, kind and created_at are read by the sifters. Signature and
    id verification happen upstream.

    Attributes:
        id: Event id (hex)
        pubkey: Author public key (hex)
        created_at: Creation time as unix seconds
        kind: Event kind
        tags: List of tags, each a list of strings
        content: Event content
        sig: Signature (hex)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default="", description="Event id")
    pubkey: str = Field(..., description="Author public key")
    created_at: int = Field(..., description="Creation time as unix seconds")
    kind: int = Field(..., description="Event kind", ge=0)
    tags: list[list[str]] = Field(default_factory=list, description="Event tags")
    content: str = Field(default="", description="Event content")
    sig: str = Field(default="", description="Event signature")

    @property
    def created_at_datetime(self) -> datetime:
        """Creation time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.created_at, tz=UTC)

    def tag_values(self, name: str) -> set[str]:
        """Return the values of all tags named `name`."""
        return {tag[1] for tag in self.tags if len(tag) >= 2 and tag[0] == name}


class Filter(BaseModel):
    """
    A structured event filter.

    All present conditions must hold for an event to match. Tag conditions
    are written as "#<name>" keys in filter documents and stored in `tags`.

    Attributes:
        ids: Allowed event ids
        authors: Allowed author public keys
        kinds: Allowed kinds
        since: Minimum created_at (inclusive)
        until: Maximum created_at (inclusive)
        limit: Result limit, kept for compatibility and ignored when matching
        tags: Tag name to allowed values
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ids: list[str] | None = None
    authors: list[str] | None = None
    kinds: list[int] | None = None
    since: int | None = None
    until: int | None = None
    limit: int | None = Field(default=None, ge=0)
    tags: dict[str, list[str]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_tag_conditions(cls, data: Any) -> Any:
        """Move "#x" keys into the tags mapping."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        tags = dict(data.pop("tags", None) or {})
        for key in [k for k in data if isinstance(k, str) and k.startswith("#")]:
            name = key[1:]
            if not name:
                msg = "Tag condition needs a name after '#'"
                raise ValueError(msg)
            tags[name] = data.pop(key)
        data["tags"] = tags
        return data

    def matches(self, event: Event) -> bool:
        """Check whether the event satisfies every condition of this filter."""
        if self.ids is not None and event.id not in self.ids:
            return False
        if self.authors is not None and event.pubkey not in self.authors:
            return False
        if self.kinds is not None and event.kind not in self.kinds:
            return False
        if self.since is not None and event.created_at < self.since:
            return False
        if self.until is not None and event.created_at > self.until:
            return False
        for name, values in self.tags.items():
            if event.tag_values(name).isdisjoint(values):
                return False
        return True


def matches_any(filters: Iterable[Filter], event: Event) -> bool:
    """Check whether at least one filter matches the event."""
    return any(f.matches(event) for f in filters)


# =============================================================================
# Verdict
# =============================================================================


class Verdict(BaseModel):
    """
    Result of evaluating one event with one sifter.

    Attributes:
        action: accept, reject or error
        message: Reason for a rejection (empty otherwise)
        error: The evaluation failure for an error verdict
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    action: Action = Field(..., description="What to do with the event")
    message: str = Field(default="", description="Reason for a rejection")
    error: Exception | None = Field(default=None, description="Evaluation failure")

    @classmethod
    def accept(cls) -> "Verdict":
        """Create an ACCEPT verdict."""
        return cls(action=Action.ACCEPT)

    @classmethod
    def reject(cls, message: str) -> "Verdict":
        """Create a REJECT verdict."""
        return cls(action=Action.REJECT, message=message)

    @classmethod
    def internal_error(cls, error: Exception) -> "Verdict":
        """Create an ERROR verdict."""
        return cls(action=Action.ERROR, message=str(error), error=error)

    @property
    def accepted(self) -> bool:
        return self.action == Action.ACCEPT

    @property
    def rejected(self) -> bool:
        return self.action == Action.REJECT

    @property
    def errored(self) -> bool:
        return self.action == Action.ERROR
