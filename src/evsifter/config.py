"""
Rule configuration for evsifter.

Rules are written in YAML and validated with Pydantic. Each rule names a
sifter type, a mode and the data for that type:

    rules:
      - type: author_list
        mode: allow
        authors: ["<pubkey>"]
      - type: created_at_range
        mode: allow
        max_past_seconds: 3600
        reject_message: "invalid: too old"

build_sifters() turns a validated RuleSet into SifterUnits, in file order.
How the units are combined is up to the host.
"""

from datetime import timedelta
from pathlib import Path
from typing import Annotated, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from evsifter.clock import Clock, RelativeTimeRange
from evsifter.errors import EventLoadError, RuleConfigError
from evsifter.schema import Event, Filter, Mode
from evsifter.sifters import (
    KIND_CLASSES,
    SifterUnit,
    author_list,
    created_at_range,
    kind_list,
    kind_matcher,
    matches_filters,
)


KindClassName = Literal["regular", "replaceable", "ephemeral", "parameterized_replaceable"]

# Upper bound for created_at_range windows: 100 years
MAX_RANGE_SECONDS = 100 * 365 * 24 * 60 * 60


# =============================================================================
# Rule Models
# =============================================================================


class _RuleBase(BaseModel):
    """
    Fields shared by every rule.

    Attributes:
        mode: allow or deny
        reject_message: Replaces the default rejection message when set
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mode: Mode = Field(..., description="Whether the rule lists allowed or denied events")
    reject_message: str | None = Field(
        default=None,
        description="Custom rejection message",
        min_length=1,
    )

    def build(self, clock: Clock | None = None) -> SifterUnit:
        sifter = self._build_sifter(clock)
        if self.reject_message:
            sifter = sifter.reject_with(self.reject_message)
        return sifter

    def _build_sifter(self, clock: Clock | None) -> SifterUnit:
        raise NotImplementedError


class AuthorListRule(_RuleBase):
    """Accept or reject by author pubkey."""

    type: Literal["author_list"]
    authors: list[str] = Field(default_factory=list)

    def _build_sifter(self, clock: Clock | None) -> SifterUnit:
        return author_list(self.authors, self.mode)


class KindListRule(_RuleBase):
    """Accept or reject by event kind."""

    type: Literal["kind_list"]
    kinds: list[int] = Field(default_factory=list)

    def _build_sifter(self, clock: Clock | None) -> SifterUnit:
        return kind_list(self.kinds, self.mode)


class KindClassRule(_RuleBase):
    """Accept or reject by kind class (regular, replaceable, ...)."""

    type: Literal["kind_class"]
    classes: list[KindClassName] = Field(..., min_length=1)

    def _build_sifter(self, clock: Clock | None) -> SifterUnit:
        predicates = [KIND_CLASSES[name] for name in self.classes]
        return kind_matcher(lambda k: any(p(k) for p in predicates), self.mode)


class FiltersRule(_RuleBase):
    """Accept or reject by structured filters."""

    type: Literal["filters"]
    filters: list[Filter] = Field(..., min_length=1)

    def _build_sifter(self, clock: Clock | None) -> SifterUnit:
        return matches_filters(self.filters, self.mode)


class CreatedAtRangeRule(_RuleBase):
    """Accept or reject by created_at relative to now (0 = unbounded)."""

    type: Literal["created_at_range"]
    max_past_seconds: int = Field(default=0, ge=0, le=MAX_RANGE_SECONDS)
    max_future_seconds: int = Field(default=0, ge=0, le=MAX_RANGE_SECONDS)

    def _build_sifter(self, clock: Clock | None) -> SifterUnit:
        time_range = RelativeTimeRange(
            max_past_delta=timedelta(seconds=self.max_past_seconds),
            max_future_delta=timedelta(seconds=self.max_future_seconds),
        )
        return created_at_range(time_range, self.mode, clock=clock)


Rule = Annotated[
    AuthorListRule | KindListRule | KindClassRule | FiltersRule | CreatedAtRangeRule,
    Field(discriminator="type"),
]


class RuleSet(BaseModel):
    """A list of rules, in evaluation order."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rules: list[Rule] = Field(..., min_length=1)


def build_sifters(ruleset: RuleSet, clock: Clock | None = None) -> list[SifterUnit]:
    """Build one SifterUnit per rule, in order."""
    return [rule.build(clock) for rule in ruleset.rules]


# =============================================================================
# Loading Helpers
# =============================================================================


def load_rules(path: Path | str) -> RuleSet:
    """
    Load a rule set from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Validated RuleSet

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuleConfigError: If the YAML is malformed or doesn't match the schema
    """
    path = Path(path)
    with path.open() as f:
        return _parse_rules(f.read(), source=str(path))


def load_rules_from_string(content: str) -> RuleSet:
    """Load a rule set from a YAML string."""
    return _parse_rules(content, source="")


def _parse_rules(content: str, source: str) -> RuleSet:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise RuleConfigError(source=source, details=str(e)) from e

    try:
        return RuleSet.model_validate(data)
    except ValidationError as e:
        raise RuleConfigError(source=source, details=str(e)) from e


def load_event(path: Path | str) -> Event:
    """
    Load a single event from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        EventLoadError: If the content is not a valid event
    """
    path = Path(path)
    return _parse_event(path.read_text(), source=str(path))


def load_event_from_string(content: str) -> Event:
    """Load a single event from a JSON string."""
    return _parse_event(content, source="")


def _parse_event(content: str, source: str) -> Event:
    try:
        return Event.model_validate_json(content)
    except ValidationError as e:
        raise EventLoadError(source=source, details=str(e)) from e
