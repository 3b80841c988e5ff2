"""Interpreter for the numeric range subset of CHECK constraints.

Only one shape is understood::

    ((field >= N) AND (field <= M))

with arbitrary whitespace, found anywhere in the definition, so the
database's rendering ``CHECK (((score >= 1) AND (score <= 10)))`` matches
too. Anything else parses to ``Unrecognized`` and evaluates as satisfied:
the database stays authoritative for every constraint.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Union

from schemagate.types import ValueKind, kind_of

__all__ = ["RangeCheck", "Unrecognized", "ParsedCheck", "parse_check", "evaluate_check"]

RANGE_PATTERN = re.compile(
    r"\(\s*\(\s*(?P<lower_field>\w+)\s*>=\s*(?P<minimum>\d+)\s*\)"
    r"\s*AND\s*"
    r"\(\s*(?P<upper_field>\w+)\s*<=\s*(?P<maximum>\d+)\s*\)\s*\)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RangeCheck:
    """An inclusive numeric range on a single field."""

    field: str
    minimum: int
    maximum: int

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        """True unless the field holds a number outside [minimum, maximum].

        NaN is never inside the range.
        """
        value = record.get(self.field)
        if kind_of(value) not in (ValueKind.INTEGER, ValueKind.FLOAT):
            return True
        try:
            return self.minimum <= value <= self.maximum
        except ArithmeticError:
            # Decimal NaN cannot be ordered and is never in range
            return False


@dataclass(frozen=True)
class Unrecognized:
    """A definition outside the supported grammar; always satisfied."""

    raw_definition: str
    reason: str

    def evaluate(self, record: Mapping[str, Any]) -> bool:
        return True


ParsedCheck = Union[RangeCheck, Unrecognized]


def parse_check(raw_definition: str) -> ParsedCheck:
    """Parse a CHECK constraint definition into a RangeCheck or Unrecognized."""
    match = RANGE_PATTERN.search(raw_definition or "")
    if match is None:
        return Unrecognized(raw_definition, "unsupported expression")

    lower_field = match.group("lower_field")
    upper_field = match.group("upper_field")
    if lower_field != upper_field:
        return Unrecognized(
            raw_definition, f"bounds on different fields: {lower_field}, {upper_field}"
        )

    return RangeCheck(
        field=lower_field,
        minimum=int(match.group("minimum")),
        maximum=int(match.group("maximum")),
    )


def evaluate_check(record: Mapping[str, Any], raw_definition: str) -> bool:
    """Evaluate a CHECK constraint definition against a record.

    Returns False only for a recognized range whose field holds a number
    outside the range. Absent, null or non-numeric values pass.
    """
    return parse_check(raw_definition).evaluate(record)
