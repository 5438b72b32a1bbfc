"""Delivery time value type.

Delivery times are stored as free text such as "32 minutes". Two readings
are used by the reports:

- the leading integer token, when the text is an integer optionally followed
  by a unit word ("32 minutes", "32 mins", "32"); anything else has no value
- the "labelled" reading, which only trusts texts ending in the word
  "minutes" and counts every other text as 0

Both readings are available per value (DeliveryTime) and per column
(polars expressions), built from the same pattern.
"""

import re
from dataclasses import dataclass

import polars as pl

MINUTES_UNIT = "minutes"

# Largest value the Int64 minutes column holds
MAX_MINUTES = 2**63 - 1

# ASCII integer token, then optional unit text. ASCII digits and whitespace
# only: Python re and the polars engine must match the same inputs.
LEADING_MINUTES_PATTERN = r"^[ \t\r\n]*([0-9]+)(?:[ \t\r\n]+([^ \t\r\n](?:.*[^ \t\r\n])?))?[ \t\r\n]*$"

_LEADING_MINUTES_RE = re.compile(LEADING_MINUTES_PATTERN)


@dataclass(frozen=True)
class DeliveryTime:
    """A parsed delivery time."""

    raw: str | None
    minutes: int | None
    unit: str | None

    @classmethod
    def parse(cls, raw: str | None) -> "DeliveryTime":
        """Parse free text into a DeliveryTime. Never raises."""
        if raw is None:
            return cls(raw=None, minutes=None, unit=None)

        match = _LEADING_MINUTES_RE.match(raw)
        if match is None:
            return cls(raw=raw, minutes=None, unit=None)

        minutes = int(match.group(1))
        if minutes > MAX_MINUTES:
            return cls(raw=raw, minutes=None, unit=None)

        return cls(raw=raw, minutes=minutes, unit=match.group(2))

    @property
    def is_labelled_minutes(self) -> bool:
        return self.raw is not None and self.raw.endswith(MINUTES_UNIT)

    @property
    def minutes_if_labelled(self) -> int:
        """Minutes when the text ends with "minutes", otherwise 0."""
        if not self.is_labelled_minutes or self.minutes is None:
            return 0
        return self.minutes


def leading_minutes(column: str | pl.Expr) -> pl.Expr:
    """Column-wise DeliveryTime.minutes (null when the text does not parse)."""
    expr = pl.col(column) if isinstance(column, str) else column
    return (
        expr.str.extract(LEADING_MINUTES_PATTERN, group_index=1)
        .cast(pl.Int64, strict=False)
    )


def labelled_minutes(column: str | pl.Expr) -> pl.Expr:
    """Column-wise DeliveryTime.minutes_if_labelled."""
    expr = pl.col(column) if isinstance(column, str) else column
    return (
        pl.when(expr.str.ends_with(MINUTES_UNIT))
        .then(leading_minutes(expr).fill_null(0))
        .otherwise(0)
        .cast(pl.Int64)
    )
