# ==============================================
# Ranking (FieldInsight data classes)
# ==============================================
#
# PURPOSE:
#   The ranked, percentage-annotated view of one field's histogram.
#   This is what display code reads: total entries, the top values,
#   and the full list for "show all" expansion.
#
# ENUMS:
# ------
# - TieBreak(Enum): INSERTION, LABEL
#     How values with equal counts are ordered.
#     INSERTION keeps first-seen order (stable sort), LABEL sorts
#     equal counts lexicographically by value.
#
# CLASSES:
# --------
# - ValueEntry (dataclass, frozen)
#     label: str, count: int, percentage: str ("66.7"), rank: int
#
# - FieldInsight (dataclass, frozen)
#     field: str
#     total_entries: int
#     all_values: tuple[ValueEntry, ...]   → sorted by count desc
#     top_n: int                           → size of the top slice
#
#     Properties: top_values, remaining_values
#
# FUNCTIONS:
# ----------
# - rank_counts(counts, tie_break) -> list[(label, count)]
# - build_insight(counts, top_n=3, tie_break=INSERTION) -> FieldInsight
#
# ==============================================

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, List, Tuple

from .field_counts import FieldCounts


DEFAULT_TOP_N = 3
ONE_DECIMAL = Decimal("0.1")

# Hex colours used for ranked value badges
INSIGHT_PALETTE = (
    "#F4C542",  # yellow
    "#0078D4",  # blue
    "#00B294",  # green
    "#D83B01",  # orange
    "#A0A0A0",  # grey
)


class TieBreak(Enum):
    """Ordering of values that share the same count."""
    INSERTION = "insertion"
    LABEL = "label"


@dataclass(frozen=True)
class ValueEntry:
    """One ranked value of a field."""
    label: str
    count: int
    percentage: str
    rank: int

    @property
    def percentage_value(self) -> float:
        return float(self.percentage)

    @property
    def color(self) -> str:
        return INSIGHT_PALETTE[(self.rank - 1) % len(INSIGHT_PALETTE)]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "count": self.count,
            "percentage": self.percentage,
            "rank": self.rank,
        }


@dataclass(frozen=True)
class FieldInsight:
    """
    Ranked breakdown of one field's values.

    ``all_values`` is ordered by count descending with ranks 1..N.
    """
    field: str
    total_entries: int
    all_values: Tuple[ValueEntry, ...]
    top_n: int = DEFAULT_TOP_N

    @property
    def top_values(self) -> Tuple[ValueEntry, ...]:
        return self.all_values[: self.top_n]

    @property
    def remaining_values(self) -> Tuple[ValueEntry, ...]:
        """Values past the top slice, shown when a field is expanded."""
        return self.all_values[self.top_n:]

    @property
    def distinct_values(self) -> int:
        return len(self.all_values)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "totalEntries": self.total_entries,
            "allValues": [entry.to_dict() for entry in self.all_values],
            "topValues": [entry.to_dict() for entry in self.top_values],
            "colorPalette": list(INSIGHT_PALETTE),
        }


def format_percentage(count: int, total: int) -> str:
    """
    ``count / total`` as a percentage string with one decimal place.

    Halves round up, applied to the exact binary value of the double, so
    1/16 gives "6.3" rather than the half-even "6.2".
    """
    if total <= 0:
        return "0.0"
    return str(Decimal(count / total * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def rank_counts(
    counts: FieldCounts,
    tie_break: TieBreak = TieBreak.INSERTION,
) -> List[Tuple[str, int]]:
    """
    Order a field's (label, count) pairs by count, highest first.

    Python's sort is stable, so with TieBreak.INSERTION equal counts keep
    the order in which the values were first seen.
    """
    pairs = list(counts.items())
    if tie_break is TieBreak.LABEL:
        return sorted(pairs, key=lambda pair: (-pair[1], pair[0]))
    return sorted(pairs, key=lambda pair: pair[1], reverse=True)


def build_insight(
    counts: FieldCounts,
    top_n: int = DEFAULT_TOP_N,
    tie_break: TieBreak = TieBreak.INSERTION,
) -> FieldInsight:
    """
    Build the ranked insight for one field.

    Args:
        counts: The field's histogram
        top_n: How many entries make up the "top" slice
        tie_break: Ordering among equal counts

    Returns:
        FieldInsight with ranks 1..N and one-decimal percentages.
    """
    if top_n < 0:
        raise ValueError(f"top_n must not be negative, got {top_n}")

    total = counts.total_entries
    entries = tuple(
        ValueEntry(
            label=label,
            count=count,
            percentage=format_percentage(count, total),
            rank=index + 1,
        )
        for index, (label, count) in enumerate(rank_counts(counts, tie_break))
    )
    return FieldInsight(
        field=counts.name,
        total_entries=total,
        all_values=entries,
        top_n=top_n,
    )
