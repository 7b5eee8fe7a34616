# ==============================================
# FieldCounts
# ==============================================
#
# PURPOSE:
#   Data class that holds the value histogram for a single field:
#   every distinct (stringified) value seen and how many records
#   carried it.
#
# CLASS: FieldCounts (dataclass)
# ------------------------------
#   Attributes:
#   -----------
#   - name: str                → Field name as it appeared in the records
#   - counts: dict[str, int]   → {"Open": 2, "Closed": 1}, first-seen order
#
#   Computed Properties:
#   --------------------
#   - total_entries -> int      Sum of all counts
#   - distinct_values -> int    Number of buckets
#
#   Methods:
#   --------
#   - add(key: str, amount: int = 1) -> None
#   - merge(other: FieldCounts) -> FieldCounts
#   - to_dict() / from_dict()
#
# ==============================================

from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple


@dataclass
class FieldCounts:
    """
    Occurrence counts of distinct values for one field.

    Keys are canonical value strings (see ValueKey). Insertion order is the
    order in which values were first observed.
    """

    name: str
    counts: Dict[str, int] = field(default_factory=dict)

    def add(self, key: str, amount: int = 1) -> None:
        """
        Record ``amount`` more occurrences of ``key``.

        Args:
            key: Canonical value string
            amount: Number of occurrences to add (positive)
        """
        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")
        self.counts[key] = self.counts.get(key, 0) + amount

    @property
    def total_entries(self) -> int:
        """Sum of all value counts (number of records carrying the field)."""
        return sum(self.counts.values())

    @property
    def distinct_values(self) -> int:
        return len(self.counts)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self.counts.items())

    def merge(self, other: "FieldCounts") -> "FieldCounts":
        """
        Return a new FieldCounts holding the sum of both histograms.

        Values from ``self`` keep their order; values only in ``other``
        are appended in the order ``other`` saw them.
        """
        if other.name != self.name:
            raise ValueError(f"cannot merge counts of '{other.name}' into '{self.name}'")
        merged = FieldCounts(name=self.name, counts=dict(self.counts))
        for key, count in other.items():
            merged.add(key, count)
        return merged

    def __len__(self) -> int:
        return len(self.counts)

    def __contains__(self, key: str) -> bool:
        return key in self.counts

    def __getitem__(self, key: str) -> int:
        return self.counts[key]

    # ======================================
    # Serialization
    # ======================================
    def to_dict(self) -> Dict[str, int]:
        """Plain ``{value: count}`` mapping, suitable for JSON."""
        return dict(self.counts)

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, int]) -> "FieldCounts":
        fc = cls(name=name)
        for key, count in data.items():
            fc.add(str(key), int(count))
        return fc
