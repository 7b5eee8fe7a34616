# ==============================================
# FieldAggregator
# ==============================================
#
# PURPOSE:
#   Turn a batch of flat records into a per-field value histogram
#   (FieldCounts) and the ranked insight for every field.
#
# CLASS: FieldAggregator
# ----------------------
#   Stateless: every aggregate() call starts from empty counters
#   and returns a new AggregationResult.
#
#   Constructor:
#   ------------
#   - __init__(excluded_fields=("Id",), top_n=3, tie_break=TieBreak.INSERTION)
#
#   Methods:
#   --------
#   - aggregate(records: Iterable[Mapping]) -> AggregationResult
#       For each record, for each key not excluded, bump the counter
#       for the value's canonical string. Records that are not mappings
#       and values that are not scalars are skipped and counted.
#
# CLASS: AggregationResult
# ------------------------
#   Read-only mapping field name → FieldCounts. Ranked insights are
#   built once, when the result is created, and served from that cache.
#
#   - insight(field) -> FieldInsight | None
#   - chart_data(field) -> ChartData
#   - merge(other) -> AggregationResult
#   - to_dict() -> dict[str, dict[str, int]]
#
# FUNCTIONS:
# ----------
# - aggregate(records, ...) -> AggregationResult
# - insight(result, field) -> FieldInsight | None
# - chart_data(result, field) -> ChartData
# - combine_batches(*batches) -> list
#
# ==============================================

import time
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from field_insights.logging import get_logger, log_aggregate
from .charts import ChartData, chart_from_insight
from .field_counts import FieldCounts
from .ranking import DEFAULT_TOP_N, FieldInsight, TieBreak, build_insight
from .value_key import UnstringifiableValue, ValueKey


logger = get_logger(__name__)

# Identifier field, never counted whatever else is excluded
RESERVED_FIELD = "Id"
DEFAULT_EXCLUDED_FIELDS = (RESERVED_FIELD,)


class AggregationResult(Mapping):
    """
    Per-field value histograms plus their cached ranked insights.

    Behaves as a read-only ``{field: FieldCounts}`` mapping.
    """

    def __init__(
        self,
        fields: Optional[Dict[str, FieldCounts]] = None,
        record_count: int = 0,
        skipped_records: int = 0,
        skipped_values: int = 0,
        top_n: int = DEFAULT_TOP_N,
        tie_break: TieBreak = TieBreak.INSERTION,
    ):
        self._fields: Dict[str, FieldCounts] = dict(fields or {})
        self.record_count = record_count
        self.skipped_records = skipped_records
        self.skipped_values = skipped_values
        self.top_n = top_n
        self.tie_break = tie_break
        self._insights: Dict[str, FieldInsight] = {
            name: build_insight(counts, top_n=top_n, tie_break=tie_break)
            for name, counts in self._fields.items()
        }

    # ======================================
    # Mapping protocol
    # ======================================
    def __getitem__(self, field_name: str) -> FieldCounts:
        return self._fields[field_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"AggregationResult(fields={list(self._fields)}, "
            f"record_count={self.record_count})"
        )

    # ======================================
    # Derived views
    # ======================================
    @property
    def fields(self) -> List[str]:
        return list(self._fields)

    def insight(self, field_name: str) -> Optional[FieldInsight]:
        """
        Ranked insight for a field, or None if the field was never seen.

        Args:
            field_name: The field to look up

        Returns:
            The cached FieldInsight, or None
        """
        return self._insights.get(field_name)

    def chart_data(self, field_name: str) -> ChartData:
        return chart_from_insight(field_name, self.insight(field_name))

    def merge(self, other: "AggregationResult") -> "AggregationResult":
        """
        Combine two results as if their batches had been aggregated together.

        Ranking options are taken from ``self``.
        """
        merged: Dict[str, FieldCounts] = {}
        for name in list(self._fields) + [n for n in other if n not in self._fields]:
            mine = self._fields.get(name)
            theirs = other.get(name)
            if mine is not None and theirs is not None:
                merged[name] = mine.merge(theirs)
            else:
                source = mine if mine is not None else theirs
                merged[name] = FieldCounts.from_dict(name, source.to_dict())

        return AggregationResult(
            fields=merged,
            record_count=self.record_count + other.record_count,
            skipped_records=self.skipped_records + other.skipped_records,
            skipped_values=self.skipped_values + other.skipped_values,
            top_n=self.top_n,
            tie_break=self.tie_break,
        )

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """Plain ``{field: {value: count}}`` structure."""
        return {name: counts.to_dict() for name, counts in self._fields.items()}


class FieldAggregator:
    """
    Counts value occurrences per field across a batch of records.

    Holds only options; no state survives between aggregate() calls.
    """

    def __init__(
        self,
        excluded_fields: Sequence[str] = DEFAULT_EXCLUDED_FIELDS,
        top_n: int = DEFAULT_TOP_N,
        tie_break: TieBreak = TieBreak.INSERTION,
    ):
        """
        Args:
            excluded_fields: Extra field names never counted. "Id" is always
                excluded.
            top_n: Size of each insight's top slice
            tie_break: Ordering among values with equal counts
        """
        self.excluded_fields = frozenset(excluded_fields) | {RESERVED_FIELD}
        self.top_n = top_n
        self.tie_break = tie_break

    def aggregate(self, records: Iterable[Any]) -> AggregationResult:
        """
        Aggregate a full batch of records.

        Args:
            records: Flat records (field → scalar). May be empty.

        Returns:
            A new AggregationResult with ranked insights already built.
        """
        start_time = time.time()
        fields: Dict[str, FieldCounts] = {}
        record_count = 0
        skipped_records = 0
        skipped_values = 0

        for record in records:
            if not isinstance(record, Mapping):
                skipped_records += 1
                logger.debug(
                    "Skipping non-mapping record",
                    extra={"record_type": type(record).__name__},
                )
                continue

            record_count += 1
            skipped_values += self._count_record(record, fields)

        result = AggregationResult(
            fields=fields,
            record_count=record_count,
            skipped_records=skipped_records,
            skipped_values=skipped_values,
            top_n=self.top_n,
            tie_break=self.tie_break,
        )

        log_aggregate(
            logger,
            record_count=record_count,
            field_count=len(fields),
            skipped_values=skipped_values + skipped_records,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return result

    def _count_record(self, record: Mapping, fields: Dict[str, FieldCounts]) -> int:
        """
        Add one record's values to ``fields``.

        Returns:
            Number of values that were skipped.
        """
        skipped = 0
        for key, value in record.items():
            field_name = key if isinstance(key, str) else str(key)
            if field_name in self.excluded_fields:
                continue

            try:
                value_key = ValueKey.canonical(value)
            except UnstringifiableValue as e:
                skipped += 1
                logger.debug(
                    "Skipping value that has no string form",
                    extra={"field": field_name, "reason": str(e)},
                )
                continue

            if field_name not in fields:
                fields[field_name] = FieldCounts(name=field_name)
            fields[field_name].add(value_key)

        return skipped


def aggregate(
    records: Iterable[Any],
    excluded_fields: Sequence[str] = DEFAULT_EXCLUDED_FIELDS,
    top_n: int = DEFAULT_TOP_N,
    tie_break: TieBreak = TieBreak.INSERTION,
) -> AggregationResult:
    """Aggregate ``records`` with a one-off FieldAggregator."""
    return FieldAggregator(excluded_fields, top_n=top_n, tie_break=tie_break).aggregate(records)


def insight(result: AggregationResult, field_name: str) -> Optional[FieldInsight]:
    return result.insight(field_name)


def chart_data(result: AggregationResult, field_name: str) -> ChartData:
    return result.chart_data(field_name)


def combine_batches(*batches: Iterable[Any]) -> List[Any]:
    """Concatenate record batches, in the order given."""
    combined: List[Any] = []
    for batch in batches:
        combined.extend(batch)
    return combined
