# ==============================================
# FIELD FREQUENCY AGGREGATION
# ==============================================
#
# This package turns flat records into per-field value
# histograms and ranked, percentage-annotated insights.
#
# Modules:
# --------
# - value_key.py     → Canonical string form of a scalar value
# - field_counts.py  → Data class holding one field's histogram
# - ranking.py       → Ranked view of a histogram (FieldInsight)
# - charts.py        → Bar-chart projection of an insight
# - aggregator.py    → FieldAggregator and AggregationResult
#
# ==============================================

from .aggregator import (
    AggregationResult,
    FieldAggregator,
    aggregate,
    chart_data,
    combine_batches,
    insight,
)
from .charts import CHART_PALETTE, ChartData
from .field_counts import FieldCounts
from .ranking import INSIGHT_PALETTE, FieldInsight, TieBreak, ValueEntry, build_insight
from .value_key import UnstringifiableValue, ValueKey

__all__ = [
    "AggregationResult",
    "FieldAggregator",
    "aggregate",
    "chart_data",
    "combine_batches",
    "insight",
    "CHART_PALETTE",
    "ChartData",
    "FieldCounts",
    "INSIGHT_PALETTE",
    "FieldInsight",
    "TieBreak",
    "ValueEntry",
    "build_insight",
    "UnstringifiableValue",
    "ValueKey",
]
