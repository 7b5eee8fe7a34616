"""Bar-chart projection of a field's ranked values."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .ranking import FieldInsight


CHART_PALETTE = (
    "rgba(244, 197, 66, 0.7)",
    "rgba(0, 120, 212, 0.7)",
    "rgba(0, 178, 148, 0.7)",
    "rgba(216, 59, 1, 0.7)",
    "rgba(160, 160, 160, 0.7)",
)


@dataclass(frozen=True)
class ChartData:
    """Parallel labels / counts lists in rank order."""
    field: str
    labels: List[str] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.labels

    def colors(self) -> List[str]:
        return [CHART_PALETTE[i % len(CHART_PALETTE)] for i in range(len(self.labels))]

    def to_chartjs(self) -> Dict[str, Any]:
        """
        Chart.js style ``{labels, datasets}`` payload.

        An empty chart has no datasets at all.
        """
        if self.is_empty:
            return {"labels": [], "datasets": []}
        return {
            "labels": list(self.labels),
            "datasets": [
                {
                    "label": self.field,
                    "data": list(self.counts),
                    "backgroundColor": self.colors(),
                    "borderWidth": 1,
                }
            ],
        }


def chart_from_insight(field_name: str, insight: Optional[FieldInsight]) -> ChartData:
    if insight is None:
        return ChartData(field=field_name)
    return ChartData(
        field=field_name,
        labels=[entry.label for entry in insight.all_values],
        counts=[entry.count for entry in insight.all_values],
    )
