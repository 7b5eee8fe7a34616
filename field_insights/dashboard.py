# ==============================================
# InsightDashboard (Orchestrator)
# ==============================================
#
# PURPOSE:
#   The class callers interact with. It runs an export, hands the
#   fetched records to the aggregator, keeps the result, and serves
#   the per-field views that display code needs.
#
# HOW IT CONNECTS THE PIECES:
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                    InsightDashboard                      │
#   │                                                          │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ CLIENT                                       │        │
#   │  │  ExportClient.fetch_all(export_paths)        │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ concatenated records                   │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ AGGREGATION                                  │        │
#   │  │  FieldAggregator → AggregationResult         │        │
#   │  │  (ranked insights cached per field)          │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │                                        │
#   │                 ▼                                        │
#   │     field_cards() / chart_data() / field_insight()       │
#   └──────────────────────────────────────────────────────────┘
#
# CLASS: InsightDashboard
# -----------------------
#
#   Public Methods:
#   ---------------
#   - export_data() -> dict
#       Fetch all export paths, aggregate, store. On failure keep the
#       previous result and record the error message.
#
#   - load_records(records: list[dict]) -> dict
#       Aggregate records obtained elsewhere (file, fixture).
#
#   - field_insight(field) / chart_data(field) / fields()
#   - toggle_field_expansion(field) -> bool
#   - is_expanded(field) -> bool
#   - field_cards() -> list[dict]
#   - get_status() -> dict
#
#   Attributes:
#   -----------
#   - _client: ExportClient
#   - _aggregator: FieldAggregator
#   - _result: AggregationResult | None
#   - _loading: bool
#   - _status_message: str | None
#   - _error_message: str | None
#   - _expanded: dict[str, bool]
#
# ==============================================

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from field_insights.aggregation import (
    AggregationResult,
    ChartData,
    FieldAggregator,
    FieldInsight,
    TieBreak,
)
from field_insights.client import ExportClient
from field_insights.config import AppConfig, get_config
from field_insights.errors import ExportError
from field_insights.logging import get_logger


logger = get_logger(__name__)

EXPORT_COMPLETED = "Export completed"


class InsightDashboard:
    """
    Export → aggregate → display controller.

    Holds the latest AggregationResult and the per-field expand state.
    """

    def __init__(self, config: Optional[AppConfig] = None, client: Optional[ExportClient] = None):
        """
        Args:
            config: Application configuration. If None, loads from environment.
            client: Export client. If None, one is built from ``config.api``.
        """
        self._config = config or get_config()

        self._client = client if client is not None else ExportClient.from_config(self._config.api)
        self._aggregator = FieldAggregator(
            excluded_fields=self._config.insight.excluded_fields,
            top_n=self._config.insight.top_n,
            tie_break=TieBreak(self._config.insight.tie_break),
        )

        # View state
        self._result: Optional[AggregationResult] = None
        self._loading = False
        self._status_message: Optional[str] = None
        self._error_message: Optional[str] = None
        self._expanded: Dict[str, bool] = {}
        self._last_export_at: Optional[str] = None

    @property
    def result(self) -> Optional[AggregationResult]:
        return self._result

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error_message

    @property
    def status_message(self) -> Optional[str]:
        return self._status_message

    def export_data(self, paths: Optional[List[str]] = None) -> dict:
        """
        Fetch every export path and aggregate the combined records.

        Args:
            paths: Endpoint paths; defaults to ``config.api.export_paths``.

        Returns:
            Dictionary with export results and statistics.
        """
        paths = list(paths or self._config.api.export_paths)
        self._loading = True
        self._error_message = None
        self._status_message = None
        start_time = time.time()

        try:
            records = self._client.fetch_all(paths)
            result = self._store(records)
        except ExportError as e:
            self._error_message = str(e)
            logger.warning("Export failed", extra={"paths": paths, "error": str(e)})
            return {
                "status": "error",
                "error": self._error_message,
                "paths": paths,
                "timestamp": _now(),
            }
        finally:
            self._loading = False

        self._status_message = EXPORT_COMPLETED
        elapsed = time.time() - start_time
        return {
            "status": "success",
            "records_processed": result.record_count,
            "records_skipped": result.skipped_records,
            "values_skipped": result.skipped_values,
            "fields": len(result),
            "paths": paths,
            "elapsed_seconds": round(elapsed, 3),
            "timestamp": self._last_export_at,
        }

    def load_records(self, records: List[Any]) -> dict:
        """
        Aggregate records that were already fetched.

        Returns:
            Dictionary with record and field counts.
        """
        self._error_message = None
        result = self._store(records)
        self._status_message = EXPORT_COMPLETED
        return {
            "status": "success",
            "records_processed": result.record_count,
            "records_skipped": result.skipped_records,
            "values_skipped": result.skipped_values,
            "fields": len(result),
            "timestamp": self._last_export_at,
        }

    def fields(self) -> List[str]:
        if self._result is None:
            return []
        return self._result.fields

    def field_insight(self, field_name: str) -> Optional[FieldInsight]:
        if self._result is None:
            return None
        return self._result.insight(field_name)

    def chart_data(self, field_name: str) -> ChartData:
        if self._result is None:
            return ChartData(field=field_name)
        return self._result.chart_data(field_name)

    def toggle_field_expansion(self, field_name: str) -> bool:
        """
        Flip the "show all values" state of a field.

        Returns:
            The new state (True = expanded).
        """
        self._expanded[field_name] = not self._expanded.get(field_name, False)
        return self._expanded[field_name]

    def is_expanded(self, field_name: str) -> bool:
        return self._expanded.get(field_name, False)

    def field_cards(self) -> List[Dict[str, Any]]:
        """
        One display card per field, in the order fields were first seen.

        A card carries the total, the top entries, the remaining entries
        (only when the field is expanded) and the chart payload.
        """
        cards = []
        for field_name in self.fields():
            field_insight = self._result.insight(field_name)
            expanded = self.is_expanded(field_name)
            cards.append({
                "field": field_name,
                "total_entries": field_insight.total_entries,
                "top_values": list(field_insight.top_values),
                "remaining_values": list(field_insight.remaining_values) if expanded else [],
                "hidden_values": 0 if expanded else len(field_insight.remaining_values),
                "expanded": expanded,
                "chart": self._result.chart_data(field_name),
            })
        return cards

    def get_status(self) -> dict:
        """
        Get current dashboard status.

        Returns:
            Dictionary with dashboard state information.
        """
        return {
            "loading": self._loading,
            "status": self._status_message,
            "error": self._error_message,
            "has_data": self._result is not None,
            "fields": len(self._result) if self._result is not None else 0,
            "records": self._result.record_count if self._result is not None else 0,
            "expanded_fields": sorted(f for f, state in self._expanded.items() if state),
            "export_paths": list(self._config.api.export_paths),
            "upstream_url": self._config.api.upstream_url,
            "last_export_at": self._last_export_at,
        }

    def _store(self, records: List[Any]) -> AggregationResult:
        result = self._aggregator.aggregate(records)
        self._result = result
        self._last_export_at = _now()
        # Expand state only applies to fields that still exist
        self._expanded = {f: state for f, state in self._expanded.items() if f in result}
        return result

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
