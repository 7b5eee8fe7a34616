# ==============================================
# ExportClient
# ==============================================
#
# PURPOSE:
#   Fetch record batches from the analytics export API.
#   Each endpoint answers with {"data": [record, ...]}.
#
# CLASS: ExportClient
# -------------------
#   Constructor:
#   ------------
#   - __init__(base_url, timeout=None, max_parallel_fetches=2, session=None)
#
#   Methods:
#   --------
#   - fetch_records(path: str) -> list[dict]
#       GET base_url + path, check status, return the "data" list.
#
#   - fetch_all(paths: list[str]) -> list[dict]
#       Fetch every path in parallel and wait for all of them.
#       All-or-nothing: if any request fails, the first failure
#       (in path order) is raised and nothing is returned.
#
#   - close() -> None
#
# ==============================================

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import requests

from field_insights.aggregation import combine_batches
from field_insights.config import ApiConfig
from field_insights.errors import ExportError, InvalidPayloadError
from field_insights.logging import get_logger, log_fetch


logger = get_logger(__name__)


class ExportClient:
    """
    Thin requests-based client for the export endpoints.

    No retries and no pagination: a batch is whatever one GET returns.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        max_parallel_fetches: int = 2,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: API root, e.g. "http://localhost:4000/api"
            timeout: Seconds per request; None waits indefinitely
            max_parallel_fetches: Upper bound on concurrent requests
            session: Optional pre-built requests.Session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_parallel_fetches = max(1, max_parallel_fetches)
        self._session = session if session is not None else requests.Session()
        self._owns_session = session is None

    @classmethod
    def from_config(cls, api_config: ApiConfig) -> "ExportClient":
        return cls(
            base_url=api_config.base_url,
            timeout=api_config.timeout_seconds,
            max_parallel_fetches=api_config.max_parallel_fetches,
        )

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def fetch_records(self, path: str) -> List[Dict[str, Any]]:
        """
        Fetch one export batch.

        Args:
            path: Endpoint path relative to base_url (or an absolute URL)

        Returns:
            The list found under the response's "data" key.

        Raises:
            ExportError: On connection failures and non-2xx responses
            InvalidPayloadError: If the body is not {"data": [...]}
        """
        url = self.url_for(path)
        start_time = time.time()

        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise ExportError(f"Request to {url} failed: {e}", path=path, status_code=status_code) from e
        except requests.exceptions.RequestException as e:
            raise ExportError(f"Request to {url} failed: {e}", path=path) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidPayloadError(path=path, detail="response is not JSON") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise InvalidPayloadError(path=path, detail="expected an object with a 'data' list")

        records = payload["data"]
        log_fetch(
            logger,
            path=path,
            record_count=len(records),
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return records

    def fetch_all(self, paths: Sequence[str]) -> List[Dict[str, Any]]:
        """
        Fetch several batches concurrently and concatenate them in path order.

        Every request is allowed to settle before anything is raised, so a
        fast failure does not leave other requests running in the background.

        Raises:
            ExportError: The first failure in path order, if any request failed.
        """
        if not paths:
            return []

        if len(paths) == 1:
            return list(self.fetch_records(paths[0]))

        worker_count = min(self.max_parallel_fetches, len(paths))
        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            futures = [executor.submit(self.fetch_records, path) for path in paths]
            outcomes = []
            for future in futures:
                try:
                    outcomes.append(future.result())
                except ExportError as e:
                    outcomes.append(e)

        for outcome in outcomes:
            if isinstance(outcome, ExportError):
                raise outcome

        return combine_batches(*outcomes)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
