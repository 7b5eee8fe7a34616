# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# - status_records      → the three-record Status example
# - sample_records      → a small export batch with mixed value types
# - app_config          → AppConfig built in code (no environment)
# - make_response       → factory for fake requests responses
# - clean_config        → (autouse) fresh config singleton per test
# ==============================================

from unittest.mock import Mock

import pytest
import requests

from field_insights.config import ApiConfig, AppConfig, InsightConfig, reset_config


CONFIG_ENV_VARS = (
    "API_BASE_URL",
    "EXPORT_PATHS",
    "EXPORT_TIMEOUT_SECONDS",
    "MAX_PARALLEL_FETCHES",
    "UPSTREAM_URL",
    "EXCLUDED_FIELDS",
    "INSIGHT_TOP_N",
    "INSIGHT_TIE_BREAK",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Drop the config singleton and any config variables around each test."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def status_records():
    return [
        {"Id": 1, "Status": "Open"},
        {"Id": 2, "Status": "Open"},
        {"Id": 3, "Status": "Closed"},
    ]


@pytest.fixture
def sample_records():
    """Export batch shaped like the analytics API's rows."""
    return [
        {"Id": "1001", "Owner": "Ana", "Stage": "Won", "Region": "EU", "Amount": 1200, "Priority": 1},
        {"Id": "1002", "Owner": "Luis", "Stage": "Lost", "Region": "EU", "Amount": 300, "Priority": "1"},
        {"Id": "1003", "Owner": "Ana", "Stage": "Won", "Region": "US", "Amount": 1200.0, "Priority": 2},
        {"Id": "1004", "Owner": "Marta", "Stage": "Open", "Region": None, "Amount": 50, "Priority": 3},
        {"Id": "1005", "Owner": "Ana", "Stage": "Won", "Region": "EU", "Amount": 75.5, "Priority": 1},
    ]


@pytest.fixture
def app_config():
    return AppConfig(
        api=ApiConfig(base_url="http://api.test/api", export_paths=["/export-data"]),
        insight=InsightConfig(),
    )


@pytest.fixture
def make_response():
    """Build a fake ``requests.Response`` for a Mock session."""

    def _make(payload=None, status_code=200, json_error=False):
        response = Mock()
        response.status_code = status_code
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error", response=response
            )
        else:
            response.raise_for_status.return_value = None
        if json_error:
            response.json.side_effect = ValueError("Expecting value")
        else:
            response.json.return_value = payload
        return response

    return _make
