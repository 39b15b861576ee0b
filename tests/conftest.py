"""Shared test fixtures for azure-debug-info tests."""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable
from unittest.mock import MagicMock, patch

import pytest

from az_debug_info.azure_api import AzureCloud, get_cloud

_AZURE_ENV_VARS = (
    "AZURE_CLIENT_ID",
    "AZURE_TENANT_ID",
    "AZURE_CLIENT_SECRET",
    "AZURE_FEDERATED_TOKEN_FILE",
    "IDENTITY_ENDPOINT",
    "MSI_ENDPOINT",
    "AZURE_ENVIRONMENT",
    "AZURE_IMDS_PROBE",
    "VERBOSE",
    "DEBUG",
    "LOG_JSON",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without Azure or logging variables set."""
    for name in _AZURE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _mock_credential():
    """Prevent real Azure credential calls in every test."""
    mock_token = MagicMock()
    mock_token.token = "fake-token"
    with patch("az_debug_info.azure_api._auth.DefaultAzureCredential") as cls:
        cls.return_value.get_token.return_value = mock_token
        yield cls


@pytest.fixture(autouse=True)
def _mock_imds():
    """Keep the instance metadata probe off the network; reports unreachable."""
    with patch("az_debug_info.identity._imds_reachable", return_value=False) as probe:
        yield probe


@pytest.fixture(autouse=True)
def _reset_app_logger():
    """Undo ``setup_logging`` so caplog sees records in later tests."""
    yield
    app_logger = logging.getLogger("az_debug_info")
    app_logger.handlers = []
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


@pytest.fixture()
def cloud() -> AzureCloud:
    return get_cloud("AzurePublicCloud")


@pytest.fixture()
def make_jwt() -> Callable[[object], str]:
    """Return a builder for unsigned JWTs carrying the given payload."""

    def _encode(part: object) -> str:
        raw = json.dumps(part).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    def _make(payload: object) -> str:
        return f"{_encode({'alg': 'none', 'typ': 'JWT'})}.{_encode(payload)}.sig"

    return _make


@pytest.fixture()
def json_response() -> Callable[[dict], MagicMock]:
    """Return a builder for mocked ``requests`` responses."""

    def _make(data: dict) -> MagicMock:
        resp = MagicMock()
        resp.ok = True
        resp.json.return_value = data
        resp.raise_for_status.return_value = None
        return resp

    return _make
