from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from apps.dashboard.api_client import PortfolioApiClient
from apps.dashboard.settings import DashboardSettings
from core.domain.drafts import CreateHoldingRequest, UpdateBalanceRequest
from core.domain.errors import LoadError, WriteError


def _client(handler, **kwargs) -> tuple[PortfolioApiClient, list[httpx.Request]]:  # noqa: ANN001
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = PortfolioApiClient(
        "http://backend.test/",
        transport=httpx.MockTransport(recording_handler),
        **kwargs,
    )
    return client, seen


def test_fetch_snapshot_returns_document() -> None:
    document = {"Equities": [{"symbol": "AAPL"}], "total": 10}
    client, seen = _client(lambda _request: httpx.Response(200, json=document))

    result = asyncio.run(client.fetch_snapshot())

    assert result == document
    assert seen[0].method == "GET"
    assert str(seen[0].url) == "http://backend.test/portfolio"


@pytest.mark.parametrize("status", [404, 500, 302])
def test_fetch_snapshot_non_success_is_load_error(status: int) -> None:
    client, _ = _client(lambda _request: httpx.Response(status, headers={"location": "/elsewhere"}))

    with pytest.raises(LoadError):
        asyncio.run(client.fetch_snapshot())


def test_fetch_snapshot_network_failure_is_load_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client, _ = _client(handler)

    with pytest.raises(LoadError, match="refused"):
        asyncio.run(client.fetch_snapshot())


def test_fetch_snapshot_invalid_json_is_load_error() -> None:
    client, _ = _client(lambda _request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(LoadError):
        asyncio.run(client.fetch_snapshot())


def test_create_holding_posts_payload() -> None:
    client, seen = _client(lambda _request: httpx.Response(201))
    request = CreateHoldingRequest(name="Apple", symbol="AAPL", shares=2, average_cost=100)

    asyncio.run(client.create_holding(request))

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/portfolio/equities"
    assert json.loads(seen[0].content) == {"name": "Apple", "symbol": "AAPL", "shares": 2.0, "average_cost": 100.0}


def test_update_balance_patches_account() -> None:
    client, seen = _client(lambda _request: httpx.Response(204), account_path="/accounts/main")

    asyncio.run(client.update_balance(UpdateBalanceRequest(balance=1500)))

    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/accounts/main"
    assert json.loads(seen[0].content) == {"balance": 1500.0}


@pytest.mark.parametrize("status", [400, 403, 500])
def test_rejected_writes_raise_write_error(status: int) -> None:
    client, _ = _client(lambda _request: httpx.Response(status))

    with pytest.raises(WriteError):
        asyncio.run(client.update_balance(UpdateBalanceRequest(balance=1)))


def test_from_settings_uses_configured_paths(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DASHBOARD_API_BASE_URL", "http://api.test/v1/")
    monkeypatch.setenv("DASHBOARD_SNAPSHOT_PATH", "/snapshot.json")
    settings = DashboardSettings(_env_file=None)

    client = PortfolioApiClient.from_settings(settings)

    assert client.base_url == "http://api.test/v1"
    assert client.snapshot_path == "/snapshot.json"
    assert client.holdings_path == "/portfolio/equities"
