from __future__ import annotations

import httpx
import pytest
from tenacity import wait_none

from clientimport.clients import ekontroll
from clientimport.clients.ekontroll import DemoSource, EKontrollSource, fetch_candidates
from clientimport.errors import EmptyCredential, FetchFailed

from conftest import DEMO_TOKEN, RecordingSource


@pytest.fixture(autouse=True)
def _no_retry_wait(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(ekontroll, "_get_json", ekontroll._get_json.retry_with(wait=wait_none()))


def _roster_row(cid: int, name: str) -> dict:
    return {"id": cid, "razao_social": name, "nome_fantasia": "", "valor_mensalidade": None}


def test_empty_credential_fails_without_touching_source() -> None:
    source = RecordingSource()
    with pytest.raises(EmptyCredential):
        fetch_candidates("", source)
    with pytest.raises(EmptyCredential):
        fetch_candidates("   ", source)
    assert source.calls == []


def test_empty_credential_does_not_wait_on_demo_delay() -> None:
    # a real sleep would hang the test for an hour
    source = DemoSource([DEMO_TOKEN], delay=3600)
    with pytest.raises(EmptyCredential):
        fetch_candidates("", source)


def test_demo_source_accepted_token_returns_roster_in_order(demo_source: DemoSource) -> None:
    candidates = fetch_candidates(DEMO_TOKEN, demo_source)
    assert [c["id"] for c in candidates] == [501, 502, 503]
    assert candidates[0]["nome_fantasia"] == "MetalForte"
    assert candidates[0]["valor_mensalidade"] == 4500.0


def test_demo_source_unknown_token_is_empty_success(demo_source: DemoSource) -> None:
    assert fetch_candidates("not-a-known-token", demo_source) == []


def test_demo_source_returns_fresh_records_each_call(demo_source: DemoSource) -> None:
    first = fetch_candidates(DEMO_TOKEN, demo_source)
    first[0]["razao_social"] = "changed"
    second = fetch_candidates(DEMO_TOKEN, demo_source)
    assert second[0]["razao_social"] == "Indústrias Metalúrgicas Ltda"


def test_http_source_sends_token_and_normalizes() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [_roster_row(7, "Padaria Central Ltda")]})

    source = EKontrollSource(base_url="https://ek.test/api/", transport=httpx.MockTransport(handler))
    candidates = fetch_candidates("secret", source)

    assert [c["id"] for c in candidates] == [7]
    assert candidates[0]["nome_fantasia"] is None
    assert str(seen[0].url) == "https://ek.test/api/clientes"
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert seen[0].headers["X-Token"] == "secret"


def test_http_source_rejected_key_is_not_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, json={"error": "unauthorized"})

    source = EKontrollSource(base_url="https://ek.test/api", max_attempts=3, transport=httpx.MockTransport(handler))
    with pytest.raises(FetchFailed) as exc:
        source.fetch("bad")
    assert len(calls) == 1
    assert "rejected" in exc.value.cause


def test_http_source_retries_server_errors_then_fails() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    source = EKontrollSource(base_url="https://ek.test/api", max_attempts=3, transport=httpx.MockTransport(handler))
    with pytest.raises(FetchFailed) as exc:
        source.fetch("secret")
    assert len(calls) == 3
    assert "503" in exc.value.cause


def test_http_source_recovers_after_transient_error() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"data": []})

    source = EKontrollSource(base_url="https://ek.test/api", max_attempts=2, transport=httpx.MockTransport(handler))
    assert source.fetch("secret") == []
    assert len(calls) == 2


def test_http_source_connection_failure_is_fetch_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = EKontrollSource(base_url="https://ek.test/api", max_attempts=2, transport=httpx.MockTransport(handler))
    with pytest.raises(FetchFailed) as exc:
        source.fetch("secret")
    assert "connection" in exc.value.cause


def test_http_source_non_json_body_is_fetch_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    source = EKontrollSource(base_url="https://ek.test/api", transport=httpx.MockTransport(handler))
    with pytest.raises(FetchFailed):
        source.fetch("secret")


def test_http_source_missing_data_key_is_fetch_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"clientes": []})

    source = EKontrollSource(base_url="https://ek.test/api", transport=httpx.MockTransport(handler))
    with pytest.raises(FetchFailed):
        source.fetch("secret")


def test_credential_reaches_source_unmodified() -> None:
    source = RecordingSource()
    fetch_candidates("  key with spaces ", source)
    assert source.calls == ["  key with spaces "]
