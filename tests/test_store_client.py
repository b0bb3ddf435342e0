from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import httpx
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from billed.domain import MultipartPayload, SelectedFile
from billed.infrastructure import HttpStoreClient, InMemoryStore, StoreError


def _client(handler, **kwargs) -> tuple[HttpStoreClient, httpx.AsyncClient]:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpStoreClient("http://localhost:5678", http_client=http_client, **kwargs), http_client


def test_create_posts_multipart_with_token():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("authorization")
        captured["content_type"] = request.headers.get("content-type")
        captured["body"] = request.content
        return httpx.Response(201, json={"fileUrl": "http://localhost:5678/public/abc.png", "key": "abc"})

    client, http_client = _client(handler, token="jwt-token")
    payload = MultipartPayload(
        fields={"email": "employee@test.com"},
        files={"file": SelectedFile(name="image.png", content_type="image/png", content=b"\x89PNG")},
    )

    async def scenario():
        try:
            return await client.resource("bills").create(payload)
        finally:
            await http_client.aclose()

    result = asyncio.run(scenario())

    assert result == {"fileUrl": "http://localhost:5678/public/abc.png", "key": "abc"}
    assert captured["method"] == "POST"
    assert captured["url"] == "http://localhost:5678/bills"
    assert captured["auth"] == "Bearer jwt-token"
    assert str(captured["content_type"]).startswith("multipart/form-data")
    body = captured["body"]
    assert b'name="email"' in body and b"employee@test.com" in body
    assert b'filename="image.png"' in body


def test_update_patches_selected_entity():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["json"] = json.loads(request.content)
        captured["auth"] = request.headers.get("authorization")
        return httpx.Response(200, json={"id": "abc", "status": "pending"})

    client, http_client = _client(handler)

    async def scenario():
        try:
            return await client.resource("bills").update({"status": "pending"}, selector="abc")
        finally:
            await http_client.aclose()

    result = asyncio.run(scenario())

    assert result == {"id": "abc", "status": "pending"}
    assert captured == {"method": "PATCH", "path": "/bills/abc", "json": {"status": "pending"}, "auth": None}


@pytest.mark.parametrize("status", [404, 500])
def test_http_errors_become_store_errors(status):
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"message": "Erreur"})

    client, http_client = _client(handler)

    async def scenario():
        try:
            await client.resource("bills").update({}, selector="abc")
        finally:
            await http_client.aclose()

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.status_code == status


def test_network_errors_become_store_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http_client = _client(handler)

    async def scenario():
        try:
            await client.resource("bills").create(MultipartPayload())
        finally:
            await http_client.aclose()

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.status_code is None


def test_update_without_selector_is_rejected_before_sending():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client, http_client = _client(handler)

    async def scenario():
        try:
            await client.resource("bills").update({"status": "pending"}, selector=None)
        finally:
            await http_client.aclose()

    with pytest.raises(StoreError):
        asyncio.run(scenario())
    assert calls == []


def test_api_base_requires_scheme_and_host():
    with pytest.raises(ValueError):
        HttpStoreClient("localhost:5678")


def test_in_memory_store_round_trip():
    store = InMemoryStore(images_url="https://cdn.test/images/")
    bills = store.resource("bills")
    payload = MultipartPayload(
        fields={"email": "employee@test.com"},
        files={"file": SelectedFile(name="Receipt.PNG", content_type="image/png")},
    )

    async def scenario():
        created = await bills.create(payload)
        updated = await bills.update({"status": "pending", "amount": 10}, selector=created["key"])
        return created, updated

    created, updated = asyncio.run(scenario())

    assert created["fileUrl"] == f"https://cdn.test/images/{created['key']}.png"
    assert updated["id"] == created["key"]
    assert updated["fileName"] == "Receipt.PNG"
    assert updated["amount"] == 10
    assert store.resource("bills") is bills


def test_in_memory_store_rejects_unknown_selector():
    store = InMemoryStore()

    with pytest.raises(StoreError) as excinfo:
        asyncio.run(store.resource("bills").update({}, selector="missing"))
    assert excinfo.value.status_code == 404
