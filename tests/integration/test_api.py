"""Integration tests for the FastAPI REST API."""

from __future__ import annotations

import json

import pytest
from httpx import ASGITransport, AsyncClient

from uiguard.api.app import build_chain, build_stream_manager, create_app
from uiguard.api.deps import init_services, reset_services
from uiguard.settings import Settings


@pytest.fixture
def app():
    settings = Settings(session_ttl_seconds=3600, session_cleanup_interval=9999)
    app = create_app(settings=settings)
    # Manually init services (ASGITransport doesn't trigger lifespan)
    chain = build_chain(settings)
    init_services(build_stream_manager(settings, chain), chain)
    yield app
    reset_services()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health & catalog
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    async def test_timing_header(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert float(response.headers["X-Request-Duration-Ms"]) >= 0


class TestCatalogEndpoint:
    async def test_catalog(self, client: AsyncClient) -> None:
        response = await client.get("/catalog")
        assert response.status_code == 200
        data = response.json()
        assert "Button" in data["components"]
        assert data["aliases"]["div"] == "Container"


# ---------------------------------------------------------------------------
# Whole-document validation
# ---------------------------------------------------------------------------


class TestValidateEndpoint:
    async def test_valid_document(self, client: AsyncClient, valid_json: str) -> None:
        response = await client.post("/validate", json={"content": valid_json})
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["errors"] == []
        assert data["schema"] == json.loads(valid_json)
        assert len(data["timing"]) == 7

    async def test_invalid_json(self, client: AsyncClient) -> None:
        response = await client.post("/validate", json={"content": '{"root": '})
        data = response.json()
        assert data["valid"] is False
        assert data["schema"] is None
        assert data["errors"][0]["layer"] == "json-syntax"

    async def test_unknown_component(self, client: AsyncClient) -> None:
        content = json.dumps({"version": "1.0", "root": {"id": "r", "type": "Buton"}})
        response = await client.post("/validate", json={"content": content})
        error = response.json()["errors"][0]
        assert error["layer"] == "component-existence"
        assert error["path"] == "root.type"
        assert error["severity"] == "error"

    async def test_strict_flag(self, client: AsyncClient) -> None:
        content = json.dumps({"version": "1.0", "root": {"id": "r", "type": "Grid"}})
        relaxed = await client.post("/validate", json={"content": content})
        strict = await client.post("/validate", json={"content": content, "strict": True})
        assert relaxed.json()["valid"] is True
        assert strict.json()["valid"] is False

    async def test_missing_content_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/validate", json={})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Streams
# ---------------------------------------------------------------------------


class TestStreamEndpoints:
    async def test_stream_lifecycle(self, client: AsyncClient, valid_json: str) -> None:
        response = await client.post("/streams", json={"metadata": {"client": "test"}})
        assert response.status_code == 201
        stream = response.json()
        stream_id = stream["stream_id"]
        assert stream["metadata"] == {"client": "test"}

        half = len(valid_json) // 2
        first = await client.post(f"/streams/{stream_id}/chunks", json={"chunk": valid_json[:half]})
        assert first.status_code == 200
        assert first.json()["partial"] is True
        second = await client.post(
            f"/streams/{stream_id}/chunks", json={"chunk": valid_json[half:]}
        )
        assert second.json()["partial"] is False

        final = await client.post(f"/streams/{stream_id}/finalize")
        assert final.status_code == 200
        data = final.json()
        assert data["valid"] is True
        assert data["complete"] is True
        assert data["partial_schema"] == json.loads(valid_json)

        info = (await client.get(f"/streams/{stream_id}")).json()
        assert info["chunks_received"] == 2
        assert info["finalized"] is True

        deleted = await client.delete(f"/streams/{stream_id}")
        assert deleted.status_code == 204
        missing = await client.get(f"/streams/{stream_id}")
        assert missing.status_code == 404

    async def test_create_without_body(self, client: AsyncClient) -> None:
        response = await client.post("/streams")
        assert response.status_code == 201
        assert response.json()["metadata"] == {}

    async def test_chunk_reports_components_and_errors(self, client: AsyncClient) -> None:
        stream_id = (await client.post("/streams")).json()["stream_id"]
        response = await client.post(
            f"/streams/{stream_id}/chunks",
            json={"chunk": '{"root": {"type": "Buttn", "id": "b"'},
        )
        data = response.json()
        assert data["components"] == [
            {"path": "root", "type": "Buttn", "id": "b", "complete": True}
        ]
        assert data["errors"][0]["code"] == "UNKNOWN_COMPONENT"

    async def test_list_streams(self, client: AsyncClient) -> None:
        await client.post("/streams")
        await client.post("/streams")
        response = await client.get("/streams")
        assert response.status_code == 200
        assert len(response.json()["streams"]) == 2

    async def test_unknown_stream(self, client: AsyncClient) -> None:
        chunk = await client.post("/streams/nope/chunks", json={"chunk": "{"})
        finalize = await client.post("/streams/nope/finalize")
        delete = await client.delete("/streams/nope")
        assert chunk.status_code == 404
        assert finalize.status_code == 404
        assert delete.status_code == 404
        assert chunk.json()["detail"] == "Stream 'nope' not found"

    async def test_chunk_after_finalize_conflicts(
        self, client: AsyncClient, valid_json: str
    ) -> None:
        stream_id = (await client.post("/streams")).json()["stream_id"]
        await client.post(f"/streams/{stream_id}/chunks", json={"chunk": valid_json})
        await client.post(f"/streams/{stream_id}/finalize")
        response = await client.post(f"/streams/{stream_id}/chunks", json={"chunk": " "})
        assert response.status_code == 409
        assert "already finalized" in response.json()["detail"]
