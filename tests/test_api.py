"""Tests for the HTTP interface."""

import asyncio

import httpx
import pytest

from config import Config
from shortener.errors import StorageError
from web_app import create_app


@pytest.fixture
def config(data_file):
    return Config(storage_backend="file", data_file=data_file, base_url="http://sho.rt")


@pytest.fixture
async def client(file_store, service, config):
    """HTTP client bound to the app in-process."""
    app = create_app(store_instance=file_store, service_instance=service, config=config)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


def broken_write(payload):
    raise OSError("disk full")


@pytest.mark.asyncio
class TestWebInterface:
    """Form and redirect endpoints."""

    async def test_homepage_empty(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert '<form action="/shorten" method="post"' in response.text

    async def test_homepage_lists_mappings(self, client, service):
        result = await service.shorten("https://example.com/listed")

        response = await client.get("/")

        assert response.status_code == 200
        assert result["short_code"] in response.text
        assert "https://example.com/listed" in response.text

    async def test_homepage_storage_failure(self, client, service, monkeypatch):
        async def failing_list_all():
            raise StorageError("backend down")

        monkeypatch.setattr(service, "list_all", failing_list_all)

        response = await client.get("/")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to retrieve URL mappings"

    async def test_shorten_form(self, client, service):
        response = await client.post("/shorten", data={"url": "https://example.com/form"})

        assert response.status_code == 200
        mappings = await service.list_all()
        assert len(mappings) == 1
        assert f"Shortened URL: http://testserver/{mappings[0].short_code}" in response.text
        assert "already shortened" not in response.text

    async def test_shorten_form_twice(self, client, service):
        await client.post("/shorten", data={"url": "https://example.com/form"})
        response = await client.post("/shorten", data={"url": "https://example.com/form"})

        assert response.status_code == 200
        assert "(already shortened)" in response.text
        assert len(await service.list_all()) == 1

    async def test_shorten_form_uses_forwarded_host(self, client, service):
        response = await client.post(
            "/shorten",
            data={"url": "https://example.com/form"},
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "short.example"},
        )

        code = (await service.list_all())[0].short_code
        assert f"Shortened URL: https://short.example/{code}" in response.text

    async def test_shorten_form_missing_url(self, client):
        response = await client.post("/shorten", data={})

        assert response.status_code == 400
        assert response.json()["detail"] == "URL parameter is required"

    async def test_shorten_form_blank_url(self, client):
        response = await client.post("/shorten", data={"url": "   "})

        assert response.status_code == 400

    async def test_shorten_form_invalid_url(self, client, service):
        response = await client.post("/shorten", data={"url": "example.com/page"})

        assert response.status_code == 200
        assert "URL must include scheme (http:// or https://)" in response.text
        assert await service.list_all() == []

    async def test_shorten_form_requires_post(self, client, service):
        response = await client.get("/shorten")

        assert response.status_code == 405
        assert response.json()["detail"] == "Method not allowed"
        assert response.headers["allow"] == "POST"
        assert await service.list_all() == []

    async def test_shorten_form_storage_failure(self, client, file_store, monkeypatch):
        monkeypatch.setattr(file_store, "_write_snapshot", broken_write)

        response = await client.post("/shorten", data={"url": "https://example.com/form"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to save URL mapping"

    async def test_redirect(self, client, service):
        result = await service.shorten("https://example.com/target")

        response = await client.get(f"/{result['short_code']}")

        assert response.status_code == 301
        assert response.headers["location"] == "https://example.com/target"
        assert (await service.get_mapping(result["short_code"])).visit_count == 1

    async def test_redirect_unknown_code(self, client):
        response = await client.get("/zzzzzz")

        assert response.status_code == 404
        assert response.json()["detail"] == "URL not found"

    async def test_redirect_malformed_code(self, client):
        response = await client.get("/favicon.ico")

        assert response.status_code == 404

    async def test_redirect_storage_failure(self, client, service, file_store, monkeypatch):
        result = await service.shorten("https://example.com/target")
        monkeypatch.setattr(file_store, "_write_snapshot", broken_write)

        response = await client.get(f"/{result['short_code']}")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to update URL mapping"
        assert (await service.get_mapping(result["short_code"])).visit_count == 0

    async def test_concurrent_redirects(self, client, service):
        result = await service.shorten("https://example.com/target")

        responses = await asyncio.gather(
            *(client.get(f"/{result['short_code']}") for _ in range(20))
        )

        assert all(r.status_code == 301 for r in responses)
        assert (await service.get_mapping(result["short_code"])).visit_count == 20

    async def test_static_stylesheet(self, client):
        response = await client.get("/static/css/style.css")

        assert response.status_code == 200


@pytest.mark.asyncio
class TestJSONAPI:
    """JSON endpoints under /api."""

    async def test_shorten(self, client):
        response = await client.post("/api/shorten", json={"url": "https://example.com/api"})

        assert response.status_code == 200
        data = response.json()
        assert data["long_url"] == "https://example.com/api"
        assert data["short_url"] == f"http://testserver/{data['short_code']}"
        assert data["already_existed"] is False

    async def test_shorten_existing(self, client):
        first = (await client.post("/api/shorten", json={"url": "https://example.com/api"})).json()
        second = (await client.post("/api/shorten", json={"url": "https://example.com/api"})).json()

        assert second["short_code"] == first["short_code"]
        assert second["already_existed"] is True

    async def test_shorten_invalid(self, client):
        response = await client.post("/api/shorten", json={"url": "ftp://example.com/file"})

        assert response.status_code == 400
        assert response.json()["detail"] == "URL must include scheme (http:// or https://)"

    async def test_url_info_does_not_count(self, client):
        created = (await client.post("/api/shorten", json={"url": "https://example.com/api"})).json()

        response = await client.get(f"/api/urls/{created['short_code']}")

        assert response.status_code == 200
        data = response.json()
        assert data["long_url"] == "https://example.com/api"
        assert data["visit_count"] == 0
        assert data["last_visited_at"] is None

    async def test_url_info_after_redirect(self, client):
        created = (await client.post("/api/shorten", json={"url": "https://example.com/api"})).json()
        await client.get(f"/{created['short_code']}")

        data = (await client.get(f"/api/urls/{created['short_code']}")).json()

        assert data["visit_count"] == 1
        assert data["last_visited_at"] is not None

    async def test_url_info_unknown(self, client):
        response = await client.get("/api/urls/zzzzzz")

        assert response.status_code == 404

    async def test_list_urls(self, client, sample_urls):
        for url in sample_urls:
            await client.post("/api/shorten", json={"url": url})

        data = (await client.get("/api/urls")).json()

        assert data["count"] == len(sample_urls)
        assert [u["long_url"] for u in data["urls"]] == sample_urls

    async def test_health(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["storage"] == "healthy"
