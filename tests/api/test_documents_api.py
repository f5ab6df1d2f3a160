"""Documents API: CRUD, search, facets and autocomplete over HTTP."""

from datetime import datetime

from httpx import AsyncClient

from docsearch.domain.enums import SearchEngine
from tests.fakes import hit


async def _create(client: AsyncClient, **fields) -> dict:
    response = await client.post("/api/v1/documents", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


class TestDocumentCrud:
    async def test_create_get_update_delete(self, client: AsyncClient) -> None:
        created = await _create(client, title="Java Guide", author="Ann", category="doc")
        assert created["created_at"] == created["updated_at"]

        fetched = await client.get(f"/api/v1/documents/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Java Guide"

        updated = await client.put(
            f"/api/v1/documents/{created['id']}", json={"status": "approved"}
        )
        assert updated.status_code == 200
        body = updated.json()
        assert body["status"] == "approved"
        assert body["title"] == "Java Guide"
        assert datetime.fromisoformat(body["updated_at"]) > datetime.fromisoformat(
            body["created_at"]
        )

        deleted = await client.delete(f"/api/v1/documents/{created['id']}")
        assert deleted.json() == {"deleted": True}

        missing = await client.get(f"/api/v1/documents/{created['id']}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "RESOURCE_NOT_FOUND"

    async def test_delete_unknown_reports_false(self, client: AsyncClient) -> None:
        await _create(client, title="keep")

        response = await client.delete("/api/v1/documents/does-not-exist")

        assert response.status_code == 200
        assert response.json() == {"deleted": False}
        listing = await client.get("/api/v1/documents")
        assert len(listing.json()) == 1

    async def test_update_unknown_is_404(self, client: AsyncClient) -> None:
        response = await client.put("/api/v1/documents/nope", json={"title": "x"})
        assert response.status_code == 404

    async def test_blank_title_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/documents", json={"title": ""})
        assert response.status_code == 422

    async def test_whitespace_title_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/documents", json={"title": "   "})
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "title"}

    async def test_create_indexes_in_engines(self, client: AsyncClient, search_clients) -> None:
        created = await _create(client, title="Indexed")
        for fake in search_clients.values():
            assert created["id"] in fake.indexed

    async def test_denied_principal_gets_403(self, app, client: AsyncClient) -> None:
        created = await _create(client, title="secret")
        app.state.permission_filter.deny("bob", created["id"])

        response = await client.get(
            f"/api/v1/documents/{created['id']}", headers={"X-User-ID": "bob"}
        )

        assert response.status_code == 403
        assert response.json()["error"] == "PERMISSION_DENIED"


class TestSearchApi:
    async def test_filter_search_paginates(self, client: AsyncClient) -> None:
        for i in range(12):
            await _create(client, title=f"Doc {i}", category="doc")

        response = await client.post(
            "/api/v1/documents/search", json={"category": "doc", "page": 0, "size": 5}
        )

        body = response.json()
        assert response.status_code == 200
        assert len(body["content"]) == 5
        assert body["total_elements"] == 12
        assert body["total_pages"] == 3
        assert body["has_next"] is True
        assert body["has_previous"] is False

    async def test_camel_case_request_keys(self, client: AsyncClient) -> None:
        await _create(client, title="b")
        await _create(client, title="a")

        response = await client.post(
            "/api/v1/documents/search",
            json={"sortBy": "title", "sortOrder": "ASC", "includeFacets": True},
        )

        body = response.json()
        assert [d["title"] for d in body["content"]] == ["a", "b"]
        assert body["facets"] is not None

    async def test_engine_outage_is_not_an_error(
        self, client: AsyncClient, failing_engines
    ) -> None:
        await _create(client, title="Java Guide")

        response = await client.post("/api/v1/documents/search", json={"query": "java"})

        assert response.status_code == 200
        assert [d["title"] for d in response.json()["content"]] == ["Java Guide"]

    async def test_engine_hits_used_when_available(
        self, client: AsyncClient, search_clients
    ) -> None:
        created = await _create(client, title="Found by engine")
        search_clients[SearchEngine.TYPESENSE].hits = [
            hit(created["id"], SearchEngine.TYPESENSE)
        ]

        response = await client.post("/api/v1/documents/search", json={"query": "zzz"})

        assert [d["id"] for d in response.json()["content"]] == [created["id"]]

    async def test_facets(self, client: AsyncClient) -> None:
        await _create(client, title="1", category="doc", status="draft")
        await _create(client, title="2", category="task", status="draft")

        response = await client.post("/api/v1/documents/facets", json={"category": "doc"})

        body = response.json()
        assert [f["value"] for f in body["categories"]] == ["doc", "task"]
        assert body["statuses"] == [{"value": "draft", "count": 1, "label": "draft"}]


class TestAutocompleteApi:
    async def test_title_suggestions(self, client: AsyncClient) -> None:
        for title in ("Java Guide", "java Tips", "Python Notes"):
            await _create(client, title=title, author="Ann")

        response = await client.post(
            "/api/v1/documents/autocomplete",
            json={"prefix": "Java", "field": "title", "limit": 10},
        )

        assert response.status_code == 200
        assert [c["text"] for c in response.json()] == ["java Tips", "Java Guide"]

    async def test_unknown_field_is_400(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/documents/autocomplete", json={"prefix": "ja", "field": "content"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "INVALID_FIELD"

    async def test_short_prefix_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/documents/autocomplete", json={"prefix": "j"})
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
