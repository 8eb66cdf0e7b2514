"""
Daymare Backend: Article API Tests
===================================

What:  End-to-end behaviour of the article endpoints through the real app.
How:   httpx AsyncClient over ASGITransport; ArticleStore backed by the
       in-memory FakeCollection from conftest.py.

What we test:
    ✅ Create assigns id and ctime, discarding client-supplied ones
    ✅ Get returns what was created; malformed and absent ids both 404
    ✅ List is newest first
    ✅ Malformed bodies answer 400 and never reach the store
    ✅ Update keeps id and ctime; delete removes
    ✅ Store outages are redacted
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect


def parse_ctime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def create(client, **fields):
    response = await client.post("/api/save", json=fields)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_ctime(self, test_client, fake_collection):
        before = datetime.now(timezone.utc)
        response = await test_client.post("/api/save", json={"title": "T", "body": "B"})

        assert response.status_code == 201
        assert response.headers["content-type"] == "application/json"
        article = response.json()
        assert ObjectId.is_valid(article["id"])
        assert article["title"] == "T"
        assert article["body"] == "B"
        ctime = parse_ctime(article["ctime"])
        assert before - timedelta(seconds=1) <= ctime <= datetime.now(timezone.utc) + timedelta(seconds=1)

        assert len(fake_collection.documents) == 1
        assert fake_collection.documents[0]["_id"] == ObjectId(article["id"])

    @pytest.mark.asyncio
    async def test_client_id_and_ctime_are_discarded(self, test_client):
        supplied_id = str(ObjectId())
        article = await create(
            test_client,
            id=supplied_id,
            title="T",
            body="B",
            ctime="1999-01-01T00:00:00Z",
        )

        assert article["id"] != supplied_id
        assert parse_ctime(article["ctime"]).year != 1999

    @pytest.mark.asyncio
    async def test_title_is_optional(self, test_client):
        article = await create(test_client, body="markdown only")
        assert article["title"] == ""
        assert article["body"] == "markdown only"

    @pytest.mark.asyncio
    async def test_non_json_body_is_invalid_request(self, test_client, fake_collection):
        response = await test_client.post(
            "/api/save",
            content=b"not json at all",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "invalid request"}
        assert fake_collection.calls == []
        assert fake_collection.documents == []

    @pytest.mark.asyncio
    async def test_empty_body_is_invalid_request(self, test_client, fake_collection):
        response = await test_client.post("/api/save")
        assert response.status_code == 400
        assert response.json() == {"error": "invalid request"}
        assert fake_collection.calls == []

    @pytest.mark.asyncio
    async def test_missing_body_field_is_rejected(self, test_client, fake_collection):
        response = await test_client.post("/api/save", json={"title": "no body"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("body:")
        assert fake_collection.calls == []

    @pytest.mark.asyncio
    async def test_unknown_field_is_rejected(self, test_client, fake_collection):
        response = await test_client.post("/api/save", json={"body": "B", "author": "someone"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("author:")
        assert fake_collection.calls == []

    @pytest.mark.asyncio
    async def test_wrong_type_is_rejected(self, test_client):
        response = await test_client.post("/api/save", json={"title": 7, "body": "B"})
        assert response.status_code == 400
        assert response.json()["error"].startswith("title:")

    @pytest.mark.asyncio
    async def test_json_array_is_rejected(self, test_client, fake_collection):
        response = await test_client.post("/api/save", json=[{"body": "B"}])
        assert response.status_code == 400
        assert fake_collection.calls == []

    @pytest.mark.asyncio
    async def test_store_failure_is_redacted(self, test_client, fake_collection):
        fake_collection.insert_one = AsyncMock(side_effect=AutoReconnect("10.0.0.5:27017: connection closed"))

        response = await test_client.post("/api/save", json={"body": "B"})

        assert response.status_code == 503
        assert response.json() == {"error": "store unavailable"}

    @pytest.mark.asyncio
    async def test_get_is_not_bound_to_save(self, test_client):
        response = await test_client.get("/api/save")
        # Falls through to the static catch-all; no such file.
        assert response.status_code == 404


class TestGet:

    @pytest.mark.asyncio
    async def test_get_created_article(self, test_client):
        created = await create(test_client, title="T", body="B")

        response = await test_client.get(f"/api/article/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, test_client):
        response = await test_client.get("/api/article/abc123")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_absent_id_is_not_found(self, test_client):
        response = await test_client.get(f"/api/article/{ObjectId()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_query_string_is_ignored(self, test_client):
        created = await create(test_client, body="B")
        response = await test_client.get(f"/api/article/{created['id']}?format=full")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, test_client):
        response = await test_client.get("/api/article/abc", headers={"X-Request-ID": "trace-1"})
        assert response.headers["X-Request-ID"] == "trace-1"


class TestList:

    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        response = await test_client.get("/api/index")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client):
        for title in ("A", "B", "C"):
            await create(test_client, title=title, body=title.lower())

        response = await test_client.get("/api/index")

        assert response.status_code == 200
        assert [a["title"] for a in response.json()] == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_store_failure_is_redacted(self, test_client, fake_collection):
        def broken_find(filter=None):
            raise AutoReconnect("primary stepped down")

        fake_collection.find = broken_find

        response = await test_client.get("/api/index")

        assert response.status_code == 503
        assert response.json() == {"error": "store unavailable"}


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_ctime(self, test_client):
        created = await create(test_client, title="Old", body="old body")

        response = await test_client.put(
            f"/api/article/{created['id']}",
            json={"title": "New", "body": "new body"},
        )

        assert response.status_code == 200
        updated = response.json()
        assert updated["id"] == created["id"]
        assert updated["ctime"] == created["ctime"]
        assert updated["title"] == "New"

        fetched = (await test_client.get(f"/api/article/{created['id']}")).json()
        assert fetched == updated

    @pytest.mark.asyncio
    async def test_update_keeps_list_position(self, test_client):
        first = await create(test_client, title="first", body="1")
        await create(test_client, title="second", body="2")

        await test_client.put(f"/api/article/{first['id']}", json={"title": "first*", "body": "1"})

        titles = [a["title"] for a in (await test_client.get("/api/index")).json()]
        assert titles == ["second", "first*"]

    @pytest.mark.asyncio
    async def test_update_requires_both_fields(self, test_client):
        created = await create(test_client, title="T", body="B")
        response = await test_client.put(f"/api/article/{created['id']}", json={"title": "only"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_rejects_ctime(self, test_client):
        created = await create(test_client, title="T", body="B")
        response = await test_client.put(
            f"/api/article/{created['id']}",
            json={"title": "T", "body": "B", "ctime": "1999-01-01T00:00:00Z"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_article(self, test_client):
        response = await test_client.put(f"/api/article/{ObjectId()}", json={"title": "T", "body": "B"})
        assert response.status_code == 404


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_article(self, test_client, fake_collection):
        created = await create(test_client, title="T", body="B")

        response = await test_client.delete(f"/api/article/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created
        assert fake_collection.documents == []
        assert (await test_client.get(f"/api/article/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_article(self, test_client):
        response = await test_client.delete(f"/api/article/{ObjectId()}")
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}


class TestFallthrough:

    @pytest.mark.asyncio
    async def test_unmatched_method_and_path_hits_default_handler(self, test_client):
        response = await test_client.post("/unknown/path", json={})
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}

    @pytest.mark.asyncio
    async def test_nested_article_path_is_not_an_article(self, test_client):
        response = await test_client.get("/api/article/abc/def")
        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_unlisted_method_falls_through_to_default_handler(self, test_client, fake_collection):
        response = await test_client.post("/api/index", json={})
        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}
        assert fake_collection.calls == []


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_id_is_short(self, test_client):
        response = await test_client.get("/api/index")
        assert len(response.headers["X-Request-ID"]) == 8
