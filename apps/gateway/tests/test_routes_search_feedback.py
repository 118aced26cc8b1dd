"""检索 / 反馈路由测试"""

from brain.gateway.routes.search import parse_types
from httpx import AsyncClient


class TestParseTypes:
    def test_none_and_empty(self):
        assert parse_types(None) is None
        assert parse_types("") is None

    def test_filters_unknown_values(self):
        assert parse_types("notes, TASKS,bogus") == ["notes", "tasks"]

    def test_only_unknown_means_all(self):
        assert parse_types("bogus") is None


class TestSearchRoutes:
    async def test_search(self, client: AsyncClient):
        await client.post("/api/v1/notes", json={"content": "graphql schema ideas"})
        await client.post("/api/v1/tasks", json={"title": "GraphQL gateway", "project": "api"})

        resp = await client.get("/api/v1/search", params={"q": "graphql"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["query"] == "graphql"
        assert data["total"] == 2
        assert {r["type"] for r in data["results"]} == {"note", "task"}
        scores = [r["score"] for r in data["results"]]
        assert scores == sorted(scores, reverse=True)

    async def test_search_types_and_project(self, client: AsyncClient):
        await client.post("/api/v1/notes", json={"content": "graphql", "project": "api"})
        await client.post("/api/v1/tasks", json={"title": "graphql", "project": "api"})
        await client.post("/api/v1/tasks", json={"title": "graphql", "project": "web"})

        resp = await client.get(
            "/api/v1/search", params={"q": "graphql", "types": "tasks", "project": "api"}
        )
        results = resp.json()["results"]
        assert len(results) == 1
        assert results[0]["type"] == "task"
        assert results[0]["project"] == "api"

    async def test_search_requires_query(self, client: AsyncClient):
        resp = await client.get("/api/v1/search")
        assert resp.status_code == 422

    async def test_suggest(self, client: AsyncClient):
        await client.post("/api/v1/notes", json={"content": "n", "tags": ["docker", "dev"]})
        resp = await client.get("/api/v1/search/suggest", params={"q": "do"})
        assert resp.status_code == 200
        assert resp.json() == {"suggestions": ["docker"]}

        resp = await client.get("/api/v1/search/suggest", params={"q": "d"})
        assert resp.json() == {"suggestions": []}


class TestFeedbackRoutes:
    _BODY = {"message": "love it", "user_id": "u1", "username": "someone"}

    async def test_submit_until_rate_limited(self, client: AsyncClient):
        resp = await client.post("/api/v1/feedback", json=self._BODY)
        assert resp.status_code == 201
        assert resp.headers["X-RateLimit-Limit"] == "2"
        assert resp.headers["X-RateLimit-Remaining"] == "1"

        resp = await client.post("/api/v1/feedback", json=self._BODY)
        assert resp.status_code == 201
        assert resp.headers["X-RateLimit-Remaining"] == "0"

        resp = await client.post("/api/v1/feedback", json=self._BODY)
        assert resp.status_code == 429
        error = resp.json()["error"]
        assert error["code"] == "RATE_LIMITED"
        assert 0 < error["reset_in"] <= 86400
        assert resp.headers["X-RateLimit-Remaining"] == "0"
        assert resp.headers["X-RateLimit-Reset"] == str(error["reset_in"])

    async def test_message_length_validated(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/feedback", json={**self._BODY, "message": "x" * 1001}
        )
        assert resp.status_code == 422

    async def test_list_and_get(self, client: AsyncClient):
        created = (await client.post("/api/v1/feedback", json=self._BODY)).json()

        resp = await client.get("/api/v1/feedback")
        data = resp.json()
        assert data["total"] == 1
        assert data["feedback"][0]["id"] == created["id"]

        resp = await client.get(f"/api/v1/feedback/{created['id']}")
        assert resp.json() == created

        resp = await client.get("/api/v1/feedback/fb_missing")
        assert resp.status_code == 404
