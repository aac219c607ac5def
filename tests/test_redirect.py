"""Redirect endpoint behavior tests."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_redirect_generated_code(client: AsyncClient) -> None:
    create_resp = await client.post("/api/links", json={"target_url": "https://example.com"})
    assert create_resp.status_code == 201
    code = create_resp.json()["code"]

    response = await client.get(f"/{code}", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "https://example.com"

    stats = (await client.get(f"/api/links/{code}")).json()
    assert stats["total_clicks"] == 1
    assert stats["last_clicked"] is not None


@pytest.mark.asyncio
async def test_redirect_unknown_code(client: AsyncClient) -> None:
    response = await client.get("/ZZZZZZ", follow_redirects=False)
    assert response.status_code == 404
    assert response.headers["content-type"].startswith("text/html")
    assert "does not exist" in response.text


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/favicon.ico", "/ab", "/way-too-long-code"])
async def test_redirect_malformed_code(client: AsyncClient, path: str) -> None:
    response = await client.get(path, follow_redirects=False)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_redirect_increments_clicks(client: AsyncClient) -> None:
    await client.post("/api/links", json={"target_url": "https://www.python.org", "code": "py1234"})

    for _ in range(3):
        response = await client.get("/py1234", follow_redirects=False)
        assert response.status_code == 302

    stats = (await client.get("/api/links/py1234")).json()
    assert stats["total_clicks"] == 3


@pytest.mark.asyncio
async def test_redirect_keeps_target_query_string(client: AsyncClient) -> None:
    target = "https://example.com/search?q=tiny&page=2"
    await client.post("/api/links", json={"target_url": target, "code": "query1"})

    response = await client.get("/query1", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == target


@pytest.mark.asyncio
async def test_redirect_after_delete(client: AsyncClient) -> None:
    await client.post("/api/links", json={"target_url": "https://example.com", "code": "bye123"})
    assert (await client.get("/bye123", follow_redirects=False)).status_code == 302

    await client.delete("/api/links/bye123")

    response = await client.get("/bye123", follow_redirects=False)
    assert response.status_code == 404
    assert "location" not in response.headers


@pytest.mark.asyncio
async def test_codes_are_case_sensitive(client: AsyncClient) -> None:
    await client.post("/api/links", json={"target_url": "https://upper.example.com", "code": "ABCDEF"})
    await client.post("/api/links", json={"target_url": "https://lower.example.com", "code": "abcdef"})

    upper = await client.get("/ABCDEF", follow_redirects=False)
    lower = await client.get("/abcdef", follow_redirects=False)
    assert upper.headers["location"] == "https://upper.example.com"
    assert lower.headers["location"] == "https://lower.example.com"
