"""Concurrent creation and redirect tests against the real store."""

import asyncio

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_concurrent_identical_custom_codes(client: AsyncClient) -> None:
    payload = {"target_url": "https://example.com", "code": "RACE01"}

    responses = await asyncio.gather(
        client.post("/api/links", json=payload),
        client.post("/api/links", json=payload),
    )

    statuses = sorted(response.status_code for response in responses)
    assert statuses == [201, 409]

    links = (await client.get("/api/links")).json()
    assert [link["code"] for link in links] == ["RACE01"]


@pytest.mark.asyncio
async def test_concurrent_redirects_count_every_click(client: AsyncClient) -> None:
    await client.post("/api/links", json={"target_url": "https://example.com", "code": "HOT123"})
    clicks = 20

    responses = await asyncio.gather(
        *(client.get("/HOT123", follow_redirects=False) for _ in range(clicks))
    )

    assert all(response.status_code == 302 for response in responses)
    stats = (await client.get("/api/links/HOT123")).json()
    assert stats["total_clicks"] == clicks


@pytest.mark.asyncio
async def test_concurrent_generated_codes_are_unique(client: AsyncClient) -> None:
    responses = await asyncio.gather(
        *(client.post("/api/links", json={"target_url": f"https://example.com/{i}"}) for i in range(10))
    )

    assert all(response.status_code == 201 for response in responses)
    codes = {response.json()["code"] for response in responses}
    assert len(codes) == 10
