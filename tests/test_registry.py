"""Link Registry tests against a real (SQLite) session."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tinylink.database import async_session
from tinylink.registry import LinkRegistry


@pytest.mark.asyncio
async def test_insert_unique_sets_defaults(db_session: AsyncSession) -> None:
    registry = LinkRegistry(db_session)

    link = await registry.insert_unique("abc123", "https://example.com")

    assert link is not None
    assert link.id is not None
    assert link.code == "abc123"
    assert link.total_clicks == 0
    assert link.last_clicked is None
    assert link.created_at is not None


@pytest.mark.asyncio
async def test_insert_unique_conflict(db_session: AsyncSession) -> None:
    registry = LinkRegistry(db_session)
    await registry.insert_unique("abc123", "https://example.com")

    assert await registry.insert_unique("abc123", "https://other.example.com") is None

    # The session stays usable after the rejected insert
    link = await registry.find_by_code("abc123")
    assert link is not None
    assert link.target_url == "https://example.com"


@pytest.mark.asyncio
async def test_increment_clicks(db_session: AsyncSession) -> None:
    registry = LinkRegistry(db_session)
    await registry.insert_unique("abc123", "https://example.com")

    assert await registry.increment_clicks("abc123") == "https://example.com"
    assert await registry.increment_clicks("abc123") == "https://example.com"

    # Read through a fresh session so no identity-map state is involved
    async with async_session() as session:
        link = await LinkRegistry(session).find_by_code("abc123")
    assert link.total_clicks == 2
    assert link.last_clicked is not None


@pytest.mark.asyncio
async def test_increment_clicks_unknown_code(db_session: AsyncSession) -> None:
    assert await LinkRegistry(db_session).increment_clicks("nope12") is None


@pytest.mark.asyncio
async def test_find_by_code_absent(db_session: AsyncSession) -> None:
    assert await LinkRegistry(db_session).find_by_code("nope12") is None


@pytest.mark.asyncio
async def test_delete_by_code(db_session: AsyncSession) -> None:
    registry = LinkRegistry(db_session)
    await registry.insert_unique("abc123", "https://example.com")

    deleted = await registry.delete_by_code("abc123")

    assert deleted is not None
    assert deleted.code == "abc123"
    assert deleted.target_url == "https://example.com"
    assert await registry.find_by_code("abc123") is None
    assert await registry.delete_by_code("abc123") is None


@pytest.mark.asyncio
async def test_list_all_newest_first(db_session: AsyncSession) -> None:
    registry = LinkRegistry(db_session)
    for code in ("aaaaaa", "bbbbbb", "cccccc"):
        await registry.insert_unique(code, f"https://example.com/{code}")

    links = await registry.list_all()

    assert [link.code for link in links] == ["cccccc", "bbbbbb", "aaaaaa"]


@pytest.mark.asyncio
async def test_list_all_empty(db_session: AsyncSession) -> None:
    assert await LinkRegistry(db_session).list_all() == []
