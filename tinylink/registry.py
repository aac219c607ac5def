"""Link Registry: the durable code -> link mapping shared by every component.

All concurrency safety lives here, in two store primitives:

- ``insert_unique`` relies on the UNIQUE constraint on ``links.code``. The
  insert itself is the uniqueness check; there is no read-then-insert window.
- ``increment_clicks`` is a single relative UPDATE of ``total_clicks`` and
  ``last_clicked``, so concurrent redirects of one code never lose an update.

Operation Overview
==================
::
    insert_unique(code, url)  ──▶ INSERT, load row, commit   ──▶ Link | None on conflict
    increment_clicks(code)    ──▶ UPDATE ... RETURNING url   ──▶ str  | None if absent
    find_by_code(code)        ──▶ SELECT ... WHERE code      ──▶ Link | None
    delete_by_code(code)      ──▶ DELETE ... RETURNING *     ──▶ Link | None if absent
    list_all()                ──▶ SELECT ... ORDER BY created_at DESC

How to Use
===========
::
    registry = LinkRegistry(session)
    link = await registry.insert_unique("abc123", "https://example.com")
    if link is None:
        ...  # somebody else owns "abc123"

Key Behaviours
===============
- One registry per request, bound to that request's AsyncSession.
- Every write commits before returning; a rejected insert is rolled back
  so the session can be reused for the next attempt.
- Store errors other than a uniqueness conflict propagate unchanged.
"""

from prometheus_client import Counter
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tinylink.models import Link

__all__ = ["LinkRegistry", "REGISTRY_OPERATIONS_TOTAL"]

REGISTRY_OPERATIONS_TOTAL = Counter(
    "tinylink_registry_operations_total",
    "Link registry operations by outcome",
    ["operation", "outcome"],
)


class LinkRegistry:
    """Read/write access to the ``links`` table through one session."""

    def __init__(self, session: AsyncSession):
        self._db = session

    async def insert_unique(self, code: str, target_url: str) -> Link | None:
        """Atomically create a link unless ``code`` is already taken.

        Returns:
            Link: the committed record with server defaults loaded.
            None: if the UNIQUE constraint rejected the insert.
        """
        link = Link(code=code, target_url=target_url, total_clicks=0)
        self._db.add(link)
        try:
            await self._db.flush()
        except IntegrityError:
            await self._db.rollback()
            REGISTRY_OPERATIONS_TOTAL.labels(operation="insert", outcome="conflict").inc()
            return None
        # Server defaults are read inside the inserting transaction; nothing touches the row after commit.
        await self._db.refresh(link)
        await self._db.commit()
        REGISTRY_OPERATIONS_TOTAL.labels(operation="insert", outcome="success").inc()
        return link

    async def increment_clicks(self, code: str) -> str | None:
        """Record one click on ``code`` and return its target URL.

        Both accounting fields change in one statement, relative to their
        stored values, so the result is independent of concurrent redirects.
        """
        stmt = (
            update(Link)
            .where(Link.code == code)
            .values(total_clicks=Link.total_clicks + 1, last_clicked=func.now())
            .returning(Link.target_url)
            .execution_options(synchronize_session=False)
        )
        result = await self._db.execute(stmt)
        target_url = result.scalar_one_or_none()
        await self._db.commit()
        outcome = "success" if target_url is not None else "not_found"
        REGISTRY_OPERATIONS_TOTAL.labels(operation="increment", outcome=outcome).inc()
        return target_url

    async def find_by_code(self, code: str) -> Link | None:
        result = await self._db.execute(select(Link).where(Link.code == code))
        REGISTRY_OPERATIONS_TOTAL.labels(operation="find", outcome="success").inc()
        return result.scalar_one_or_none()

    async def delete_by_code(self, code: str) -> Link | None:
        """Hard-delete ``code``; the code is free for reuse once this commits."""
        stmt = (
            delete(Link)
            .where(Link.code == code)
            .returning(Link)
            .execution_options(synchronize_session=False)
        )
        result = await self._db.execute(stmt)
        link = result.scalar_one_or_none()
        await self._db.commit()
        outcome = "success" if link is not None else "not_found"
        REGISTRY_OPERATIONS_TOTAL.labels(operation="delete", outcome=outcome).inc()
        return link

    async def list_all(self) -> list[Link]:
        result = await self._db.execute(select(Link).order_by(Link.created_at.desc(), Link.id.desc()))
        REGISTRY_OPERATIONS_TOTAL.labels(operation="list", outcome="success").inc()
        return list(result.scalars().all())
