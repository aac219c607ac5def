"""SQLAlchemy ORM models for TinyLink.

Data Model Layout
=================
::
    links table
    ├─ id (SERIAL PRIMARY KEY)
    ├─ code (VARCHAR(8) UNIQUE, INDEXED)
    ├─ target_url (TEXT NOT NULL)
    ├─ total_clicks (INTEGER NOT NULL DEFAULT 0)
    ├─ last_clicked (TIMESTAMPTZ NULL)
    └─ created_at (TIMESTAMPTZ, DEFAULT NOW())

How to Use
===========
**Step 1 — Import**::
    from tinylink.models import Link

**Step 2 — Query links**::
    result = await db.execute(select(Link).where(Link.code == "abc123"))
    link = result.scalar_one_or_none()

Key Behaviours
===============
- code is unique; the constraint is the only authority on code ownership.
- code and target_url never change after insertion.
- total_clicks and last_clicked are only ever written together, by a
  relative UPDATE (see LinkRegistry.increment_clicks).
- id is a storage detail and is never exposed through the API.

Classes:
    Link:  A short code mapped to a target URL with click accounting.
"""

import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from tinylink.config import MAX_CODE_LENGTH
from tinylink.database import Base

__all__ = ["Link"]


class Link(Base):
    __tablename__ = "links"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(MAX_CODE_LENGTH), unique=True, index=True, nullable=False)
    target_url: Mapped[str] = mapped_column(Text, nullable=False)
    total_clicks: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    last_clicked: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<Link(id={self.id}, code='{self.code}', total_clicks={self.total_clicks})>"
