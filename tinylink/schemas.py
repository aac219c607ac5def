"""Pydantic schemas for request/response validation in TinyLink.

Schema Hierarchy
=================
::
    LinkCreate (Input)
    ├─ target_url: str | None
    └─ code: str | None (optional custom code)

    LinkResponse (Output)
    ├─ code: str
    ├─ target_url: str
    ├─ total_clicks: int
    ├─ last_clicked: datetime | None
    └─ created_at: datetime

    DeleteResponse (Output)
    ├─ message: str
    └─ code: str

    HealthResponse (Output)
    ├─ ok: bool
    ├─ version: str
    ├─ uptime: int (seconds)
    └─ timestamp: datetime

    ErrorResponse (Output)
    ├─ error: str
    └─ error_type: str

Key Behaviours
===============
- LinkCreate deliberately performs no URL/code checks: those belong to the
  CodeAllocator so that they surface as 400 with a domain error type
  instead of a generic 422.
- Datetimes serialize as UTC ISO-8601 strings, whatever the backend returns.
- Output models read straight from ORM objects (from_attributes).
"""

import datetime

from pydantic import BaseModel, Field, field_serializer

__all__ = [
    "LinkCreate",
    "LinkResponse",
    "DeleteResponse",
    "HealthResponse",
    "ErrorResponse",
]


class LinkCreate(BaseModel):
    target_url: str | None = None
    code: str | None = None


class LinkResponse(BaseModel):
    code: str
    target_url: str
    total_clicks: int
    last_clicked: datetime.datetime | None
    created_at: datetime.datetime

    model_config = {"from_attributes": True}

    @field_serializer("created_at", "last_clicked")
    def serialize_timestamp(self, value: datetime.datetime | None) -> datetime.datetime | None:
        # SQLite hands back naive values; both backends store UTC.
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)


class DeleteResponse(BaseModel):
    message: str = "Link deleted successfully"
    code: str


class HealthResponse(BaseModel):
    ok: bool = True
    version: str
    uptime: int = Field(..., description="Seconds since the process started", ge=0)
    timestamp: datetime.datetime


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable message, e.g. 'Code already exists'")
    error_type: str = Field(..., description="Error class name, e.g. 'CodeAlreadyExists'")
