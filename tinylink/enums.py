"""Shared enums for the TinyLink service.

This module defines the status values used as metric labels and log fields.
Using enums instead of string literals provides type safety and prevents typos.
"""

from enum import StrEnum

__all__ = ["CodeSource", "RequestStatus"]


class RequestStatus(StrEnum):
    """Request status values for metrics and logging."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    EXHAUSTED = "exhausted"
    NOT_FOUND = "not_found"
    ERROR = "error"


class CodeSource(StrEnum):
    """Where the short code of a new link came from."""

    CUSTOM = "custom"
    GENERATED = "generated"
