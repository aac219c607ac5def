"""Input checks shared by the allocator, the accountant and the routes."""

import re
from urllib.parse import urlsplit

import validators

from tinylink.errors import InvalidCodeFormat, InvalidTargetUrl

__all__ = [
    "ALLOWED_SCHEMES",
    "CODE_PATTERN",
    "RESERVED_CODES",
    "is_valid_code",
    "validate_code",
    "validate_target_url",
]

ALLOWED_SCHEMES = frozenset({"http", "https"})
CODE_PATTERN = re.compile(r"[A-Za-z0-9]{6,8}")

# Top-level paths served by the app itself; a link under one of them would never be reachable.
RESERVED_CODES = frozenset({"healthz", "metrics"})


def is_valid_code(code: str) -> bool:
    return CODE_PATTERN.fullmatch(code) is not None


def validate_code(code: str) -> str:
    if not is_valid_code(code):
        raise InvalidCodeFormat()
    return code


def validate_target_url(target_url: str | None) -> str:
    """Return ``target_url`` unchanged if it is an absolute http(s) URL.

    Raises:
        InvalidTargetUrl: for missing, relative, malformed or non-http(s) URLs.
    """
    if not target_url or not isinstance(target_url, str):
        raise InvalidTargetUrl()
    try:
        scheme = urlsplit(target_url).scheme.lower()
    except ValueError as exc:
        raise InvalidTargetUrl() from exc
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidTargetUrl()
    if not validators.url(target_url, simple_host=True, strict_query=False):
        raise InvalidTargetUrl()
    return target_url
