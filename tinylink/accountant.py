"""Redirect Accountant: resolves a short code and records the visit.

Click Accounting Flow
=====================
::
    ┌─────────────┐
    │  GET /:code │
    └──────┬──────┘
           ▼
    ┌─────────────┐  malformed
    │ code format │───────────▶ CodeNotFound (404)
    └──────┬──────┘
           ▼
    ┌──────────────────────────────────────────┐
    │ UPDATE links                              │
    │    SET total_clicks = total_clicks + 1,   │
    │        last_clicked = now()               │
    │  WHERE code = :code RETURNING target_url  │
    └──────┬───────────────────────────────────┘
    ROW?   │
    ┌──────┴──────┐
    │ NO          │ YES
    ▼             ▼
 CodeNotFound   commit, return target_url ──▶ 302

Key Behaviours
===============
- Lookup and accounting are one statement; there is no read-then-write
  window, so N concurrent redirects always add exactly N clicks.
- A redirect racing a delete of the same code may see CodeNotFound.
- Failed resolutions leave the store untouched.
"""

import logging
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram

from tinylink.enums import RequestStatus
from tinylink.errors import CodeNotFound
from tinylink.registry import LinkRegistry
from tinylink.validation import is_valid_code

if TYPE_CHECKING:
    from tinylink.dependencies import RequestContext

__all__ = ["RedirectAccountant"]

REDIRECT_REQUESTS_TOTAL = Counter(
    "tinylink_redirect_requests_total",
    "Total redirect requests",
    ["status"],
)
REDIRECT_DURATION = Histogram(
    "tinylink_redirect_duration_seconds",
    "Time taken to resolve a code and record the click",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25],
)


class RedirectAccountant:
    def __init__(self, registry: LinkRegistry, logger: logging.Logger | logging.LoggerAdapter):
        self._registry = registry
        self._logger = logger

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "RedirectAccountant":
        return cls(LinkRegistry(ctx.database), ctx.logger)

    async def resolve_and_record(self, code: str) -> str:
        """Return the target URL for ``code`` after counting one click.

        Raises:
            CodeNotFound: if no link is registered under ``code``.
        """
        start_time = time.perf_counter()
        status = RequestStatus.ERROR

        try:
            target_url = None
            if is_valid_code(code):
                target_url = await self._registry.increment_clicks(code)

            if target_url is None:
                status = RequestStatus.NOT_FOUND
                self._logger.info(f"Redirect miss for code: {code}")
                raise CodeNotFound(code)

            status = RequestStatus.SUCCESS
            self._logger.debug(f"Click recorded for {code}")
            return target_url

        finally:
            REDIRECT_DURATION.observe(time.perf_counter() - start_time)
            REDIRECT_REQUESTS_TOTAL.labels(status=status).inc()
