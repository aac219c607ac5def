"""Code Allocator: assigns a unique short code to every new link.

Allocation Flow
===============
::
    ┌──────────────────┐
    │ POST /api/links   │
    └────────┬─────────┘
             ▼
    ┌──────────────────┐   invalid
    │ validate target  │──────────▶ InvalidTargetUrl (400)
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ code supplied?   │
    └────────┬─────────┘
      YES    │        NO
    ┌────────┴───────────────────────┐
    ▼                                ▼
┌───────────────┐              ┌────────────────────┐
│ validate code │─▶ 400        │ generate (nanoid)  │◀──┐
└──────┬────────┘              └─────────┬──────────┘   │ conflict and
       ▼                                 ▼              │ attempts left
┌───────────────┐              ┌────────────────────┐   │
│ insert_unique │─▶ 409        │ insert_unique      │───┘
└──────┬────────┘              └─────────┬──────────┘
       │                                 │ attempts used up
       │                                 ▼
       │                       AllocationExhausted (500)
       ▼
    new Link (total_clicks=0, last_clicked=None)

How to Use
===========
::
    allocator = CodeAllocator.from_context(ctx)
    link = await allocator.allocate(None, "https://example.com")
    link = await allocator.allocate("MYLINK1", "https://a.com")

Key Behaviours
===============
- Both inputs are validated before the store is touched.
- Uniqueness is decided by the store's UNIQUE constraint, never by a
  pre-check read, so identical concurrent requests yield one winner.
- Generated codes draw each character uniformly from [A-Za-z0-9] using
  nanoid's secure random source.
- Generation retries are bounded by CODE_ALLOCATION_MAX_ATTEMPTS.
"""

import logging
import time
from typing import TYPE_CHECKING

from nanoid import generate
from prometheus_client import Counter, Histogram

from tinylink.config import Settings
from tinylink.enums import CodeSource, RequestStatus
from tinylink.errors import AllocationExhausted, CodeAlreadyExists, InvalidCodeFormat, InvalidTargetUrl
from tinylink.models import Link
from tinylink.registry import LinkRegistry
from tinylink.validation import RESERVED_CODES, validate_code, validate_target_url

if TYPE_CHECKING:
    from tinylink.dependencies import RequestContext

__all__ = ["ALPHABET", "CodeAllocator", "generate_code"]

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

LINK_CREATION_REQUESTS_TOTAL = Counter(
    "tinylink_link_creation_requests_total",
    "Total link creation requests",
    ["status", "source"],
)
LINK_CREATION_DURATION = Histogram(
    "tinylink_link_creation_duration_seconds",
    "Time taken to allocate a code and store a link",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
CODE_GENERATION_ATTEMPTS_TOTAL = Counter(
    "tinylink_code_generation_attempts_total",
    "Generated codes tried against the registry",
)
CODE_GENERATION_COLLISIONS_TOTAL = Counter(
    "tinylink_code_generation_collisions_total",
    "Generated codes rejected because they were already taken or reserved",
)


def generate_code(length: int) -> str:
    assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"
    return generate(ALPHABET, length)


class CodeAllocator:
    """Validates link creation requests and claims a unique code for each."""

    def __init__(self, registry: LinkRegistry, settings: Settings, logger: logging.Logger | logging.LoggerAdapter):
        self._registry = registry
        self._settings = settings
        self._logger = logger

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "CodeAllocator":
        return cls(LinkRegistry(ctx.database), ctx.settings, ctx.logger)

    async def allocate(self, requested_code: str | None, target_url: str | None) -> Link:
        """Create a link for ``target_url`` under ``requested_code`` or a generated code.

        An empty ``requested_code`` is treated the same as ``None``.

        Returns:
            Link: the committed record.

        Raises:
            InvalidTargetUrl: target is missing or not an absolute http(s) URL.
            InvalidCodeFormat: requested code does not match [A-Za-z0-9]{6,8}.
            CodeAlreadyExists: requested code is taken or reserved.
            AllocationExhausted: no free generated code within the attempt budget.
        """
        start_time = time.perf_counter()
        source = CodeSource.CUSTOM if requested_code else CodeSource.GENERATED
        status = RequestStatus.ERROR

        try:
            target_url = validate_target_url(target_url)
            if requested_code:
                link = await self._allocate_custom(validate_code(requested_code), target_url)
            else:
                link = await self._allocate_generated(target_url)
            status = RequestStatus.SUCCESS
            self._logger.info(f"Link created: {link.code} -> {link.target_url} ({source})")
            return link

        except (InvalidTargetUrl, InvalidCodeFormat) as exc:
            status = RequestStatus.VALIDATION_ERROR
            self._logger.warning(f"Link creation rejected: {exc.message}")
            raise

        except CodeAlreadyExists as exc:
            status = RequestStatus.CONFLICT
            self._logger.warning(f"Link creation conflict for code {exc.code}: {exc.message}")
            raise

        except AllocationExhausted as exc:
            status = RequestStatus.EXHAUSTED
            self._logger.error(f"No free code after {exc.attempts} attempts")
            raise

        finally:
            LINK_CREATION_DURATION.observe(time.perf_counter() - start_time)
            LINK_CREATION_REQUESTS_TOTAL.labels(status=status, source=source).inc()

    async def _allocate_custom(self, code: str, target_url: str) -> Link:
        if code in RESERVED_CODES:
            raise CodeAlreadyExists(code, "Code is reserved")

        link = await self._registry.insert_unique(code, target_url)
        if link is None:
            raise CodeAlreadyExists(code)
        return link

    async def _allocate_generated(self, target_url: str) -> Link:
        max_attempts = self._settings.CODE_ALLOCATION_MAX_ATTEMPTS

        for attempt in range(1, max_attempts + 1):
            code = generate_code(self._settings.SHORT_CODE_LENGTH)
            CODE_GENERATION_ATTEMPTS_TOTAL.inc()

            if code not in RESERVED_CODES:
                link = await self._registry.insert_unique(code, target_url)
                if link is not None:
                    return link

            CODE_GENERATION_COLLISIONS_TOTAL.inc()
            self._logger.warning(f"Generated code {code} unavailable (attempt {attempt}/{max_attempts})")

        raise AllocationExhausted(max_attempts)
