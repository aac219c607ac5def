"""FastAPI route definitions for the TinyLink REST API.

API Endpoint Overview
=====================
::
    GET    /healthz
        └─ HealthResponse (200)

    POST   /api/links
        ├─ LinkCreate (request body)
        └─ LinkResponse (201) or 400/409/500

    GET    /api/links
        └─ list[LinkResponse] (200), newest first

    GET    /api/links/:code
        └─ LinkResponse (200) or 404

    DELETE /api/links/:code
        └─ DeleteResponse (200) or 404

    GET    /:code
        └─ 302 Redirect or 404 HTML page

Request Flow Diagram
====================
::
    ┌─────────────┐     ┌─────────────┐     ┌──────────────────┐     ┌─────────────┐
    │  HTTP       │────▶│ Inject      │────▶│ CodeAllocator /  │────▶│ LinkRegistry│
    │  Request    │     │ RequestCtx  │     │ RedirectAccountant│    │ (SQL)       │
    └─────────────┘     └─────────────┘     └──────────────────┘     └─────────────┘

Key Behaviours
===============
- Domain errors (tinylink.errors) propagate out of the handlers and are
  rendered by the exception handlers registered in tinylink.main.
- The redirect route renders its own HTML 404 page for unknown codes.
- /{code} is registered last so it never shadows the fixed routes.
"""

import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse

from tinylink.accountant import RedirectAccountant
from tinylink.allocator import CodeAllocator
from tinylink.dependencies import (
    RequestContext,
    ServiceManager,
    get_accountant,
    get_allocator,
    get_registry,
    get_request_context,
    get_service_manager,
)
from tinylink.errors import CodeNotFound
from tinylink.registry import LinkRegistry
from tinylink.schemas import DeleteResponse, ErrorResponse, HealthResponse, LinkCreate, LinkResponse

__all__ = ["router"]

router = APIRouter()

NOT_FOUND_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>404 - Link Not Found</title>
</head>
<body>
  <div style="text-align: center; padding: 60px 20px;">
    <h1>404</h1>
    <p>This short link does not exist or has been deleted.</p>
    <a href="/">Go to Dashboard</a>
  </div>
</body>
</html>
"""

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/healthz", response_model=HealthResponse, tags=["health"])
async def health_check(manager: ServiceManager = Depends(get_service_manager)) -> HealthResponse:
    return HealthResponse(
        ok=True,
        version=manager.settings.VERSION,
        uptime=manager.uptime_seconds(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )


@router.post(
    "/api/links",
    response_model=LinkResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["links"],
)
async def create_link(
    payload: LinkCreate,
    ctx: RequestContext = Depends(get_request_context),
    allocator: CodeAllocator = Depends(get_allocator),
) -> LinkResponse:
    ctx.logger.info(
        f"Link creation requested: {payload.target_url}",
        extra={"operation": "create_link", "custom_code": payload.code},
    )
    link = await allocator.allocate(payload.code, payload.target_url)
    ctx.logger.info(
        f"Link created: {link.code}",
        extra={"operation": "create_link", "code": link.code, "duration_ms": ctx.get_duration()},
    )
    return LinkResponse.model_validate(link)


@router.get("/api/links", response_model=list[LinkResponse], responses=ERROR_RESPONSES, tags=["links"])
async def list_links(registry: LinkRegistry = Depends(get_registry)) -> list[LinkResponse]:
    links = await registry.list_all()
    return [LinkResponse.model_validate(link) for link in links]


@router.get("/api/links/{code}", response_model=LinkResponse, responses=ERROR_RESPONSES, tags=["links"])
async def get_link(code: str, registry: LinkRegistry = Depends(get_registry)) -> LinkResponse:
    link = await registry.find_by_code(code)
    if link is None:
        raise CodeNotFound(code)
    return LinkResponse.model_validate(link)


@router.delete("/api/links/{code}", response_model=DeleteResponse, responses=ERROR_RESPONSES, tags=["links"])
async def delete_link(
    code: str,
    ctx: RequestContext = Depends(get_request_context),
    registry: LinkRegistry = Depends(get_registry),
) -> DeleteResponse:
    link = await registry.delete_by_code(code)
    if link is None:
        ctx.logger.warning(f"Delete failed - code not found: {code}")
        raise CodeNotFound(code)
    ctx.logger.info(f"Link deleted: {code}", extra={"operation": "delete_link", "code": code})
    return DeleteResponse(code=link.code)


@router.get("/{code}", tags=["redirect"])
async def redirect_to_target(
    code: str,
    ctx: RequestContext = Depends(get_request_context),
    accountant: RedirectAccountant = Depends(get_accountant),
):
    try:
        target_url = await accountant.resolve_and_record(code)
    except CodeNotFound:
        return HTMLResponse(NOT_FOUND_PAGE, status_code=404)

    ctx.logger.info(
        f"Redirect successful: {code} -> {target_url}",
        extra={
            "operation": "redirect",
            "code": code,
            "client_ip": ctx.client_ip,
            "duration_ms": ctx.get_duration(),
        },
    )
    return RedirectResponse(url=target_url, status_code=302)
