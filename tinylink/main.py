"""FastAPI application entry point for TinyLink.

Application Lifecycle Diagram
===========================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Create app, │
    │ CORS, error │
    │ handlers    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ /metrics,   │
    │ then routes │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ init_db()   │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ close_db()  │
    └─────────────┘

How to Use
===========
**Step 1 — Run with uvicorn**::
    uvicorn tinylink.main:app --host 0.0.0.0 --port 3000 --reload

**Step 2 — Make API calls**::
    curl http://localhost:3000/healthz

    curl -X POST http://localhost:3000/api/links \\
         -H "Content-Type: application/json" \\
         -d '{"target_url": "https://example.com", "code": "MYLINK1"}'

    curl -i http://localhost:3000/MYLINK1

Key Behaviours
===============
- The links table is created automatically on startup.
- Domain errors render as {"error": ..., "error_type": ...} with their status.
- Malformed request bodies are client errors (400), not 422.
- Store failures become a generic 500; details only go to the log.
- /metrics is mounted before the routes so /{code} never shadows it.
"""

__all__ = ["app"]

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError

from tinylink.config import get_settings
from tinylink.database import close_db, init_db
from tinylink.dependencies import get_service_manager
from tinylink.errors import TinyLinkError
from tinylink.routes import router
from tinylink.schemas import ErrorResponse

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    get_service_manager()
    await init_db()
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Short links with click accounting",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, message: str, error_type: str) -> JSONResponse:
    body = ErrorResponse(error=message, error_type=error_type)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(TinyLinkError)
async def handle_tinylink_error(request: Request, exc: TinyLinkError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message, exc.error_type)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    get_service_manager().logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    return _error_response(400, "Invalid request body", "InvalidRequest")


@app.exception_handler(SQLAlchemyError)
async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    get_service_manager().logger.error(f"Store error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(500, "Internal server error", "InternalError")


Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=False,
    should_respect_env_var=False,
).instrument(app).expose(app)

app.include_router(router)
