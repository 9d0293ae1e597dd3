"""FastAPI entrypoint for the order reporting service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from orderboard.api.v1.api import api_router
from orderboard.core.config import settings
from orderboard.core.errors import ReportError
from orderboard.db import session as db_session
from orderboard.db.base import Base
from orderboard.db.migrations import ensure_sqlite_schema
from orderboard.db.seed import ensure_seed_data

logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)
app.include_router(api_router, prefix="/api/v1")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("[REPORT] %s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first_error = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first_error.get("loc", ()) if part not in {"query", "path"})
    message = first_error.get("msg", "Invalid request")
    return _error_response(400, f"`{location}`: {message}" if location else message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[REPORT] Unexpected error on %s %s", request.method, request.url.path)
    return _error_response(500, "Failed to build report")


@app.on_event("startup")
def startup() -> None:
    engine = db_session.engine
    Base.metadata.create_all(bind=engine)
    ensure_sqlite_schema(engine)
    with db_session.SessionLocal() as session:
        try:
            seeded = ensure_seed_data(session)
            logger.info("[BOOTSTRAP] demo data seeded: %s", "yes" if seeded else "no")
        except Exception:
            logger.exception("[BOOTSTRAP] Seed failed; continuing startup.")


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Order reporting API is running"}


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}
