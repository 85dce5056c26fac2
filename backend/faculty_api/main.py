from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.middleware.cors import CORSMiddleware

from .config import settings
from .db import bootstrap_database, check_db_connection
from .logging_utils import configure_logging
from .metrics import CONTENT_TYPE_LATEST, REQUESTS_TOTAL, generate_latest
from .routers.faculty import router as faculty_router
from .schemas import HealthResponse

configure_logging()
logger = logging.getLogger("faculty.app")

app = FastAPI(title="Faculty Directory API", version="1.0.0")


@app.on_event("startup")
async def startup_event() -> None:
    check_db_connection()
    result = bootstrap_database()
    logger.info(
        "Backend startup complete",
        extra={
            "event": "startup",
            "source": result.source,
            "inserted": result.inserted,
            "db_backend": "sqlite" if settings.is_sqlite else "external",
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


@app.middleware("http")
async def request_metrics_middleware(request: Request, call_next):
    try:
        response = await call_next(request)
    except Exception:
        REQUESTS_TOTAL.labels(method=request.method, path=_route_path(request), status="500").inc()
        raise
    REQUESTS_TOTAL.labels(
        method=request.method,
        path=_route_path(request),
        status=str(response.status_code),
    ).inc()
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(
        "Rejected invalid request",
        extra={"event": "bad_request", "path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while serving request",
        extra={
            "event": "request_failed",
            "path": request.url.path,
            "method": request.method,
            "status": 500,
        },
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/api/health", response_model=HealthResponse)
def api_healthcheck() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/metrics")
def metrics() -> Response:
    if not settings.enable_prometheus_metrics:
        raise HTTPException(status_code=404, detail="Metrics disabled")
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(faculty_router)
