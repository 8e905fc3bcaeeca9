from datetime import datetime
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatkeep.chatkeep_logger import logger
from chatkeep.config import settings
from chatkeep.database import check_db, init_db, sessionlocal
from chatkeep.errors import STATUS_TO_TYPE, BadRequest, InternalError, ValidationError, error_body
from chatkeep.routers import (
    artifacts, conversations, export, folders, maintenance, messages, projects, prompts, shares, templates, users
)
from chatkeep.services.user_service import ensure_default_user

app = FastAPI(
    title="chatkeep",
    description="Storage service for conversations, messages, artifacts, projects and folders",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

logger.info(f"Server starting... Version: {settings.APP_VERSION}, Debug: {settings.DEBUG}")

allowed_origins = [
    "http://localhost:5173",          # Vite dev server
    "http://localhost:4173",          # Vite preview server
    "http://localhost:3000",
]

if settings.CORS_ORIGINS:
    allowed_origins.extend(o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = f"{process_time:.4f}"
    logger.info({
        "request": {"url": str(request.url), "method": request.method},
        "status": response.status_code,
        "process Time": process_time,
    })
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error_type = getattr(exc, "error_type", None) or STATUS_TO_TYPE.get(exc.status_code, "error")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), error_type),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return JSONResponse(
            status_code=BadRequest.status_code,
            content=error_body("Malformed JSON body", BadRequest.error_type),
        )
    details = [
        {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in errors
    ]
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=error_body("Request validation failed", ValidationError.error_type, details),
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=InternalError.status_code,
        content=error_body("Storage failure", InternalError.error_type),
    )


# Register all API routers
app.include_router(users.router)
app.include_router(conversations.router)
app.include_router(messages.router)
app.include_router(artifacts.router)
app.include_router(projects.router)
app.include_router(folders.router)
app.include_router(shares.router)
app.include_router(prompts.router)
app.include_router(templates.router)
app.include_router(export.router)
app.include_router(maintenance.router)


@app.get("/api/health", tags=["Health"])
async def health():
    database_ok = check_db()
    return {
        "status": "ok" if database_ok else "degraded",
        "version": settings.APP_VERSION,
        "timestamp": datetime.utcnow().isoformat(),
        "database": "connected" if database_ok else "unavailable",
    }


@app.on_event("startup")
async def startup_event():
    init_db()
    db = sessionlocal()
    try:
        ensure_default_user(db)
    finally:
        db.close()
    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")
