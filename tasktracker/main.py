"""
tasktracker/main.py

FastAPI application: routers, CORS, error mapping and request logging.

Run: uvicorn tasktracker.main:app --reload
"""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tasktracker.config import CORS_ORIGINS, IS_DEV, IS_PROD
from tasktracker.db import init_db
from tasktracker.errors import STATUS_BY_KIND, DomainError, ErrorKind
from tasktracker.routes_auth import router as auth_router
from tasktracker.routes_notes import router as notes_router
from tasktracker.routes_projects import router as projects_router
from tasktracker.routes_tasks import router as tasks_router
from tasktracker.routes_users import router as users_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# ---------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------
app = FastAPI(title="Tasktracker Backend", version="0.1", lifespan=lifespan)

# CORS configuration from config module
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if IS_PROD else ["*"],  # Restrict origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------
# Error mapping
# ---------------------------------------------------------
@app.exception_handler(DomainError)
def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status = STATUS_BY_KIND[exc.kind]
    if exc.kind is ErrorKind.INFRASTRUCTURE:
        print(f"[ERROR] {request.method} {request.url.path}: {exc.detail}")
    elif IS_DEV:
        print(f"[ERROR] {request.method} {request.url.path} -> {status} {exc.kind.value}")
    return JSONResponse(status_code=status, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid request")
    detail = f"{field}: {message}" if field else message
    if IS_DEV:
        print(f"[ERROR] {request.method} {request.url.path} -> 400 {detail}")
    return JSONResponse(status_code=STATUS_BY_KIND[ErrorKind.INVALID_INPUT], content={"detail": detail})


# ---------------------------------------------------------
# Request logging (dev only)
# ---------------------------------------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    if not IS_DEV:
        return await call_next(request)

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    print(f"[REQUEST] {request.method} {request.url.path} status={response.status_code} duration_ms={elapsed_ms:.1f}")
    return response


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(projects_router)
app.include_router(tasks_router)
app.include_router(notes_router)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}
