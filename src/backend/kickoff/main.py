"""ASGI entry point for the project assistant.

Run with: uvicorn kickoff.main:app
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from kickoff.api.assistant import router as assistant_router
from kickoff.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"{settings.app_name} {settings.app_version} starting "
        f"(project service {settings.project_service_url}, "
        f"auth service {settings.auth_service_url})"
    )
    yield
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

# Browser clients call the assistant directly
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Accept", "Authorization", "Content-Type"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f} ms)"
    )
    return response


app.include_router(assistant_router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "healthy", "service": settings.app_name, "version": settings.app_version}
