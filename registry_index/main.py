# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Registry Index API Server.

Main entry point for the Docker v1 registry index application.

Usage:
    uvicorn main:app --host 0.0.0.0 --port $PORT
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.router import api_router
from common.config import get_config
from container import container

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

container.wire(modules=[
    "api.dependencies",
    "api.repositories.routes",
    "api.repositories.dependencies",
])
logger.info("Using container: %s", container.__class__.__name__)

registry_config = get_config()


@asynccontextmanager
async def lifespan(app: FastAPI):  # pylint: disable=unused-argument
    """Log application lifecycle events."""
    logger.info(
        "Application startup complete: registry version=%s, endpoints=%s",
        registry_config.docker.version,
        registry_config.docker.endpoints,
    )

    yield

    logger.info("Application shutdown complete")


app = FastAPI(
    title="Registry Index API",
    description="Docker v1 repository index: registration, tags and pull manifests",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Attach container to app so dependency_injector Provide dependencies resolve
app.container = container

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_registry_headers(request: Request, call_next):
    """Advertise the registry version and config on every response."""
    response = await call_next(request)
    response.headers["X-Docker-Registry-Version"] = registry_config.docker.version
    response.headers["X-Docker-Registry-Config"] = registry_config.docker.config
    return response


app.include_router(api_router)


@app.get(
    "/",
    summary="Root endpoint",
    description="Returns a welcome message and API documentation URL.",
)
async def root() -> dict:
    """Root endpoint returning welcome message."""
    return {
        "message": "Welcome to Registry Index API",
        "docs": "/docs",
        "version": "1.0.0",
    }


@app.get(
    "/health",
    summary="Health check",
    description="Returns the health status of the API server.",
    status_code=status.HTTP_200_OK,
)
async def health_check() -> dict:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):  # pylint: disable=unused-argument
    """Render HTTP errors as the bare ``{"error": ...}`` body Docker clients read."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = {"error": exc.detail["error"]}
    else:
        content = {"error": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):  # pylint: disable=unused-argument
    """Render request validation failures as 400 errors."""
    logger.warning("Request validation failed: %d errors", len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):  # pylint: disable=unused-argument
    """Global exception handler for unhandled exceptions."""
    logger.exception("Unhandled exception occurred")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An internal server error occurred"},
    )


def get_server_config():
    """Get server host and port configuration with proper validation."""
    host = os.getenv("HOST", "0.0.0.0")

    if not host or host.strip() == "":
        raise ValueError("HOST environment variable cannot be empty")

    port_env = os.getenv("PORT")
    if not port_env:
        raise ValueError("PORT environment variable is required")

    try:
        port = int(port_env)
    except ValueError as exc:
        raise ValueError(
            f"PORT environment variable must be a valid integer, got: {port_env}"
        ) from exc
    if not 1 <= port <= 65535:
        raise ValueError(f"Port {port} is not in valid range 1-65535")

    return host.strip(), port


if __name__ == "__main__":
    import uvicorn

    try:
        server_host, server_port = get_server_config()

        logger.info("Starting Registry Index API server on %s:%d", server_host, server_port)

        uvicorn.run("main:app", host=server_host, port=server_port)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        raise
