# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from schoollink import __version__
from schoollink.api.dependencies import Store
from schoollink.core.config import get_settings
from schoollink.domains.errors import StoreUnavailableError
from schoollink.infrastructure.database.store import DirectoryStore
from schoollink.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    checked_at: datetime = Field(description="When health was checked")
    database: ComponentHealth


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")


async def check_database(store: DirectoryStore) -> ComponentHealth:
    """Check the directory database through the store."""
    start = time.time()
    try:
        await store.ping()
    except StoreUnavailableError as e:
        logger.error("Database health check failed: %s", e)
        return ComponentHealth(status="unhealthy", message=str(e))

    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health_check(store: Store) -> HealthResponse:
    """Check if the API is healthy.

    Returns:
        HealthResponse with the database status.
    """
    settings = get_settings()
    db_health = await check_database(store)

    return HealthResponse(
        status=db_health.status,
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        checked_at=utc_now(),
        database=db_health,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(store: Store) -> ReadinessResponse:
    """Check if the API is ready to accept traffic."""
    db_health = await check_database(store)
    return ReadinessResponse(ready=db_health.status == "healthy")
