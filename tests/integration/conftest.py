# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API integration tests.

The application is built with create_app() and served in-process through
httpx's ASGI transport. The lifespan is not run; the store dependency is
overridden with the seeded test store instead.
"""

from collections.abc import AsyncIterator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from schoollink.api.app import create_app
from schoollink.api.dependencies import get_store
from schoollink.infrastructure.database.store import DirectoryStore


@pytest.fixture
def app(store: DirectoryStore, directory) -> FastAPI:
    """Create the application wired to the seeded test store."""
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Create an async HTTP client for the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
