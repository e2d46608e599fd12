# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    classes: Class enrollment endpoints (assign, unassign, occupancy).
    link_requests: Family link request workflow endpoints.
    family_links: Approved student-family linkage endpoints.
    rosters: Roster query endpoint for the linking screens.
"""

from fastapi import APIRouter

from schoollink.api.v1 import classes, family_links, link_requests, rosters

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(classes.router, prefix="/classes", tags=["Classes"])
router.include_router(link_requests.router, prefix="/link-requests", tags=["Link Requests"])
router.include_router(family_links.router, prefix="/family-links", tags=["Family Links"])
router.include_router(rosters.router, prefix="/rosters", tags=["Rosters"])

__all__ = ["router"]
