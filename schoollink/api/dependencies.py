# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the directory store
- Get service instances

Example:
    @router.get("/classes/{class_id}/occupancy")
    async def get_occupancy(
        class_id: str,
        service: EnrollmentService = Depends(get_enrollment_service),
    ):
        ...
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from schoollink.core.config import get_settings
from schoollink.domains.enrollment import EnrollmentService
from schoollink.domains.family_link import FamilyLinkService
from schoollink.domains.link_request import LinkRequestWorkflow
from schoollink.domains.roster import RosterService
from schoollink.infrastructure.database.connection import (
    close_database,
    get_sessionmaker,
    init_database,
)
from schoollink.infrastructure.database.store import DirectoryStore

logger = logging.getLogger(__name__)

# Directory store singleton; one instance so its write lock is shared
_store: DirectoryStore | None = None


async def init_db() -> None:
    """Initialize the directory database and store."""
    global _store
    settings = get_settings()

    await init_database(settings, create_tables=settings.db.is_sqlite)
    _store = DirectoryStore(
        get_sessionmaker(),
        timeout=settings.store.timeout_seconds,
        max_conflict_retries=settings.store.max_conflict_retries,
    )


async def close_db() -> None:
    """Close the directory database."""
    global _store
    _store = None
    await close_database()


def get_store() -> DirectoryStore:
    """Get the directory store singleton.

    Returns:
        DirectoryStore initialized at application startup.

    Raises:
        HTTPException: If not initialized.
    """
    if _store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Directory store not initialized",
        )
    return _store


# =========================================================================
# Service Dependencies
# =========================================================================


def get_enrollment_service(store: DirectoryStore = Depends(get_store)) -> EnrollmentService:
    """Get EnrollmentService instance."""
    settings = get_settings()
    return EnrollmentService(
        store,
        zero_capacity_unlimited=settings.enrollment.zero_capacity_unlimited,
    )


def get_link_request_workflow(store: DirectoryStore = Depends(get_store)) -> LinkRequestWorkflow:
    """Get LinkRequestWorkflow instance."""
    settings = get_settings()
    return LinkRequestWorkflow(store, history_page_size=settings.store.history_page_size)


def get_family_link_service(
    store: DirectoryStore = Depends(get_store),
    workflow: LinkRequestWorkflow = Depends(get_link_request_workflow),
) -> FamilyLinkService:
    """Get FamilyLinkService instance sharing the request's workflow."""
    return FamilyLinkService(store, workflow)


def get_roster_service(
    store: DirectoryStore = Depends(get_store),
    enrollment: EnrollmentService = Depends(get_enrollment_service),
) -> RosterService:
    """Get RosterService instance."""
    return RosterService(store, enrollment)


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

Store = Annotated[DirectoryStore, Depends(get_store)]
Enrollment = Annotated[EnrollmentService, Depends(get_enrollment_service)]
Workflow = Annotated[LinkRequestWorkflow, Depends(get_link_request_workflow)]
FamilyLinks = Annotated[FamilyLinkService, Depends(get_family_link_service)]
Rosters = Annotated[RosterService, Depends(get_roster_service)]
