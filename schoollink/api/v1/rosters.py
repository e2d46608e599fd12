# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster API endpoints.

This module provides the roster listing used by the class linking screens:
- GET / - Students in a center/course/class scope, filtered by mode and text
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from schoollink.api.dependencies import Rosters
from schoollink.models.common import RosterMode
from schoollink.models.roster import RosterResponse, RosterScope

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=RosterResponse,
    summary="Query roster",
    description=(
        "List students in scope. LINKED lists the students of the scoped class, "
        "PENDING the students without a class."
    ),
)
async def query_roster(
    service: Rosters,
    center_id: str | None = Query(None, description="Center scope"),
    course_id: str | None = Query(None, description="Course scope"),
    class_id: str | None = Query(None, description="Class scope"),
    mode: RosterMode = Query(RosterMode.ALL, description="Roster mode"),
    q: str | None = Query(None, max_length=200, description="Search by name or id"),
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> RosterResponse:
    """Query the roster for a scope.

    Args:
        service: Roster service.
        center_id: Center scope.
        course_id: Course scope.
        class_id: Class scope.
        mode: ALL, LINKED or PENDING.
        q: Search text.
        limit: Page size.
        offset: Page offset.

    Returns:
        Roster page with the class occupancy when a class is in scope.
    """
    scope = RosterScope(center_id=center_id, course_id=course_id, class_id=class_id)
    return await service.roster_view(scope, mode, q, limit=limit, offset=offset)
