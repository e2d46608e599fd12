# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Link request API endpoints.

This module provides endpoints for the family link request workflow:
- POST / - Create a link request
- POST /{request_id}/decision - Approve or reject a request
- GET /pending - Pending requests, oldest first
- GET /history - Audit history, newest first
- GET /{request_id} - Get a request
- GET /family-members/{family_member_id} - Requests of a family member

Approvals go through the family link service so the linkage is written in
the same transaction as the decision.
"""

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from schoollink.api.dependencies import FamilyLinks, Workflow
from schoollink.models.common import LinkRequestState
from schoollink.models.family_link import DecisionOutcome
from schoollink.models.link_request import (
    CreateLinkRequestRequest,
    DecisionRequest,
    HistoryFilter,
    LinkRequestListResponse,
    LinkRequestResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=LinkRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create link request",
    description="Ask for a family member to be linked to a student.",
)
async def create_link_request(
    data: CreateLinkRequestRequest,
    workflow: Workflow,
) -> LinkRequestResponse:
    """Create a PENDING link request.

    Args:
        data: Student, family member and relationship.
        workflow: Link request workflow.

    Returns:
        The created request.
    """
    return await workflow.create_link_request(
        data.student_id,
        data.family_member_id,
        data.relationship,
    )


@router.post(
    "/{request_id}/decision",
    response_model=DecisionOutcome,
    summary="Decide link request",
    description="Approve or reject a pending link request.",
)
async def decide_link_request(
    request_id: str,
    data: DecisionRequest,
    service: FamilyLinks,
) -> DecisionOutcome:
    """Approve or reject a pending request."""
    return await service.decide(request_id, data.decision, data.decider_id, data.notes)


@router.get(
    "/pending",
    response_model=LinkRequestListResponse,
    summary="List pending link requests",
)
async def list_pending(
    workflow: Workflow,
    center_id: str | None = Query(None, description="Filter by center"),
) -> LinkRequestListResponse:
    """List pending requests, oldest first."""
    items = await workflow.list_pending(center_id)
    return LinkRequestListResponse(items=items, total=len(items))


@router.get(
    "/history",
    response_model=LinkRequestListResponse,
    summary="Link request history",
    description="Audit history of link requests, newest first.",
)
async def list_history(
    workflow: Workflow,
    state: LinkRequestState | None = Query(None, description="Filter by state"),
    center_id: str | None = Query(None, description="Filter by center"),
    date_from: datetime | None = Query(None, description="Requested at or after"),
    date_to: datetime | None = Query(None, description="Requested before"),
    decided_only: bool = Query(False, description="Only approved or rejected requests"),
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> LinkRequestListResponse:
    """Get the audit history of link requests."""
    try:
        history_filter = HistoryFilter(
            state=state,
            center_id=center_id,
            date_from=date_from,
            date_to=date_to,
            decided_only=decided_only,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.errors(include_url=False, include_context=False),
        ) from e

    history = workflow.list_history(history_filter)
    items = await history.to_list(limit=limit)
    return LinkRequestListResponse(items=items, total=len(items))


@router.get(
    "/family-members/{family_member_id}",
    response_model=LinkRequestListResponse,
    summary="List requests of a family member",
)
async def list_for_family_member(
    family_member_id: str,
    workflow: Workflow,
) -> LinkRequestListResponse:
    """List every request made by a family member, newest first."""
    items = await workflow.list_for_family_member(family_member_id)
    return LinkRequestListResponse(items=items, total=len(items))


@router.get(
    "/{request_id}",
    response_model=LinkRequestResponse,
    summary="Get link request",
)
async def get_link_request(
    request_id: str,
    workflow: Workflow,
) -> LinkRequestResponse:
    """Get a link request by id."""
    return await workflow.get_request(request_id)
