# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student-family linkage API endpoints.

This module provides endpoints for approved linkages:
- GET /students/{student_id} - Family members linked to a student
- GET /family-members/{family_member_id} - Students linked to a family member
- DELETE /students/{student_id}/family-members/{family_member_id} - Unlink
"""

import logging

from fastapi import APIRouter, status

from schoollink.api.dependencies import FamilyLinks
from schoollink.models.family_link import FamilyLinkResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/students/{student_id}",
    response_model=list[FamilyLinkResponse],
    summary="List family members of a student",
)
async def list_family_members(
    student_id: str,
    service: FamilyLinks,
) -> list[FamilyLinkResponse]:
    """List the linkages of a student."""
    return await service.list_family_members(student_id)


@router.get(
    "/family-members/{family_member_id}",
    response_model=list[FamilyLinkResponse],
    summary="List students of a family member",
)
async def list_students(
    family_member_id: str,
    service: FamilyLinks,
) -> list[FamilyLinkResponse]:
    """List the linkages of a family member."""
    return await service.list_students(family_member_id)


@router.delete(
    "/students/{student_id}/family-members/{family_member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unlink family member",
    description="Remove a linkage. The approved request stays in the history.",
)
async def unlink(
    student_id: str,
    family_member_id: str,
    service: FamilyLinks,
) -> None:
    """Remove the linkage between a student and a family member."""
    await service.unlink(student_id, family_member_id)
