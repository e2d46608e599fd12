# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class enrollment API endpoints.

This module provides endpoints for assigning students to classes:
- POST /{class_id}/students/{student_id} - Assign a student
- DELETE /{class_id}/students/{student_id} - Unassign a student
- POST /{class_id}/students - Bulk assign students
- GET /{class_id}/students - List assigned students
- GET /{class_id}/occupancy - Current occupancy against capacity
"""

import logging

from fastapi import APIRouter

from schoollink.api.dependencies import Enrollment
from schoollink.models.enrollment import (
    AssignmentResult,
    BulkAssignRequest,
    BulkAssignResponse,
    OccupancyResponse,
    StudentSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{class_id}/students/{student_id}",
    response_model=AssignmentResult,
    summary="Assign student to class",
    description="Assign a student to a class, releasing any previous class. No-op if already assigned.",
)
async def assign_student(
    class_id: str,
    student_id: str,
    service: Enrollment,
) -> AssignmentResult:
    """Assign a student to a class.

    Args:
        class_id: Target class.
        student_id: Student to assign.
        service: Enrollment service.

    Returns:
        Assignment result with occupancy.
    """
    return await service.assign_student_to_class(student_id, class_id)


@router.delete(
    "/{class_id}/students/{student_id}",
    response_model=AssignmentResult,
    summary="Unassign student from class",
    description="Remove a student from a class. No-op if the student is not in it.",
)
async def unassign_student(
    class_id: str,
    student_id: str,
    service: Enrollment,
) -> AssignmentResult:
    """Unassign a student from a class."""
    return await service.unassign_student_from_class(student_id, class_id)


@router.post(
    "/{class_id}/students",
    response_model=BulkAssignResponse,
    summary="Bulk assign students",
    description="Assign several students to a class, reporting per-student failures.",
)
async def bulk_assign_students(
    class_id: str,
    data: BulkAssignRequest,
    service: Enrollment,
) -> BulkAssignResponse:
    """Assign several students to a class."""
    return await service.bulk_assign(class_id, data.student_ids)


@router.get(
    "/{class_id}/students",
    response_model=list[StudentSummary],
    summary="List class students",
)
async def list_class_students(
    class_id: str,
    service: Enrollment,
) -> list[StudentSummary]:
    """List the students currently assigned to a class."""
    return await service.list_class_students(class_id)


@router.get(
    "/{class_id}/occupancy",
    response_model=OccupancyResponse,
    summary="Get class occupancy",
)
async def get_occupancy(
    class_id: str,
    service: Enrollment,
) -> OccupancyResponse:
    """Get the occupancy of a class against its capacity."""
    return OccupancyResponse.from_occupancy(await service.get_occupancy(class_id))
