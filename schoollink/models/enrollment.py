# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment schemas.

Request/response schemas for assigning students to classes and reading
class occupancy.
"""

from datetime import date

from pydantic import BaseModel, Field


class Occupancy(BaseModel):
    """Current occupancy of a class.

    ``capacity`` is None when the class has no effective limit.
    """

    class_id: str
    count: int = Field(ge=0, description="Students currently assigned")
    capacity: int | None = Field(default=None, description="Effective limit, None if unlimited")

    @property
    def is_limited(self) -> bool:
        return self.capacity is not None

    @property
    def available(self) -> int | None:
        """Seats left, None if unlimited."""
        if self.capacity is None:
            return None
        return max(self.capacity - self.count, 0)

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and self.count >= self.capacity


class OccupancyResponse(BaseModel):
    """Occupancy as rendered by the API (capacity banner)."""

    class_id: str
    count: int
    capacity: int | None
    available: int | None
    is_full: bool

    @classmethod
    def from_occupancy(cls, occupancy: Occupancy) -> "OccupancyResponse":
        return cls(
            class_id=occupancy.class_id,
            count=occupancy.count,
            capacity=occupancy.capacity,
            available=occupancy.available,
            is_full=occupancy.is_full,
        )


class AssignmentResult(BaseModel):
    """Outcome of an assign or unassign call."""

    student_id: str
    class_id: str
    changed: bool = Field(description="False when the call was a no-op")
    previous_class_id: str | None = Field(
        default=None,
        description="Class the student was released from, if any",
    )
    current_class_id: str | None = None
    occupancy: Occupancy


class BulkAssignRequest(BaseModel):
    """Assign several students to one class."""

    student_ids: list[str] = Field(min_length=1, max_length=200)


class BulkAssignFailure(BaseModel):
    """Why one student of a bulk assignment was not assigned."""

    student_id: str
    error: str
    reason: str


class BulkAssignResponse(BaseModel):
    """Result of a bulk assignment."""

    class_id: str
    assigned: list[str] = Field(default_factory=list)
    failed: list[BulkAssignFailure] = Field(default_factory=list)
    occupancy: Occupancy

    @property
    def total_assigned(self) -> int:
        return len(self.assigned)

    @property
    def total_failed(self) -> int:
        return len(self.failed)


class StudentSummary(BaseModel):
    """Student as shown in class and roster lists."""

    id: str
    name: str
    surname: str
    full_name: str
    birth_date: date | None = None
    center_id: str
    course_id: str | None = None
    current_class_id: str | None = None
    is_active: bool = True
