# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster query schemas."""

from pydantic import BaseModel, Field

from schoollink.models.common import RosterMode
from schoollink.models.enrollment import OccupancyResponse


class RosterScope(BaseModel):
    """Center/course/class filter narrowing the roster.

    Any level may be omitted; a class implies its course and center.
    """

    center_id: str | None = None
    course_id: str | None = None
    class_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.center_id or self.course_id or self.class_id)


class RosterEntry(BaseModel):
    """One student row of a roster with its linkage flags."""

    id: str
    name: str
    surname: str
    full_name: str
    current_class_id: str | None = None
    is_in_class: bool = Field(description="Assigned to the class in scope")
    is_unassigned: bool = Field(description="Has no current class")


class RosterResponse(BaseModel):
    """Paginated roster with the occupancy banner of the scoped class."""

    mode: RosterMode
    search_text: str | None = None
    items: list[RosterEntry]
    total: int
    limit: int
    offset: int
    occupancy: OccupancyResponse | None = None
