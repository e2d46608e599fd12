# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Roster service for the class linking screens.

Builds the list of students shown when staff link students to a class:
every student of the scoped center or course, the ones already in the
scoped class, or the ones without any class yet.

Reads only; nothing here writes to the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import or_, select

from schoollink.domains.enrollment import EnrollmentService
from schoollink.infrastructure.database.models import Center, Course, SchoolClass, Student
from schoollink.infrastructure.database.store import DirectoryStore
from schoollink.models.common import RosterMode
from schoollink.models.enrollment import OccupancyResponse
from schoollink.models.roster import RosterEntry, RosterResponse, RosterScope
from schoollink.utils.text import student_sort_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedScope:
    """Scope with every implied level filled in."""

    center_id: str
    course_id: str | None = None
    class_id: str | None = None


class RosterService:
    """Service for scoped student rosters.

    Attributes:
        store: Directory store.
        enrollment: Enrollment service used for the occupancy banner.
    """

    def __init__(self, store: DirectoryStore, enrollment: EnrollmentService | None = None) -> None:
        self.store = store
        self.enrollment = enrollment or EnrollmentService(store)

    async def query_roster(
        self,
        scope: RosterScope,
        mode: RosterMode = RosterMode.ALL,
        search_text: str | None = None,
    ) -> list[RosterEntry]:
        """List the students in scope for a roster mode.

        Args:
            scope: Center, course and/or class to narrow to. A class
                implies its course and center; a course implies its center.
            mode: ALL candidates, LINKED to the scoped class, or PENDING
                (no class at all).
            search_text: Case-insensitive substring of the full name or id.

        Returns:
            Entries ordered by surname, name and id. Empty when the scope
            has no ids, or for LINKED without a class in scope.

        Raises:
            NotFoundError: If a scoped id does not exist.
        """
        if scope.is_empty:
            return []

        resolved = await self.resolve_scope(scope)
        if mode is RosterMode.LINKED and resolved.class_id is None:
            return []

        criteria = [Student.center_id == resolved.center_id, Student.is_active.is_(True)]
        if resolved.course_id is not None:
            course_classes = select(SchoolClass.id).where(SchoolClass.course_id == resolved.course_id)
            criteria.append(
                or_(
                    Student.course_id == resolved.course_id,
                    Student.current_class_id.in_(course_classes),
                )
            )
        if mode is RosterMode.LINKED:
            criteria.append(Student.current_class_id == resolved.class_id)
        elif mode is RosterMode.PENDING:
            criteria.append(Student.current_class_id.is_(None))

        students = await self.store.query(Student, *criteria)

        needle = (search_text or "").strip().casefold()
        if needle:
            students = [
                s for s in students
                if needle in s.full_name.casefold() or needle in s.id.casefold()
            ]
        students.sort(key=student_sort_key)

        logger.debug(
            "Roster query: center=%s, course=%s, class=%s, mode=%s, results=%d",
            resolved.center_id,
            resolved.course_id,
            resolved.class_id,
            mode.value,
            len(students),
        )

        return [to_roster_entry(s, resolved.class_id) for s in students]

    async def roster_view(
        self,
        scope: RosterScope,
        mode: RosterMode = RosterMode.ALL,
        search_text: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> RosterResponse:
        """Get a page of the roster with the scoped class occupancy.

        Args:
            scope: Roster scope.
            mode: Roster mode.
            search_text: Optional search text.
            limit: Maximum entries returned.
            offset: Entries to skip.

        Returns:
            Roster page. ``occupancy`` is set when a class is in scope.
        """
        entries = await self.query_roster(scope, mode, search_text)

        occupancy = None
        if scope.class_id:
            occupancy = OccupancyResponse.from_occupancy(
                await self.enrollment.get_occupancy(scope.class_id)
            )

        text = (search_text or "").strip() or None
        return RosterResponse(
            mode=mode,
            search_text=text,
            items=entries[offset:offset + limit],
            total=len(entries),
            limit=limit,
            offset=offset,
            occupancy=occupancy,
        )

    async def resolve_scope(self, scope: RosterScope) -> ResolvedScope:
        """Fill in the levels implied by the most specific id of a scope.

        The most specific id wins: a class overrides the course and center
        given alongside it.

        Raises:
            NotFoundError: If an id does not exist.
        """
        if scope.class_id:
            class_ = await self.store.get(SchoolClass, scope.class_id)
            course = await self.store.get(Course, class_.course_id)
            return ResolvedScope(center_id=course.center_id, course_id=course.id, class_id=class_.id)

        if scope.course_id:
            course = await self.store.get(Course, scope.course_id)
            return ResolvedScope(center_id=course.center_id, course_id=course.id)

        center = await self.store.get(Center, scope.center_id)
        return ResolvedScope(center_id=center.id)


def to_roster_entry(student: Student, class_id: str | None) -> RosterEntry:
    """Convert a student record to a roster entry for a scoped class."""
    return RosterEntry(
        id=student.id,
        name=student.name,
        surname=student.surname,
        full_name=student.full_name,
        current_class_id=student.current_class_id,
        is_in_class=class_id is not None and student.current_class_id == class_id,
        is_unassigned=student.current_class_id is None,
    )
