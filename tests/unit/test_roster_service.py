# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the roster service."""

import pytest

from schoollink.domains.errors import NotFoundError
from schoollink.infrastructure.database.models import Student
from schoollink.models.common import RosterMode
from schoollink.models.roster import RosterScope


def names(entries) -> list[str]:
    return [e.full_name for e in entries]


class TestRosterScope:
    """Tests for scope resolution."""

    @pytest.mark.asyncio
    async def test_empty_scope_returns_nothing(self, roster_service, directory):
        """Test a scope without ids yields an empty roster."""
        assert await roster_service.query_roster(RosterScope()) == []

    @pytest.mark.asyncio
    async def test_class_implies_course_and_center(self, roster_service, directory):
        """Test a class scope resolves its course and center."""
        resolved = await roster_service.resolve_scope(RosterScope(class_id=directory.class_3a))

        assert resolved.center_id == directory.center_norte
        assert resolved.course_id == directory.course_3y
        assert resolved.class_id == directory.class_3a

    @pytest.mark.asyncio
    async def test_course_implies_center(self, roster_service, directory):
        """Test a course scope resolves its center."""
        resolved = await roster_service.resolve_scope(RosterScope(course_id=directory.course_4y))

        assert resolved.center_id == directory.center_norte
        assert resolved.class_id is None

    @pytest.mark.asyncio
    async def test_unknown_ids_raise(self, roster_service, directory):
        """Test unknown scoped ids raise NotFoundError."""
        for scope in (
            RosterScope(center_id="center-missing"),
            RosterScope(course_id="course-missing"),
            RosterScope(class_id="class-missing"),
        ):
            with pytest.raises(NotFoundError):
                await roster_service.query_roster(scope)


class TestRosterModes:
    """Tests for ALL, LINKED and PENDING rosters."""

    @pytest.mark.asyncio
    async def test_center_roster_all(self, roster_service, directory):
        """Test the center roster lists active students ordered by surname."""
        entries = await roster_service.query_roster(RosterScope(center_id=directory.center_norte))

        assert names(entries) == [
            "Ane Agirre",
            "Iker Etxeberria",
            "María García",
            "Lucía Garmendia",
            "Jon Pérez",
        ]

    @pytest.mark.asyncio
    async def test_course_roster_all(self, roster_service, directory):
        """Test the course roster excludes other courses of the center."""
        entries = await roster_service.query_roster(RosterScope(course_id=directory.course_3y))

        assert names(entries) == ["Ane Agirre", "Iker Etxeberria", "María García", "Jon Pérez"]

    @pytest.mark.asyncio
    async def test_linked_lists_class_members(self, roster_service, enrollment_service, directory):
        """Test LINKED lists only the students of the scoped class."""
        await enrollment_service.assign_student_to_class(directory.jon, directory.class_3a)
        await enrollment_service.assign_student_to_class(directory.maria, directory.class_3a)
        await enrollment_service.assign_student_to_class(directory.ane, directory.class_3b)

        entries = await roster_service.query_roster(
            RosterScope(class_id=directory.class_3a),
            RosterMode.LINKED,
        )

        assert names(entries) == ["María García", "Jon Pérez"]
        assert all(e.is_in_class and not e.is_unassigned for e in entries)

    @pytest.mark.asyncio
    async def test_linked_without_class_is_empty(self, roster_service, enrollment_service, directory):
        """Test LINKED needs a class in scope."""
        await enrollment_service.assign_student_to_class(directory.jon, directory.class_3a)

        entries = await roster_service.query_roster(
            RosterScope(course_id=directory.course_3y),
            RosterMode.LINKED,
        )

        assert entries == []

    @pytest.mark.asyncio
    async def test_pending_lists_unassigned(self, roster_service, enrollment_service, directory):
        """Test PENDING excludes students assigned to any class."""
        await enrollment_service.assign_student_to_class(directory.jon, directory.class_3a)
        await enrollment_service.assign_student_to_class(directory.ane, directory.class_3b)

        entries = await roster_service.query_roster(
            RosterScope(class_id=directory.class_3a),
            RosterMode.PENDING,
        )

        assert names(entries) == ["Iker Etxeberria", "María García"]
        assert all(e.is_unassigned and not e.is_in_class for e in entries)

    @pytest.mark.asyncio
    async def test_all_flags_membership(self, roster_service, enrollment_service, directory):
        """Test ALL entries carry class membership flags."""
        await enrollment_service.assign_student_to_class(directory.jon, directory.class_3a)
        await enrollment_service.assign_student_to_class(directory.ane, directory.class_3b)

        entries = await roster_service.query_roster(RosterScope(class_id=directory.class_3a))
        flags = {e.full_name: (e.is_in_class, e.is_unassigned) for e in entries}

        assert flags == {
            "Ane Agirre": (False, False),
            "Iker Etxeberria": (False, True),
            "María García": (False, True),
            "Jon Pérez": (True, False),
        }


    @pytest.mark.asyncio
    async def test_order_ignores_accents_and_case(self, roster_service, store, directory):
        """Test an accented or lowercase surname sorts with its plain letter."""
        await store.transact(
            writes=[
                Student(
                    id="88888888H",
                    name="Oier",
                    surname="Álvarez",
                    center_id=directory.center_norte,
                    course_id=directory.course_3y,
                ),
                Student(
                    id="99999999J",
                    name="Mikel",
                    surname="zubiri",
                    center_id=directory.center_norte,
                    course_id=directory.course_3y,
                ),
            ]
        )

        entries = await roster_service.query_roster(RosterScope(course_id=directory.course_3y))

        assert names(entries) == [
            "Ane Agirre",
            "Oier Álvarez",
            "Iker Etxeberria",
            "María García",
            "Jon Pérez",
            "Mikel zubiri",
        ]


class TestRosterSearch:
    """Tests for roster search text."""

    @pytest.mark.asyncio
    async def test_pending_search_by_surname(self, roster_service, directory):
        """Test searching 'gar' among pending students of a class scope."""
        entries = await roster_service.query_roster(
            RosterScope(class_id=directory.class_3a),
            RosterMode.PENDING,
            search_text="gar",
        )

        assert names(entries) == ["María García"]

    @pytest.mark.asyncio
    async def test_search_is_trimmed_and_case_insensitive(self, roster_service, directory):
        """Test search ignores case and surrounding whitespace."""
        entries = await roster_service.query_roster(
            RosterScope(center_id=directory.center_norte),
            search_text="  MARÍA GAR ",
        )

        assert names(entries) == ["María García"]

    @pytest.mark.asyncio
    async def test_search_by_id(self, roster_service, directory):
        """Test search matches the student id."""
        entries = await roster_service.query_roster(
            RosterScope(center_id=directory.center_norte),
            search_text="2222",
        )

        assert [e.id for e in entries] == [directory.jon]

    @pytest.mark.asyncio
    async def test_blank_search_means_no_filter(self, roster_service, directory):
        """Test whitespace-only search text is ignored."""
        entries = await roster_service.query_roster(
            RosterScope(course_id=directory.course_3y),
            search_text="   ",
        )

        assert len(entries) == 4


class TestRosterView:
    """Tests for the paginated roster view."""

    @pytest.mark.asyncio
    async def test_view_paginates_and_reports_occupancy(self, roster_service, enrollment_service, directory):
        """Test pagination and the class occupancy banner."""
        await enrollment_service.assign_student_to_class(directory.jon, directory.class_3a)

        view = await roster_service.roster_view(
            RosterScope(class_id=directory.class_3a),
            RosterMode.ALL,
            limit=2,
            offset=1,
        )

        assert view.total == 4
        assert names(view.items) == ["Iker Etxeberria", "María García"]
        assert view.occupancy is not None
        assert view.occupancy.count == 1
        assert view.occupancy.capacity == 2
        assert view.occupancy.available == 1

    @pytest.mark.asyncio
    async def test_view_without_class_has_no_occupancy(self, roster_service, directory):
        """Test no occupancy banner without a class in scope."""
        view = await roster_service.roster_view(RosterScope(center_id=directory.center_norte), search_text=" ")

        assert view.occupancy is None
        assert view.search_text is None
        assert view.total == 5
