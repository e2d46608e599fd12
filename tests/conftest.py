# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- A throwaway SQLite directory database per test
- A seeded directory (centers, courses, classes, students, family members)
- Service instances wired to the test store
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from schoollink.core.config import clear_settings_cache
from schoollink.domains.enrollment import EnrollmentService
from schoollink.domains.family_link import FamilyLinkService
from schoollink.domains.link_request import LinkRequestWorkflow
from schoollink.domains.roster import RosterService
from schoollink.infrastructure.database.connection import (
    build_engine,
    build_sessionmaker,
    create_schema,
)
from schoollink.infrastructure.database.models import (
    Center,
    Course,
    FamilyMember,
    SchoolClass,
    Student,
)
from schoollink.infrastructure.database.store import DirectoryStore


# =============================================================================
# Seed Data
# =============================================================================


@dataclass(frozen=True)
class Directory:
    """Identifiers of the seeded directory."""

    center_norte: str = "center-norte"
    center_sur: str = "center-sur"

    course_3y: str = "course-3y"
    course_4y: str = "course-4y"
    course_sur: str = "course-sur"

    # course_3y classes
    class_3a: str = "class-3a"  # capacity 2
    class_3b: str = "class-3b"  # no capacity
    class_3z: str = "class-3z"  # capacity 0
    class_3x: str = "class-3x"  # capacity 1
    class_old: str = "class-old"  # inactive
    # course_4y / course_sur classes
    class_4a: str = "class-4a"
    class_sur: str = "class-sur"

    # course_3y students
    maria: str = "11111111A"  # María García
    jon: str = "22222222B"  # Jon Pérez
    ane: str = "33333333C"  # Ane Agirre
    iker: str = "44444444D"  # Iker Etxeberria
    pedro: str = "66666666F"  # Pedro Gómez, inactive
    # other courses
    lucia: str = "55555555E"  # Lucía Garmendia, course_4y
    sara: str = "77777777G"  # Sara Ruiz, center_sur

    carmen: str = "family-carmen"  # Carmen García, mother
    jose: str = "family-jose"  # José Pérez, father
    retired: str = "family-retired"  # inactive


async def seed_directory(store: DirectoryStore) -> Directory:
    """Insert the seeded directory through the store."""
    d = Directory()
    records = [
        Center(id=d.center_norte, name="Centro Norte"),
        Center(id=d.center_sur, name="Centro Sur"),
        Course(id=d.course_3y, center_id=d.center_norte, name="Infantil 3 años", academic_year="2025-2026"),
        Course(id=d.course_4y, center_id=d.center_norte, name="Infantil 4 años", academic_year="2025-2026"),
        Course(id=d.course_sur, center_id=d.center_sur, name="Infantil 3 años", academic_year="2025-2026"),
        SchoolClass(id=d.class_3a, course_id=d.course_3y, name="3A", capacity=2),
        SchoolClass(id=d.class_3b, course_id=d.course_3y, name="3B", capacity=None),
        SchoolClass(id=d.class_3z, course_id=d.course_3y, name="3Z", capacity=0),
        SchoolClass(id=d.class_3x, course_id=d.course_3y, name="3X", capacity=1),
        SchoolClass(id=d.class_old, course_id=d.course_3y, name="Old", capacity=10, is_active=False),
        SchoolClass(id=d.class_4a, course_id=d.course_4y, name="4A", capacity=20),
        SchoolClass(id=d.class_sur, course_id=d.course_sur, name="Sur A", capacity=10),
        Student(id=d.maria, name="María", surname="García", center_id=d.center_norte, course_id=d.course_3y),
        Student(id=d.jon, name="Jon", surname="Pérez", center_id=d.center_norte, course_id=d.course_3y),
        Student(id=d.ane, name="Ane", surname="Agirre", center_id=d.center_norte, course_id=d.course_3y),
        Student(id=d.iker, name="Iker", surname="Etxeberria", center_id=d.center_norte, course_id=d.course_3y),
        Student(
            id=d.pedro,
            name="Pedro",
            surname="Gómez",
            center_id=d.center_norte,
            course_id=d.course_3y,
            is_active=False,
        ),
        Student(id=d.lucia, name="Lucía", surname="Garmendia", center_id=d.center_norte, course_id=d.course_4y),
        Student(id=d.sara, name="Sara", surname="Ruiz", center_id=d.center_sur, course_id=d.course_sur),
        FamilyMember(id=d.carmen, name="Carmen", surname="García", relationship="mother"),
        FamilyMember(id=d.jose, name="José", surname="Pérez", relationship="father"),
        FamilyMember(id=d.retired, name="Ramón", surname="Sanz", is_active=False),
    ]
    await store.transact(writes=records)
    return d


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> None:
    """Never leak cached settings between tests."""
    clear_settings_cache()


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """Create a fresh SQLite database with the directory schema."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'schoollink.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine: AsyncEngine) -> DirectoryStore:
    """Create a directory store over the test database."""
    return DirectoryStore(build_sessionmaker(engine), timeout=5.0, max_conflict_retries=3)


@pytest.fixture
async def directory(store: DirectoryStore) -> Directory:
    """Seed the test database."""
    return await seed_directory(store)


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def enrollment_service(store: DirectoryStore) -> EnrollmentService:
    """Create enrollment service with 0-capacity meaning unlimited."""
    return EnrollmentService(store)


@pytest.fixture
def workflow(store: DirectoryStore) -> LinkRequestWorkflow:
    """Create link request workflow with a small history page size."""
    return LinkRequestWorkflow(store, history_page_size=2)


@pytest.fixture
def family_link_service(store: DirectoryStore, workflow: LinkRequestWorkflow) -> FamilyLinkService:
    """Create family link service sharing the workflow."""
    return FamilyLinkService(store, workflow)


@pytest.fixture
def roster_service(store: DirectoryStore, enrollment_service: EnrollmentService) -> RosterService:
    """Create roster service."""
    return RosterService(store, enrollment_service)
