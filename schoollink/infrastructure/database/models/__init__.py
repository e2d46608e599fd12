# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""ORM models for the directory database."""

from schoollink.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    VersionedMixin,
    new_id,
)
from schoollink.infrastructure.database.models.directory import (
    Center,
    Course,
    FamilyMember,
    SchoolClass,
    Student,
    StudentFamilyLink,
)
from schoollink.infrastructure.database.models.linking import LinkRequest

__all__ = [
    "Base",
    "TimestampMixin",
    "VersionedMixin",
    "new_id",
    "Center",
    "Course",
    "SchoolClass",
    "Student",
    "FamilyMember",
    "StudentFamilyLink",
    "LinkRequest",
]
