# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory records: centers, courses, classes, students, family members.

Ownership is one-directional. A student points at its current class
through ``current_class_id``; classes keep no back-reference collection and
the class roster is always obtained by query.
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from schoollink.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    VersionedMixin,
    new_id,
)
from schoollink.models.common import RelationshipKind
from schoollink.utils.datetime import utc_now


class Center(TimestampMixin, VersionedMixin, Base):
    """School center, root of the scope hierarchy."""

    __tablename__ = "centers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Course(TimestampMixin, VersionedMixin, Base):
    """Course offered by a center for an academic year."""

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    center_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("centers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    min_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class SchoolClass(TimestampMixin, VersionedMixin, Base):
    """Class (group) within a course.

    A capacity of None means the class has no explicit limit.
    """

    __tablename__ = "classes"
    __entity_name__ = "Class"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    course_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("courses.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    room: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Student(TimestampMixin, VersionedMixin, Base):
    """Student, keyed by national identifier."""

    __tablename__ = "students"
    __table_args__ = (
        Index("ix_students_center_course", "center_id", "course_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    center_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("centers.id", ondelete="RESTRICT"), nullable=False
    )
    course_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("courses.id", ondelete="SET NULL"), nullable=True
    )
    current_class_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("classes.id", ondelete="SET NULL"), nullable=True, index=True
    )
    medical_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    observations: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def full_name(self) -> str:
        """Name followed by surname."""
        return f"{self.name} {self.surname}".strip()


class FamilyMember(TimestampMixin, VersionedMixin, Base):
    """Family user that can be linked to students."""

    __tablename__ = "family_members"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    relationship: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RelationshipKind.PARENT.value
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def full_name(self) -> str:
        """Name followed by surname."""
        return f"{self.name} {self.surname}".strip()


class StudentFamilyLink(TimestampMixin, VersionedMixin, Base):
    """Approved linkage between a student and a family member.

    Always created in the same transaction as the APPROVED decision on
    ``request_id``.
    """

    __tablename__ = "student_family_links"
    __table_args__ = (
        UniqueConstraint("student_id", "family_member_id", name="uq_student_family_link"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    family_member_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("family_members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relationship: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RelationshipKind.PARENT.value
    )
    request_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("link_requests.id", ondelete="SET NULL"), nullable=True
    )
    linked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
