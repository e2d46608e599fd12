# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student class assignments.

This module provides the EnrollmentService class for:
- Assigning a student to a class (moving them out of any previous class)
- Unassigning a student from a class
- Reading class occupancy against capacity
- Bulk assignment

A student holds at most one current class. Occupancy is always derived by
counting students whose current class is the class in question; it is
never stored. Every enrollment change writes the affected class rows too,
which bumps their version, so two assignments racing for the last seat of
a class cannot both commit.
"""

from __future__ import annotations

import logging

from schoollink.domains.errors import (
    CapacityExceededError,
    InactiveEntityError,
    SchoolLinkError,
    StoreUnavailableError,
)
from schoollink.infrastructure.database.models import SchoolClass, Student
from schoollink.infrastructure.database.store import DirectoryStore
from schoollink.models.enrollment import (
    AssignmentResult,
    BulkAssignFailure,
    BulkAssignResponse,
    Occupancy,
    StudentSummary,
)
from schoollink.utils.text import student_sort_key

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for managing student enrollments.

    Attributes:
        store: Directory store.
        zero_capacity_unlimited: Whether a capacity of 0 means "no limit".
    """

    def __init__(self, store: DirectoryStore, *, zero_capacity_unlimited: bool = True) -> None:
        """Initialize enrollment service.

        Args:
            store: Directory store used for every read and write.
            zero_capacity_unlimited: Treat capacity 0 as unlimited.
        """
        self.store = store
        self.zero_capacity_unlimited = zero_capacity_unlimited

    async def assign_student_to_class(self, student_id: str, class_id: str) -> AssignmentResult:
        """Assign a student to a class.

        Assigning a student to the class they are already in is a no-op.
        A student enrolled elsewhere is released from that class in the
        same transaction.

        Args:
            student_id: Student identifier.
            class_id: Target class identifier.

        Returns:
            Assignment result with the resulting occupancy.

        Raises:
            NotFoundError: If the student or class does not exist.
            InactiveEntityError: If the student or class is inactive.
            CapacityExceededError: If the class is full.
            ConcurrentModificationError: If conflicts persist after retries.
        """

        async def attempt() -> AssignmentResult:
            student = await self.store.get(Student, student_id)
            # Read the class before counting; the count is only trusted
            # while the class version is unchanged.
            class_ = await self.store.get(SchoolClass, class_id)
            self._ensure_active(student, "Student")
            self._ensure_active(class_, "Class")

            count = await self._count_students(class_id)
            capacity = self.effective_capacity(class_)

            if student.current_class_id == class_id:
                return AssignmentResult(
                    student_id=student_id,
                    class_id=class_id,
                    changed=False,
                    current_class_id=class_id,
                    occupancy=Occupancy(class_id=class_id, count=count, capacity=capacity),
                )

            if capacity is not None and count >= capacity:
                logger.info(
                    "Class full: class=%s, capacity=%d, student=%s",
                    class_id,
                    capacity,
                    student_id,
                )
                raise CapacityExceededError(class_id, capacity, count)

            writes: list[SchoolClass | Student] = [student, class_]
            previous_class_id = student.current_class_id
            if previous_class_id is not None:
                previous_class = await self.store.find(SchoolClass, previous_class_id)
                if previous_class is not None:
                    writes.append(previous_class)

            student.current_class_id = class_id
            student.course_id = class_.course_id
            await self.store.transact(writes=writes)

            logger.info(
                "Assigned student: student=%s, class=%s, previous=%s",
                student_id,
                class_id,
                previous_class_id,
            )

            return AssignmentResult(
                student_id=student_id,
                class_id=class_id,
                changed=True,
                previous_class_id=previous_class_id,
                current_class_id=class_id,
                occupancy=Occupancy(class_id=class_id, count=count + 1, capacity=capacity),
            )

        return await self.store.retrying(attempt, operation_name="assign_student_to_class")

    async def unassign_student_from_class(self, student_id: str, class_id: str) -> AssignmentResult:
        """Remove a student from a class.

        A student that is not currently in the class is left untouched and
        the call still succeeds.

        Args:
            student_id: Student identifier.
            class_id: Class identifier.

        Returns:
            Assignment result with the resulting occupancy.

        Raises:
            NotFoundError: If the student or class does not exist.
            ConcurrentModificationError: If conflicts persist after retries.
        """

        async def attempt() -> AssignmentResult:
            student = await self.store.get(Student, student_id)
            class_ = await self.store.get(SchoolClass, class_id)
            capacity = self.effective_capacity(class_)

            if student.current_class_id != class_id:
                count = await self._count_students(class_id)
                return AssignmentResult(
                    student_id=student_id,
                    class_id=class_id,
                    changed=False,
                    current_class_id=student.current_class_id,
                    occupancy=Occupancy(class_id=class_id, count=count, capacity=capacity),
                )

            count = await self._count_students(class_id)
            student.current_class_id = None
            await self.store.transact(writes=[student, class_])

            logger.info("Unassigned student: student=%s, class=%s", student_id, class_id)

            return AssignmentResult(
                student_id=student_id,
                class_id=class_id,
                changed=True,
                previous_class_id=class_id,
                current_class_id=None,
                occupancy=Occupancy(class_id=class_id, count=max(count - 1, 0), capacity=capacity),
            )

        return await self.store.retrying(attempt, operation_name="unassign_student_from_class")

    async def get_occupancy(self, class_id: str) -> Occupancy:
        """Get the current occupancy of a class.

        Args:
            class_id: Class identifier.

        Returns:
            Student count and effective capacity.

        Raises:
            NotFoundError: If the class does not exist.
        """
        class_ = await self.store.get(SchoolClass, class_id)
        count = await self._count_students(class_id)
        return Occupancy(class_id=class_id, count=count, capacity=self.effective_capacity(class_))

    async def bulk_assign(self, class_id: str, student_ids: list[str]) -> BulkAssignResponse:
        """Assign several students to a class, one transaction each.

        Students that cannot be assigned are reported with the error code
        instead of aborting the batch. A store outage aborts the batch.

        Args:
            class_id: Target class identifier.
            student_ids: Students to assign, in order.

        Returns:
            Assigned ids, failures and the final occupancy.

        Raises:
            NotFoundError: If the class does not exist.
            StoreUnavailableError: If the store becomes unavailable.
        """
        await self.store.get(SchoolClass, class_id)

        assigned: list[str] = []
        failed: list[BulkAssignFailure] = []

        for student_id in dict.fromkeys(student_ids):
            try:
                await self.assign_student_to_class(student_id, class_id)
                assigned.append(student_id)
            except StoreUnavailableError:
                raise
            except SchoolLinkError as e:
                failed.append(BulkAssignFailure(student_id=student_id, error=e.code, reason=e.message))

        logger.info(
            "Bulk assignment: class=%s, assigned=%d, failed=%d",
            class_id,
            len(assigned),
            len(failed),
        )

        return BulkAssignResponse(
            class_id=class_id,
            assigned=assigned,
            failed=failed,
            occupancy=await self.get_occupancy(class_id),
        )

    async def list_class_students(self, class_id: str) -> list[StudentSummary]:
        """List the students currently assigned to a class.

        Raises:
            NotFoundError: If the class does not exist.
        """
        await self.store.get(SchoolClass, class_id)
        students = await self.store.query(Student, Student.current_class_id == class_id)
        return [to_student_summary(s) for s in sorted(students, key=student_sort_key)]

    def effective_capacity(self, class_: SchoolClass) -> int | None:
        """Capacity limit of a class, None when unlimited."""
        if class_.capacity is None:
            return None
        if class_.capacity == 0 and self.zero_capacity_unlimited:
            return None
        return class_.capacity

    async def _count_students(self, class_id: str) -> int:
        return await self.store.count(Student, Student.current_class_id == class_id)

    @staticmethod
    def _ensure_active(record: SchoolClass | Student, entity: str) -> None:
        if not record.is_active:
            raise InactiveEntityError(entity, record.id)


def to_student_summary(student: Student) -> StudentSummary:
    """Convert a student record to its summary DTO."""
    return StudentSummary(
        id=student.id,
        name=student.name,
        surname=student.surname,
        full_name=student.full_name,
        birth_date=student.birth_date,
        center_id=student.center_id,
        course_id=student.course_id,
        current_class_id=student.current_class_id,
        is_active=student.is_active,
    )
