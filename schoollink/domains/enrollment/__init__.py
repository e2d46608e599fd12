# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides student enrollment management functionality including:
- Student assignment to classes
- Unassignment from a class
- Bulk assignment
- Class occupancy against capacity
"""

from schoollink.domains.enrollment.service import EnrollmentService, to_student_summary

__all__ = [
    "EnrollmentService",
    "to_student_summary",
]
