# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SchoolLink.

This package contains domain services that encapsulate business logic.
Each domain module provides a service that orchestrates reads and atomic
writes against the directory store.

Domains:
    enrollment: Student class assignment and occupancy.
    link_request: Family link request workflow and audit history.
    family_link: Approved student-family linkages.
    roster: Scoped student listings for the linking screens.
"""
