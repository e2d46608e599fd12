# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for SchoolLink.

Modules:
    database: SQLAlchemy async connection handling, ORM models and the
        directory store used by every domain service.
"""
