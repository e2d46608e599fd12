# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the directory.

This package provides:
- SQLAlchemy async engine and sessionmaker lifecycle
- ORM models for centers, courses, classes, students, family members,
  link requests and linkages
- DirectoryStore, the versioned data-access interface used by services

Example:
    from schoollink.infrastructure.database import (
        DirectoryStore,
        get_sessionmaker,
        init_database,
    )

    await init_database(settings)
    store = DirectoryStore(get_sessionmaker())
"""

from schoollink.infrastructure.database.connection import (
    DatabaseError,
    build_engine,
    build_sessionmaker,
    close_database,
    create_schema,
    get_sessionmaker,
    init_database,
)
from schoollink.infrastructure.database.store import ConflictError, DirectoryStore

__all__ = [
    # Connection
    "DatabaseError",
    "build_engine",
    "build_sessionmaker",
    "create_schema",
    "init_database",
    "close_database",
    "get_sessionmaker",
    # Store
    "DirectoryStore",
    "ConflictError",
]
