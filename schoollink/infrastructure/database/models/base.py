# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column mixins."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from schoollink.utils.datetime import utc_now


def new_id() -> str:
    """Generate a new string primary key."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Declarative base for every directory table."""


class TimestampMixin:
    """Adds created_at / updated_at columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


class VersionedMixin:
    """Adds the optimistic concurrency version counter.

    The directory store increments it on every committed write and
    conditions updates on the value the record was read with.
    """

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
