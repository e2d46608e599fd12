# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Link request records."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from schoollink.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    VersionedMixin,
    new_id,
)
from schoollink.models.common import LinkRequestState, RelationshipKind
from schoollink.utils.datetime import utc_now

_PENDING_ONLY = text("state = 'PENDING'")


class LinkRequest(TimestampMixin, VersionedMixin, Base):
    """Request from a family member to be linked to a student.

    At most one PENDING request may exist per (student, family member); the
    partial unique index enforces it at the storage level.
    """

    __tablename__ = "link_requests"
    __table_args__ = (
        Index(
            "uq_link_requests_pending_pair",
            "student_id",
            "family_member_id",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
        Index("ix_link_requests_requested", "requested_at", "id"),
        Index("ix_link_requests_center_state", "center_id", "state"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    family_member_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("family_members.id", ondelete="CASCADE"), nullable=False, index=True
    )
    center_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    relationship: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RelationshipKind.PARENT.value
    )
    state: Mapped[str] = mapped_column(
        String(16), nullable=False, default=LinkRequestState.PENDING.value
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decider_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    decision_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def is_pending(self) -> bool:
        """Whether the request still awaits a decision."""
        return self.state == LinkRequestState.PENDING.value
