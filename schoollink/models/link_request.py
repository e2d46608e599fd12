# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Link request schemas.

Request/response schemas for the family-to-student link request workflow
and its audit history.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from schoollink.models.common import Decision, LinkRequestState, RelationshipKind
from schoollink.utils.datetime import ensure_utc


class CreateLinkRequestRequest(BaseModel):
    """Request a link between a family member and a student."""

    student_id: str = Field(min_length=1, max_length=64)
    family_member_id: str = Field(min_length=1, max_length=64)
    relationship: RelationshipKind | None = Field(
        default=None,
        description="Defaults to the family member's own relationship kind",
    )


class DecisionRequest(BaseModel):
    """Decide a pending link request."""

    decision: Decision
    decider_id: str = Field(min_length=1, max_length=64)
    notes: str | None = Field(default=None, max_length=2000)


class LinkRequestResponse(BaseModel):
    """Link request as returned to callers."""

    id: str
    student_id: str
    family_member_id: str
    center_id: str | None = None
    relationship: RelationshipKind
    state: LinkRequestState
    requested_at: datetime
    decided_at: datetime | None = None
    decider_id: str | None = None
    decision_notes: str | None = None


class LinkRequestListResponse(BaseModel):
    """List of link requests."""

    items: list[LinkRequestResponse]
    total: int


class HistoryFilter(BaseModel):
    """Filter for the link request audit history.

    ``decided_only`` restricts the history to terminal requests.
    """

    state: LinkRequestState | None = None
    center_id: str | None = None
    date_from: datetime | None = Field(default=None, description="Inclusive lower bound on requested_at")
    date_to: datetime | None = Field(default=None, description="Exclusive upper bound on requested_at")
    decided_only: bool = False

    @field_validator("date_from", "date_to")
    @classmethod
    def normalise_bound(cls, value: datetime | None) -> datetime | None:
        # Naive bounds are taken as UTC; stored timestamps carry no offset on SQLite.
        return ensure_utc(value)

    @model_validator(mode="after")
    def check_range(self) -> "HistoryFilter":
        if self.date_from and self.date_to and self.date_from >= self.date_to:
            raise ValueError("date_from must be earlier than date_to")
        return self
