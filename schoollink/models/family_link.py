# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Schemas for approved student-family linkages."""

from datetime import datetime

from pydantic import BaseModel

from schoollink.models.common import RelationshipKind
from schoollink.models.link_request import LinkRequestResponse


class FamilyLinkResponse(BaseModel):
    """An approved linkage."""

    id: str
    student_id: str
    family_member_id: str
    relationship: RelationshipKind
    request_id: str | None = None
    linked_at: datetime


class DecisionOutcome(BaseModel):
    """Result of deciding a request through the linkage service.

    ``link`` is set only when the request was approved.
    """

    request: LinkRequestResponse
    link: FamilyLinkResponse | None = None
