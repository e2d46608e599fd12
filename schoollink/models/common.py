# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enumerations shared by ORM models, DTOs and services."""

from enum import Enum


class RelationshipKind(str, Enum):
    """How a family member relates to a student."""

    PARENT = "parent"
    MOTHER = "mother"
    FATHER = "father"
    TUTOR = "tutor"
    OTHER = "other"


class LinkRequestState(str, Enum):
    """Link request lifecycle states."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is allowed from this state."""
        return self is not LinkRequestState.PENDING


class Decision(str, Enum):
    """Decision taken on a pending link request."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"

    @property
    def target_state(self) -> LinkRequestState:
        """State the request moves to when this decision is applied."""
        if self is Decision.APPROVE:
            return LinkRequestState.APPROVED
        return LinkRequestState.REJECTED


class RosterMode(str, Enum):
    """Roster view modes used by the linking screens."""

    ALL = "ALL"
    LINKED = "LINKED"
    PENDING = "PENDING"
