# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by the enrollment and linking services.

Every error carries a stable ``code`` and the HTTP status the API layer
maps it to. Only ConcurrentModificationError is produced after internal
retries; every other error is surfaced to the caller on first occurrence.
"""

from typing import Any


class SchoolLinkError(Exception):
    """Base exception for SchoolLink domain errors.

    Attributes:
        message: Human-readable error description.
        context: Identifiers involved in the failure.
    """

    code = "schoollink_error"
    status_code = 500

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class NotFoundError(SchoolLinkError):
    """Raised when a referenced entity id does not exist."""

    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} {entity_id} not found", entity=entity, entity_id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class InactiveEntityError(SchoolLinkError):
    """Raised when a referenced entity exists but is marked inactive."""

    code = "inactive_entity"
    status_code = 409

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} {entity_id} is inactive", entity=entity, entity_id=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class CapacityExceededError(SchoolLinkError):
    """Raised when a class is already at capacity."""

    code = "capacity_exceeded"
    status_code = 409

    def __init__(self, class_id: str, capacity: int, occupancy: int) -> None:
        super().__init__(
            f"Class {class_id} is full ({occupancy}/{capacity})",
            class_id=class_id,
            capacity=capacity,
            occupancy=occupancy,
        )
        self.class_id = class_id
        self.capacity = capacity
        self.occupancy = occupancy


class DuplicateRequestError(SchoolLinkError):
    """Raised when a PENDING link request already exists for the pair."""

    code = "duplicate_request"
    status_code = 409

    def __init__(self, student_id: str, family_member_id: str, existing_id: str) -> None:
        super().__init__(
            "A pending link request already exists for this student and family member",
            student_id=student_id,
            family_member_id=family_member_id,
            existing_id=existing_id,
        )
        self.existing_id = existing_id


class InvalidStateError(SchoolLinkError):
    """Raised on a transition out of a terminal link request state."""

    code = "invalid_state"
    status_code = 409

    def __init__(self, request_id: str, state: str) -> None:
        super().__init__(
            f"Link request {request_id} was already decided ({state})",
            request_id=request_id,
            state=state,
        )
        self.request_id = request_id
        self.state = state


class ConcurrentModificationError(SchoolLinkError):
    """Raised when an optimistic transaction keeps losing races."""

    code = "concurrent_modification"
    status_code = 409


class StoreUnavailableError(SchoolLinkError):
    """Raised when the directory store times out or is unreachable."""

    code = "store_unavailable"
    status_code = 503
