# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Family link service for managing approved student-family linkages.

This module provides the FamilyLinkService class for:
- Approving link requests together with creating the linkage
- Rejecting link requests
- Listing the linkages of a student or a family member
- Removing a linkage

The linkage is written in the same transaction as the APPROVED decision,
so a link never exists without an approved request and an approved request
always has its link (until it is explicitly unlinked).
"""

from __future__ import annotations

import logging

from schoollink.domains.errors import NotFoundError
from schoollink.domains.link_request import LinkRequestWorkflow
from schoollink.infrastructure.database.models import (
    FamilyMember,
    LinkRequest,
    Student,
    StudentFamilyLink,
    new_id,
)
from schoollink.infrastructure.database.store import DirectoryStore
from schoollink.models.common import Decision
from schoollink.models.family_link import DecisionOutcome, FamilyLinkResponse
from schoollink.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class FamilyLinkService:
    """Service for student-family linkages.

    Attributes:
        store: Directory store.
        workflow: Link request workflow used for decisions.
    """

    def __init__(self, store: DirectoryStore, workflow: LinkRequestWorkflow | None = None) -> None:
        """Initialize family link service.

        Args:
            store: Directory store.
            workflow: Link request workflow, built on the same store if omitted.
        """
        self.store = store
        self.workflow = workflow or LinkRequestWorkflow(store)

    async def approve(
        self,
        request_id: str,
        decider_id: str,
        notes: str | None = None,
    ) -> DecisionOutcome:
        """Approve a pending request and link the pair.

        An existing linkage for the same pair is refreshed instead of
        duplicated.

        Args:
            request_id: Request to approve.
            decider_id: Staff member approving.
            notes: Optional decision notes.

        Returns:
            The approved request and the resulting linkage.

        Raises:
            NotFoundError: If the request does not exist.
            InvalidStateError: If the request was already decided.
        """
        written: list[StudentFamilyLink] = []

        async def link_pair(request: LinkRequest) -> list[StudentFamilyLink]:
            written.clear()
            link = await self._find_link(request.student_id, request.family_member_id)
            if link is None:
                link = StudentFamilyLink(
                    id=new_id(),
                    student_id=request.student_id,
                    family_member_id=request.family_member_id,
                )
            link.relationship = request.relationship
            link.request_id = request.id
            link.linked_at = utc_now()
            written.append(link)
            return [link]

        request = await self.workflow.decide(
            request_id,
            Decision.APPROVE,
            decider_id,
            notes=notes,
            side_effects=link_pair,
        )
        link = written[0]

        logger.info(
            "Linked family member: student=%s, family_member=%s, request=%s",
            link.student_id,
            link.family_member_id,
            request_id,
        )

        return DecisionOutcome(request=request, link=to_family_link_response(link))

    async def reject(
        self,
        request_id: str,
        decider_id: str,
        notes: str | None = None,
    ) -> DecisionOutcome:
        """Reject a pending request.

        Raises:
            NotFoundError: If the request does not exist.
            InvalidStateError: If the request was already decided.
        """
        request = await self.workflow.decide(request_id, Decision.REJECT, decider_id, notes=notes)
        return DecisionOutcome(request=request)

    async def decide(
        self,
        request_id: str,
        decision: Decision,
        decider_id: str,
        notes: str | None = None,
    ) -> DecisionOutcome:
        """Dispatch a decision to approve or reject."""
        if decision is Decision.APPROVE:
            return await self.approve(request_id, decider_id, notes)
        return await self.reject(request_id, decider_id, notes)

    async def list_family_members(self, student_id: str) -> list[FamilyLinkResponse]:
        """List the linkages of a student.

        Raises:
            NotFoundError: If the student does not exist.
        """
        await self.store.get(Student, student_id)
        links = await self.store.query(
            StudentFamilyLink,
            StudentFamilyLink.student_id == student_id,
            order_by=(StudentFamilyLink.linked_at, StudentFamilyLink.id),
        )
        return [to_family_link_response(link) for link in links]

    async def list_students(self, family_member_id: str) -> list[FamilyLinkResponse]:
        """List the linkages of a family member.

        Raises:
            NotFoundError: If the family member does not exist.
        """
        await self.store.get(FamilyMember, family_member_id)
        links = await self.store.query(
            StudentFamilyLink,
            StudentFamilyLink.family_member_id == family_member_id,
            order_by=(StudentFamilyLink.linked_at, StudentFamilyLink.id),
        )
        return [to_family_link_response(link) for link in links]

    async def unlink(self, student_id: str, family_member_id: str) -> None:
        """Remove the linkage between a student and a family member.

        The request that created the linkage keeps its APPROVED state.

        Raises:
            NotFoundError: If the pair is not linked.
        """

        async def attempt() -> None:
            link = await self._find_link(student_id, family_member_id)
            if link is None:
                raise NotFoundError("StudentFamilyLink", f"{student_id}/{family_member_id}")
            await self.store.transact(deletes=[link])

        await self.store.retrying(attempt, operation_name="unlink")
        logger.info("Unlinked family member: student=%s, family_member=%s", student_id, family_member_id)

    async def _find_link(self, student_id: str, family_member_id: str) -> StudentFamilyLink | None:
        found = await self.store.query(
            StudentFamilyLink,
            StudentFamilyLink.student_id == student_id,
            StudentFamilyLink.family_member_id == family_member_id,
            limit=1,
        )
        return found[0] if found else None


def to_family_link_response(link: StudentFamilyLink) -> FamilyLinkResponse:
    """Convert a linkage record to its response DTO."""
    return FamilyLinkResponse(
        id=link.id,
        student_id=link.student_id,
        family_member_id=link.family_member_id,
        relationship=link.relationship,
        request_id=link.request_id,
        linked_at=ensure_utc(link.linked_at),
    )
