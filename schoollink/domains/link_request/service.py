# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Link request workflow.

A family member asks to be linked to a student; center staff approve or
reject the request. States are PENDING, APPROVED and REJECTED; the latter
two are terminal. At most one PENDING request exists per student and family
member pair at any time.

Duplicates and invalid transitions are reported to the caller straight
away. Lost races against concurrent writers are retried with fresh reads,
which is how a concurrent duplicate or a concurrent second decision ends up
reported as DuplicateRequestError or InvalidStateError.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable

from schoollink.domains.errors import (
    DuplicateRequestError,
    InactiveEntityError,
    InvalidStateError,
)
from schoollink.domains.link_request.history import LinkRequestHistory, to_link_request_response
from schoollink.infrastructure.database.models import (
    Base,
    FamilyMember,
    LinkRequest,
    Student,
    new_id,
)
from schoollink.infrastructure.database.store import DirectoryStore
from schoollink.models.common import Decision, LinkRequestState, RelationshipKind
from schoollink.models.link_request import HistoryFilter, LinkRequestResponse
from schoollink.utils.datetime import utc_now
from schoollink.utils.logging import get_logger

logger = get_logger(__name__)

# Extra records to commit together with a decision.
SideEffects = Callable[[LinkRequest], Awaitable[Iterable[Base]]]


class LinkRequestWorkflow:
    """State machine over link requests.

    Attributes:
        store: Directory store.
        history_page_size: Page size used when streaming the history.
    """

    def __init__(self, store: DirectoryStore, *, history_page_size: int = 50) -> None:
        self.store = store
        self.history_page_size = history_page_size

    async def create_link_request(
        self,
        student_id: str,
        family_member_id: str,
        relationship: RelationshipKind | None = None,
    ) -> LinkRequestResponse:
        """Create a PENDING link request.

        Args:
            student_id: Student to link.
            family_member_id: Family member asking for the link.
            relationship: Relationship kind, defaults to the family
                member's own.

        Returns:
            The created request.

        Raises:
            NotFoundError: If the student or family member does not exist.
            InactiveEntityError: If either is inactive.
            DuplicateRequestError: If a PENDING request exists for the pair.
        """

        async def attempt() -> LinkRequest:
            student = await self.store.get(Student, student_id)
            family_member = await self.store.get(FamilyMember, family_member_id)
            if not student.is_active:
                raise InactiveEntityError("Student", student_id)
            if not family_member.is_active:
                raise InactiveEntityError("FamilyMember", family_member_id)

            pending = await self._find_pending(student_id, family_member_id)
            if pending is not None:
                logger.info(
                    "link_request_duplicate",
                    student_id=student_id,
                    family_member_id=family_member_id,
                    existing_id=pending.id,
                )
                raise DuplicateRequestError(student_id, family_member_id, pending.id)

            kind = relationship or RelationshipKind(family_member.relationship)
            request = LinkRequest(
                id=new_id(),
                student_id=student_id,
                family_member_id=family_member_id,
                center_id=student.center_id,
                relationship=kind.value,
                state=LinkRequestState.PENDING.value,
                requested_at=utc_now(),
            )
            await self.store.transact(reads=[student, family_member], writes=[request])
            return request

        request = await self.store.retrying(attempt, operation_name="create_link_request")
        logger.info(
            "link_request_created",
            request_id=request.id,
            student_id=student_id,
            family_member_id=family_member_id,
        )
        return to_link_request_response(request)

    async def decide(
        self,
        request_id: str,
        decision: Decision,
        decider_id: str,
        notes: str | None = None,
        side_effects: SideEffects | None = None,
    ) -> LinkRequestResponse:
        """Approve or reject a PENDING request.

        Args:
            request_id: Request to decide.
            decision: APPROVE or REJECT.
            decider_id: Staff member taking the decision.
            notes: Optional decision notes.
            side_effects: Called with the decided request; the records it
                returns are committed in the same transaction.

        Returns:
            The decided request.

        Raises:
            NotFoundError: If the request does not exist.
            InvalidStateError: If the request was already decided.
        """
        target = decision.target_state

        async def attempt() -> LinkRequest:
            request = await self.store.get(LinkRequest, request_id)
            if not request.is_pending:
                raise InvalidStateError(request_id, request.state)

            request.state = target.value
            request.decided_at = utc_now()
            request.decider_id = decider_id
            request.decision_notes = notes

            extra = list(await side_effects(request)) if side_effects is not None else []
            await self.store.transact(writes=[request, *extra])
            return request

        request = await self.store.retrying(attempt, operation_name="decide_link_request")
        logger.info(
            "link_request_decided",
            request_id=request_id,
            state=target.value,
            decider_id=decider_id,
        )
        return to_link_request_response(request)

    async def get_request(self, request_id: str) -> LinkRequestResponse:
        """Get a link request by id.

        Raises:
            NotFoundError: If the request does not exist.
        """
        return to_link_request_response(await self.store.get(LinkRequest, request_id))

    async def list_pending(self, center_id: str | None = None) -> list[LinkRequestResponse]:
        """List PENDING requests, oldest first.

        Args:
            center_id: Restrict to requests for students of this center.
        """
        criteria = [LinkRequest.state == LinkRequestState.PENDING.value]
        if center_id is not None:
            criteria.append(LinkRequest.center_id == center_id)

        records = await self.store.query(
            LinkRequest,
            *criteria,
            order_by=(LinkRequest.requested_at.asc(), LinkRequest.id.asc()),
        )
        return [to_link_request_response(r) for r in records]

    async def list_for_family_member(self, family_member_id: str) -> list[LinkRequestResponse]:
        """List every request made by a family member, newest first.

        Raises:
            NotFoundError: If the family member does not exist.
        """
        await self.store.get(FamilyMember, family_member_id)
        records = await self.store.query(
            LinkRequest,
            LinkRequest.family_member_id == family_member_id,
            order_by=(LinkRequest.requested_at.desc(), LinkRequest.id.asc()),
        )
        return [to_link_request_response(r) for r in records]

    def list_history(self, history_filter: HistoryFilter | None = None) -> LinkRequestHistory:
        """Get the audit history matching a filter.

        Nothing is read until the history is iterated.
        """
        return LinkRequestHistory(
            self.store,
            history_filter or HistoryFilter(),
            page_size=self.history_page_size,
        )

    async def _find_pending(self, student_id: str, family_member_id: str) -> LinkRequest | None:
        found = await self.store.query(
            LinkRequest,
            LinkRequest.student_id == student_id,
            LinkRequest.family_member_id == family_member_id,
            LinkRequest.state == LinkRequestState.PENDING.value,
            limit=1,
        )
        return found[0] if found else None
