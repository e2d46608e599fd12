# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lazy audit history of link requests.

The history is an async iterable over link requests, newest first, fetched
from the store one page at a time with keyset pagination on
``(requested_at, id)``. Each ``async for`` starts a fresh scan from the
newest record, so the same history object can be consumed repeatedly.

Example:
    history = workflow.list_history(HistoryFilter(state=LinkRequestState.APPROVED))
    async for request in history:
        print(request.id, request.decided_at)
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

from sqlalchemy import and_, or_

from schoollink.infrastructure.database.models import LinkRequest
from schoollink.infrastructure.database.store import DirectoryStore
from schoollink.models.common import LinkRequestState
from schoollink.models.link_request import HistoryFilter, LinkRequestResponse
from schoollink.utils.datetime import ensure_utc
from schoollink.utils.logging import get_logger

logger = get_logger(__name__)

_ORDERING = (LinkRequest.requested_at.desc(), LinkRequest.id.asc())


def history_criteria(history_filter: HistoryFilter) -> list[Any]:
    """Translate a history filter into SQLAlchemy criteria."""
    criteria: list[Any] = []
    if history_filter.state is not None:
        criteria.append(LinkRequest.state == history_filter.state.value)
    if history_filter.decided_only:
        criteria.append(LinkRequest.state != LinkRequestState.PENDING.value)
    if history_filter.center_id is not None:
        criteria.append(LinkRequest.center_id == history_filter.center_id)
    if history_filter.date_from is not None:
        criteria.append(LinkRequest.requested_at >= history_filter.date_from)
    if history_filter.date_to is not None:
        criteria.append(LinkRequest.requested_at < history_filter.date_to)
    return criteria


class LinkRequestHistory:
    """Restartable, page-by-page iterable over link requests.

    Attributes:
        history_filter: Filter applied to every scan.
        page_size: Rows fetched per store query.
    """

    def __init__(
        self,
        store: DirectoryStore,
        history_filter: HistoryFilter,
        *,
        page_size: int = 50,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._store = store
        self.history_filter = history_filter
        self.page_size = page_size

    def __aiter__(self) -> AsyncIterator[LinkRequestResponse]:
        return self._scan()

    async def _scan(self) -> AsyncIterator[LinkRequestResponse]:
        base_criteria = history_criteria(self.history_filter)
        cursor: tuple[datetime, str] | None = None
        pages = 0

        while True:
            criteria = list(base_criteria)
            if cursor is not None:
                requested_at, request_id = cursor
                criteria.append(
                    or_(
                        LinkRequest.requested_at < requested_at,
                        and_(LinkRequest.requested_at == requested_at, LinkRequest.id > request_id),
                    )
                )

            page = await self._store.query(
                LinkRequest,
                *criteria,
                order_by=_ORDERING,
                limit=self.page_size,
            )
            pages += 1

            for record in page:
                yield to_link_request_response(record)

            if len(page) < self.page_size:
                break
            cursor = (page[-1].requested_at, page[-1].id)

        logger.debug("history_scanned", pages=pages, page_size=self.page_size)

    async def to_list(self, limit: int | None = None) -> list[LinkRequestResponse]:
        """Collect the history into a list.

        Args:
            limit: Stop after this many requests.
        """
        items: list[LinkRequestResponse] = []
        async for item in self:
            items.append(item)
            if limit is not None and len(items) >= limit:
                break
        return items


def to_link_request_response(record: LinkRequest) -> LinkRequestResponse:
    """Convert a link request record to its response DTO."""
    return LinkRequestResponse(
        id=record.id,
        student_id=record.student_id,
        family_member_id=record.family_member_id,
        center_id=record.center_id,
        relationship=record.relationship,
        state=record.state,
        requested_at=ensure_utc(record.requested_at),
        decided_at=ensure_utc(record.decided_at),
        decider_id=record.decider_id,
        decision_notes=record.decision_notes,
    )
