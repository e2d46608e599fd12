# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for link request API endpoints."""

from datetime import datetime, timedelta, timezone

import pytest

pytestmark = pytest.mark.integration


async def create_request(client, student_id: str, family_member_id: str, **extra) -> dict:
    response = await client.post(
        "/api/v1/link-requests",
        json={"student_id": student_id, "family_member_id": family_member_id, **extra},
    )
    assert response.status_code == 201
    return response.json()


class TestLinkRequestsAPIRouting:
    """Tests for link request API routing."""

    def test_routes_registered(self, app):
        """Test that link request routes are registered."""
        routes = [route.path for route in app.routes]

        assert "/api/v1/link-requests" in routes
        assert "/api/v1/link-requests/{request_id}/decision" in routes
        assert "/api/v1/link-requests/pending" in routes
        assert "/api/v1/link-requests/history" in routes
        assert "/api/v1/link-requests/{request_id}" in routes


class TestCreateLinkRequest:
    """Tests for POST /link-requests."""

    @pytest.mark.asyncio
    async def test_create_success(self, client, directory):
        """Test a new request starts PENDING with the family member's relationship."""
        data = await create_request(client, directory.maria, directory.carmen)

        assert data["state"] == "PENDING"
        assert data["relationship"] == "mother"
        assert data["center_id"] == directory.center_norte
        assert data["decided_at"] is None

    @pytest.mark.asyncio
    async def test_create_with_relationship(self, client, directory):
        """Test an explicit relationship overrides the default."""
        data = await create_request(client, directory.maria, directory.jose, relationship="tutor")

        assert data["relationship"] == "tutor"

    @pytest.mark.asyncio
    async def test_create_duplicate(self, client, directory):
        """Test a second pending request for the pair answers 409."""
        await create_request(client, directory.maria, directory.carmen)

        response = await client.post(
            "/api/v1/link-requests",
            json={"student_id": directory.maria, "family_member_id": directory.carmen},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_request"

    @pytest.mark.asyncio
    async def test_create_unknown_family_member(self, client, directory):
        """Test an unknown family member answers 404."""
        response = await client.post(
            "/api/v1/link-requests",
            json={"student_id": directory.maria, "family_member_id": "family-missing"},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_inactive_family_member(self, client, directory):
        """Test an inactive family member answers 409."""
        response = await client.post(
            "/api/v1/link-requests",
            json={"student_id": directory.maria, "family_member_id": directory.retired},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "inactive_entity"


class TestDecideLinkRequest:
    """Tests for POST /link-requests/{id}/decision."""

    @pytest.mark.asyncio
    async def test_approve_creates_link(self, client, directory):
        """Test approval returns the decided request and the new linkage."""
        created = await create_request(client, directory.maria, directory.carmen)

        response = await client.post(
            f"/api/v1/link-requests/{created['id']}/decision",
            json={"decision": "APPROVE", "decider_id": "admin-1", "notes": "DNI checked"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["request"]["state"] == "APPROVED"
        assert data["request"]["decider_id"] == "admin-1"
        assert data["request"]["decision_notes"] == "DNI checked"
        assert data["link"]["student_id"] == directory.maria
        assert data["link"]["request_id"] == created["id"]

    @pytest.mark.asyncio
    async def test_reject_has_no_link(self, client, directory):
        """Test rejection returns no linkage."""
        created = await create_request(client, directory.maria, directory.carmen)

        response = await client.post(
            f"/api/v1/link-requests/{created['id']}/decision",
            json={"decision": "REJECT", "decider_id": "admin-1"},
        )

        assert response.status_code == 200
        assert response.json()["request"]["state"] == "REJECTED"
        assert response.json()["link"] is None

    @pytest.mark.asyncio
    async def test_decide_twice(self, client, directory):
        """Test deciding a decided request answers 409."""
        created = await create_request(client, directory.maria, directory.carmen)
        url = f"/api/v1/link-requests/{created['id']}/decision"
        await client.post(url, json={"decision": "APPROVE", "decider_id": "admin-1"})

        response = await client.post(url, json={"decision": "REJECT", "decider_id": "admin-2"})

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state"

    @pytest.mark.asyncio
    async def test_decide_unknown_request(self, client, directory):
        """Test deciding an unknown request answers 404."""
        response = await client.post(
            "/api/v1/link-requests/req-missing/decision",
            json={"decision": "APPROVE", "decider_id": "admin-1"},
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_decide_invalid_decision(self, client, directory):
        """Test an unknown decision value is rejected."""
        created = await create_request(client, directory.maria, directory.carmen)

        response = await client.post(
            f"/api/v1/link-requests/{created['id']}/decision",
            json={"decision": "MAYBE", "decider_id": "admin-1"},
        )

        assert response.status_code == 422


class TestLinkRequestListings:
    """Tests for pending, history and lookups."""

    @pytest.mark.asyncio
    async def test_pending_oldest_first(self, client, directory):
        """Test the pending queue excludes decided requests."""
        first = await create_request(client, directory.maria, directory.carmen)
        second = await create_request(client, directory.jon, directory.jose)
        decided = await create_request(client, directory.ane, directory.carmen)
        await client.post(
            f"/api/v1/link-requests/{decided['id']}/decision",
            json={"decision": "REJECT", "decider_id": "admin-1"},
        )

        response = await client.get("/api/v1/link-requests/pending")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [r["id"] for r in data["items"]] == [first["id"], second["id"]]

    @pytest.mark.asyncio
    async def test_pending_by_center(self, client, directory):
        """Test the pending queue filtered by center."""
        await create_request(client, directory.maria, directory.carmen)
        sur = await create_request(client, directory.sara, directory.carmen)

        response = await client.get("/api/v1/link-requests/pending", params={"center_id": directory.center_sur})

        assert [r["id"] for r in response.json()["items"]] == [sur["id"]]

    @pytest.mark.asyncio
    async def test_history_filters(self, client, directory):
        """Test history filtered to decided requests."""
        approved = await create_request(client, directory.maria, directory.carmen)
        await create_request(client, directory.jon, directory.jose)
        await client.post(
            f"/api/v1/link-requests/{approved['id']}/decision",
            json={"decision": "APPROVE", "decider_id": "admin-1"},
        )

        response = await client.get("/api/v1/link-requests/history", params={"decided_only": "true"})

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["items"]] == [approved["id"]]

    @pytest.mark.asyncio
    async def test_history_limit(self, client, directory):
        """Test the history limit caps the listing."""
        for student_id in (directory.maria, directory.jon, directory.ane):
            await create_request(client, student_id, directory.carmen)

        response = await client.get("/api/v1/link-requests/history", params={"limit": 2})

        assert response.json()["total"] == 2

    @pytest.mark.asyncio
    async def test_history_inverted_range(self, client, directory):
        """Test an empty date range answers 400."""
        response = await client.get(
            "/api/v1/link-requests/history",
            params={"date_from": "2025-10-01T00:00:00Z", "date_to": "2025-09-01T00:00:00Z"},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_history_mixed_timezone_range(self, client, directory):
        """Test an aware lower bound with a naive upper bound is accepted."""
        created = await create_request(client, directory.maria, directory.carmen)

        response = await client.get(
            "/api/v1/link-requests/history",
            params={"date_from": "2020-01-01T00:00:00Z", "date_to": "2099-01-01T00:00:00"},
        )

        assert response.status_code == 200
        assert [r["id"] for r in response.json()["items"]] == [created["id"]]

    @pytest.mark.asyncio
    async def test_history_offset_bound(self, client, directory):
        """Test a bound in a non-UTC offset keeps in-range requests."""
        created = await create_request(client, directory.maria, directory.carmen)
        requested_at = datetime.fromisoformat(created["requested_at"])
        bound = (requested_at - timedelta(hours=1)).astimezone(timezone(timedelta(hours=2)))

        response = await client.get("/api/v1/link-requests/history", params={"date_from": bound.isoformat()})

        assert [r["id"] for r in response.json()["items"]] == [created["id"]]

    @pytest.mark.asyncio
    async def test_get_request(self, client, directory):
        """Test fetching a request by id."""
        created = await create_request(client, directory.maria, directory.carmen)

        response = await client.get(f"/api/v1/link-requests/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_get_unknown_request(self, client, directory):
        """Test an unknown request answers 404."""
        response = await client.get("/api/v1/link-requests/req-missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_family_member_requests(self, client, directory):
        """Test the requests of a family member."""
        await create_request(client, directory.maria, directory.carmen)
        await create_request(client, directory.jon, directory.jose)

        response = await client.get(f"/api/v1/link-requests/family-members/{directory.jose}")

        items = response.json()["items"]
        assert [r["student_id"] for r in items] == [directory.jon]
