"""Maintenance and campaign routes"""

import pytest

from main import app
from src.infrastructure.config.settings import Settings, get_settings


@pytest.mark.asyncio
async def test_next_id_for_empty_table(client):
    response = await client.get("/maintenance/next-id/hunters")

    assert response.status_code == 200
    assert response.json() == {"table": "hunters", "next_id": 1}


@pytest.mark.asyncio
async def test_next_id_unknown_table_is_404(client):
    response = await client.get("/maintenance/next-id/sqlite_master")

    assert response.status_code == 404
    assert response.json()["error"] == "UNKNOWN_TABLE"


@pytest.mark.asyncio
async def test_resequence_disabled_outside_maintenance(client):
    response = await client.post("/maintenance/resequence/hunters")

    assert response.status_code == 403
    assert response.json()["error"] == "MAINTENANCE_DISABLED"


@pytest.mark.asyncio
async def test_resequence_enabled_in_maintenance(client, storage, make_hunter):
    """
    GIVEN maintenance mode and hunters with ids 1 and 3
    WHEN resequencing through the API
    THEN the ids become 1 and 2
    """
    app.dependency_overrides[get_settings] = lambda: Settings(maintenance_enabled=True)
    first = await make_hunter()
    second = await make_hunter()
    third = await make_hunter()
    await storage.delete_hunter(second.id)

    response = await client.post("/maintenance/resequence/hunters")

    assert response.status_code == 204
    assert [h.id for h in await storage.list_hunters()] == [first.id, 2]
    assert third.id == 3


@pytest.mark.asyncio
async def test_campaign_round_trip_and_validation(client):
    assert (await client.get("/campaign/")).status_code == 404

    saved = await client.put(
        "/campaign/",
        json={"start_date": "2025-01-04", "end_date": "2025-06-25", "year": "2025", "is_active": True},
    )
    assert saved.status_code == 200

    outside = await client.get("/campaign/validate", params={"candidate": "2025-07-01"})
    assert outside.json()["accepted"] is False
    assert "2025-06-25" in outside.json()["reason"]

    inside = await client.get("/campaign/validate", params={"candidate": "2025-03-01"})
    assert inside.json() == {"accepted": True, "reason": None}


@pytest.mark.asyncio
async def test_report_outside_campaign_is_422(client, make_hunter, make_user, make_permit):
    hunter = await make_hunter()
    user = await make_user()
    permit = await make_permit(hunter.id)

    response = await client.post(
        "/hunting-reports/",
        json={
            "user_id": user.id,
            "hunter_id": hunter.id,
            "permit_id": permit.id,
            "report_date": "2025-03-01",
            "location": "Faro",
        },
    )

    assert response.status_code == 422
    assert response.json()["error"] == "CAMPAIGN_WINDOW_ERROR"
