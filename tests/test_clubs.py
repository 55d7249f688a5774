"""
Tests for Club Endpoints
========================

Tests for:
- GET /clubs
- GET /clubs/{club_id}
- POST /clubs
- PUT /clubs/{club_id}
- DELETE /clubs/{club_id}
"""

import pytest
from httpx import AsyncClient
from uuid import uuid4


@pytest.mark.asyncio
async def test_get_club_not_found(client: AsyncClient):
    """Test that non-existent club returns 404."""
    fake_id = uuid4()
    response = await client.get(f"/clubs/{fake_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_club_detail(client: AsyncClient, seeded_db):
    """Test getting a club."""
    club_id = seeded_db.test_data["clubs"]["ajax"]
    response = await client.get(f"/clubs/{club_id}")
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["id"] == str(club_id)
    assert data["name"] == "Ajax"
    assert data["country"] == "Netherlands"
    assert data["logoUrl"] == "https://cdn.example.com/ajax.png"


@pytest.mark.asyncio
async def test_list_clubs_sorted_by_name(client: AsyncClient, seeded_db):
    response = await client.get("/clubs")
    assert response.status_code == 200

    names = [c["name"] for c in response.json()["data"]]
    assert names == ["Ajax", "Feyenoord", "PSV"]


@pytest.mark.asyncio
async def test_create_club(client: AsyncClient):
    response = await client.post("/clubs", json={"name": "  AZ  ", "country": "Netherlands"})
    assert response.status_code == 201

    data = response.json()
    assert data["status"] == "success"
    assert data["data"]["name"] == "AZ"


@pytest.mark.asyncio
async def test_create_duplicate_club_conflicts(client: AsyncClient, seeded_db):
    response = await client.post("/clubs", json={"name": "Ajax", "country": "Netherlands"})
    assert response.status_code == 409
    assert response.json()["code"] == "club_exists"


@pytest.mark.asyncio
async def test_same_name_other_country_is_distinct(client: AsyncClient, seeded_db):
    response = await client.post("/clubs", json={"name": "Ajax", "country": "South Africa"})
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_update_club(client: AsyncClient, seeded_db):
    club_id = seeded_db.test_data["clubs"]["psv"]
    response = await client.put(f"/clubs/{club_id}", json={"logoUrl": "https://cdn.example.com/psv.png"})
    assert response.status_code == 200

    data = response.json()["data"]
    assert data["name"] == "PSV"
    assert data["logoUrl"] == "https://cdn.example.com/psv.png"


@pytest.mark.asyncio
async def test_update_club_to_existing_identity_conflicts(client: AsyncClient, seeded_db):
    club_id = seeded_db.test_data["clubs"]["psv"]
    response = await client.put(f"/clubs/{club_id}", json={"name": "Ajax"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_unused_club(client: AsyncClient, seeded_db):
    club_id = seeded_db.test_data["clubs"]["psv"]
    response = await client.delete(f"/clubs/{club_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "Club deleted successfully"

    response = await client.get(f"/clubs/{club_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_club_used_by_match_conflicts(client: AsyncClient, seeded_db):
    club_id = seeded_db.test_data["clubs"]["ajax"]
    response = await client.delete(f"/clubs/{club_id}")
    assert response.status_code == 409
    assert response.json()["code"] == "club_in_use"

    response = await client.get(f"/clubs/{club_id}")
    assert response.status_code == 200
