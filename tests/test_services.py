"""Tests for the service catalog endpoints."""

import pytest
from sqlalchemy import select

from app.models.service import Service

from conftest import auth_headers, create_user


@pytest.mark.asyncio
async def test_provider_creates_service(client, db, provider):
    resp = await client.post("/api/v1/services/", json={
        "name": "Massage",
        "description": "Deep tissue",
        "durationMinutes": 45,
        "price": "65.50",
    }, headers=auth_headers(provider))

    assert resp.status_code == 201
    data = resp.json()
    assert data["durationMinutes"] == 45
    assert data["price"] == 65.5
    assert data["providerId"] == str(provider.id)
    assert data["isActive"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"name": "Too short", "durationMinutes": 10, "price": 10},
    {"name": "Too long", "durationMinutes": 481, "price": 10},
    {"name": "Negative", "durationMinutes": 30, "price": -1},
    {"name": "", "durationMinutes": 30, "price": 10},
])
async def test_create_service_validation(client, provider, payload):
    resp = await client.post("/api/v1/services/", json=payload, headers=auth_headers(provider))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_users_cannot_create_services(client, customer):
    resp = await client.post("/api/v1/services/", json={
        "name": "Sneaky", "durationMinutes": 30, "price": 10,
    }, headers=auth_headers(customer))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_update_service(client, provider, service):
    resp = await client.put(
        f"/api/v1/services/{service.id}",
        json={"price": "55.00"},
        headers=auth_headers(provider),
    )

    assert resp.status_code == 200
    assert resp.json()["price"] == 55.0
    assert resp.json()["name"] == "Consultation"


@pytest.mark.asyncio
async def test_update_other_providers_service(client, db, service):
    other = await create_user(db, "rival@example.com", role="provider")

    resp = await client.put(
        f"/api/v1/services/{service.id}",
        json={"price": "1.00"},
        headers=auth_headers(other),
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_is_soft(client, db, provider, service):
    resp = await client.delete(f"/api/v1/services/{service.id}", headers=auth_headers(provider))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Service deleted successfully"}

    result = await db.execute(
        select(Service).where(Service.id == service.id).execution_options(populate_existing=True)
    )
    assert result.scalar_one().is_active is False

    listing = await client.get("/api/v1/services/")
    assert listing.json()["data"] == []


@pytest.mark.asyncio
async def test_public_listing_filters(client, db, provider):
    db.add_all([
        Service(provider_id=provider.id, name="Quick trim", duration_minutes=15, price=15),
        Service(provider_id=provider.id, name="Full colour", description="Includes trim", duration_minutes=120, price=90),
        Service(provider_id=provider.id, name="Consult", duration_minutes=30, price=0),
    ])
    await db.commit()

    resp = await client.get("/api/v1/services/", params={"search": "trim", "sortBy": "price", "sortOrder": "asc"})
    assert resp.status_code == 200
    names = [s["name"] for s in resp.json()["data"]]
    assert names == ["Quick trim", "Full colour"]
    assert resp.json()["data"][0]["provider"]["name"] == "Dana Provider"

    resp = await client.get("/api/v1/services/", params={"minPrice": 10, "maxDuration": 60})
    assert [s["name"] for s in resp.json()["data"]] == ["Quick trim"]

    resp = await client.get("/api/v1/services/", params={"limit": 2, "page": 2})
    body = resp.json()
    assert len(body["data"]) == 1
    assert body["pagination"]["totalItems"] == 3
    assert body["pagination"]["hasPrevPage"] is True


@pytest.mark.asyncio
async def test_my_services_only_lists_own(client, db, provider, service):
    other = await create_user(db, "elsewhere@example.com", role="provider")
    db.add(Service(provider_id=other.id, name="Elsewhere", duration_minutes=30, price=10))
    await db.commit()

    resp = await client.get("/api/v1/services/mine", headers=auth_headers(provider))
    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()["data"]] == ["Consultation"]
