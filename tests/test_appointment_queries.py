"""Tests for appointment listings, filters and pagination."""

from datetime import date, datetime, timedelta

import pytest

from app.models.appointment import Appointment, AppointmentStatus
from app.schemas.appointment import AppointmentListParams
from app.services.appointment_queries import list_appointments, paginate, get_appointment_detail
from app.core.exceptions import NotFoundError

from conftest import auth_headers, create_user

NOW = datetime(2030, 6, 12, 9, 0)
TODAY = NOW.date()


def add_appointment(db, customer, provider, service, day, start="10:00", end="11:00", status=AppointmentStatus.BOOKED):
    appt = Appointment(
        user_id=customer.id,
        provider_id=provider.id,
        service_id=service.id,
        date=day,
        start_time=start,
        end_time=end,
        status=status,
        price_at_booking=service.price,
    )
    db.add(appt)
    return appt


def test_paginate():
    assert paginate(15, 2, 10) == {
        "total_items": 15,
        "total_pages": 2,
        "current_page": 2,
        "has_next_page": False,
        "has_prev_page": True,
        "next_page": None,
        "prev_page": 1,
        "limit": 10,
    }
    assert paginate(0, 1, 10)["total_pages"] == 1


@pytest.mark.asyncio
async def test_second_page_holds_the_remainder(db, provider, customer, service):
    for i in range(15):
        add_appointment(db, customer, provider, service, TODAY + timedelta(days=i + 1))
    await db.commit()

    page = await list_appointments(db, customer.id, AppointmentListParams(page=2, limit=10), now=NOW)

    assert len(page["data"]) == 5
    assert page["pagination"]["has_next_page"] is False
    assert page["pagination"]["has_prev_page"] is True
    assert page["pagination"]["total_items"] == 15


@pytest.mark.asyncio
async def test_default_sort_is_date_descending(db, provider, customer, service):
    add_appointment(db, customer, provider, service, TODAY + timedelta(days=1), "09:00", "10:00")
    add_appointment(db, customer, provider, service, TODAY + timedelta(days=3))
    add_appointment(db, customer, provider, service, TODAY + timedelta(days=1), "14:00", "15:00")
    await db.commit()

    page = await list_appointments(db, customer.id, AppointmentListParams(), now=NOW)
    order = [(a.date, a.start_time) for a in page["data"]]

    assert order == [
        (TODAY + timedelta(days=3), "10:00"),
        (TODAY + timedelta(days=1), "14:00"),
        (TODAY + timedelta(days=1), "09:00"),
    ]

    page = await list_appointments(db, customer.id, AppointmentListParams(sort_order="asc"), now=NOW)
    assert page["data"][0].start_time == "09:00"


@pytest.mark.asyncio
async def test_upcoming_and_past_filters(db, provider, customer, service):
    add_appointment(db, customer, provider, service, TODAY + timedelta(days=2))
    add_appointment(db, customer, provider, service, TODAY)
    add_appointment(db, customer, provider, service, TODAY - timedelta(days=2))
    add_appointment(db, customer, provider, service, TODAY + timedelta(days=5), status=AppointmentStatus.CANCELLED)
    await db.commit()

    upcoming = await list_appointments(db, customer.id, AppointmentListParams(type="upcoming"), now=NOW)
    past = await list_appointments(db, customer.id, AppointmentListParams(type="past"), now=NOW)

    assert upcoming["pagination"]["total_items"] == 2
    assert past["pagination"]["total_items"] == 2

    stats = upcoming["stats"]
    assert stats["total"] == 4
    assert stats["today"] == 1
    assert stats["upcoming"] == 2
    assert stats["past"] == 2
    assert stats["past_booked"] == 1
    assert stats["cancelled"] == 1
    assert "total_revenue" not in stats


@pytest.mark.asyncio
async def test_filters_are_combined(db, provider, customer, service):
    add_appointment(db, customer, provider, service, date(2030, 7, 1), status=AppointmentStatus.COMPLETED)
    add_appointment(db, customer, provider, service, date(2030, 7, 5), status=AppointmentStatus.COMPLETED)
    add_appointment(db, customer, provider, service, date(2030, 7, 5), "13:00", "14:00")
    await db.commit()

    params = AppointmentListParams(status=AppointmentStatus.COMPLETED, start_date=date(2030, 7, 3), end_date=date(2030, 7, 31))
    page = await list_appointments(db, customer.id, params, now=NOW)

    assert [(a.date, a.status) for a in page["data"]] == [(date(2030, 7, 5), AppointmentStatus.COMPLETED)]


@pytest.mark.asyncio
async def test_provider_listing_filters_and_revenue(db, provider, customer, service):
    other_customer = await create_user(db, "second@example.com")
    add_appointment(db, customer, provider, service, date(2030, 7, 1), status=AppointmentStatus.COMPLETED)
    add_appointment(db, other_customer, provider, service, date(2030, 7, 1), "12:00", "13:00")
    add_appointment(db, other_customer, provider, service, date(2030, 7, 2))
    await db.commit()

    params = AppointmentListParams(date=date(2030, 7, 1), user_id=other_customer.id)
    page = await list_appointments(db, provider.id, params, as_provider=True, now=NOW)

    assert len(page["data"]) == 1
    assert page["data"][0].start_time == "12:00"
    assert page["stats"]["total"] == 3
    assert page["stats"]["total_revenue"] == 50.0


@pytest.mark.asyncio
async def test_listing_only_shows_own_appointments(db, provider, customer, service):
    stranger = await create_user(db, "stranger@example.com")
    add_appointment(db, stranger, provider, service, TODAY + timedelta(days=1))
    await db.commit()

    page = await list_appointments(db, customer.id, AppointmentListParams(), now=NOW)
    assert page["data"] == []
    assert page["pagination"]["total_pages"] == 1


@pytest.mark.asyncio
async def test_get_appointment_detail_missing(db):
    from uuid import uuid4

    with pytest.raises(NotFoundError):
        await get_appointment_detail(db, uuid4())


@pytest.mark.asyncio
async def test_my_appointments_endpoint(client, db, provider, customer, service):
    for i in range(3):
        add_appointment(db, customer, provider, service, date.today() + timedelta(days=i + 1))
    await db.commit()

    resp = await client.get(
        "/api/v1/appointments/my-appointments",
        params={"page": 1, "limit": 2, "type": "upcoming", "sortOrder": "asc"},
        headers=auth_headers(customer),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert len(body["data"]) == 2
    assert body["data"][0]["service"]["name"] == "Consultation"
    assert body["pagination"]["totalPages"] == 2
    assert body["pagination"]["hasNextPage"] is True
    assert body["stats"]["upcoming"] == 3
    assert body["stats"]["totalRevenue"] is None


@pytest.mark.asyncio
async def test_my_appointments_rejects_bad_type(client, customer):
    resp = await client.get(
        "/api/v1/appointments/my-appointments",
        params={"type": "someday"},
        headers=auth_headers(customer),
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_provider_appointments_endpoint(client, db, provider, customer, service):
    add_appointment(db, customer, provider, service, date.today() + timedelta(days=1), status=AppointmentStatus.COMPLETED)
    await db.commit()

    resp = await client.get(
        "/api/v1/appointments/provider-appointments",
        params={"userId": str(customer.id)},
        headers=auth_headers(provider),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["pagination"]["totalItems"] == 1
    assert body["stats"]["totalRevenue"] == 50.0
    assert body["data"][0]["user"]["name"] == "Casey Customer"

    resp = await client.get("/api/v1/appointments/provider-appointments", headers=auth_headers(customer))
    assert resp.status_code == 403
