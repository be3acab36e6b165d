"""Shift tests — scoped listing, hour derivation, company assignment checks,
and per-shift access for workers."""

from __future__ import annotations

from datetime import datetime

from shift_manager.common.constants import UserRole


def _shift_body(workplace_id: int, **overrides) -> dict:
    body = {
        "workplaceId": workplace_id,
        "date": "2025-03-10T00:00:00Z",
        "startTime": "2025-03-10T08:00:00Z",
        "endTime": "2025-03-10T16:30:00Z",
        "notes": "Inventura",
    }
    body.update(overrides)
    return body


# ── Create ──────────────────────────────────────────────────────────


async def test_create_derives_whole_hours(client, company, worker, make_workplace, auth_headers_for):
    workplace = await make_workplace(owner_id=company.id)
    resp = await client.post(
        "/api/shifts",
        json=_shift_body(workplace.id, userId=worker.id),
        headers=await auth_headers_for(company),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["hours"] == 8
    assert data["userId"] == worker.id
    assert data["startTime"].startswith("2025-03-10T08:00:00")


async def test_explicit_hours_kept(client, admin, make_workplace, auth_headers_for):
    workplace = await make_workplace()
    resp = await client.post(
        "/api/shifts",
        json=_shift_body(workplace.id, hours=6),
        headers=await auth_headers_for(admin),
    )
    assert resp.status_code == 201
    assert resp.json()["hours"] == 6


async def test_unparseable_dates_are_dropped(client, admin, make_workplace, auth_headers_for):
    workplace = await make_workplace()
    resp = await client.post(
        "/api/shifts",
        json=_shift_body(workplace.id, startTime="zitra", endTime=""),
        headers=await auth_headers_for(admin),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["startTime"] is None
    assert data["hours"] is None


async def test_workplace_required(client, admin, auth_headers_for):
    resp = await client.post("/api/shifts", json={"notes": "x"}, headers=await auth_headers_for(admin))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Workplace ID is required"


async def test_company_cannot_use_foreign_workplace(client, company, make_user, make_workplace, auth_headers_for):
    other = await make_user(role=UserRole.company)
    foreign = await make_workplace(owner_id=other.id)
    resp = await client.post(
        "/api/shifts", json=_shift_body(foreign.id), headers=await auth_headers_for(company),
    )
    assert resp.status_code == 403


async def test_company_cannot_assign_foreign_worker(client, company, make_user, make_workplace, auth_headers_for):
    workplace = await make_workplace(owner_id=company.id)
    stranger = await make_user(role=UserRole.worker)
    resp = await client.post(
        "/api/shifts",
        json=_shift_body(workplace.id, userId=stranger.id),
        headers=await auth_headers_for(company),
    )
    assert resp.status_code == 403


async def test_worker_cannot_create(client, worker, make_workplace, auth_headers_for):
    workplace = await make_workplace()
    resp = await client.post("/api/shifts", json=_shift_body(workplace.id), headers=await auth_headers_for(worker))
    assert resp.status_code == 403


# ── List ────────────────────────────────────────────────────────────


async def test_worker_lists_only_own_shifts(client, worker, make_user, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace()
    colleague = await make_user(role=UserRole.worker)
    mine = await make_shift(workplace_id=workplace.id, user_id=worker.id)
    await make_shift(workplace_id=workplace.id, user_id=colleague.id)

    resp = await client.get("/api/shifts", headers=await auth_headers_for(worker))
    assert resp.status_code == 200
    data = resp.json()
    assert [s["id"] for s in data] == [mine.id]
    assert data[0]["workplace"]["id"] == workplace.id
    assert data[0]["user"]["id"] == worker.id
    assert "password" not in data[0]["user"]


async def test_date_window_filter(client, admin, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace()
    early = await make_shift(workplace_id=workplace.id, start=datetime(2025, 3, 1, 8))
    await make_shift(workplace_id=workplace.id, start=datetime(2025, 4, 1, 8))

    resp = await client.get(
        "/api/shifts",
        params={"startDate": "2025-03-01T00:00:00Z", "endDate": "2025-03-31T23:59:59Z"},
        headers=await auth_headers_for(admin),
    )
    assert [s["id"] for s in resp.json()] == [early.id]


async def test_company_sees_shifts_of_its_workplaces_and_workers(
    client, company, worker, make_user, make_workplace, make_shift, auth_headers_for,
):
    other = await make_user(role=UserRole.company)
    own_place = await make_workplace(owner_id=company.id)
    foreign_place = await make_workplace(owner_id=other.id)

    at_own = await make_shift(workplace_id=own_place.id)
    own_worker_elsewhere = await make_shift(workplace_id=foreign_place.id, user_id=worker.id)
    await make_shift(workplace_id=foreign_place.id)

    resp = await client.get("/api/shifts", headers=await auth_headers_for(company))
    assert {s["id"] for s in resp.json()} == {at_own.id, own_worker_elsewhere.id}


# ── Detail / update / delete ────────────────────────────────────────


async def test_worker_forbidden_on_foreign_shift(client, worker, make_user, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace()
    colleague = await make_user(role=UserRole.worker)
    shift = await make_shift(workplace_id=workplace.id, user_id=colleague.id)

    resp = await client.get(f"/api/shifts/{shift.id}", headers=await auth_headers_for(worker))
    assert resp.status_code == 403


async def test_worker_edits_only_notes_of_own_shift(client, worker, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace()
    other_place = await make_workplace(name="Jinde")
    shift = await make_shift(workplace_id=workplace.id, user_id=worker.id)

    resp = await client.put(
        f"/api/shifts/{shift.id}",
        json={"notes": "Přijdu o 10 minut dřív", "workplaceId": other_place.id, "userId": None},
        headers=await auth_headers_for(worker),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["notes"] == "Přijdu o 10 minut dřív"
    assert data["workplaceId"] == workplace.id
    assert data["userId"] == worker.id


async def test_update_times_recomputes_hours(client, admin, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace()
    shift = await make_shift(workplace_id=workplace.id, hours=8)

    resp = await client.put(
        f"/api/shifts/{shift.id}",
        json={"startTime": "2025-03-10T10:00:00Z", "endTime": "2025-03-10T14:45:00Z"},
        headers=await auth_headers_for(admin),
    )
    assert resp.json()["hours"] == 4


async def test_worker_cannot_delete_own_shift(client, worker, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace()
    shift = await make_shift(workplace_id=workplace.id, user_id=worker.id)
    resp = await client.delete(f"/api/shifts/{shift.id}", headers=await auth_headers_for(worker))
    assert resp.status_code == 403


async def test_company_deletes_shift_at_own_workplace(client, company, make_workplace, make_shift, auth_headers_for):
    workplace = await make_workplace(owner_id=company.id)
    shift = await make_shift(workplace_id=workplace.id)
    headers = await auth_headers_for(company)

    resp = await client.delete(f"/api/shifts/{shift.id}", headers=headers)
    assert resp.status_code == 204
    gone = await client.get(f"/api/shifts/{shift.id}", headers=headers)
    assert gone.status_code == 404
