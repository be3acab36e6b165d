"""Worker management tests — company-owned accounts, role changes, deletion."""

from __future__ import annotations

from sqlalchemy import select

from shift_manager.auth.models import User
from shift_manager.common.constants import UserRole


def _worker_body(**overrides) -> dict:
    body = {
        "firstName": "Eva",
        "lastName": "Malá",
        "username": "eva",
        "email": "Eva@Example.com",
        "password": "heslo123",
        "hourlyWage": "185",
        "phone": "+420 603 111 222",
    }
    body.update(overrides)
    return body


async def test_company_creates_own_worker(client, db, company, auth_headers_for):
    resp = await client.post(
        "/api/workers",
        json=_worker_body(role="admin", parentCompanyId=None),
        headers=await auth_headers_for(company),
    )
    assert resp.status_code == 201
    data = resp.json()
    # A company can only ever create workers of its own
    assert data["role"] == "worker"
    assert data["parentCompanyId"] == company.id
    assert data["email"] == "eva@example.com"
    assert data["hourlyWage"] == 185
    assert "password" not in data

    result = await db.execute(select(User).where(User.id == data["id"]))
    assert result.scalars().first().password != "heslo123"


async def test_admin_may_create_any_role(client, admin, auth_headers_for):
    resp = await client.post(
        "/api/workers",
        json=_worker_body(role="company", companyName="Nová firma"),
        headers=await auth_headers_for(admin),
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "company"


async def test_worker_cannot_create_accounts(client, worker, auth_headers_for):
    resp = await client.post("/api/workers", json=_worker_body(), headers=await auth_headers_for(worker))
    assert resp.status_code == 403


async def test_duplicate_email_rejected(client, company, worker, auth_headers_for):
    resp = await client.post(
        "/api/workers",
        json=_worker_body(email=worker.email, username="jiny"),
        headers=await auth_headers_for(company),
    )
    assert resp.status_code == 400


async def test_list_is_scoped(client, company, worker, make_user, auth_headers_for):
    await make_user(role=UserRole.worker)
    resp = await client.get("/api/workers", headers=await auth_headers_for(company))
    assert {u["id"] for u in resp.json()} == {company.id, worker.id}


# ── Update ──────────────────────────────────────────────────────────


async def test_worker_updates_own_profile(client, worker, auth_headers_for):
    resp = await client.patch(
        f"/api/workers/{worker.id}",
        json={"phone": "+420 777 000 111", "hourlyWage": ""},
        headers=await auth_headers_for(worker),
    )
    assert resp.status_code == 200
    assert resp.json()["phone"] == "+420 777 000 111"


async def test_non_admin_cannot_change_role(client, company, worker, auth_headers_for):
    as_worker = await client.patch(
        f"/api/workers/{worker.id}", json={"role": "company"}, headers=await auth_headers_for(worker),
    )
    assert as_worker.status_code == 403

    as_company = await client.patch(
        f"/api/workers/{worker.id}", json={"role": "admin"}, headers=await auth_headers_for(company),
    )
    assert as_company.status_code == 403


async def test_admin_changes_role(client, admin, worker, auth_headers_for):
    resp = await client.patch(
        f"/api/workers/{worker.id}", json={"role": "company"}, headers=await auth_headers_for(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "company"


async def test_cannot_update_stranger(client, company, make_user, auth_headers_for):
    stranger = await make_user(role=UserRole.worker)
    resp = await client.patch(
        f"/api/workers/{stranger.id}", json={"notes": "x"}, headers=await auth_headers_for(company),
    )
    assert resp.status_code == 403


# ── Delete ──────────────────────────────────────────────────────────


async def test_cannot_delete_self(client, company, auth_headers_for):
    resp = await client.delete(f"/api/workers/{company.id}", headers=await auth_headers_for(company))
    assert resp.status_code == 400


async def test_parent_company_deletes_worker(client, db, company, worker, auth_headers_for):
    resp = await client.delete(f"/api/workers/{worker.id}", headers=await auth_headers_for(company))
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    result = await db.execute(
        select(User).where(User.id == worker.id).execution_options(populate_existing=True),
    )
    assert result.scalars().first() is None


async def test_worker_cannot_delete_colleague(client, worker, company, make_user, auth_headers_for):
    colleague = await make_user(role=UserRole.worker, parent_company_id=company.id)
    resp = await client.delete(f"/api/workers/{colleague.id}", headers=await auth_headers_for(worker))
    assert resp.status_code == 403
