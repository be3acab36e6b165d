"""Workflow accounts — registration, login, bearer tokens and role gates."""

from __future__ import annotations

import pytest

from shift_manager.common.constants import WorkflowRole

REGISTER = {"name": "Alice Manager", "email": "Alice@Example.com", "password": "secret123"}


# ── Registration ────────────────────────────────────────────────────


async def test_register_defaults_to_manager(client):
    resp = await client.post("/api/workflow/auth/register", json=REGISTER)
    assert resp.status_code == 201
    data = resp.json()
    assert data["user"]["role"] == "manager"
    assert data["user"]["email"] == "alice@example.com"
    assert "password" not in data["user"]

    me = await client.get(
        "/api/workflow/auth/me", headers={"Authorization": f"Bearer {data['token']}"},
    )
    assert me.status_code == 200
    assert me.json()["id"] == data["user"]["id"]


async def test_register_duplicate_email_conflicts(client):
    await client.post("/api/workflow/auth/register", json=REGISTER)
    resp = await client.post(
        "/api/workflow/auth/register", json={**REGISTER, "email": "alice@example.com"},
    )
    assert resp.status_code == 409


async def test_first_account_may_be_admin(client):
    first = await client.post("/api/workflow/auth/register", json={**REGISTER, "role": "admin"})
    assert first.status_code == 201
    assert first.json()["user"]["role"] == "admin"

    second = await client.post(
        "/api/workflow/auth/register",
        json={"name": "Bob", "email": "bob@example.com", "password": "secret123", "role": "admin"},
    )
    assert second.status_code == 403


async def test_register_with_employee_profile(client):
    resp = await client.post(
        "/api/workflow/auth/register",
        json={
            **REGISTER,
            "role": "employee",
            "employeeProfile": {
                "firstName": "Alice",
                "lastName": "Novak",
                "email": "alice.work@example.com",
                "position": "Barista",
                "hourlyRate": 180,
            },
        },
    )
    assert resp.status_code == 201
    token = resp.json()["token"]

    me = await client.get("/api/workflow/auth/me", headers={"Authorization": f"Bearer {token}"})
    profile = me.json()["employeeProfile"]
    assert profile["position"] == "Barista"
    assert profile["userId"] == resp.json()["user"]["id"]


async def test_register_short_password(client):
    resp = await client.post("/api/workflow/auth/register", json={**REGISTER, "password": "123"})
    assert resp.status_code == 400


# ── Login ───────────────────────────────────────────────────────────


async def test_login_returns_token(client, make_wf_user):
    user, _ = await make_wf_user(email="carol@example.com", password="secret123")
    resp = await client.post(
        "/api/workflow/auth/login", json={"email": "CAROL@example.com", "password": "secret123"},
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user.id
    assert resp.json()["token"]


async def test_login_wrong_password(client, make_wf_user):
    await make_wf_user(email="carol@example.com", password="secret123")
    resp = await client.post(
        "/api/workflow/auth/login", json={"email": "carol@example.com", "password": "nope"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials"


# ── Bearer tokens ───────────────────────────────────────────────────


async def test_missing_authorization_header(client):
    resp = await client.get("/api/workflow/employees")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authorization header missing"


async def test_expired_token(client, make_wf_user, workflow_token):
    user, _ = await make_wf_user()
    token = workflow_token(user.id, expired=True)
    resp = await client.get("/api/workflow/employees", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has expired"


@pytest.mark.parametrize("header", ["Bearer not-a-jwt", "Basic abc", "Bearer"])
async def test_malformed_token(client, header):
    resp = await client.get("/api/workflow/employees", headers={"Authorization": header})
    assert resp.status_code == 401


async def test_token_for_unknown_user(client, workflow_token):
    resp = await client.get(
        "/api/workflow/employees", headers={"Authorization": f"Bearer {workflow_token(9999)}"},
    )
    assert resp.status_code == 401


# ── Role gates ──────────────────────────────────────────────────────

EMPLOYEE_BODY = {
    "firstName": "Dana",
    "lastName": "Kralova",
    "email": "dana@example.com",
    "position": "Cook",
    "hourlyRate": 200,
}


async def test_employee_reads_but_cannot_write(client, make_wf_user):
    _, headers = await make_wf_user(role=WorkflowRole.employee)

    assert (await client.get("/api/workflow/employees", headers=headers)).status_code == 200
    denied = await client.post("/api/workflow/employees", json=EMPLOYEE_BODY, headers=headers)
    assert denied.status_code == 403


async def test_only_admin_deletes_employees(client, make_wf_user):
    _, manager = await make_wf_user(role=WorkflowRole.manager)
    _, admin = await make_wf_user(role=WorkflowRole.admin)

    created = await client.post("/api/workflow/employees", json=EMPLOYEE_BODY, headers=manager)
    assert created.status_code == 201
    employee_id = created.json()["id"]

    assert (await client.delete(f"/api/workflow/employees/{employee_id}", headers=manager)).status_code == 403
    assert (await client.delete(f"/api/workflow/employees/{employee_id}", headers=admin)).status_code == 204
    assert (await client.get(f"/api/workflow/employees/{employee_id}", headers=admin)).status_code == 404


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/workflow/invoices"),
        ("get", "/api/workflow/payroll"),
        ("get", "/api/workflow/finance/overview"),
        ("post", "/api/workflow/reports/summary"),
    ],
)
async def test_staff_only_areas(client, make_wf_user, method, path):
    _, employee = await make_wf_user(role=WorkflowRole.employee)
    _, manager = await make_wf_user(role=WorkflowRole.manager)

    kwargs = {"json": {}} if method == "post" else {}
    denied = await getattr(client, method)(path, headers=employee, **kwargs)
    assert denied.status_code == 403
    allowed = await getattr(client, method)(path, headers=manager, **kwargs)
    assert allowed.status_code == 200
