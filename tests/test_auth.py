"""Auth module test suite — registration, cookie sessions, CSRF, inactivity,
logout and the password reset flow."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from http.cookies import SimpleCookie

from sqlalchemy import select

from shift_manager.auth.models import PasswordResetCode, UserSession
from shift_manager.auth.service import (
    INVALID_CREDENTIALS,
    SESSION_EXPIRED_INACTIVITY,
    hash_token,
)
from shift_manager.common.audit import AuditTrail
from shift_manager.common.constants import UserRole
from shift_manager.config import settings


def _session_cookie(resp) -> str:
    """Pull the session token out of the Set-Cookie header."""
    jar = SimpleCookie()
    jar.load(resp.headers["set-cookie"])
    return jar[settings.SESSION_COOKIE_NAME].value


def _register_body(**overrides) -> dict:
    body = {
        "firstName": "Petr",
        "lastName": "Svoboda",
        "username": "petr",
        "email": "Petr@Example.com",
        "password": "tajneheslo",
        "role": "company",
        "companyName": "Svoboda s.r.o.",
    }
    body.update(overrides)
    return body


# ── Registration ────────────────────────────────────────────────────


async def test_register_opens_session(client, db):
    """Successful registration → 201, session cookie, no password in body."""
    resp = await client.post("/api/register", json=_register_body())
    assert resp.status_code == 201
    data = resp.json()
    assert data["email"] == "petr@example.com"
    assert data["role"] == "company"
    assert data["companyName"] == "Svoboda s.r.o."
    assert data["csrfToken"]
    assert "password" not in data

    token = _session_cookie(resp)
    result = await db.execute(select(UserSession).where(UserSession.token_hash == hash_token(token)))
    assert result.scalars().first() is not None


async def test_register_duplicate_email(client, make_user):
    await make_user(email="petr@example.com")
    resp = await client.post("/api/register", json=_register_body())
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already exists"


async def test_register_duplicate_username(client, make_user):
    await make_user(username="petr")
    resp = await client.post("/api/register", json=_register_body())
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username already exists"


async def test_register_admin_role_rejected(client):
    resp = await client.post("/api/register", json=_register_body(role="admin"))
    assert resp.status_code == 403


async def test_register_invalid_email(client):
    resp = await client.post("/api/register", json=_register_body(email="not-an-email"))
    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith("application/problem+json")


# ── Login / current user ────────────────────────────────────────────


async def test_login_and_fetch_current_user(client, make_user):
    user = await make_user(email="jana@example.com", password="heslo123")

    resp = await client.post("/api/login", json={"email": "JANA@example.com", "password": "heslo123"})
    assert resp.status_code == 200
    login = resp.json()
    assert login["id"] == user.id

    token = _session_cookie(resp)
    me = await client.get("/api/user", headers={"Cookie": f"sid={token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "jana@example.com"
    assert me.json()["csrfToken"] == login["csrfToken"]


async def test_login_wrong_password(client, make_user):
    await make_user(email="jana@example.com", password="heslo123")
    resp = await client.post("/api/login", json={"email": "jana@example.com", "password": "spatne"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == INVALID_CREDENTIALS


async def test_login_writes_audit_entry(client, db, make_user):
    user = await make_user(email="jana@example.com", password="heslo123")
    await client.post("/api/login", json={"email": "jana@example.com", "password": "heslo123"})

    result = await db.execute(select(AuditTrail).where(AuditTrail.action == "login"))
    entry = result.scalars().first()
    assert entry is not None
    assert entry.actor_id == user.id


async def test_current_user_requires_cookie(client):
    resp = await client.get("/api/user")
    assert resp.status_code == 401


async def test_tampered_cookie_rejected(client):
    resp = await client.get("/api/user", headers={"Cookie": "sid=not-a-token"})
    assert resp.status_code == 401


# ── Inactivity / logout ─────────────────────────────────────────────


async def test_inactive_session_is_revoked(client, db, worker, auth_headers_for):
    headers = await auth_headers_for(worker)
    result = await db.execute(select(UserSession).where(UserSession.user_id == worker.id))
    session = result.scalars().first()
    session.last_active_at = datetime.now(timezone.utc) - timedelta(
        minutes=settings.SESSION_INACTIVITY_MINUTES + 1,
    )
    await db.commit()

    resp = await client.get("/api/user", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == SESSION_EXPIRED_INACTIVITY

    await db.refresh(session)
    assert session.is_revoked is True


async def test_logout_revokes_session(client, worker, auth_headers_for):
    headers = await auth_headers_for(worker)

    resp = await client.post("/api/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    again = await client.get("/api/user", headers=headers)
    assert again.status_code == 401


# ── CSRF ────────────────────────────────────────────────────────────


async def test_csrf_enforced_blocks_missing_header(client, worker, auth_headers_for, monkeypatch):
    monkeypatch.setattr(settings, "CSRF_ENFORCE", True)
    headers = await auth_headers_for(worker)
    cookie_only = {"Cookie": headers["Cookie"]}

    resp = await client.post("/api/logout", headers=cookie_only)
    assert resp.status_code == 403

    ok = await client.post("/api/logout", headers=headers)
    assert ok.status_code == 200


async def test_csrf_not_checked_on_reads(client, worker, auth_headers_for, monkeypatch):
    monkeypatch.setattr(settings, "CSRF_ENFORCE", True)
    headers = await auth_headers_for(worker)
    resp = await client.get("/api/user", headers={"Cookie": headers["Cookie"]})
    assert resp.status_code == 200


# ── Visible users ───────────────────────────────────────────────────


async def test_users_scoped_by_role(client, admin, company, worker, make_user, auth_headers_for):
    outsider = await make_user(role=UserRole.worker)

    as_company = await client.get("/api/users", headers=await auth_headers_for(company))
    assert {u["id"] for u in as_company.json()} == {company.id, worker.id}

    as_worker = await client.get("/api/users", headers=await auth_headers_for(worker))
    assert [u["id"] for u in as_worker.json()] == [worker.id]

    as_admin = await client.get("/api/users", headers=await auth_headers_for(admin))
    assert {admin.id, company.id, worker.id, outsider.id} <= {u["id"] for u in as_admin.json()}


# ── Password reset ──────────────────────────────────────────────────


async def test_password_reset_flow(client, db, make_user, monkeypatch):
    await make_user(email="jana@example.com", password="stareheslo")
    monkeypatch.setattr("shift_manager.auth.service.generate_reset_code", lambda: "123456")

    resp = await client.post("/api/reset-password", json={"email": "jana@example.com"})
    assert resp.status_code == 200

    # Stored hashed, never in clear text
    result = await db.execute(select(PasswordResetCode))
    entry = result.scalars().first()
    assert entry.code_hash == hash_token("123456")

    confirm = await client.post(
        "/api/reset-password/confirm",
        json={"email": "jana@example.com", "code": "123456", "newPassword": "noveheslo"},
    )
    assert confirm.status_code == 200

    login = await client.post("/api/login", json={"email": "jana@example.com", "password": "noveheslo"})
    assert login.status_code == 200

    # A code works only once
    reuse = await client.post(
        "/api/reset-password/confirm",
        json={"email": "jana@example.com", "code": "123456", "newPassword": "jineheslo"},
    )
    assert reuse.status_code == 400


async def test_password_reset_unknown_email(client):
    resp = await client.post("/api/reset-password", json={"email": "nikdo@example.com"})
    assert resp.status_code == 404


async def test_password_reset_wrong_code(client, make_user, monkeypatch):
    await make_user(email="jana@example.com")
    monkeypatch.setattr("shift_manager.auth.service.generate_reset_code", lambda: "123456")
    await client.post("/api/reset-password", json={"email": "jana@example.com"})

    resp = await client.post(
        "/api/reset-password/confirm",
        json={"email": "jana@example.com", "code": "654321", "newPassword": "noveheslo"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid or expired code"


async def test_password_reset_missing_fields(client):
    resp = await client.post("/api/reset-password/confirm", json={"email": "jana@example.com"})
    assert resp.status_code == 400


# ── Health ──────────────────────────────────────────────────────────


async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert resp.headers["X-Frame-Options"] == "DENY"
