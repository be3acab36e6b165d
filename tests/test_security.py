"""Security test suite — rate limits on credential endpoints, response headers,
password and session-token storage.

Run: pytest tests/test_security.py -v
"""

from __future__ import annotations

from http.cookies import SimpleCookie

import pytest
from sqlalchemy import select

from shift_manager.auth.models import User, UserSession
from shift_manager.auth.service import hash_password, hash_token, verify_password
from shift_manager.common.constants import AUTH_RATE_LIMIT
from shift_manager.config import settings


# ═════════════════════════════════════════════════════════════════════
# 1. RATE LIMITING
# ═════════════════════════════════════════════════════════════════════


class TestRateLimiting:
    """Verify rate limits on auth endpoints."""

    @pytest.fixture(autouse=True)
    def _enable_limiter(self):
        """Ensure rate limiter is enabled for these tests."""
        from shift_manager.common.rate_limit import limiter
        original = limiter.enabled
        limiter.enabled = True
        yield
        limiter.enabled = original

    async def test_login_rate_limited(self, client, make_user):
        """POST /login allows AUTH_RATE_LIMIT requests per minute, then 429."""
        await make_user(email="jana@example.com", password="heslo123")
        allowed = int(AUTH_RATE_LIMIT.split("/")[0])

        for i in range(allowed):
            resp = await client.post("/api/login", json={"email": "jana@example.com", "password": f"bad-{i}"})
            # Failed logins still count toward the limit
            assert resp.status_code == 401, f"Request {i+1} should not be rate-limited"

        resp = await client.post("/api/login", json={"email": "jana@example.com", "password": "heslo123"})
        assert resp.status_code == 429

    async def test_health_not_limited_by_credential_rule(self, client):
        allowed = int(AUTH_RATE_LIMIT.split("/")[0])
        for _ in range(allowed + 1):
            resp = await client.get("/api/health")
            assert resp.status_code == 200


# ═════════════════════════════════════════════════════════════════════
# 2. RESPONSE HEADERS
# ═════════════════════════════════════════════════════════════════════


class TestSecurityHeaders:

    async def test_headers_on_every_response(self, client):
        resp = await client.get("/api/user")
        assert resp.status_code == 401
        assert resp.headers["X-Frame-Options"] == "DENY"
        assert resp.headers["X-Content-Type-Options"] == "nosniff"

    async def test_csp_only_in_production(self, client):
        resp = await client.get("/api/health")
        assert "Content-Security-Policy" not in resp.headers


# ═════════════════════════════════════════════════════════════════════
# 3. CREDENTIAL STORAGE
# ═════════════════════════════════════════════════════════════════════


class TestCredentialStorage:

    def test_passwords_hashed_with_scrypt(self):
        stored = hash_password("tajneheslo")
        assert stored.startswith("scrypt:")
        assert verify_password("tajneheslo", stored)
        assert not verify_password("jineheslo", stored)

    async def test_register_never_stores_plain_password(self, client, db):
        await client.post(
            "/api/register",
            json={
                "firstName": "Eva",
                "lastName": "Malá",
                "username": "eva",
                "email": "eva@example.com",
                "password": "tajneheslo",
            },
        )
        result = await db.execute(select(User).where(User.email == "eva@example.com"))
        user = result.scalars().first()
        assert user.role == "worker"
        assert user.password != "tajneheslo"

    async def test_session_cookie_and_token_hash(self, client, db, make_user):
        user = await make_user(email="jana@example.com", password="heslo123")
        resp = await client.post("/api/login", json={"email": "jana@example.com", "password": "heslo123"})

        raw_cookie = resp.headers["set-cookie"]
        assert "httponly" in raw_cookie.lower()
        assert "samesite=lax" in raw_cookie.lower()

        jar = SimpleCookie()
        jar.load(raw_cookie)
        token = jar[settings.SESSION_COOKIE_NAME].value

        result = await db.execute(select(UserSession).where(UserSession.user_id == user.id))
        session = result.scalars().first()
        # Only the digest is persisted
        assert session.token_hash == hash_token(token)
        assert session.token_hash != token
