"""Rate limiting configuration using slowapi.

Provides a module-level Limiter instance that can be imported by routers
for per-endpoint rate limiting, and wired into the FastAPI app in main.py.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Default: 120 requests/minute per client IP for all endpoints.
# Credential endpoints override with @limiter.limit(AUTH_RATE_LIMIT).
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["120/minute"],
)
