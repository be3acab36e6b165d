"""Workflow auth dependencies — stateless bearer JWT, role gates."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from shift_manager.common.constants import WorkflowRole
from shift_manager.common.exceptions import ForbiddenException, UnauthorizedException
from shift_manager.config import settings
from shift_manager.database import get_db
from shift_manager.workflow.models import WorkflowUser

logger = logging.getLogger(__name__)


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise UnauthorizedException(detail="Authorization header missing")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedException(detail="Token missing")
    return token


async def get_workflow_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> WorkflowUser:
    """Validate the bearer JWT and return the WorkflowUser it names."""
    token = _extract_bearer(request)
    try:
        payload = jwt.decode(
            token,
            settings.WORKFLOW_JWT_SECRET,
            algorithms=[settings.WORKFLOW_JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise UnauthorizedException(detail="Token has expired")
    except JWTError:
        raise UnauthorizedException(detail="Invalid or expired token")

    try:
        user_id = int(payload["id"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedException(detail="Invalid token")

    user = await db.get(WorkflowUser, user_id)
    if user is None:
        raise UnauthorizedException(detail="Invalid token")
    return user


def require_workflow_role(*allowed_roles: WorkflowRole) -> Callable:
    """Return a dependency that enforces workflow role membership."""
    allowed = {r.value for r in allowed_roles}

    async def _check(user: WorkflowUser = Depends(get_workflow_user)) -> WorkflowUser:
        if user.role not in allowed:
            logger.warning(
                "Workflow user %s (%s) denied: requires %s",
                user.id,
                user.role,
                sorted(allowed),
            )
            raise ForbiddenException(detail="Forbidden")
        return user

    return _check


# Shorthands for the common gates
staff_only = require_workflow_role(WorkflowRole.admin, WorkflowRole.manager)
admin_only = require_workflow_role(WorkflowRole.admin)
