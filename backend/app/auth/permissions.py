"""
Module-permission checks and audit scheduling for protected endpoints.

Every protected route depends on ``require_permission("service:endpoint")``.
The endpoint name is looked up in ENDPOINT_TO_MODULES; the user passes when
one of their role permissions is among the endpoint's modules. System
administrators always pass. Endpoints that are not mapped, or mapped to no
module, are reserved for system administrators.

Usage:
    @router.post("/countries")
    def create_country(user: User = Depends(require_permission("inventory:createCountry"))):
        ...
"""

import json

from fastapi import BackgroundTasks, Depends, Request

from inventory_core.constants import ENDPOINT_TO_MODULES
from inventory_core.errors import UnauthorizedError
from inventory_core.logging import get_logger
from inventory_core.models import User

from ..config import get_settings
from ..services import audit_service
from .dependencies import get_current_user

logger = get_logger("api.permissions")


def has_permission(user: User, endpoint: str) -> bool:
    if user.is_system_admin:
        return True
    modules = ENDPOINT_TO_MODULES.get(endpoint)
    if not modules:
        return False
    return not user.permission_codes.isdisjoint(modules)


async def _request_payload(request: Request) -> dict | None:
    body = await request.body()
    if not body:
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else {"data": payload}


def require_permission(endpoint: str):
    """Build a dependency that authorises ``endpoint`` and audits the call."""

    async def check_permission(
        request: Request,
        background_tasks: BackgroundTasks,
        user: User = Depends(get_current_user),
    ) -> User:
        if not has_permission(user, endpoint):
            logger.warning("permission_denied", user_id=user.id, endpoint=endpoint)
            raise UnauthorizedError()

        if get_settings().audit_enabled:
            background_tasks.add_task(
                audit_service.record_audit,
                user_id=user.id,
                endpoint=endpoint,
                method=request.method,
                path=request.url.path,
                payload=await _request_payload(request),
                ip_address=request.client.host if request.client else None,
            )
        return user

    return check_permission
