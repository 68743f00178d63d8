"""
User, role, permission and audit endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_core.domain import (
    validate_permission,
    validate_role,
    validate_role_permissions,
    validate_user,
    validate_user_roles,
)
from inventory_core.models import User
from inventory_core.repositories import PermissionRepository, RoleRepository, UserRepository

from ..auth.permissions import require_permission
from ..database import get_db
from ..schemas import (
    AuditResponse,
    ListRequest,
    PaginatedResponse,
    PermissionCreate,
    PermissionIdsRequest,
    PermissionResponse,
    PermissionUpdate,
    RoleCreate,
    RoleIdsRequest,
    RoleResponse,
    RoleUpdate,
    RoleWithPermissionsResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
    UserWithRolesResponse,
)
from ..services import audit_service, crud_service
from .crud import CrudResource, add_crud_routes, crud_router

# =============================================================================
# Users & roles
# =============================================================================

users_router = APIRouter(prefix="/users", tags=["users"])


@users_router.put("/{user_id}/roles", response_model=UserWithRolesResponse)
def assign_roles_to_user(
    user_id: int,
    payload: RoleIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:assignRolesToUser")),
):
    return crud_service.assign_related(
        db,
        UserRepository,
        RoleRepository,
        user_id,
        payload.role_ids,
        validate_user_roles,
        UserRepository.assign_roles,
    )


add_crud_routes(
    users_router,
    CrudResource(
        singular="User",
        plural="Users",
        repository=UserRepository,
        create_schema=UserCreate,
        update_schema=UserUpdate,
        response_schema=UserResponse,
        validator=validate_user,
        service="users",
    ),
)

roles_router = APIRouter(prefix="/roles", tags=["roles"])


@roles_router.put("/{role_id}/permissions", response_model=RoleWithPermissionsResponse)
def assign_permissions_to_role(
    role_id: int,
    payload: PermissionIdsRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:assignPermissionsToRole")),
):
    return crud_service.assign_related(
        db,
        RoleRepository,
        PermissionRepository,
        role_id,
        payload.permission_ids,
        validate_role_permissions,
        RoleRepository.assign_permissions,
    )


add_crud_routes(
    roles_router,
    CrudResource(
        singular="Role",
        plural="Roles",
        repository=RoleRepository,
        create_schema=RoleCreate,
        update_schema=RoleUpdate,
        response_schema=RoleResponse,
        validator=validate_role,
        service="users",
    ),
)

permissions_router = crud_router(
    "/permissions",
    ["permissions"],
    CrudResource(
        singular="Permission",
        plural="Permissions",
        repository=PermissionRepository,
        create_schema=PermissionCreate,
        update_schema=PermissionUpdate,
        response_schema=PermissionResponse,
        validator=validate_permission,
        service="users",
    ),
)


# =============================================================================
# Audits
# =============================================================================

audits_router = APIRouter(prefix="/audits", tags=["audits"])


@audits_router.post("/list", response_model=PaginatedResponse[AuditResponse])
def list_audits_paginated(
    request: ListRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission("users:listAuditsPaginated")),
):
    """Audit trail, newest first. System administrators only."""
    result = audit_service.list_audits(db, request.to_params())
    return {"data": result.data, "pagination": result.pagination.to_dict()}


routers = [users_router, roles_router, permissions_router, audits_router]
