"""Business rules for users, roles and permissions."""

from inventory_core.constants import MODULE_PERMISSIONS
from inventory_core.errors import FieldErrorCollector
from inventory_core.repositories import (
    PermissionRepository,
    RoleRepository,
    UniqueField,
    UserRepository,
)

from .common import check_choice, check_id_list, check_uniqueness


def validate_user(repo: UserRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(
        repo,
        collector,
        [UniqueField("username", payload.get("username")), UniqueField("email", payload.get("email"))],
        current_id,
    )
    collector.throw_if_errors()
    return payload


def validate_role(repo: RoleRepository, payload: dict, current_id: int | None = None) -> dict:
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("name", payload.get("name"))], current_id)
    collector.throw_if_errors()
    return payload


def validate_permission(repo: PermissionRepository, payload: dict, current_id: int | None = None) -> dict:
    """Permission codes must be one of the known module codes."""
    collector = FieldErrorCollector()
    check_uniqueness(repo, collector, [UniqueField("code", payload.get("code"))], current_id)
    check_choice(collector, "code", payload.get("code"), sorted(MODULE_PERMISSIONS.values()))
    collector.throw_if_errors()
    return payload


def validate_user_roles(repo: UserRepository, user_id: int, role_ids: list[int]) -> None:
    collector = FieldErrorCollector()
    repo.find_one(user_id)
    check_id_list(
        collector,
        "roleIds",
        role_ids,
        RoleRepository(repo.session),
        "Roles",
        "Duplicate role IDs are not allowed in the assignment",
    )
    collector.throw_if_errors()


def validate_role_permissions(repo: RoleRepository, role_id: int, permission_ids: list[int]) -> None:
    collector = FieldErrorCollector()
    repo.find_one(role_id)
    check_id_list(
        collector,
        "permissionIds",
        permission_ids,
        PermissionRepository(repo.session),
        "Permissions",
        "Duplicate permission IDs are not allowed in the assignment",
    )
    collector.throw_if_errors()
