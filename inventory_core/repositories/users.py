"""User, role, permission and audit repositories."""

from inventory_core.models import Audit, Permission, Role, User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
    searchable_fields = ("username", "email", "first_name", "last_name")

    def get_active_by_id(self, user_id: int) -> User | None:
        """Non-deleted, active user, used to resolve bearer tokens."""
        user = self.find_by("id", user_id)
        if user is None or not user.active:
            return None
        return user

    def assign_roles(self, user: User, roles: list[Role]) -> User:
        user.roles = roles
        self._flush("assign roles to", {"id": user.id})
        return user


class RoleRepository(BaseRepository[Role]):
    model = Role
    searchable_fields = ("name", "description")

    def assign_permissions(self, role: Role, permissions: list[Permission]) -> Role:
        role.permissions = permissions
        self._flush("assign permissions to", {"id": role.id})
        return role


class PermissionRepository(BaseRepository[Permission]):
    model = Permission
    searchable_fields = ("code", "name", "description")


class AuditRepository(BaseRepository[Audit]):
    model = Audit
    searchable_fields = ("endpoint", "path")
    soft_delete_enabled = False
