"""
User-related SQLAlchemy models: users, roles, permissions and the audit log.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, CatalogMixin, IdMixin, unique_active_index, utc_now

role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utc_now),
)


class Permission(CatalogMixin, Base):
    """
    Module permission granted through roles.

    Attributes:
        code: Module code such as ``inventory_buses`` (see MODULE_PERMISSIONS)
    """

    __tablename__ = "permissions"
    __table_args__ = (unique_active_index("uq_permissions_code_active", "code"),)

    code: Mapped[str] = mapped_column(String(100))
    name: Mapped[str] = mapped_column(String(150))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Role(CatalogMixin, Base):
    __tablename__ = "roles"
    __table_args__ = (unique_active_index("uq_roles_name_active", "name"),)

    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    permissions: Mapped[list["Permission"]] = relationship("Permission", secondary=role_permissions)


class User(CatalogMixin, Base):
    """
    Back-office user.

    Attributes:
        is_system_admin: Bypasses module permission checks
    """

    __tablename__ = "users"
    __table_args__ = (
        unique_active_index("uq_users_username_active", "username"),
        unique_active_index("uq_users_email_active", "email"),
    )

    username: Mapped[str] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_system_admin: Mapped[bool] = mapped_column(Boolean, default=False)

    roles: Mapped[list["Role"]] = relationship("Role", secondary=user_roles)

    @property
    def permission_codes(self) -> set[str]:
        """Module codes granted by every active role of the user."""
        return {
            permission.code
            for role in self.roles
            if role.active and role.deleted_at is None
            for permission in role.permissions
            if permission.active and permission.deleted_at is None
        }


class Audit(IdMixin, Base):
    """
    One authorised API call.

    Written in the background after the permission check passes.
    """

    __tablename__ = "audits"

    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    endpoint: Mapped[str] = mapped_column(String(150), index=True)
    method: Mapped[str] = mapped_column(String(10))
    path: Mapped[str] = mapped_column(String(512))
    payload: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, index=True)

    user: Mapped[Optional["User"]] = relationship("User")
