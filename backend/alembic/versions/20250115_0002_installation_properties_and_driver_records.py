"""installation properties and driver records

Revision ID: 20250115_0002
Revises: 20250101_0001
Create Date: 2025-01-15

Adds typed property schemas per installation type with their per-installation
values, and the time-offs and medical checks of drivers.
"""

from alembic import op
import sqlalchemy as sa


revision = "20250115_0002"
down_revision = "20250101_0001"
branch_labels = None
depends_on = None

ACTIVE_ROWS = sa.text("deleted_at IS NULL")


def catalog_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "installation_schemas",
        *catalog_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=150)),
        sa.Column("description", sa.Text()),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "installation_type_id",
            sa.Integer(),
            sa.ForeignKey("installation_types.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("ix_installation_schemas_id", "installation_schemas", ["id"])
    op.create_index("ix_installation_schemas_deleted_at", "installation_schemas", ["deleted_at"])
    op.create_index(
        "ix_installation_schemas_installation_type_id", "installation_schemas", ["installation_type_id"]
    )
    op.create_index(
        "uq_installation_schemas_type_name_active",
        "installation_schemas",
        ["installation_type_id", "name"],
        unique=True,
        postgresql_where=ACTIVE_ROWS,
        sqlite_where=ACTIVE_ROWS,
    )

    op.create_table(
        "installation_properties",
        *timestamp_columns(),
        sa.Column(
            "installation_id",
            sa.Integer(),
            sa.ForeignKey("installations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "installation_schema_id",
            sa.Integer(),
            sa.ForeignKey("installation_schemas.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("value", sa.Text()),
        sa.UniqueConstraint(
            "installation_id", "installation_schema_id", name="uq_installation_properties_schema"
        ),
    )
    op.create_index(
        "ix_installation_properties_installation_id", "installation_properties", ["installation_id"]
    )

    op.create_table(
        "driver_time_offs",
        *catalog_columns(),
        sa.Column(
            "driver_id", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("reason", sa.Text()),
    )
    op.create_index("ix_driver_time_offs_id", "driver_time_offs", ["id"])
    op.create_index("ix_driver_time_offs_deleted_at", "driver_time_offs", ["deleted_at"])
    op.create_index("ix_driver_time_offs_driver_id", "driver_time_offs", ["driver_id"])
    op.create_index(
        "ix_driver_time_offs_driver_dates", "driver_time_offs", ["driver_id", "start_date", "end_date"]
    )

    op.create_table(
        "driver_medical_checks",
        *timestamp_columns(),
        sa.Column(
            "driver_id", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("check_date", sa.Date(), nullable=False),
        sa.Column("days_until_next_check", sa.Integer(), nullable=False),
        sa.Column("next_check_date", sa.Date(), nullable=False),
        sa.Column("result", sa.String(length=20), nullable=False),
        sa.Column("source", sa.String(length=20), nullable=False, server_default="MANUAL"),
        sa.Column("notes", sa.Text()),
    )
    op.create_index("ix_driver_medical_checks_driver_id", "driver_medical_checks", ["driver_id"])


def downgrade() -> None:
    for table in (
        "driver_medical_checks",
        "driver_time_offs",
        "installation_properties",
        "installation_schemas",
    ):
        op.drop_table(table)
