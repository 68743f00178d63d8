"""initial inventory schema

Revision ID: 20250101_0001
Revises:
Create Date: 2025-01-01

Creates every inventory, user and audit table. Uniqueness on codes and
names is enforced by partial indexes that ignore soft-deleted rows.
"""

from alembic import op
import sqlalchemy as sa


revision = "20250101_0001"
down_revision = None
branch_labels = None
depends_on = None

ACTIVE_ROWS = sa.text("deleted_at IS NULL")


def catalog_columns() -> list[sa.Column]:
    """id, active, timestamps and soft delete, shared by every catalog table."""
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def create_catalog_table(name: str, *columns: sa.Column) -> None:
    op.create_table(name, *catalog_columns(), *columns)
    op.create_index(f"ix_{name}_id", name, ["id"])
    op.create_index(f"ix_{name}_deleted_at", name, ["deleted_at"])


def create_unique_active_index(name: str, table: str, columns: list[str]) -> None:
    op.create_index(
        name,
        table,
        columns,
        unique=True,
        postgresql_where=ACTIVE_ROWS,
        sqlite_where=ACTIVE_ROWS,
    )


def create_join_table(name: str, left: tuple[str, str], right: tuple[str, str]) -> None:
    left_column, left_table = left
    right_column, right_table = right
    op.create_table(
        name,
        sa.Column(
            left_column,
            sa.Integer(),
            sa.ForeignKey(f"{left_table}.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            right_column,
            sa.Integer(),
            sa.ForeignKey(f"{right_table}.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def upgrade() -> None:
    # ==========================================================================
    # Geography
    # ==========================================================================

    create_catalog_table(
        "countries",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=False),
    )
    create_unique_active_index("uq_countries_name_active", "countries", ["name"])
    create_unique_active_index("uq_countries_code_active", "countries", ["code"])

    create_catalog_table(
        "states",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=False),
        sa.Column("country_id", sa.Integer(), sa.ForeignKey("countries.id"), nullable=False),
    )
    op.create_index("ix_states_country_id", "states", ["country_id"])
    create_unique_active_index("uq_states_code_active", "states", ["code"])
    create_unique_active_index("uq_states_country_name_active", "states", ["country_id", "name"])

    create_catalog_table(
        "cities",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=150), nullable=False),
        sa.Column("timezone", sa.String(length=50), nullable=False, server_default="UTC"),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("state_id", sa.Integer(), sa.ForeignKey("states.id"), nullable=False),
    )
    op.create_index("ix_cities_state_id", "cities", ["state_id"])
    create_unique_active_index("uq_cities_slug_active", "cities", ["slug"])

    create_catalog_table(
        "populations",
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text()),
    )
    create_unique_active_index("uq_populations_code_active", "populations", ["code"])
    create_join_table("population_cities", ("population_id", "populations"), ("city_id", "cities"))

    # ==========================================================================
    # Installations, nodes & their catalogs
    # ==========================================================================

    create_catalog_table(
        "installation_types",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("system_locked", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    create_unique_active_index("uq_installation_types_code_active", "installation_types", ["code"])

    create_catalog_table(
        "event_types",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("base_time", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("needs_cost", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("needs_quantity", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("integration", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    create_unique_active_index("uq_event_types_code_active", "event_types", ["code"])
    create_join_table(
        "installation_type_event_types",
        ("installation_type_id", "installation_types"),
        ("event_type_id", "event_types"),
    )

    create_catalog_table(
        "amenities",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=30), nullable=False),
        sa.Column("amenity_type", sa.String(length=30), nullable=False, server_default="bus"),
        sa.Column("description", sa.Text()),
        sa.Column("icon_name", sa.String(length=50)),
    )
    create_unique_active_index("uq_amenities_name_active", "amenities", ["name"])
    op.create_index("ix_amenities_type_category", "amenities", ["amenity_type", "category"])

    create_catalog_table(
        "installations",
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("address", sa.String(length=255)),
        sa.Column("description", sa.Text()),
        sa.Column("contact_phone", sa.String(length=30)),
        sa.Column("contact_email", sa.String(length=255)),
        sa.Column("website", sa.String(length=255)),
        sa.Column("installation_type_id", sa.Integer(), sa.ForeignKey("installation_types.id")),
    )
    create_join_table(
        "installation_amenities", ("installation_id", "installations"), ("amenity_id", "amenities")
    )

    create_catalog_table(
        "labels",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("color", sa.String(length=7), nullable=False),
    )
    create_unique_active_index("uq_labels_name_active", "labels", ["name"])

    create_catalog_table(
        "nodes",
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=150), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("radius", sa.Float(), nullable=False),
        sa.Column("city_id", sa.Integer(), sa.ForeignKey("cities.id"), nullable=False),
        sa.Column("population_id", sa.Integer(), sa.ForeignKey("populations.id")),
        sa.Column("installation_id", sa.Integer(), sa.ForeignKey("installations.id")),
    )
    op.create_index("ix_nodes_city_id", "nodes", ["city_id"])
    create_unique_active_index("uq_nodes_code_active", "nodes", ["code"])
    create_unique_active_index("uq_nodes_slug_active", "nodes", ["slug"])
    create_join_table("label_nodes", ("label_id", "labels"), ("node_id", "nodes"))

    # ==========================================================================
    # Operators
    # ==========================================================================

    create_catalog_table(
        "transporters",
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("legal_name", sa.String(length=255)),
        sa.Column("address", sa.String(length=255)),
        sa.Column("description", sa.Text()),
        sa.Column("website", sa.String(length=255)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("phone", sa.String(length=30)),
        sa.Column("headquarter_city_id", sa.Integer(), sa.ForeignKey("cities.id")),
        sa.Column("logo_url", sa.String(length=512)),
        sa.Column("contact_info", sa.JSON()),
        sa.Column("license_number", sa.String(length=50)),
    )
    create_unique_active_index("uq_transporters_code_active", "transporters", ["code"])

    create_catalog_table(
        "service_types",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("description", sa.Text()),
    )
    create_unique_active_index("uq_service_types_name_active", "service_types", ["name"])
    create_unique_active_index("uq_service_types_code_active", "service_types", ["code"])

    create_catalog_table(
        "bus_lines",
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("transporter_id", sa.Integer(), sa.ForeignKey("transporters.id"), nullable=False),
        sa.Column("service_type_id", sa.Integer(), sa.ForeignKey("service_types.id"), nullable=False),
        sa.Column("price_per_kilometer", sa.Float(), nullable=False, server_default="1.0"),
        sa.Column("description", sa.Text()),
        sa.Column("fleet_size", sa.Integer()),
        sa.Column("website", sa.String(length=255)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("phone", sa.String(length=30)),
    )
    op.create_index("ix_bus_lines_transporter_id", "bus_lines", ["transporter_id"])
    op.create_index("ix_bus_lines_service_type_id", "bus_lines", ["service_type_id"])
    create_unique_active_index("uq_bus_lines_code_active", "bus_lines", ["code"])

    # ==========================================================================
    # Fleet
    # ==========================================================================

    create_catalog_table(
        "technologies",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("provider", sa.String(length=100)),
        sa.Column("version", sa.String(length=50)),
    )
    create_unique_active_index("uq_technologies_name_active", "technologies", ["name"])

    create_catalog_table(
        "chromatics",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("image_url", sa.String(length=512)),
    )
    create_unique_active_index("uq_chromatics_name_active", "chromatics", ["name"])

    create_catalog_table(
        "seat_diagrams",
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("max_capacity", sa.Integer(), nullable=False),
        sa.Column("num_floors", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("seats_per_floor", sa.JSON(), nullable=False),
        sa.Column("total_seats", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("allows_adjacent_seat", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_factory_default", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    create_unique_active_index("uq_seat_diagrams_name_active", "seat_diagrams", ["name"])

    op.create_table(
        "seat_diagram_spaces",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "seat_diagram_id",
            sa.Integer(),
            sa.ForeignKey("seat_diagrams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("floor_number", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("position_x", sa.Integer(), nullable=False),
        sa.Column("position_y", sa.Integer(), nullable=False),
        sa.Column("space_type", sa.String(length=20), nullable=False, server_default="seat"),
        sa.Column("seat_number", sa.String(length=10)),
        sa.Column("seat_type", sa.String(length=20)),
        sa.Column("reclinement_angle", sa.Integer()),
        sa.Column("meta", sa.JSON(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "seat_diagram_id",
            "floor_number",
            "position_x",
            "position_y",
            name="uq_seat_diagram_spaces_position",
        ),
    )
    op.create_index("ix_seat_diagram_spaces_id", "seat_diagram_spaces", ["id"])
    op.create_index("ix_seat_diagram_spaces_seat_diagram_id", "seat_diagram_spaces", ["seat_diagram_id"])

    create_catalog_table(
        "bus_models",
        sa.Column("manufacturer", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("seating_capacity", sa.Integer(), nullable=False),
        sa.Column("num_floors", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("engine_type", sa.String(length=50)),
        sa.Column("default_seat_diagram_id", sa.Integer(), sa.ForeignKey("seat_diagrams.id")),
    )

    create_catalog_table(
        "buses",
        sa.Column("economic_number", sa.String(length=20), nullable=False),
        sa.Column("registration_number", sa.String(length=50), nullable=False),
        sa.Column("license_plate_type", sa.String(length=20), nullable=False, server_default="NATIONAL"),
        sa.Column("license_plate_number", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="ACTIVE"),
        sa.Column("model_id", sa.Integer(), sa.ForeignKey("bus_models.id"), nullable=False),
        sa.Column("seat_diagram_id", sa.Integer(), sa.ForeignKey("seat_diagrams.id"), nullable=False),
        sa.Column("transporter_id", sa.Integer(), sa.ForeignKey("transporters.id")),
        sa.Column("bus_line_id", sa.Integer(), sa.ForeignKey("bus_lines.id")),
        sa.Column("chromatic_id", sa.Integer(), sa.ForeignKey("chromatics.id")),
        sa.Column("purchase_date", sa.Date()),
        sa.Column("current_kilometer", sa.Float()),
        sa.Column("last_maintenance_date", sa.Date()),
        sa.Column("status_changed_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_buses_status", "buses", ["status"])
    op.create_index("ix_buses_model_id", "buses", ["model_id"])
    create_unique_active_index("uq_buses_economic_number_active", "buses", ["economic_number"])
    create_unique_active_index("uq_buses_registration_number_active", "buses", ["registration_number"])
    create_unique_active_index("uq_buses_license_plate_number_active", "buses", ["license_plate_number"])
    create_join_table("bus_technologies", ("bus_id", "buses"), ("technology_id", "technologies"))

    create_catalog_table(
        "drivers",
        sa.Column("driver_key", sa.String(length=20), nullable=False),
        sa.Column("payroll_key", sa.String(length=20), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255)),
        sa.Column("phone", sa.String(length=30)),
        sa.Column("license", sa.String(length=50)),
        sa.Column("license_expiry", sa.Date()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="IN_TRAINING"),
        sa.Column("status_date", sa.Date()),
        sa.Column("hire_date", sa.Date()),
        sa.Column("bus_line_id", sa.Integer(), sa.ForeignKey("bus_lines.id")),
    )
    op.create_index("ix_drivers_status", "drivers", ["status"])
    create_unique_active_index("uq_drivers_driver_key_active", "drivers", ["driver_key"])
    create_unique_active_index("uq_drivers_payroll_key_active", "drivers", ["payroll_key"])

    # ==========================================================================
    # Users, roles, permissions & audit
    # ==========================================================================

    create_catalog_table(
        "permissions",
        sa.Column("code", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("description", sa.Text()),
    )
    create_unique_active_index("uq_permissions_code_active", "permissions", ["code"])

    create_catalog_table(
        "roles",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text()),
    )
    create_unique_active_index("uq_roles_name_active", "roles", ["name"])
    create_join_table("role_permissions", ("role_id", "roles"), ("permission_id", "permissions"))

    create_catalog_table(
        "users",
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100)),
        sa.Column("last_name", sa.String(length=100)),
        sa.Column("is_system_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    create_unique_active_index("uq_users_username_active", "users", ["username"])
    create_unique_active_index("uq_users_email_active", "users", ["email"])
    create_join_table("user_roles", ("user_id", "users"), ("role_id", "roles"))

    op.create_table(
        "audits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("endpoint", sa.String(length=150), nullable=False),
        sa.Column("method", sa.String(length=10), nullable=False),
        sa.Column("path", sa.String(length=512), nullable=False),
        sa.Column("payload", sa.JSON()),
        sa.Column("ip_address", sa.String(length=64)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_audits_id", "audits", ["id"])
    op.create_index("ix_audits_user_id", "audits", ["user_id"])
    op.create_index("ix_audits_endpoint", "audits", ["endpoint"])
    op.create_index("ix_audits_created_at", "audits", ["created_at"])


def downgrade() -> None:
    for table in (
        "audits",
        "user_roles",
        "users",
        "role_permissions",
        "roles",
        "permissions",
        "drivers",
        "bus_technologies",
        "buses",
        "bus_models",
        "seat_diagram_spaces",
        "seat_diagrams",
        "chromatics",
        "technologies",
        "bus_lines",
        "service_types",
        "transporters",
        "label_nodes",
        "nodes",
        "labels",
        "installation_amenities",
        "installations",
        "amenities",
        "installation_type_event_types",
        "event_types",
        "installation_types",
        "population_cities",
        "populations",
        "cities",
        "states",
        "countries",
    ):
        op.drop_table(table)
