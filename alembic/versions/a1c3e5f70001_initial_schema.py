"""Initial schema: logistics, fleet, preoperational and Siigo tables

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-17

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c3e5f70001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

material_type = postgresql.ENUM("stocked", "non_stocked", name="materialtype", create_type=False)
unit_of_measure = postgresql.ENUM("m3", "ton", name="unitofmeasure", create_type=False)
trip_request_priority = postgresql.ENUM("normal", "urgent", name="triprequestpriority", create_type=False)
trip_request_status = postgresql.ENUM(
    "pending", "scheduled", "cancelled", name="triprequeststatus", create_type=False
)
trip_measure = postgresql.ENUM("cubic_meters", "tons", name="tripmeasure", create_type=False)
trip_status = postgresql.ENUM(
    "scheduled",
    "loading",
    "in_transit",
    "delivered",
    "completed",
    "invoiced",
    name="tripstatus",
    create_type=False,
)
siigo_platform = postgresql.ENUM("sandbox", "production", "data", name="siigoplatform", create_type=False)
import_status = postgresql.ENUM(
    "processing", "success", "partial", "error", name="importstatus", create_type=False
)
generated_state = postgresql.ENUM("generated", "approved", "cancelled", name="generatedstate", create_type=False)

ENUM_TYPES = (
    material_type,
    unit_of_measure,
    trip_request_priority,
    trip_request_status,
    trip_measure,
    trip_status,
    siigo_platform,
    import_status,
    generated_state,
)


def _uuid_pk() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUM_TYPES:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "clients",
        _uuid_pk(),
        sa.Column("identification", sa.String(40), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(255)),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(40)),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "projects",
        _uuid_pk(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("address", sa.String(255)),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("start_date", sa.Date()),
        sa.Column("end_date", sa.Date()),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
        sa.UniqueConstraint("client_id", "name", name="uq_projects_client_name"),
    )
    op.create_table(
        "materials",
        _uuid_pk(),
        sa.Column("name", sa.String(160), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
        sa.Column("type", material_type),
        sa.Column("unit_of_measure", unit_of_measure),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "project_material_prices",
        _uuid_pk(),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("material_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("materials.id"), nullable=False),
        sa.Column("sale_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("outsourced_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date()),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_index(
        "ix_project_material_prices_project_material",
        "project_material_prices",
        ["project_id", "material_id"],
    )

    op.create_table(
        "owners",
        _uuid_pk(),
        sa.Column("document", sa.String(20), nullable=False, unique=True),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "vehicles",
        _uuid_pk(),
        sa.Column("plate", sa.String(20), nullable=False, unique=True),
        sa.Column("brand", sa.String(80), nullable=False),
        sa.Column("model", sa.String(80), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(60), nullable=False),
        sa.Column("status", sa.String(40)),
        sa.Column("location", sa.String(160)),
        sa.Column("odometer", sa.Integer()),
        sa.Column("fuel_type", sa.String(40), nullable=False),
        sa.Column("capacity_tons", sa.Numeric(10, 2)),
        sa.Column("capacity_m3", sa.Numeric(10, 2)),
        sa.Column("last_maintenance", sa.Date()),
        sa.Column("next_maintenance", sa.Date()),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("owners.id")),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "drivers",
        _uuid_pk(),
        sa.Column("name", sa.String(160), nullable=False),
        sa.Column("identification", sa.String(40), nullable=False, unique=True),
        sa.Column("license", sa.String(40), nullable=False, unique=True),
        sa.Column("phone", sa.String(40)),
        sa.Column("email", sa.String(255)),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "driver_vehicles",
        _uuid_pk(),
        sa.Column("driver_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("assigned_at", sa.DateTime(timezone=True)),
        sa.Column("unassigned_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_table(
        "fuel_purchases",
        _uuid_pk(),
        sa.Column("purchase_date", sa.Date(), nullable=False),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("total", sa.Numeric(14, 2), nullable=False),
        sa.Column("provider", sa.String(120), nullable=False),
        sa.Column("receipt", sa.String(60)),
        sa.Column("state", sa.Boolean()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_fuel_purchases_state", "fuel_purchases", ["state"])

    op.create_table(
        "trip_requests",
        _uuid_pk(),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("client_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("priority", trip_request_priority),
        sa.Column("status", trip_request_status),
        sa.Column("request_date", sa.Date()),
        sa.Column("observations", sa.Text()),
        *_timestamps(),
    )
    op.create_table(
        "trip_request_materials",
        _uuid_pk(),
        sa.Column(
            "trip_request_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("trip_requests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("material_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("materials.id"), nullable=False),
        sa.Column("requested_quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit_of_measure", unit_of_measure, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_table(
        "trips",
        _uuid_pk(),
        sa.Column("material_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("materials.id"), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("driver_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("trip_request_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("trip_requests.id")),
        sa.Column("trip_date", sa.Date(), nullable=False),
        sa.Column("incoming_receipt_number", sa.String(60)),
        sa.Column("outcoming_receipt_number", sa.String(60)),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("measure", trip_measure),
        sa.Column("sale_price", sa.Numeric(14, 2)),
        sa.Column("outsourced_price", sa.Numeric(14, 2)),
        sa.Column("status", trip_status),
        sa.Column("certified_weight", sa.Numeric(12, 3)),
        sa.Column("observation", sa.Text()),
        sa.Column("is_approved", sa.Boolean()),
        *_timestamps(),
    )
    op.create_index("ix_trips_trip_date", "trips", ["trip_date"])

    op.create_table(
        "preoperational_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(160), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "preoperational_inspections",
        _uuid_pk(),
        sa.Column("inspection_date", sa.Date(), nullable=False),
        sa.Column("driver_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("drivers.id"), nullable=False),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("initial_mileage", sa.Numeric(12, 1)),
        sa.Column("final_mileage", sa.Numeric(12, 1)),
        *_timestamps(),
    )
    op.create_table(
        "preoperational_inspection_details",
        _uuid_pk(),
        sa.Column(
            "inspection_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("preoperational_inspections.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("item_id", sa.Integer(), sa.ForeignKey("preoperational_items.id"), nullable=False),
        sa.Column("passed", sa.Boolean()),
        sa.Column("observations", sa.Text()),
        sa.Column("photo_url", sa.String(500)),
    )

    op.create_table(
        "siigo_credentials",
        _uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("access_key", sa.String(255), nullable=False),
        sa.Column("platform", siigo_platform),
        sa.Column("is_active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "siigo_warehouses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("active", sa.Boolean()),
        sa.Column("has_movements", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "siigo_cost_centers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("code", sa.String(40), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("active", sa.Boolean()),
        *_timestamps(),
    )
    op.create_table(
        "siigo_accounts_payable_generated",
        _uuid_pk(),
        sa.Column("request_date", sa.DateTime(timezone=True)),
        sa.Column("endpoint", sa.String(255), nullable=False),
        sa.Column("page", sa.Integer()),
        sa.Column("page_size", sa.Integer()),
        sa.Column("total_results", sa.Integer()),
        sa.Column("records_processed", sa.Integer()),
        sa.Column("status", import_status),
        sa.Column("state", generated_state),
        sa.Column("duration_ms", sa.Integer()),
        sa.Column("error_message", sa.Text()),
        sa.Column("user_agent", sa.String(500)),
        sa.Column("ip_address", sa.String(64)),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_table(
        "siigo_accounts_payable",
        _uuid_pk(),
        sa.Column("prefix", sa.String(20)),
        sa.Column("consecutive", sa.BigInteger()),
        sa.Column("quote", sa.Integer()),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("balance", sa.Numeric(18, 2)),
        sa.Column("provider_identification", sa.String(40)),
        sa.Column("provider_branch_office", sa.Integer()),
        sa.Column("provider_name", sa.String(255)),
        sa.Column("cost_center_code", sa.Integer()),
        sa.Column("cost_center_name", sa.String(200)),
        sa.Column("currency_code", sa.String(10)),
        sa.Column("currency_balance", sa.Numeric(18, 2)),
        sa.Column("payment_value", sa.Numeric(18, 2)),
        sa.Column("approved", sa.Boolean()),
        sa.Column("paid", sa.Boolean()),
        sa.Column(
            "generated_request_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("siigo_accounts_payable_generated.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index(
        "ix_siigo_accounts_payable_generated_request_id",
        "siigo_accounts_payable",
        ["generated_request_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_siigo_accounts_payable_generated_request_id", table_name="siigo_accounts_payable")
    op.drop_table("siigo_accounts_payable")
    op.drop_table("siigo_accounts_payable_generated")
    op.drop_table("siigo_cost_centers")
    op.drop_table("siigo_warehouses")
    op.drop_table("siigo_credentials")
    op.drop_table("preoperational_inspection_details")
    op.drop_table("preoperational_inspections")
    op.drop_table("preoperational_items")
    op.drop_index("ix_trips_trip_date", table_name="trips")
    op.drop_table("trips")
    op.drop_table("trip_request_materials")
    op.drop_table("trip_requests")
    op.drop_index("ix_fuel_purchases_state", table_name="fuel_purchases")
    op.drop_table("fuel_purchases")
    op.drop_table("driver_vehicles")
    op.drop_table("drivers")
    op.drop_table("vehicles")
    op.drop_table("owners")
    op.drop_index("ix_project_material_prices_project_material", table_name="project_material_prices")
    op.drop_table("project_material_prices")
    op.drop_table("materials")
    op.drop_table("projects")
    op.drop_table("clients")
    bind = op.get_bind()
    for enum_type in reversed(ENUM_TYPES):
        enum_type.drop(bind, checkfirst=True)
