"""initial ledger tables

Revision ID: 0001
Revises:
Create Date: 2025-03-14 12:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


VEHICLE_CATEGORY = sa.Enum(
    "MULTICAB", "VAN", name="vehicle_category_enum", create_constraint=True
)
VIOLATION_TYPE = sa.Enum(
    "TERMINAL_FEE", name="violation_type_enum", create_constraint=True
)
VIOLATION_STATUS = sa.Enum(
    "UNPAID", "PARTIALLY_PAID", "PAID",
    name="violation_status_enum",
    create_constraint=True,
)
ACTION_TYPE = sa.Enum(
    "VIOLATION_ISSUED",
    "VIOLATION_UPDATED",
    "VIOLATION_DELETED",
    "PAYMENT_RECORDED",
    "BULK_SETTLEMENT",
    name="action_type_enum",
    create_constraint=True,
)


def upgrade() -> None:
    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("plate_number", sa.String(length=8), nullable=False),
        sa.Column("category", VEHICLE_CATEGORY, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_vehicles_plate_number", "vehicles", ["plate_number"], unique=True
    )

    op.create_table(
        "violations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "vehicle_id", sa.Integer(),
            sa.ForeignKey("vehicles.id"), nullable=False,
        ),
        sa.Column("violation_type", VIOLATION_TYPE, nullable=False),
        sa.Column("issued_at", sa.DateTime(), nullable=False),
        sa.Column("fine_amount", sa.Integer(), nullable=False),
        sa.Column("status", VIOLATION_STATUS, nullable=False),
        sa.Column("issued_by", sa.String(length=64), nullable=False),
        sa.Column("attachment", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.CheckConstraint(
            "fine_amount > 0", name="ck_violations_fine_positive"
        ),
    )
    op.create_index("ix_violations_vehicle_id", "violations", ["vehicle_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "violation_id", sa.Integer(),
            sa.ForeignKey("violations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("recorded_by", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
    )
    op.create_index("ix_payments_violation_id", "payments", ["violation_id"])

    op.create_table(
        "actions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor_id", sa.String(length=64), nullable=False),
        sa.Column("violation_id", sa.Integer(), nullable=True),
        sa.Column("event_type", ACTION_TYPE, nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_actions_actor_id", "actions", ["actor_id"])
    op.create_index("ix_actions_violation_id", "actions", ["violation_id"])


def downgrade() -> None:
    op.drop_index("ix_actions_violation_id", table_name="actions")
    op.drop_index("ix_actions_actor_id", table_name="actions")
    op.drop_table("actions")
    op.drop_index("ix_payments_violation_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_violations_vehicle_id", table_name="violations")
    op.drop_table("violations")
    op.drop_index("ix_vehicles_plate_number", table_name="vehicles")
    op.drop_table("vehicles")

    bind = op.get_bind()
    for enum_type in (ACTION_TYPE, VIOLATION_STATUS, VIOLATION_TYPE, VEHICLE_CATEGORY):
        enum_type.drop(bind, checkfirst=True)
