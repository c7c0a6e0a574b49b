"""Initial schema — sites, locations, products, rfid_bindings, rfid_transactions.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sites",
        sa.Column("site_id", sa.Integer, primary_key=True),
        sa.Column("site_name", sa.String(255), nullable=False, unique=True),
    )

    op.create_table(
        "locations",
        sa.Column("location_id", sa.Integer, primary_key=True),
        sa.Column("location_name", sa.String(255), nullable=False),
        sa.Column("site_id", sa.Integer, sa.ForeignKey("sites.site_id"), nullable=False),
        sa.UniqueConstraint("location_name", "site_id", name="uq_location_name_site"),
    )

    op.create_table(
        "products",
        sa.Column("ref_code", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("name", sa.String(255), nullable=False),
    )

    op.create_table(
        "rfid_bindings",
        sa.Column("tag_id", sa.String(20), primary_key=True),
        sa.Column("epc", sa.String(20), primary_key=True),
        sa.Column("ref_code", sa.Integer, sa.ForeignKey("products.ref_code"), nullable=False),
    )

    op.create_table(
        "rfid_transactions",
        sa.Column("tag_id", sa.String(20), primary_key=True),
        sa.Column("epc", sa.String(20), primary_key=True),
        sa.Column("scan_date", sa.DateTime(timezone=False), primary_key=True),
        sa.Column("location_id", sa.Integer, sa.ForeignKey("locations.location_id"), nullable=False),
        sa.Column("rssi", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_rfid_transactions_epc", "rfid_transactions", ["epc"])
    op.create_index("ix_rfid_transactions_scan_date", "rfid_transactions", ["scan_date"])


def downgrade() -> None:
    op.drop_index("ix_rfid_transactions_scan_date", table_name="rfid_transactions")
    op.drop_index("ix_rfid_transactions_epc", table_name="rfid_transactions")
    op.drop_table("rfid_transactions")
    op.drop_table("rfid_bindings")
    op.drop_table("products")
    op.drop_table("locations")
    op.drop_table("sites")
