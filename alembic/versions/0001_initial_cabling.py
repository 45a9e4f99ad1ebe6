"""initial cabling tables

Revision ID: 0001_initial_cabling
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial_cabling"
down_revision = None
branch_labels = None
depends_on = None

cable_role = sa.Enum("Feed", "Distribution", name="cablerole")


def upgrade() -> None:
    op.create_table(
        "cables",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("pair_count", sa.Integer(), nullable=False),
        sa.Column("binder_size", sa.Integer(), nullable=False, server_default=sa.text("25")),
        sa.Column("role", cable_role, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_table(
        "circuits",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("cable_id", sa.Uuid(), sa.ForeignKey("cables.id", ondelete="CASCADE"), nullable=False),
        sa.Column("circuit_id", sa.String(length=120), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("pair_start", sa.Integer(), nullable=False),
        sa.Column("pair_end", sa.Integer(), nullable=False),
        sa.Column("is_spliced", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("feed_cable_id", sa.Uuid()),
        sa.Column("feed_pair_start", sa.Integer()),
        sa.Column("feed_pair_end", sa.Integer()),
    )
    op.create_index("ix_circuits_cable_position", "circuits", ["cable_id", "position"])
    op.create_index("ix_circuits_feed_cable_id", "circuits", ["feed_cable_id"])
    op.create_table(
        "splices",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("source_cable_id", sa.Uuid(), sa.ForeignKey("cables.id", ondelete="CASCADE"), nullable=False),
        sa.Column("source_pair_start", sa.Integer(), nullable=False),
        sa.Column("source_pair_end", sa.Integer(), nullable=False),
        sa.Column(
            "destination_cable_id", sa.Uuid(), sa.ForeignKey("cables.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("destination_pair_start", sa.Integer(), nullable=False),
        sa.Column("destination_pair_end", sa.Integer(), nullable=False),
        sa.Column("pon_start", sa.Integer()),
        sa.Column("pon_end", sa.Integer()),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )


def downgrade() -> None:
    op.drop_table("splices")
    op.drop_index("ix_circuits_feed_cable_id", table_name="circuits")
    op.drop_index("ix_circuits_cable_position", table_name="circuits")
    op.drop_table("circuits")
    op.drop_table("cables")
    cable_role.drop(op.get_bind(), checkfirst=True)
