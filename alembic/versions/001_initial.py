"""Initial schema: characters, items, item instances, auctions

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "characters",
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("class", sa.String(16), nullable=False),
        sa.Column("gold", sa.Integer(), nullable=False),
        sa.CheckConstraint("class IN ('warrior', 'mage', 'ranger')", name="character_class"),
        sa.CheckConstraint("gold >= 0", name="ck_characters_gold_non_negative"),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "items",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_items_name", "items", ["name"], unique=True)

    op.create_table(
        "item_instances",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("item_id", sa.Uuid(), nullable=False),
        sa.Column("item_name", sa.String(255), nullable=False),
        sa.Column("owner_name", sa.String(64), nullable=False),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["owner_name"], ["characters.name"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_item_instances_item_id", "item_instances", ["item_id"], unique=False)
    op.create_index("ix_item_instances_owner_name", "item_instances", ["owner_name"], unique=False)

    op.create_table(
        "auctions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("auctioned_item_id", sa.Uuid(), nullable=False),
        sa.Column("item_instance_id", sa.Uuid(), nullable=False),
        sa.Column("seller_name", sa.String(64), nullable=False),
        sa.Column("buyer_name", sa.String(64), nullable=True),
        sa.Column("creation_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.CheckConstraint("status IN ('active', 'sold', 'expired')", name="auction_status"),
        sa.CheckConstraint("price >= 0", name="ck_auctions_price_non_negative"),
        sa.ForeignKeyConstraint(["auctioned_item_id"], ["items.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["item_instance_id"], ["item_instances.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["seller_name"], ["characters.name"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["buyer_name"], ["characters.name"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_auctions_auctioned_item_id", "auctions", ["auctioned_item_id"], unique=False)
    op.create_index("ix_auctions_item_instance_id", "auctions", ["item_instance_id"], unique=False)
    op.create_index("ix_auctions_seller_name", "auctions", ["seller_name"], unique=False)
    op.create_index("ix_auctions_end_date", "auctions", ["end_date"], unique=False)
    op.create_index("ix_auctions_status", "auctions", ["status"], unique=False)
    op.create_index(
        "uq_auctions_active_item_instance",
        "auctions",
        ["item_instance_id"],
        unique=True,
        sqlite_where=sa.text("status = 'active'"),
        postgresql_where=sa.text("status = 'active'"),
    )


def downgrade() -> None:
    op.drop_index("uq_auctions_active_item_instance", "auctions")
    op.drop_index("ix_auctions_status", "auctions")
    op.drop_index("ix_auctions_end_date", "auctions")
    op.drop_index("ix_auctions_seller_name", "auctions")
    op.drop_index("ix_auctions_item_instance_id", "auctions")
    op.drop_index("ix_auctions_auctioned_item_id", "auctions")
    op.drop_table("auctions")
    op.drop_index("ix_item_instances_owner_name", "item_instances")
    op.drop_index("ix_item_instances_item_id", "item_instances")
    op.drop_table("item_instances")
    op.drop_index("ix_items_name", "items")
    op.drop_table("items")
    op.drop_table("characters")
