"""tokens table

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-18 09:12:40.118305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a1c3e5f7b901"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "tokens",
        sa.Column("unit", sa.String(120), primary_key=True),
        sa.Column("policy_id", sa.String(56), nullable=False, server_default=""),
        sa.Column("asset_name", sa.String(64), nullable=False, server_default=""),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("ticker", sa.String(64), nullable=False, server_default=""),
        sa.Column("decimals", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("logo", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("unit", name=op.f("pk_tokens")),
    )
    op.create_index(op.f("ix_tokens_policy_id"), "tokens", ["policy_id"])
    op.create_index(op.f("ix_tokens_category"), "tokens", ["category"])


def downgrade() -> None:
    op.drop_index(op.f("ix_tokens_category"), table_name="tokens")
    op.drop_index(op.f("ix_tokens_policy_id"), table_name="tokens")
    op.drop_table("tokens")
