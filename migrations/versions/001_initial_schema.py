"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-03-02 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create signatures table"""
    op.create_table(
        "signatures",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ip", sa.String(), nullable=True),
        sa.Column("device_uuid", sa.String(), nullable=False),
        sa.Column("device_fingerprint", sa.String(), nullable=False),
        sa.Column("signature", sa.String(), nullable=False),
        sa.Column("room_number", sa.String(), nullable=False),
        sa.Column("signature_image", sa.Text(), nullable=True),
        sa.Column("created_at", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_signatures_device_uuid", "signatures", ["device_uuid"], unique=True)
    op.create_index(
        "ix_signatures_device_fingerprint", "signatures", ["device_fingerprint"], unique=True
    )
    op.create_index(op.f("ix_signatures_created_at"), "signatures", ["created_at"], unique=False)


def downgrade() -> None:
    """Drop signatures table"""
    op.drop_index(op.f("ix_signatures_created_at"), table_name="signatures")
    op.drop_index("ix_signatures_device_fingerprint", table_name="signatures")
    op.drop_index("ix_signatures_device_uuid", table_name="signatures")
    op.drop_table("signatures")
