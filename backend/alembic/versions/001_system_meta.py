"""system_meta key/value table for deployment-wide connectivity state.

Revision ID: 001_system_meta
Revises: None
Create Date: 2026-10-17

Holds the instance id, the current/previous enhanced session tokens, and the
last successful heartbeat timestamp. The primary key on `key` is what makes
instance-id creation safe when several processes start at once.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_system_meta"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "system_meta",
        sa.Column("key", sa.String(200), primary_key=True),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("system_meta")
