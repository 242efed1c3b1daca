"""Key/value entity store."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

from weekplanner.db.types import JSONBCompat

# revision identifiers, used by Alembic.
revision = "202610010900"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "kv_entries",
        sa.Column("key", sa.String(length=128), primary_key=True, nullable=False),
        sa.Column("value", JSONBCompat(), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )


def downgrade() -> None:
    op.drop_table("kv_entries")
