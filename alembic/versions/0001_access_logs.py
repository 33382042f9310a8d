"""access_logs table

Revision ID: 0001_access_logs
Revises: None
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_access_logs"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "access_logs",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("postal_code", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("idx_access_logs_postal_code", "access_logs", ["postal_code"])


def downgrade():
    op.drop_index("idx_access_logs_postal_code", table_name="access_logs")
    op.drop_table("access_logs")
