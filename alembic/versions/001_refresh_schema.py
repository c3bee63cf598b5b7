"""Onboarding profiles and workflow runs

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    # Tables may already be managed by the hosting platform
    if "onboarding_profiles" not in existing_tables:
        op.create_table(
            "onboarding_profiles",
            sa.Column("user_id", sa.Text, primary_key=True),
            sa.Column("website_url", sa.Text, nullable=False),
            sa.Column("industry", sa.Text),
            sa.Column("location", sa.Text),
            sa.Column("full_name", sa.Text),
            sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        )

    if "workflow_runs" not in existing_tables:
        op.create_table(
            "workflow_runs",
            sa.Column("id", sa.Uuid, primary_key=True),
            sa.Column("user_id", sa.Text, nullable=False),
            sa.Column("website_url", sa.Text),
            sa.Column("status", sa.Text, nullable=False),
            sa.Column("triggered_at", sa.DateTime, server_default=sa.func.now()),
            sa.Column("completed_at", sa.DateTime),
            sa.Column("metadata", sa.JSON().with_variant(JSONB, "postgresql")),
        )
        op.create_index("idx_workflow_runs_user_id", "workflow_runs", ["user_id"])
        op.create_index(
            "idx_workflow_runs_status_completed_at",
            "workflow_runs",
            ["status", "completed_at"],
        )


def downgrade() -> None:
    op.drop_index("idx_workflow_runs_status_completed_at", table_name="workflow_runs")
    op.drop_index("idx_workflow_runs_user_id", table_name="workflow_runs")
    op.drop_table("workflow_runs")
    op.drop_table("onboarding_profiles")
