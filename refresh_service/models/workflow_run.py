"""Workflow run model."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB

from refresh_service.database import Base


class WorkflowRunRecord(Base):
    """One execution of the intelligence workflow for a user."""

    __tablename__ = "workflow_runs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    website_url = Column(Text)
    status = Column(Text, nullable=False)  # 'pending', 'running', 'completed', 'failed'
    triggered_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime)
    # "metadata" is reserved on declarative classes
    run_metadata = Column("metadata", JSON().with_variant(JSONB, "postgresql"))

    __table_args__ = (
        Index("idx_workflow_runs_user_id", "user_id"),
        Index("idx_workflow_runs_status_completed_at", "status", "completed_at"),
    )
