"""Onboarding profile model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Text

from refresh_service.database import Base


class OnboardingProfile(Base):
    """Report parameters captured when a user finishes onboarding."""

    __tablename__ = "onboarding_profiles"

    user_id = Column(Text, primary_key=True)
    website_url = Column(Text, nullable=False)
    industry = Column(Text)
    location = Column(Text)
    full_name = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
