"""Application configuration using Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (onboarding profiles + workflow run history)
    DATABASE_URL: Optional[str] = None
    DB_READY_ATTEMPTS: int = 10

    # Supabase project hosting the run-workflow function
    SUPABASE_URL: Optional[str] = None
    SERVICE_ROLE_KEY: Optional[str] = None

    # Overrides {SUPABASE_URL}/functions/v1/run-intelligence-workflow
    WORKFLOW_ENDPOINT_URL: Optional[str] = None
    INVOCATION_TIMEOUT: float = 30.0

    # Shared secret expected in the X-Scheduler-Secret header
    SCHEDULER_SECRET: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def workflow_endpoint(self) -> Optional[str]:
        """Resolved URL of the run-workflow endpoint."""
        if self.WORKFLOW_ENDPOINT_URL:
            return self.WORKFLOW_ENDPOINT_URL
        if self.SUPABASE_URL:
            return f"{self.SUPABASE_URL.rstrip('/')}/functions/v1/run-intelligence-workflow"
        return None


# Global settings instance
settings = Settings()
