"""Application settings loaded from environment."""

from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from confmod.models import RequestStatus


class Settings(BaseSettings):
    """Strongly typed settings for the moderation console."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Backend API
    api_base_url: str = Field(default="http://localhost:3000/api/v1", alias="API_BASE_URL")
    api_token: Optional[str] = Field(default=None, alias="API_TOKEN")
    api_timeout_seconds: float = Field(default=10.0, alias="API_TIMEOUT_SECONDS")

    # Endpoints
    requests_path: str = Field(default="/admin-conference/requests", alias="REQUESTS_PATH")
    details_path: str = Field(default="/conference/{record_id}", alias="DETAILS_PATH")
    status_update_path: str = Field(
        default="/admin-conference/requests/{request_id}",
        alias="STATUS_UPDATE_PATH",
    )
    status_param_case: Literal["upper", "lower"] = Field(
        default="upper", alias="STATUS_PARAM_CASE"
    )

    # Detail fan-out
    detail_timeout_seconds: float = Field(default=5.0, alias="DETAIL_TIMEOUT_SECONDS")
    detail_max_concurrency: int = Field(default=0, alias="DETAIL_MAX_CONCURRENCY")

    # Workflow policy (JSON list in env, e.g. '["REJECTED", "APPROVED"]')
    comment_required_statuses: List[RequestStatus] = Field(
        default_factory=lambda: [RequestStatus.REJECTED],
        alias="COMMENT_REQUIRED_STATUSES",
    )

    # Runtime
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    run_env: str = Field(default="local", alias="RUN_ENV")

    def auth_headers(self) -> dict[str, str]:
        """Return request headers carrying the configured API token."""
        if not self.api_token:
            return {}
        return {"Authorization": f"Bearer {self.api_token}"}
