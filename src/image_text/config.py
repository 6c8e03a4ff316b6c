"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .grouping import GroupingConfig


class Settings(BaseSettings):
    """Settings loaded from IMAGE_TEXT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="IMAGE_TEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: str = "local"
    log_level: str = "WARNING"

    # OCR
    # livetext | google_vision, None = pick by environment
    ocr_backend: Optional[str] = None
    language: str = "en-US"
    google_credentials_json: Optional[str] = None

    # Grouping thresholds (multiples of the average box height)
    same_line_overlap_ratio: float = 0.5
    max_gap_ratio: float = 1.5

    # History
    history_path: Path = Path.home() / ".image-text" / "history.json"
    history_limit: int = 50

    @property
    def grouping(self) -> GroupingConfig:
        """Grouping thresholds as a GroupingConfig."""
        return GroupingConfig(
            same_line_overlap_ratio=self.same_line_overlap_ratio,
            max_gap_ratio=self.max_gap_ratio,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
