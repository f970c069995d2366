"""Configuration Management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

RemovedFilePolicy = Literal["keep", "quarantine", "delete"]


class Settings(BaseSettings):
    """Application settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="CATALYST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")
    debug: bool = Field(default=False, description="Verbose pipeline logging")

    # Writing
    max_concurrent_writes: int = Field(default=10, gt=0, description="Parallel file writes")
    components_dir: str = Field(default="src/components", description="Component output dir")
    component_extension: str = Field(default=".jsx", description="Component file extension")

    # Persistence
    persist_user_edits: bool = Field(default=True, description="Save user edits sidecar")
    persist_hash_cache: bool = Field(default=True, description="Save hash cache sidecar")

    # Pipeline behaviour
    emit_events: bool = Field(default=True, description="Emit lifecycle events")
    retry_failed_writes: bool = Field(
        default=True, description="Keep cache stale for failed writes so they retry"
    )
    removed_file_policy: RemovedFilePolicy = Field(
        default="quarantine", description="What to do with files of removed components"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
