"""Configuration management for NuGet Switch."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WorkspaceSettings(BaseSettings):
    """Workspace and solution processing settings."""

    model_config = SettingsConfigDict(env_prefix="NUGET_SWITCH_")

    workspace_suffix: str = Field(
        default=".nugetswitch.tmp",
        description="Suffix appended to the solution file name for the workspace side file",
    )
    max_workers: int = Field(
        default=8,
        ge=1,
        description="Maximum worker threads used to delete obj folders",
    )
    obj_folder_name: str = Field(
        default="obj",
        description="Name of the intermediate output folder next to each project file",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log message format",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path (None for console only)",
    )
    rich_console: bool = Field(
        default=True,
        description="Use rich console for prettier output",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables and .env file."""
        return cls(
            workspace=WorkspaceSettings(),
            logging=LoggingSettings(),
        )


# Global settings instance (lazy loaded)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure_settings(settings: Settings) -> None:
    """Override the global settings instance."""
    global _settings
    _settings = settings
