"""Application configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Plugin settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="info", description="Logging level")

    # Identity of this component
    product_name: str = Field(
        default="VSTSIntelliJ", description="Product token at the start of the User-Agent"
    )
    bundle_name: str = Field(
        default="com.microsoft.alm.plugin.idea.common.ui.tfplugin",
        description="Resource bundle name reported as application id and user agent tag",
    )
    plugin_id: str = Field(
        default="vsts-telemetry",
        description="Distribution name used to look up this component's own version",
    )

    # Host application descriptor
    host_app_name: str | None = Field(
        default=None, description="Full name of the host application (e.g. 'IntelliJ IDEA')"
    )
    host_app_major_version: str = Field(default="", description="Host application major version")
    host_app_minor_version: str = Field(default="", description="Host application minor version")
    host_app_build: str = Field(default="", description="Host application build identifier")

    # Linux distribution lookup
    release_files_glob: str = Field(
        default="/etc/*-release", description="Glob of OS release files read directly"
    )
    release_command: str = Field(
        default="cat /etc/*-release",
        description="Shell command used when the release files cannot be read directly",
    )
    release_command_timeout: float | None = Field(
        default=None, description="Timeout in seconds for the release command (None = no limit)"
    )


# Global settings instance
settings = Settings()
