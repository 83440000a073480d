"""
Telemetry Configuration

Connection settings and identity for the Application Insights backend.
The instrumentation key is the process-wide value stamped on every context.
"""


from pydantic_settings import BaseSettings


class TelemetryConfig(BaseSettings):
    """Telemetry configuration loaded from environment variables."""

    # Connection
    enabled: bool = True
    instrumentation_key: str = ""
    app_insights_connection_string: str | None = None

    # Application Identity
    app_id: str = "vsts-telemetry"
    environment: str = "development"  # dev/staging/production

    model_config = {
        "env_prefix": "TELEMETRY_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def get_connection_string(self) -> str | None:
        """Connection string for the exporter, derived from the key when not set explicitly."""
        if self.app_insights_connection_string:
            return self.app_insights_connection_string
        if self.instrumentation_key:
            return f"InstrumentationKey={self.instrumentation_key}"
        return None


# Global instance (lazy loaded)
_config: TelemetryConfig | None = None


def get_telemetry_config() -> TelemetryConfig:
    """Get the global telemetry configuration instance."""
    global _config
    if _config is None:
        _config = TelemetryConfig()
    return _config


def reset_telemetry_config() -> None:
    """Drop the cached configuration so the next lookup re-reads the environment."""
    global _config
    _config = None
