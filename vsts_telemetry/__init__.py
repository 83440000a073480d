"""VSTS telemetry - anonymized telemetry context and User-Agent for the plugin."""

from .telemetry import TelemetryContext, TelemetryContextInitializer

__version__ = "0.1.0"

__all__ = [
    "TelemetryContext",
    "TelemetryContextInitializer",
    "__version__",
]
