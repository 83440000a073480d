"""
Telemetry Module

Central export point for all telemetry functionality.
Import everything from this single entry point.
"""

from .config import TelemetryConfig, get_telemetry_config, reset_telemetry_config
from .constants import DEFAULT_VERSION, UNKNOWN, ContextTagKeys, TelemetryProperties
from .context import (
    ComponentContext,
    DeviceContext,
    SessionContext,
    TelemetryContext,
    UserContext,
)
from .facts import PlatformFacts, parse_release_lines, read_system_property
from .host import (
    ApplicationInfo,
    ApplicationInfoProvider,
    HostApplicationUnavailableError,
    PackageMetadataVersionProvider,
    PluginVersionProvider,
    SettingsApplicationInfoProvider,
    StaticPluginVersionProvider,
    TelemetryLookupError,
)
from .initializer import TelemetryContextInitializer
from .tracker import (
    apply_context_to_envelope,
    flush_telemetry,
    get_app_insights,
    get_telemetry_context,
    initialize_telemetry,
    shutdown_telemetry,
    track_event,
    track_exception,
)

__all__ = [
    # Config
    "TelemetryConfig",
    "get_telemetry_config",
    "reset_telemetry_config",
    # Constants
    "ContextTagKeys",
    "TelemetryProperties",
    "DEFAULT_VERSION",
    "UNKNOWN",
    # Context
    "TelemetryContext",
    "UserContext",
    "DeviceContext",
    "ComponentContext",
    "SessionContext",
    # Facts
    "PlatformFacts",
    "parse_release_lines",
    "read_system_property",
    # Host collaborators
    "ApplicationInfo",
    "ApplicationInfoProvider",
    "PluginVersionProvider",
    "SettingsApplicationInfoProvider",
    "PackageMetadataVersionProvider",
    "StaticPluginVersionProvider",
    "TelemetryLookupError",
    "HostApplicationUnavailableError",
    # Initializer
    "TelemetryContextInitializer",
    # Tracking
    "initialize_telemetry",
    "apply_context_to_envelope",
    "get_app_insights",
    "get_telemetry_context",
    "track_event",
    "track_exception",
    "flush_telemetry",
    "shutdown_telemetry",
]
