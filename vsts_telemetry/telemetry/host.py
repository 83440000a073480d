"""Collaborators supplied by the host application.

The context initializer never talks to the host directly. It asks an
ApplicationInfoProvider for the host descriptor and a PluginVersionProvider
for this component's own version, so both can be swapped for fakes.
"""

import logging
from importlib import metadata
from typing import Protocol

from pydantic import BaseModel

from ..config import Settings, settings

logger = logging.getLogger(__name__)


class TelemetryLookupError(Exception):
    """A telemetry fact source is unavailable."""


class HostApplicationUnavailableError(TelemetryLookupError):
    """The host application descriptor cannot be determined."""


class ApplicationInfo(BaseModel):
    """Host application descriptor."""

    full_name: str
    major_version: str = ""
    minor_version: str = ""
    build: str = ""

    @property
    def identifier(self) -> str:
        """Name and dotted version, e.g. ``IntelliJ IDEA/2023.2.231``."""
        return f"{self.full_name}/{self.major_version}.{self.minor_version}.{self.build}"


class ApplicationInfoProvider(Protocol):
    def get_application_info(self) -> ApplicationInfo: ...


class PluginVersionProvider(Protocol):
    def get_plugin_version(self, plugin_id: str) -> str | None: ...


class SettingsApplicationInfoProvider:
    """Reads the host descriptor from the HOST_APP_* settings."""

    def __init__(self, app_settings: Settings | None = None):
        self._settings = app_settings or settings

    def get_application_info(self) -> ApplicationInfo:
        """Return the configured host descriptor.

        Raises:
            HostApplicationUnavailableError: If no host application name is configured
        """
        if not self._settings.host_app_name:
            raise HostApplicationUnavailableError("Host application name is not configured")

        return ApplicationInfo(
            full_name=self._settings.host_app_name,
            major_version=self._settings.host_app_major_version,
            minor_version=self._settings.host_app_minor_version,
            build=self._settings.host_app_build,
        )


class PackageMetadataVersionProvider:
    """Looks up installed distribution versions through importlib.metadata."""

    def get_plugin_version(self, plugin_id: str) -> str | None:
        try:
            return metadata.version(plugin_id)
        except metadata.PackageNotFoundError:
            logger.debug(f"Distribution not installed: {plugin_id}")
            return None


class StaticPluginVersionProvider:
    """Serves versions from a fixed mapping."""

    def __init__(self, versions: dict[str, str] | None = None):
        self.versions = dict(versions or {})

    def get_plugin_version(self, plugin_id: str) -> str | None:
        return self.versions.get(plugin_id)
