"""
Telemetry Constants

Well-known property names written into every telemetry context, and the
defaults reported when a fact cannot be determined.
"""

from pydantic import BaseModel

UNKNOWN = "Unknown"
DEFAULT_VERSION = "0"
LINUX_OS_NAME = "Linux"


class TelemetryProperties:
    """Context property names."""

    # User
    USER_ID = "VSTS.Core.User.Id"
    LOCALE_NAME = "VSTS.Core.User.Locale.Name"

    # Host application
    MAJOR_VERSION = "VSTS.Core.Version.Major"
    MINOR_VERSION = "VSTS.Core.Version.Minor"
    BUILD_NUMBER = "VSTS.Core.Version.Build"
    EXE_NAME = "VSTS.Core.ExeName"

    # Plugin
    PLUGIN_VERSION = "VSTS.Plugin.Version"

    # Machine
    PROCESSOR_ARCHITECTURE = "VSTS.Core.Machine.Processor.Architecture"
    OS_MAJOR_VERSION = "VSTS.Core.Machine.OS.Version.Major"
    OS_MINOR_VERSION = "VSTS.Core.Machine.OS.Version.Minor"
    OS_NAME = "VSTS.Core.Machine.OS.Name"
    OS_SHORT_NAME = "VSTS.Core.Machine.OS.ShortName"
    OS_FULL_NAME = "VSTS.Core.Machine.OS.FullName"

    # Runtime
    RUNTIME_NAME = "VSTS.Core.Runtime.Name"
    RUNTIME_VERSION = "VSTS.Core.Runtime.Version"

    @classmethod
    def all(cls) -> list[str]:
        """Every property name, in the order they are populated."""
        return [
            cls.USER_ID,
            cls.MAJOR_VERSION,
            cls.MINOR_VERSION,
            cls.BUILD_NUMBER,
            cls.EXE_NAME,
            cls.PLUGIN_VERSION,
            cls.PROCESSOR_ARCHITECTURE,
            cls.LOCALE_NAME,
            cls.OS_MAJOR_VERSION,
            cls.OS_MINOR_VERSION,
            cls.OS_NAME,
            cls.OS_SHORT_NAME,
            cls.OS_FULL_NAME,
            cls.RUNTIME_NAME,
            cls.RUNTIME_VERSION,
        ]


class ContextTagKeys(BaseModel):
    """Application Insights envelope tag names."""

    application_id: str = "ai.application.id"
    application_version: str = "ai.application.ver"
    device_os: str = "ai.device.os"
    device_os_version: str = "ai.device.osVersion"
    user_id: str = "ai.user.id"
    user_agent: str = "ai.user.userAgent"
    session_id: str = "ai.session.id"
