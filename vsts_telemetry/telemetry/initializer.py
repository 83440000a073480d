"""
Telemetry Context Initializer

Populates a TelemetryContext with the anonymized user, device, component,
session and host facts, and builds the User-Agent sent with outbound
requests. Initialization happens once per initializer and never raises:
telemetry must not take the host application down.
"""

import hashlib
import logging
import threading
import uuid

from ..config import Settings, settings
from .config import get_telemetry_config
from .constants import DEFAULT_VERSION, ContextTagKeys, TelemetryProperties
from .context import ComponentContext, DeviceContext, SessionContext, TelemetryContext, UserContext
from .facts import PlatformFacts
from .host import (
    ApplicationInfo,
    ApplicationInfoProvider,
    PackageMetadataVersionProvider,
    PluginVersionProvider,
    SettingsApplicationInfoProvider,
)

logger = logging.getLogger(__name__)

HOST_APPLICATION_PROPERTIES = frozenset(
    {
        TelemetryProperties.MAJOR_VERSION,
        TelemetryProperties.MINOR_VERSION,
        TelemetryProperties.BUILD_NUMBER,
        TelemetryProperties.EXE_NAME,
    }
)


class TelemetryContextInitializer:
    """
    Context initializer for the Application Insights telemetry client.

    Holds the resolved-once state: the PlatformFacts caches (host name and
    Linux distribution) and the initialized flag.
    """

    def __init__(
        self,
        facts: PlatformFacts | None = None,
        application_info: ApplicationInfoProvider | None = None,
        plugin_versions: PluginVersionProvider | None = None,
        tag_keys: ContextTagKeys | None = None,
        app_settings: Settings | None = None,
    ):
        """
        Initialize the context initializer.

        Args:
            facts: Platform fact source (a fresh PlatformFacts by default)
            application_info: Host application descriptor source
            plugin_versions: Registry used to look up this component's version
            tag_keys: Tag key names written into the context tags
            app_settings: Product, bundle and plugin identity
        """
        self._settings = app_settings or settings
        self.facts = facts or PlatformFacts(app_settings=self._settings)
        self._application_info = application_info or SettingsApplicationInfoProvider(
            self._settings
        )
        self._plugin_versions = plugin_versions or PackageMetadataVersionProvider()
        self.tag_keys = tag_keys or ContextTagKeys()

        self._lock = threading.Lock()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self, context: TelemetryContext) -> None:
        """
        Populate ``context`` on the first call; later calls are no-ops.

        Concurrent first calls block until the first one finishes, so the
        resolution runs at most once.
        """
        if self._initialized:
            return

        with self._lock:
            if self._initialized:
                return

            logger.info("Starting TelemetryContext initialization")
            self._run_step("instrumentation key", self._initialize_instrumentation_key, context)
            self._run_step("properties", self._initialize_properties, context.properties)
            self._run_step("user", self._initialize_user, context.user)
            self._run_step("component", self._initialize_component, context.component)
            self._run_step("device", self._initialize_device, context.device)
            self._run_step("tags", self._initialize_tags, context.tags)
            self._run_step("session", self._initialize_session, context.session)
            self._initialized = True
            logger.info("Ending TelemetryContext initialization")

    def get_user_agent(self, default_user_agent: str) -> str:
        """
        Build the User-Agent for outbound requests.

        Format: ``<product>/<plugin-version> (<app>/<major>.<minor>.<build>;
        <platform-full-name>; <runtime>/<runtime-version>) <default>``

        Args:
            default_user_agent: Agent string of the underlying HTTP stack

        Returns:
            The formatted User-Agent, or ``default_user_agent`` if any part fails
        """
        try:
            application = self._application_info.get_application_info()
            return (
                f"{self._settings.product_name}/{self.get_plugin_version()} "
                f"({application.identifier}; {self.facts.platform_full_name}; "
                f"{self.facts.runtime_name}/{self.facts.runtime_version}) {default_user_agent}"
            )
        except Exception:
            logger.warning("Error getting UserAgent", exc_info=True)
            return default_user_agent

    def get_user_id(self) -> str:
        """Anonymized user id: SHA-1 hex digest of ``<user>@<host>``."""
        fake_user_id = f"{self.facts.user_name}@{self.facts.hostname}"
        # names read from undecodable environment bytes carry lone surrogates
        return hashlib.sha1(fake_user_id.encode("utf-8", "surrogatepass")).hexdigest()

    def get_plugin_version(self) -> str:
        """Version of this component, "0" when the registry does not know it."""
        try:
            version = self._plugin_versions.get_plugin_version(self._settings.plugin_id)
        except Exception as e:
            logger.warning(f"Could not look up version of {self._settings.plugin_id}: {e}")
            return DEFAULT_VERSION
        return version or DEFAULT_VERSION

    def _get_application_info(self) -> ApplicationInfo | None:
        try:
            return self._application_info.get_application_info()
        except Exception as e:
            logger.warning(f"Host application info unavailable: {e}")
            return None

    def _run_step(self, name: str, step, target) -> None:
        try:
            step(target)
        except Exception:
            logger.warning(f"TelemetryContext {name} initialization failed", exc_info=True)

    def _initialize_instrumentation_key(self, context: TelemetryContext) -> None:
        context.instrumentation_key = get_telemetry_config().instrumentation_key

    def _initialize_properties(self, properties: dict[str, str]) -> None:
        facts = self.facts
        application = self._get_application_info()

        values = {
            TelemetryProperties.USER_ID: self.get_user_id,
            TelemetryProperties.MAJOR_VERSION: lambda: application.major_version,
            TelemetryProperties.MINOR_VERSION: lambda: application.minor_version,
            TelemetryProperties.BUILD_NUMBER: lambda: application.build,
            TelemetryProperties.EXE_NAME: lambda: application.full_name,
            TelemetryProperties.PLUGIN_VERSION: self.get_plugin_version,
            TelemetryProperties.PROCESSOR_ARCHITECTURE: lambda: facts.processor_architecture,
            TelemetryProperties.LOCALE_NAME: lambda: facts.locale_name,
            TelemetryProperties.OS_MAJOR_VERSION: lambda: facts.platform_major_version,
            TelemetryProperties.OS_MINOR_VERSION: lambda: facts.platform_minor_version,
            TelemetryProperties.OS_NAME: lambda: facts.platform_name,
            TelemetryProperties.OS_SHORT_NAME: lambda: facts.platform_short_name,
            TelemetryProperties.OS_FULL_NAME: lambda: facts.platform_full_name,
            TelemetryProperties.RUNTIME_NAME: lambda: facts.runtime_name,
            TelemetryProperties.RUNTIME_VERSION: lambda: facts.runtime_version,
        }
        for key, value in values.items():
            properties[key] = self._property_value(key, value, available=application is not None)

    def _property_value(self, key: str, value, available: bool = True) -> str:
        # host application properties are empty when the descriptor is missing
        if not available and key in HOST_APPLICATION_PROPERTIES:
            return ""
        try:
            return value() or ""
        except Exception:
            logger.warning(f"Could not resolve telemetry property {key}", exc_info=True)
            return ""

    def _initialize_user(self, user: UserContext) -> None:
        user.id = self.get_user_id()
        user.user_agent = self._settings.bundle_name

    def _initialize_component(self, component: ComponentContext) -> None:
        component.version = self.get_plugin_version()

    def _initialize_device(self, device: DeviceContext) -> None:
        device.operating_system = self.facts.platform_name
        device.operating_system_version = self.facts.platform_version

    def _initialize_tags(self, tags: dict[str, str]) -> None:
        tags[self.tag_keys.application_id] = self._settings.bundle_name
        tags[self.tag_keys.device_os] = self.facts.platform_name
        tags[self.tag_keys.device_os_version] = self.facts.platform_version

    def _initialize_session(self, session: SessionContext) -> None:
        session.id = str(uuid.uuid4())
