"""Pytest configuration and fixtures."""

import os

# Keep the tests independent from a developer's telemetry environment
for _name in list(os.environ):
    if _name.startswith("TELEMETRY_") or _name.startswith("HOST_APP_"):
        del os.environ[_name]

import pytest

from vsts_telemetry.config import Settings
from vsts_telemetry.telemetry import (
    ApplicationInfo,
    PlatformFacts,
    StaticPluginVersionProvider,
    TelemetryContextInitializer,
    reset_telemetry_config,
    shutdown_telemetry,
)

LINUX_PROPERTIES = {
    "os.name": "Linux",
    "os.version": "5.15.0-91-generic",
    "os.arch": "amd64",
    "user.name": "alice",
    "runtime.name": "CPython",
    "runtime.version": "3.12.1",
}

UBUNTU_RELEASE = [
    'PRETTY_NAME="Ubuntu 20.04.6 LTS"',
    'NAME="Ubuntu"',
    'VERSION_ID="20.04"',
    'VERSION="20.04"',
    "ID=ubuntu",
]


class FakeApplicationInfoProvider:
    """Host descriptor fake that counts lookups and can be made to fail."""

    def __init__(self, info: ApplicationInfo | None = None, error: Exception | None = None):
        self.info = info
        self.error = error
        self.calls = 0

    def get_application_info(self) -> ApplicationInfo:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.info


@pytest.fixture(autouse=True)
def fresh_telemetry_config():
    """Re-read telemetry configuration for every test."""
    reset_telemetry_config()
    yield
    shutdown_telemetry()
    reset_telemetry_config()


@pytest.fixture
def test_settings():
    """Settings with a fixed product identity."""
    return Settings(
        product_name="VSTSIntelliJ",
        bundle_name="TfPluginBundle",
        plugin_id="vsts-telemetry",
    )


@pytest.fixture
def make_facts(test_settings):
    """Factory for PlatformFacts backed by in-memory facts."""

    def _make(
        properties: dict[str, str] | None = None,
        hostname_resolver=None,
        release_reader=None,
        locale_reader=None,
    ) -> PlatformFacts:
        props = dict(LINUX_PROPERTIES if properties is None else properties)
        return PlatformFacts(
            system_properties=props.get,
            hostname_resolver=hostname_resolver or (lambda: "devbox"),
            release_reader=release_reader or (lambda: list(UBUNTU_RELEASE)),
            locale_reader=locale_reader or (lambda: "English (United States)"),
            app_settings=test_settings,
        )

    return _make


@pytest.fixture
def application_info():
    """Host application descriptor."""
    return FakeApplicationInfoProvider(
        ApplicationInfo(
            full_name="IntelliJ IDEA",
            major_version="2023",
            minor_version="2",
            build="IU-232.9921.47",
        )
    )


@pytest.fixture
def plugin_versions():
    """Plugin registry knowing this component."""
    return StaticPluginVersionProvider({"vsts-telemetry": "1.2.3"})


@pytest.fixture
def make_initializer(make_facts, application_info, plugin_versions, test_settings):
    """Factory for TelemetryContextInitializer with injected collaborators."""

    def _make(facts: PlatformFacts | None = None, **kwargs) -> TelemetryContextInitializer:
        kwargs.setdefault("application_info", application_info)
        kwargs.setdefault("plugin_versions", plugin_versions)
        kwargs.setdefault("app_settings", test_settings)
        return TelemetryContextInitializer(facts=facts or make_facts(), **kwargs)

    return _make


@pytest.fixture
def initializer(make_initializer):
    """Context initializer on a Linux host."""
    return make_initializer()
