"""Tests for the Application Insights integration."""

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from vsts_telemetry.telemetry import (
    ContextTagKeys,
    TelemetryContext,
    apply_context_to_envelope,
    flush_telemetry,
    get_app_insights,
    get_telemetry_context,
    initialize_telemetry,
    track_event,
)
from vsts_telemetry.telemetry.context import ComponentContext, SessionContext, UserContext


def make_envelope(properties=None):
    """Minimal stand-in for an opencensus envelope."""
    return SimpleNamespace(
        iKey=None,
        tags={"ai.cloud.role": "plugin"},
        data=SimpleNamespace(baseData=SimpleNamespace(properties=properties)),
    )


def make_handler():
    """Mock exporter handler usable by the logging machinery."""
    handler = MagicMock()
    handler.level = logging.NOTSET
    return handler


class TestApplyContext:
    """Tests for stamping envelopes with the context."""

    def test_stamps_envelope(self):
        """Test that key, tags and properties are merged into the envelope."""
        context = TelemetryContext(
            instrumentation_key="ikey-1",
            properties={"VSTS.Core.Machine.OS.Name": "Linux"},
            tags={"ai.device.os": "Linux"},
            user=UserContext(id="abc", user_agent="TfPluginBundle"),
            component=ComponentContext(version="1.2.3"),
            session=SessionContext(id="session-1"),
        )
        envelope = make_envelope({"custom": "value"})

        assert apply_context_to_envelope(context, envelope) is True

        assert envelope.iKey == "ikey-1"
        assert envelope.tags == {
            "ai.cloud.role": "plugin",
            "ai.user.id": "abc",
            "ai.user.userAgent": "TfPluginBundle",
            "ai.session.id": "session-1",
            "ai.application.ver": "1.2.3",
            "ai.device.os": "Linux",
        }
        assert envelope.data.baseData.properties == {
            "custom": "value",
            "VSTS.Core.Machine.OS.Name": "Linux",
        }

    def test_empty_context(self):
        """Test that unset fields are not written."""
        envelope = make_envelope()

        apply_context_to_envelope(TelemetryContext(), envelope)

        assert envelope.iKey is None
        assert envelope.tags == {"ai.cloud.role": "plugin"}
        assert envelope.data.baseData.properties == {}

    def test_custom_tag_keys(self):
        """Test that tag key names can be replaced."""
        context = TelemetryContext(user=UserContext(id="abc"))
        envelope = make_envelope()

        apply_context_to_envelope(context, envelope, ContextTagKeys(user_id="custom.user"))

        assert envelope.tags["custom.user"] == "abc"


class TestInitializeTelemetry:
    """Tests for exporter setup."""

    def test_disabled(self, monkeypatch, initializer):
        """Test that disabled telemetry does nothing."""
        monkeypatch.setenv("TELEMETRY_ENABLED", "false")
        monkeypatch.setenv("TELEMETRY_INSTRUMENTATION_KEY", "ikey-1")

        assert initialize_telemetry(initializer) is None
        assert not initializer.is_initialized
        assert get_app_insights() is None

    def test_no_connection(self, initializer):
        """Test that a missing key disables telemetry."""
        assert initialize_telemetry(initializer) is None
        assert get_telemetry_context() is None

    def test_exporter_failure(self, monkeypatch, initializer):
        """Test that an exporter error is logged and disables telemetry."""
        monkeypatch.setenv("TELEMETRY_INSTRUMENTATION_KEY", "ikey-1")

        with patch(
            "vsts_telemetry.telemetry.tracker.AzureLogHandler", side_effect=ValueError("bad")
        ):
            assert initialize_telemetry(initializer) is None

    def test_wires_context_processor(self, monkeypatch, initializer):
        """Test that exported envelopes receive the resolved context."""
        monkeypatch.setenv("TELEMETRY_INSTRUMENTATION_KEY", "ikey-1")
        handler = make_handler()

        with patch(
            "vsts_telemetry.telemetry.tracker.AzureLogHandler", return_value=handler
        ) as handler_cls:
            logger = initialize_telemetry(initializer)

        handler_cls.assert_called_once_with(connection_string="InstrumentationKey=ikey-1")
        assert logger is get_app_insights()
        assert initialize_telemetry(initializer) is logger

        context = get_telemetry_context()
        assert context.instrumentation_key == "ikey-1"
        assert context.user.id == initializer.get_user_id()

        processor = handler.add_telemetry_processor.call_args.args[0]
        envelope = make_envelope()
        assert processor(envelope) is True
        assert envelope.iKey == "ikey-1"
        assert envelope.tags["ai.session.id"] == context.session.id
        assert envelope.data.baseData.properties == context.properties

    def test_track_event_and_flush(self, monkeypatch, initializer):
        """Test that events go to the exporter handler."""
        monkeypatch.setenv("TELEMETRY_APP_INSIGHTS_CONNECTION_STRING", "InstrumentationKey=k")
        handler = make_handler()

        with patch("vsts_telemetry.telemetry.tracker.AzureLogHandler", return_value=handler):
            initialize_telemetry(initializer)

        track_event("plugin_loaded", {"repository_count": 2})
        flush_telemetry()

        record = handler.handle.call_args.args[0]
        assert record.getMessage() == "plugin_loaded"
        assert record.custom_dimensions == {"repository_count": 2}
        handler.flush.assert_called()
