"""
Application Insights Telemetry Tracker

Wires the resolved TelemetryContext into the Azure exporter so every
envelope leaving the process carries the user, device, session and
component context. Delivery itself is left to opencensus.
"""

import logging
from typing import Any

from opencensus.ext.azure.log_exporter import AzureLogHandler

from .config import get_telemetry_config
from .constants import ContextTagKeys
from .context import TelemetryContext
from .initializer import TelemetryContextInitializer

# Global instances (singleton)
_app_insights_logger: logging.Logger | None = None
_telemetry_context: TelemetryContext | None = None


def apply_context_to_envelope(
    context: TelemetryContext, envelope: Any, tag_keys: ContextTagKeys | None = None
) -> bool:
    """
    Stamp an outgoing envelope with the telemetry context.

    Args:
        context: Initialized telemetry context
        envelope: opencensus envelope (iKey, tags, data.baseData.properties)
        tag_keys: Tag key names for the user/session/component tags

    Returns:
        True, so the envelope is still exported
    """
    keys = tag_keys or ContextTagKeys()

    if context.instrumentation_key:
        envelope.iKey = context.instrumentation_key

    tags = {
        keys.user_id: context.user.id,
        keys.user_agent: context.user.user_agent,
        keys.session_id: context.session.id,
        keys.application_version: context.component.version,
        **context.tags,
    }
    if envelope.tags is None:
        envelope.tags = {}
    envelope.tags.update({key: value for key, value in tags.items() if value is not None})

    base_data = getattr(getattr(envelope, "data", None), "baseData", None)
    if base_data is not None:
        if getattr(base_data, "properties", None) is None:
            base_data.properties = {}
        base_data.properties.update(context.properties)

    return True


def initialize_telemetry(
    initializer: TelemetryContextInitializer | None = None,
) -> logging.Logger | None:
    """
    Initialize Application Insights telemetry.

    Call this once at application startup.

    Args:
        initializer: Context initializer (a default one is created if omitted)

    Returns:
        Logger instance if successful, None if disabled or no connection is configured
    """
    global _app_insights_logger, _telemetry_context

    # Check if already initialized
    if _app_insights_logger is not None:
        return _app_insights_logger

    config = get_telemetry_config()

    if not config.enabled:
        logging.info("[Telemetry] Telemetry disabled by configuration")
        return None

    connection_string = config.get_connection_string()
    if not connection_string:
        logging.warning(
            "[Telemetry] No instrumentation key or connection string found. Telemetry disabled."
        )
        return None

    initializer = initializer or TelemetryContextInitializer()
    context = TelemetryContext()
    initializer.initialize(context)

    try:
        logger = logging.getLogger("vsts_telemetry.events")
        logger.setLevel(logging.INFO)
        logger.propagate = False

        azure_handler = AzureLogHandler(connection_string=connection_string)

        def callback_function(envelope):
            return apply_context_to_envelope(context, envelope, initializer.tag_keys)

        azure_handler.add_telemetry_processor(callback_function)
        logger.addHandler(azure_handler)

        _app_insights_logger = logger
        _telemetry_context = context

        logging.info("[Telemetry] Application Insights initialized successfully")
        return logger

    except Exception as e:
        logging.error(f"[Telemetry] Failed to initialize Application Insights: {e}")
        return None


def get_app_insights() -> logging.Logger | None:
    """Get the Application Insights logger instance, None if not initialized."""
    return _app_insights_logger


def get_telemetry_context() -> TelemetryContext | None:
    """Get the context attached to exported envelopes, None if not initialized."""
    return _telemetry_context


def track_event(name: str, properties: dict[str, Any] | None = None) -> None:
    """
    Track a custom event.

    Context properties are added to the envelope by the telemetry processor.

    Args:
        name: Event name
        properties: Additional event properties
    """
    if _app_insights_logger:
        _app_insights_logger.info(name, extra={"custom_dimensions": properties or {}})


def track_exception(
    exception: Exception, properties: dict[str, Any] | None = None, level: str = "ERROR"
) -> None:
    """
    Track an exception/error.

    Args:
        exception: Exception instance
        properties: Additional error properties
        level: Log level (ERROR, WARNING, INFO)
    """
    merged_properties = {
        "error_type": type(exception).__name__,
        "error_message": str(exception),
        **(properties or {}),
    }

    if _app_insights_logger:
        log_level = getattr(logging, level.upper(), logging.ERROR)
        _app_insights_logger.log(
            log_level,
            f"Exception: {type(exception).__name__}",
            exc_info=exception,
            extra={"custom_dimensions": merged_properties},
        )


def flush_telemetry() -> None:
    """Flush telemetry immediately (useful before application shutdown)."""
    if _app_insights_logger:
        for handler in _app_insights_logger.handlers:
            if hasattr(handler, "flush"):
                handler.flush()


def shutdown_telemetry() -> None:
    """Flush, detach the exporter and forget the resolved context."""
    global _app_insights_logger, _telemetry_context

    if _app_insights_logger:
        flush_telemetry()
        for handler in list(_app_insights_logger.handlers):
            _app_insights_logger.removeHandler(handler)
            handler.close()

    _app_insights_logger = None
    _telemetry_context = None
