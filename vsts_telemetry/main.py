"""Diagnostic entry point: print the resolved telemetry context and User-Agent."""

import json
import logging
import sys

from .config import settings
from .http import default_user_agent
from .telemetry import TelemetryContext, TelemetryContextInitializer

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)


def main() -> None:
    """Resolve the context for this machine and dump it as JSON."""
    initializer = TelemetryContextInitializer()
    context = TelemetryContext()
    initializer.initialize(context)

    report = {
        "context": context.model_dump(),
        "user_agent": initializer.get_user_agent(default_user_agent()),
    }
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
