"""Start the planner API with uvicorn using host/port from settings."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from run_planner.config import get_settings
from run_planner.logging_config import configure_logging


logger = logging.getLogger("scripts.run_server")


def main() -> None:
    configure_logging()
    settings = get_settings()
    logger.info("Starting planner API on %s:%d", settings.app_host, settings.app_port)
    uvicorn.run(
        "run_planner.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
