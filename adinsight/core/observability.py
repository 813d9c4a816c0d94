"""
Log setup for the CLI and optional Logfire export.

Every module logs through ``logging.getLogger(__name__)``. The CLI calls
``setup_logging`` once at startup and then ``setup_logfire``, which attaches a
Logfire handler to the root logger when a write token is available so the
same records reach the Logfire project.

Environment:
    LOG_LEVEL              root level name (default INFO)
    LOGFIRE_TOKEN          Logfire write token; export is off without it
    LOGFIRE_ENVIRONMENT    deployment label (default "development")
"""

import logging
import os
from typing import Optional

import logfire

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logfire_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging with the AdInsight line format."""
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def setup_logfire(environment: Optional[str] = None, service_name: str = "adinsight") -> bool:
    """
    Export log records and pydantic validation events to Logfire.

    Safe to call more than once; only the first successful call attaches
    the handler.

    Args:
        environment: Deployment label (falls back to LOGFIRE_ENVIRONMENT)
        service_name: Service name shown in Logfire

    Returns:
        True when Logfire export is active
    """
    global _logfire_handler

    if _logfire_handler is not None:
        return True

    token = os.environ.get("LOGFIRE_TOKEN")
    if not token:
        logger.debug("Logfire export disabled (LOGFIRE_TOKEN not set)")
        return False

    environment = environment or os.environ.get("LOGFIRE_ENVIRONMENT", "development")

    try:
        logfire.configure(
            token=token,
            service_name=service_name,
            environment=environment,
            send_to_logfire=True,
            console=False,
        )
        logfire.instrument_pydantic()
    except Exception as e:
        logger.warning(f"Logfire export disabled, configuration failed: {e}")
        return False

    _logfire_handler = logfire.LogfireLoggingHandler()
    logging.getLogger().addHandler(_logfire_handler)
    logger.info(f"Logfire export enabled for {service_name} ({environment})")
    return True


def teardown_logfire() -> None:
    """Detach the Logfire handler from the root logger."""
    global _logfire_handler

    if _logfire_handler is not None:
        logging.getLogger().removeHandler(_logfire_handler)
        _logfire_handler = None
