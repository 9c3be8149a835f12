"""
CreditKeeper - Application Entry Point

Wires logging and the credit service together for embedding callers
(an API layer, a notebook, a demo script).
"""

import structlog

from creditkeeper import __version__
from creditkeeper.application.services import CreditService
from creditkeeper.core.config import Settings, settings as default_settings
from creditkeeper.core.dependencies import get_credit_service
from creditkeeper.core.logging import setup_logging


def create_app(settings: Settings = default_settings) -> CreditService:
    """
    Configure logging and build the credit service.

    Args:
        settings: Application settings (uses environment defaults if not provided)

    Returns:
        A ready-to-use CreditService
    """
    setup_logging(settings)

    logger = structlog.get_logger(__name__)
    service = get_credit_service()
    logger.info(
        "application_started",
        version=__version__,
        debug=settings.debug,
        metrics_enabled=settings.metrics_enabled,
    )

    return service
