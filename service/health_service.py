"""Health service for basic health checks"""
import logging
from datetime import datetime, timezone

from service.dto import HealthResponseDTO, RootResponseDTO

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


def get_banner() -> RootResponseDTO:
    return RootResponseDTO(message="Video API running")


def get_health() -> HealthResponseDTO:
    """
    Get basic health status.

    Static OK status; the catalog and object store are not pinged.

    Returns:
        HealthResponseDTO: Health check result
    """
    logger.info("Health check requested")

    return HealthResponseDTO(
        ok=True,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=API_VERSION
    )
