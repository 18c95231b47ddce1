"""Health check API endpoints"""
from fastapi import APIRouter

from service.health_service import get_banner, get_health
from service.dto import HealthResponseDTO, RootResponseDTO

router = APIRouter(tags=["health"])


@router.get("/", response_model=RootResponseDTO)
def root() -> RootResponseDTO:
    return get_banner()


@router.get("/health", response_model=HealthResponseDTO)
def health_check() -> HealthResponseDTO:
    """
    Basic health check endpoint.

    Returns:
        HealthResponseDTO: Health status with timestamp
    """
    return get_health()
