"""
Shared service instance for the API routers.
"""
from ..config.settings import get_settings
from ..services.team_items_service import TeamItemsService


def build_service() -> TeamItemsService:
    settings = get_settings()
    return TeamItemsService(
        team_items_csv=settings.team_items_csv,
        participants_csv=settings.participants_csv,
    )


service = build_service()


def get_service() -> TeamItemsService:
    """FastAPI dependency returning the shared service."""
    return service
