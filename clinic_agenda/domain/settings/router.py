"""Settings router - center-wide configuration"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from .schemas import AppSettingsUpdate
from .service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/app-settings", tags=["Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    """Dependency injection for SettingsService"""
    return SettingsService(db)


@router.get("")
async def get_settings(
    current_user: User = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    return service.get_settings()


@router.put("")
async def update_settings(
    data: AppSettingsUpdate,
    current_user: User = Depends(require_admin),
    service: SettingsService = Depends(get_settings_service),
):
    """Update settings (admin only); times are normalized so the booking window fits the working hours"""
    return service.update_settings(data)


@router.get("/calendar")
async def get_calendar_options(
    current_user: User = Depends(get_current_user),
    service: SettingsService = Depends(get_settings_service),
):
    return service.get_calendar_options()
