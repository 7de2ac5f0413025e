"""Settings service - center hours, booking window and permission flags"""

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...shared.settings_parser import parse_bool_setting
from ..scheduling.normalizer import ScheduleWindow, normalize_schedule
from ..scheduling.time_utils import build_day_options, build_hour_range, derive_center_hour_bounds
from .repository import SettingsRepository
from .schemas import AppSettingsUpdate

logger = logging.getLogger(__name__)

# API field -> stored key
TIME_SETTING_KEYS = {
    "centerOpensAt": "center_open_time",
    "centerClosesAt": "center_close_time",
    "appointmentOpensAt": "appointment_open_time",
    "appointmentClosesAt": "appointment_close_time",
}
BOOL_SETTING_KEYS = {
    "openOnSaturday": "center_open_saturday",
    "openOnSunday": "center_open_sunday",
    "therapistCanViewOthers": "therapist_can_view_others",
    "therapistCanEditOthers": "therapist_can_edit_others",
}
SETTINGS_KEYS = {**TIME_SETTING_KEYS, **BOOL_SETTING_KEYS}

DEFAULT_FLAGS = {field: False for field in BOOL_SETTING_KEYS}


def _window_from(raw: dict[str, Any]) -> ScheduleWindow:
    return ScheduleWindow(
        center_opens_at=raw.get("centerOpensAt"),
        center_closes_at=raw.get("centerClosesAt"),
        appointment_opens_at=raw.get("appointmentOpensAt"),
        appointment_closes_at=raw.get("appointmentClosesAt"),
    )


class SettingsService:
    """Service layer for application settings"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SettingsRepository()

    def _load_raw(self) -> dict[str, Any]:
        """Stored values keyed by API field; missing keys are absent"""
        stored = self.repo.get_values(self.db, list(SETTINGS_KEYS.values()))
        return {field: stored[key] for field, key in SETTINGS_KEYS.items() if key in stored}

    def get_settings(self) -> dict:
        """Settings with malformed or missing stored values replaced by defaults"""
        raw = self._load_raw()
        schedule = normalize_schedule(_window_from(raw))

        settings = {
            "centerOpensAt": schedule.center_opens_at,
            "centerClosesAt": schedule.center_closes_at,
            "appointmentOpensAt": schedule.appointment_opens_at,
            "appointmentClosesAt": schedule.appointment_closes_at,
        }
        for field in BOOL_SETTING_KEYS:
            result = parse_bool_setting(raw.get(field), DEFAULT_FLAGS[field])
            if result.used_fallback and field in raw:
                logger.warning(f"⚠️ Setting {field} fell back to default: {result.reason}")
            settings[field] = result.value
        return settings

    def update_settings(self, data: AppSettingsUpdate) -> dict:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(status_code=400, detail="No settings to update")

        values: dict[str, Any] = {}
        if any(field in changes for field in TIME_SETTING_KEYS):
            merged = {**self._load_raw(), **changes}
            schedule = normalize_schedule(_window_from(merged))
            values.update(
                {
                    TIME_SETTING_KEYS["centerOpensAt"]: schedule.center_opens_at,
                    TIME_SETTING_KEYS["centerClosesAt"]: schedule.center_closes_at,
                    TIME_SETTING_KEYS["appointmentOpensAt"]: schedule.appointment_opens_at,
                    TIME_SETTING_KEYS["appointmentClosesAt"]: schedule.appointment_closes_at,
                }
            )

        for field, key in BOOL_SETTING_KEYS.items():
            if field in changes:
                values[key] = parse_bool_setting(changes[field], DEFAULT_FLAGS[field]).value

        try:
            self.repo.upsert_values(self.db, values)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error saving settings: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ Settings updated: {sorted(values)}")
        return self.get_settings()

    def get_calendar_options(self) -> dict:
        """Hour grid bounds and visible days derived from the current settings"""
        settings = self.get_settings()
        bounds = derive_center_hour_bounds(settings["centerOpensAt"], settings["centerClosesAt"])
        return {
            "openingHour": bounds.opening_hour,
            "clientClosingHour": bounds.client_closing_exclusive,
            "therapistClosingHour": bounds.therapist_closing_exclusive,
            "centerClosingHour": bounds.center_closing_exclusive,
            "clientHours": build_hour_range(bounds.opening_hour, bounds.client_closing_exclusive),
            "therapistHours": build_hour_range(bounds.opening_hour, bounds.therapist_closing_exclusive),
            "dayOptions": build_day_options(settings["openOnSaturday"], settings["openOnSunday"]),
        }
