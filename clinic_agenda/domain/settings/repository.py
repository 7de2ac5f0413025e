"""Settings repository - key/value rows"""

from typing import Any

from sqlalchemy.orm import Session

from ...models import Setting


class SettingsRepository:
    """Repository for settings database operations"""

    @staticmethod
    def get_values(db: Session, keys: list[str]) -> dict[str, Any]:
        rows = db.query(Setting).filter(Setting.key.in_(keys)).all()
        return {row.key: row.value for row in rows}

    @staticmethod
    def upsert_values(db: Session, values: dict[str, Any]) -> None:
        """Insert or update every key in one transaction"""
        existing = {
            row.key: row for row in db.query(Setting).filter(Setting.key.in_(list(values))).all()
        }
        for key, value in values.items():
            if key in existing:
                existing[key].value = value
            else:
                db.add(Setting(key=key, value=value))
        db.commit()
