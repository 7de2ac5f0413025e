"""Settings schemas - loosely typed center settings as sent by the admin screen"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class AppSettingsUpdate(BaseModel):
    """
    Partial settings update. Values are coerced (not rejected) by the service:
    times accept "H:MM", "HH:MM:SS" or whole hours; flags accept yes/no strings and numbers.
    """

    model_config = ConfigDict(extra="ignore")

    centerOpensAt: Optional[Any] = None
    centerClosesAt: Optional[Any] = None
    appointmentOpensAt: Optional[Any] = None
    appointmentClosesAt: Optional[Any] = None
    openOnSaturday: Optional[Any] = None
    openOnSunday: Optional[Any] = None
    therapistCanViewOthers: Optional[Any] = None
    therapistCanEditOthers: Optional[Any] = None
