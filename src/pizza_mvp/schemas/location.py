from datetime import time
from typing import List, Optional

from .base import CamelModel


class OpeningHoursRead(CamelModel):
    day_of_week: int
    open_time: Optional[time] = None
    close_time: Optional[time] = None
    is_closed: bool


class LocationRead(CamelModel):
    id: int
    name: str
    address: str
    city: Optional[str] = None
    postcode: Optional[str] = None
    phone: Optional[str] = None


class LocationWithOpeningHours(LocationRead):
    opening_hours: List[OpeningHoursRead] = []
