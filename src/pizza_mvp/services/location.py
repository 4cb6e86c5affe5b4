import logging
import math
from datetime import datetime, time, timedelta
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from pizza_mvp.crud.location import get_active_locations, get_location_by_id
from pizza_mvp.models import Location, OpeningHours
from pizza_mvp.schemas.cart import CartItem

logger = logging.getLogger(__name__)


def preparation_minutes(location: Location, cart_items: Iterable[CartItem]) -> int:
    total_quantity = sum(item.quantity for item in cart_items)
    return location.base_prep_minutes + location.per_item_prep_minutes * total_quantity


def round_up_to_interval(moment: datetime, interval_minutes: int) -> datetime:
    """
    Округляет вверх до ближайшего кратного интервала, считая от полуночи.
    """
    midnight = datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
    step = interval_minutes * 60
    seconds = (moment - midnight).total_seconds()
    return midnight + timedelta(seconds=math.ceil(seconds / step) * step)


def opening_window(hours: OpeningHours, day) -> Optional[tuple]:
    if hours.is_closed or hours.open_time is None or hours.close_time is None:
        return None
    opens_at = datetime.combine(day, hours.open_time)
    closes_at = datetime.combine(day, hours.close_time)
    if closes_at <= opens_at:
        closes_at += timedelta(days=1)
    return opens_at, closes_at


def compute_pickup_times(
    opening_hours: Iterable[OpeningHours],
    now: datetime,
    lead_minutes: int,
    interval_minutes: int,
) -> List[datetime]:
    """
    Слоты выдачи на сегодня.

    Учитываются часы работы за сегодня и хвост вчерашней смены,
    если точка закрывается после полуночи. Первый слот — не раньше
    max(now, открытие) + время приготовления, дальше с шагом interval
    и не позже закрытия.
    """
    interval_minutes = max(interval_minutes, 1)
    by_day = {h.day_of_week: h for h in opening_hours}
    today = now.date()
    naive_now = now.replace(tzinfo=None)

    slots: List[datetime] = []
    for offset in (-1, 0):
        day = today + timedelta(days=offset)
        hours = by_day.get(day.weekday())
        window = opening_window(hours, day) if hours else None
        if window is None:
            continue

        opens_at, closes_at = window
        if closes_at <= naive_now:
            continue

        slot = round_up_to_interval(
            max(naive_now, opens_at) + timedelta(minutes=lead_minutes), interval_minutes
        )
        while slot <= closes_at:
            if not slots or slot > slots[-1]:
                slots.append(slot)
            slot += timedelta(minutes=interval_minutes)

    return [slot.replace(tzinfo=now.tzinfo) for slot in slots]


class LocationService:
    """
    Точки продаж, часы работы и расчёт времени выдачи.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_active_locations(self) -> List[Location]:
        return await get_active_locations(self.db)

    async def get_location_with_opening_hours(self, location_id: int) -> Optional[Location]:
        return await get_location_by_id(self.db, location_id)

    async def get_available_pickup_times(
        self,
        location_id: int,
        cart_items: List[CartItem],
        now: Optional[datetime] = None,
    ) -> Optional[List[datetime]]:
        """
        Возвращает None, если точка не найдена.
        """
        location = await get_location_by_id(self.db, location_id)
        if location is None:
            return None

        now = now or datetime.now()
        lead = preparation_minutes(location, cart_items)
        slots = compute_pickup_times(location.opening_hours, now, lead, location.slot_interval_minutes)
        logger.debug(
            "Location %s: %d pickup slots (lead %d min, %d cart items)",
            location_id, len(slots), lead, len(cart_items),
        )
        return slots
