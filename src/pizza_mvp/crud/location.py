from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pizza_mvp.models import Location


async def get_active_locations(db: AsyncSession) -> List[Location]:
    """
    Возвращает активные точки, отсортированные по названию.
    """
    stmt = (
        select(Location)
        .where(Location.is_active.is_(True))
        .order_by(Location.name)
    )
    result = await db.execute(stmt)
    return result.scalars().all()


async def get_location_by_id(db: AsyncSession, location_id: int) -> Optional[Location]:
    """
    Возвращает активную точку с подгруженными часами работы.
    """
    stmt = (
        select(Location)
        .where(Location.id == location_id, Location.is_active.is_(True))
        .options(selectinload(Location.opening_hours))
    )
    result = await db.execute(stmt)
    return result.scalars().unique().first()
