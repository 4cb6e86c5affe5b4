from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from pizza_mvp.db.deps import get_location_service
from pizza_mvp.schemas.cart import CartItem
from pizza_mvp.schemas.location import LocationRead, LocationWithOpeningHours
from pizza_mvp.services.location import LocationService


router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("", response_model=List[LocationRead])
async def list_active_locations(service: LocationService = Depends(get_location_service)):
    """
    Возвращает список активных точек.
    """
    return await service.get_active_locations()


@router.get("/{location_id}", response_model=LocationWithOpeningHours)
async def get_location(
    location_id: int = Path(..., description="ID точки"),
    service: LocationService = Depends(get_location_service),
):
    """
    Возвращает точку с часами работы.
    """
    location = await service.get_location_with_opening_hours(location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return location


@router.post("/{location_id}/pickup-times", response_model=List[datetime])
async def get_pickup_times(
    location_id: int,
    cart_items: List[CartItem] | None = None,
    service: LocationService = Depends(get_location_service),
):
    """
    Возвращает доступное время выдачи для корзины.
    Пустая корзина допустима.
    """
    pickup_times = await service.get_available_pickup_times(location_id, cart_items or [])
    if pickup_times is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return pickup_times
