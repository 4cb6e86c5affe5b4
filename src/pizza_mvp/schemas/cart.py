from decimal import Decimal
from typing import List, Optional

from pydantic import conint

from .base import CamelModel


class Modification(CamelModel):
    ingredient_id: Optional[int] = None
    ingredient_name: Optional[str] = None
    price: Decimal = Decimal("0")
    extra: bool = False
    removed: bool = False


class CartItem(CamelModel):
    menu_item_id: int
    menu_item_name: Optional[str] = None
    quantity: conint(ge=1)
    base_price: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")  # базовая цена с учётом добавок
    modifications: List[Modification] = []
