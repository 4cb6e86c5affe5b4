from .location import Location, OpeningHours
from .menu_item import MenuItem
from .ingredient import Ingredient
from .order import Order, OrderStatusEnum, EmailStatusEnum
from .order_item import OrderItem
from .order_item_ingredient import OrderItemIngredient

__all__ = [
    "Location",
    "OpeningHours",
    "MenuItem",
    "Ingredient",
    "Order",
    "OrderStatusEnum",
    "EmailStatusEnum",
    "OrderItem",
    "OrderItemIngredient",
]
