from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import conint, field_serializer

from .base import CamelModel
from .cart import CartItem, Modification


class CheckoutItem(CamelModel):
    menu_item_name: str
    menu_item_description: Optional[str] = None
    unit_price: Decimal
    quantity: conint(ge=1)
    modifications: List[Modification] = []


class CheckoutRequest(CamelModel):
    items: List[CheckoutItem]


class CheckoutSessionCreated(CamelModel):
    url: str


class CheckoutSessionRead(CamelModel):
    session_id: str
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    payment_status: Optional[str] = None
    total_amount: Decimal

    @field_serializer("total_amount")
    def serialize_total_amount(self, value: Decimal) -> float:
        return float(value)


class SaveOrderRequest(CamelModel):
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    location_id: int
    pickup_time: datetime
    session_id: str
    total_amount: Decimal
    cart_items: List[CartItem]


class SaveOrderResponse(CamelModel):
    order_id: int
    message: str
