import logging
import smtplib
from email.message import EmailMessage
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool

from pizza_mvp.models import Order, OrderItem

logger = logging.getLogger(__name__)


def format_order_item(item: OrderItem) -> str:
    name = item.menu_item.name if item.menu_item else f"Item #{item.menu_item_id}"
    line = f"{item.quantity} x {name} - £{item.total_price:.2f}"

    mods = []
    for mod in item.ingredient_modifications:
        ingredient = mod.ingredient.name if mod.ingredient else f"#{mod.ingredient_id}"
        if mod.extra:
            mods.append(f"+{ingredient}")
        else:
            mods.append(f"-{ingredient}")
    if mods:
        line += f" ({', '.join(mods)})"
    return line


def render_order_confirmation(order: Order, items: List[OrderItem]) -> str:
    location = order.location.name if getattr(order, "location", None) else f"location #{order.location_id}"
    lines = [
        f"Hi {order.customer_name or 'there'},",
        "",
        f"Thanks for your order #{order.id}. We have received it and will have it ready",
        f"for pickup at {location} at {order.pickup_time:%H:%M on %d %b %Y}.",
        "",
    ]
    lines.extend(format_order_item(item) for item in items)
    lines.extend([
        "",
        f"Total paid: £{order.total_price:.2f}",
    ])
    return "\n".join(lines)


class EmailService:
    """
    Отправка писем через SMTP. Без SMTP_HOST сервис выключен.
    """

    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        sender: str = "orders@pizza-mvp.local",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.sender = sender

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def _send(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)

    async def send_order_confirmation(self, order: Order, items: List[OrderItem]) -> None:
        if not order.email:
            raise ValueError(f"Order {order.id} has no customer email")

        message = EmailMessage()
        message["Subject"] = f"Your pizza order #{order.id}"
        message["From"] = self.sender
        message["To"] = order.email
        message.set_content(render_order_confirmation(order, items))

        await run_in_threadpool(self._send, message)
        logger.info("Order confirmation for order %s sent to %s", order.id, order.email)
