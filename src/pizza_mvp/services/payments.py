import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

import stripe
from fastapi.concurrency import run_in_threadpool

from pizza_mvp.config import settings
from pizza_mvp.schemas.cart import Modification
from pizza_mvp.schemas.checkout import CheckoutItem, CheckoutSessionRead
from pizza_mvp.services.errors import CheckoutError, ErrorKind

logger = logging.getLogger(__name__)


def to_minor_units(amount) -> int:
    """
    Фунты → пенсы (Stripe принимает только целые суммы).
    """
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(amount: Optional[int]) -> Decimal:
    """
    Пенсы → фунты.
    """
    return (Decimal(amount or 0) / 100).quantize(Decimal("0.01"))


def describe_modifications(modifications: Iterable[Modification]) -> List[str]:
    """
    "+Basil" для добавок, "-Onion" для всего остального, в порядке ввода.
    """
    parts = []
    for mod in modifications:
        if not mod.ingredient_name:
            continue
        if mod.extra:
            parts.append(f"+{mod.ingredient_name}")
        else:
            parts.append(f"-{mod.ingredient_name}")
    return parts


def build_item_description(item: CheckoutItem) -> str:
    base = item.menu_item_description or ""
    parts = describe_modifications(item.modifications)
    if not parts:
        return base
    return f"{base} ({', '.join(parts)})".strip()


def build_line_items(items: Iterable[CheckoutItem], currency: str) -> List[dict]:
    line_items = []
    for item in items:
        product_data = {"name": item.menu_item_name}
        description = build_item_description(item)
        # Stripe отклоняет пустую строку в description
        if description:
            product_data["description"] = description

        line_items.append(
            {
                "price_data": {
                    "currency": currency,
                    "unit_amount": to_minor_units(item.unit_price),
                    "product_data": product_data,
                },
                "quantity": item.quantity,
            }
        )
    return line_items


def session_to_read(session) -> CheckoutSessionRead:
    # Session из SDK не dict: поля читаются как атрибуты
    details = getattr(session, "customer_details", None)
    return CheckoutSessionRead(
        session_id=session.id,
        customer_name=getattr(details, "name", None) or "",
        customer_email=getattr(details, "email", None) or "",
        customer_phone=getattr(details, "phone", None) or "",
        payment_status=getattr(session, "payment_status", None),
        total_amount=to_major_units(getattr(session, "amount_total", None)),
    )


class StripeCheckoutGateway:
    """
    Hosted Checkout в Stripe: создание сессии и чтение её статуса.
    Вызовы SDK синхронные, поэтому уходят в threadpool.
    """

    def __init__(
        self,
        api_key: str,
        currency: str = "gbp",
        success_url: str = settings.CHECKOUT_SUCCESS_URL,
        cancel_url: str = settings.CHECKOUT_CANCEL_URL,
    ):
        self.api_key = api_key
        self.currency = currency
        self.success_url = success_url
        self.cancel_url = cancel_url

    def session_params(self, items: Iterable[CheckoutItem]) -> dict:
        return {
            "payment_method_types": ["card"],
            "line_items": build_line_items(items, self.currency),
            "mode": "payment",
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
            # email, телефон и имя обязательны для оформления заказа
            "customer_creation": "always",
            "phone_number_collection": {"enabled": True},
            "billing_address_collection": "required",
        }

    async def create_session(self, items: List[CheckoutItem]) -> str:
        params = self.session_params(items)
        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.create, api_key=self.api_key, **params
            )
        except stripe.StripeError as e:
            logger.warning("Stripe session creation failed: %s", e)
            raise CheckoutError(ErrorKind.payment_provider, str(e)) from e

        logger.info("Created checkout session %s (%d line items)", session["id"], len(params["line_items"]))
        return session["url"]

    async def get_session(self, session_id: str) -> CheckoutSessionRead:
        try:
            session = await run_in_threadpool(
                stripe.checkout.Session.retrieve, session_id, api_key=self.api_key
            )
        except stripe.InvalidRequestError as e:
            if e.code == "resource_missing":
                logger.info("Checkout session %s not found", session_id)
                raise CheckoutError(ErrorKind.not_found, str(e)) from e
            logger.warning("Stripe session lookup failed for %s: %s", session_id, e)
            raise CheckoutError(ErrorKind.payment_provider, str(e)) from e
        except stripe.StripeError as e:
            logger.warning("Stripe session lookup failed for %s: %s", session_id, e)
            raise CheckoutError(ErrorKind.payment_provider, str(e)) from e

        if session is None:
            raise CheckoutError(ErrorKind.not_found, session_id)
        return session_to_read(session)
