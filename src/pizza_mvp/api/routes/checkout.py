from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_mvp.db.deps import get_checkout_gateway, get_email_service
from pizza_mvp.db.session import get_async_session
from pizza_mvp.schemas.checkout import (
    CheckoutRequest,
    CheckoutSessionCreated,
    CheckoutSessionRead,
    SaveOrderRequest,
    SaveOrderResponse,
)
from pizza_mvp.services.email import EmailService
from pizza_mvp.services.orders import save_order
from pizza_mvp.services.payments import StripeCheckoutGateway


router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.post("/create-session", response_model=CheckoutSessionCreated)
async def create_checkout_session(
    request: CheckoutRequest,
    gateway: StripeCheckoutGateway = Depends(get_checkout_gateway),
):
    """
    Создаёт сессию Stripe Checkout и возвращает ссылку на оплату.
    """
    url = await gateway.create_session(request.items)
    return CheckoutSessionCreated(url=url)


@router.get("/session/{session_id}", response_model=CheckoutSessionRead)
async def get_checkout_session(
    session_id: str,
    gateway: StripeCheckoutGateway = Depends(get_checkout_gateway),
):
    """
    Возвращает статус оплаты и контакты покупателя.
    """
    return await gateway.get_session(session_id)


@router.post("/save-order", response_model=SaveOrderResponse)
async def save_order_endpoint(
    order_in: SaveOrderRequest,
    db: AsyncSession = Depends(get_async_session),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Сохраняет оплаченный заказ и отправляет письмо-подтверждение.
    """
    order, created = await save_order(db, order_in, email_service)
    message = "Order saved successfully" if created else "Order already saved"
    return SaveOrderResponse(order_id=order.id, message=message)
