import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_mvp.crud.order import (
    create_order,
    find_missing_references,
    get_order_by_session_id,
    get_order_with_items,
    set_confirmation_email_status,
)
from pizza_mvp.models import EmailStatusEnum, Order
from pizza_mvp.schemas.checkout import SaveOrderRequest
from pizza_mvp.services.email import EmailService
from pizza_mvp.services.errors import CheckoutError, ErrorKind

logger = logging.getLogger(__name__)


async def send_confirmation(db: AsyncSession, order: Order, email_service: EmailService) -> EmailStatusEnum:
    """
    Письмо-подтверждение отправляется по возможности: ошибка пишется
    в лог и в confirmation_email_status, но не ломает заказ.
    """
    if not email_service.enabled:
        status = EmailStatusEnum.skipped
    else:
        try:
            await email_service.send_order_confirmation(order, list(order.items))
            status = EmailStatusEnum.sent
        except Exception:
            logger.exception("Email sending failed for order %s", order.id)
            status = EmailStatusEnum.failed

    try:
        await set_confirmation_email_status(db, order, status)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Could not record email status %s for order %s", status.value, order.id)

    return status


async def save_order(
    db: AsyncSession,
    order_in: SaveOrderRequest,
    email_service: EmailService,
) -> Tuple[Order, bool]:
    """
    Сохраняет оплаченный заказ и отправляет письмо.
    Возвращает (заказ, created). Повторный запрос с тем же session_id
    возвращает уже сохранённый заказ без повторного письма.
    """
    existing = await get_order_by_session_id(db, order_in.session_id)
    if existing is not None:
        logger.info("Order %s already saved for session %s", existing.id, order_in.session_id)
        return existing, False

    missing = await find_missing_references(db, order_in)
    if missing:
        logger.warning("Rejected order for session %s, missing: %s", order_in.session_id, ", ".join(missing))
        raise CheckoutError(ErrorKind.invalid_order, ", ".join(missing))

    try:
        order = await create_order(db, order_in)
    except IntegrityError as e:
        # параллельный запрос мог успеть сохранить заказ с тем же session_id
        existing = await get_order_by_session_id(db, order_in.session_id)
        if existing is not None:
            logger.info("Order %s was saved concurrently for session %s", existing.id, order_in.session_id)
            return existing, False
        logger.exception("Integrity error while saving order for session %s", order_in.session_id)
        raise CheckoutError(ErrorKind.invalid_order, str(e)) from e
    except SQLAlchemyError as e:
        logger.exception("Database error while saving order for session %s", order_in.session_id)
        raise CheckoutError(ErrorKind.persistence, str(e)) from e
    except Exception as e:
        await db.rollback()
        logger.exception("Unexpected error while saving order for session %s", order_in.session_id)
        raise CheckoutError(ErrorKind.persistence, str(e)) from e

    logger.info(
        "Saved order %s for session %s (%d items)",
        order.id, order_in.session_id, len(order_in.cart_items),
    )

    complete_order = await get_order_with_items(db, order.id)
    if complete_order is not None:
        await send_confirmation(db, complete_order, email_service)
        order = complete_order

    return order, True
