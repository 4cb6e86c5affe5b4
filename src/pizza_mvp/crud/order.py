from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pizza_mvp.models import (
    EmailStatusEnum,
    Ingredient,
    Location,
    MenuItem,
    Order,
    OrderItem,
    OrderItemIngredient,
    OrderStatusEnum,
)
from pizza_mvp.schemas.checkout import SaveOrderRequest


async def get_order_by_session_id(db: AsyncSession, session_id: str) -> Optional[Order]:
    stmt = select(Order).where(Order.stripe_session_id == session_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_order_with_items(db: AsyncSession, order_id: int) -> Optional[Order]:
    """
    Возвращает заказ со всем графом:
    order → items → menu_item, order → items → ingredient_modifications → ingredient.
    Предотвращает MissingGreenlet при формировании письма.
    """
    stmt = (
        select(Order)
        .where(Order.id == order_id)
        .options(
            selectinload(Order.location),
            selectinload(Order.items).selectinload(OrderItem.menu_item),
            selectinload(Order.items)
            .selectinload(OrderItem.ingredient_modifications)
            .selectinload(OrderItemIngredient.ingredient),
        )
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalars().unique().first()


async def find_missing_references(db: AsyncSession, order_in: SaveOrderRequest) -> List[str]:
    """
    Проверяет, что точка, блюда и ингредиенты из корзины существуют.
    Возвращает список того, чего нет в базе.
    """
    missing = []

    if await db.get(Location, order_in.location_id) is None:
        missing.append(f"location {order_in.location_id}")

    menu_item_ids = {item.menu_item_id for item in order_in.cart_items}
    if menu_item_ids:
        result = await db.execute(select(MenuItem.id).where(MenuItem.id.in_(menu_item_ids)))
        found = set(result.scalars().all())
        missing.extend(f"menu item {i}" for i in sorted(menu_item_ids - found))

    ingredient_ids = set()
    for item in order_in.cart_items:
        for mod in item.modifications:
            if mod.ingredient_id is None:
                missing.append(f"ingredient id for '{mod.ingredient_name or ''}'")
            else:
                ingredient_ids.add(mod.ingredient_id)
    if ingredient_ids:
        result = await db.execute(select(Ingredient.id).where(Ingredient.id.in_(ingredient_ids)))
        found = set(result.scalars().all())
        missing.extend(f"ingredient {i}" for i in sorted(ingredient_ids - found))

    return missing


async def create_order(db: AsyncSession, order_in: SaveOrderRequest) -> Order:
    """
    Создаём заказ, позиции и модификации ингредиентов одной транзакцией.
    При любой ошибке откатываем всё целиком.
    """
    items = []
    for cart_item in order_in.cart_items:
        items.append(
            OrderItem(
                menu_item_id=cart_item.menu_item_id,
                quantity=cart_item.quantity,
                base_price=cart_item.base_price,
                total_price=cart_item.unit_price * cart_item.quantity,
                ingredient_modifications=[
                    OrderItemIngredient(
                        ingredient_id=mod.ingredient_id,
                        price=mod.price,
                        extra=mod.extra,
                        removed=mod.removed,
                    )
                    for mod in cart_item.modifications
                ],
            )
        )

    order = Order(
        customer_name=order_in.customer_name,
        phone_number=order_in.customer_phone,
        email=order_in.customer_email,
        location_id=order_in.location_id,
        order_time=datetime.now(),
        status=OrderStatusEnum.received,
        pickup_time=order_in.pickup_time,
        stripe_session_id=order_in.session_id,
        total_price=order_in.total_amount,
        confirmation_email_status=EmailStatusEnum.pending,
        items=items,
    )
    db.add(order)

    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise

    return order


async def set_confirmation_email_status(db: AsyncSession, order: Order, status: EmailStatusEnum) -> None:
    order.confirmation_email_status = status
    await db.commit()
