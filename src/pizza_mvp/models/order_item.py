from sqlalchemy import Column, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    base_price = Column(Numeric(10, 2), nullable=False)  # фиксируется на момент заказа
    total_price = Column(Numeric(10, 2), nullable=False)  # цена с добавками × количество

    # связи
    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem", back_populates="order_items")
    ingredient_modifications = relationship(
        "OrderItemIngredient", back_populates="order_item", cascade="all, delete-orphan"
    )
