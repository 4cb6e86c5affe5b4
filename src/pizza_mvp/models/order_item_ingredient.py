from sqlalchemy import Column, Integer, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderItemIngredient(Base):
    __tablename__ = "order_item_ingredients"

    id = Column(Integer, primary_key=True, index=True)
    order_item_id = Column(Integer, ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(Integer, ForeignKey("ingredients.id"), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    extra = Column(Boolean, nullable=False, default=False)  # добавлен сверх рецепта
    removed = Column(Boolean, nullable=False, default=False)  # убран из рецепта

    # связи
    order_item = relationship("OrderItem", back_populates="ingredient_modifications")
    ingredient = relationship("Ingredient", back_populates="order_item_ingredients")
