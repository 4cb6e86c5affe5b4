from sqlalchemy import Column, Integer, String, Numeric, Boolean
from sqlalchemy.orm import relationship
from ..db.base import Base


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)  # цена за добавку
    is_available = Column(Boolean, default=True, nullable=False)

    order_item_ingredients = relationship("OrderItemIngredient", back_populates="ingredient")
