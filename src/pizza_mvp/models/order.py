import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class OrderStatusEnum(str, enum.Enum):
    received = "received"
    preparing = "preparing"
    ready = "ready"
    collected = "collected"
    cancelled = "cancelled"


class EmailStatusEnum(str, enum.Enum):
    pending = "pending"
    sent = "sent"
    failed = "failed"
    skipped = "skipped"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String(255), nullable=False, default="")
    phone_number = Column(String(32), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    order_time = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    status = Column(SAEnum(OrderStatusEnum, name="order_status"), nullable=False, default=OrderStatusEnum.received)
    pickup_time = Column(DateTime(timezone=True), nullable=False)
    stripe_session_id = Column(String(255), nullable=False, unique=True, index=True)
    total_price = Column(Numeric(10, 2), nullable=False)
    confirmation_email_status = Column(
        SAEnum(EmailStatusEnum, name="email_status"),
        nullable=False,
        default=EmailStatusEnum.pending,
    )

    # связи
    location = relationship("Location", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
