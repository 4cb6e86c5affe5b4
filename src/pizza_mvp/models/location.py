from sqlalchemy import Column, Integer, String, Boolean, DateTime, Time, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(128), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(128), nullable=True)
    postcode = Column(String(16), nullable=True)
    phone = Column(String(32), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # параметры расчёта времени выдачи (в минутах)
    base_prep_minutes = Column(Integer, nullable=False, default=15)
    per_item_prep_minutes = Column(Integer, nullable=False, default=2)
    slot_interval_minutes = Column(Integer, nullable=False, default=15)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # связи
    opening_hours = relationship(
        "OpeningHours",
        back_populates="location",
        cascade="all, delete-orphan",
        order_by="OpeningHours.day_of_week",
    )
    orders = relationship("Order", back_populates="location")


class OpeningHours(Base):
    __tablename__ = "opening_hours"
    __table_args__ = (
        UniqueConstraint("location_id", "day_of_week", name="uq_opening_hours_location_day"),
    )

    id = Column(Integer, primary_key=True, index=True)
    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = понедельник ... 6 = воскресенье
    open_time = Column(Time, nullable=True)
    close_time = Column(Time, nullable=True)  # <= open_time → закрытие после полуночи
    is_closed = Column(Boolean, default=False, nullable=False)

    location = relationship("Location", back_populates="opening_hours")
