"""
Delivery assignment database model.
Represents a driver taking an order, with pickup and drop-off copied onto it.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Float, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, GUID


class DeliveryAssignment(Base):
    """
    Assignment of an order to a driver.
    Pickup/drop-off fields are denormalized so the driver app needs no joins.
    """
    __tablename__ = "delivery_assignments"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("food_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rider_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("delivery_riders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vendor_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("food_vendors.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(30), default="assigned", nullable=False)

    pickup_latitude: Mapped[float] = mapped_column(Float, nullable=False)
    pickup_longitude: Mapped[float] = mapped_column(Float, nullable=False)
    customer_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    customer_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    customer_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    estimated_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    distance_km: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
    )

    def __repr__(self) -> str:
        return f"<DeliveryAssignment(id={self.id}, order_id={self.order_id}, rider_id={self.rider_id})>"
