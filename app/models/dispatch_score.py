"""
DispatchScore database model.
Audit trail of driver scores computed for an order.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, GUID


class DispatchScore(Base):
    """
    One scoring of one driver for one order.
    Rows are never updated except for `was_assigned`, and never deleted here.
    """
    __tablename__ = "driver_dispatch_scores"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    driver_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("delivery_riders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("food_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    distance_score: Mapped[float] = mapped_column(Float, nullable=False)
    idle_score: Mapped[float] = mapped_column(Float, nullable=False)
    rating_score: Mapped[float] = mapped_column(Float, nullable=False)
    acceptance_score: Mapped[float] = mapped_column(Float, nullable=False)
    total_score: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    was_assigned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<DispatchScore(driver_id={self.driver_id}, order_id={self.order_id}, total={self.total_score})>"
