"""
Delivery pricing database models.
Includes the per-city PricingPolicy and time-window SurgeRule.
Both are edited by the admin dashboard and only read by dispatch.
"""

import uuid
from datetime import datetime, time
from typing import Optional

from sqlalchemy import Boolean, Float, String, Time, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, GUID


class PricingPolicy(Base):
    """
    Delivery fee policy for a city.
    Only one policy per city should be active at a time.
    """
    __tablename__ = "delivery_pricing"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    city_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    base_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    per_km_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    min_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    max_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PricingPolicy(city_id={self.city_id}, base_fee={self.base_fee})>"


class SurgeRule(Base):
    """
    Surge multiplier for a time-of-day window in a city.
    Several rules may be active at once; the highest matching multiplier wins.
    """
    __tablename__ = "surge_rules"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    city_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("cities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    trigger_type: Mapped[str] = mapped_column(String(30), default="time_window", nullable=False)
    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    multiplier: Mapped[float] = mapped_column(Float, default=1.0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SurgeRule(name={self.name}, multiplier={self.multiplier})>"
