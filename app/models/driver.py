"""
Driver-related database models.
Includes the delivery Driver and the user Profile it is linked to.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Float, Integer, DateTime, ForeignKey, Enum, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base, GUID

if TYPE_CHECKING:
    from app.models.city import City


class DriverStatus(str, enum.Enum):
    """Onboarding/approval status of a driver."""
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


class VehicleType(str, enum.Enum):
    """Types of vehicles used for delivery."""
    MOTORCYCLE = "motorcycle"
    BICYCLE = "bicycle"
    CAR = "car"


class Profile(Base):
    """
    User profile owned by the wider application.
    The dispatch service only reads it to enrich driver listings.
    """
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, full_name={self.full_name})>"


class Driver(Base):
    """
    Delivery rider.
    Location is null while the driver is offline or has not reported a fix.
    """
    __tablename__ = "delivery_riders"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    city_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(),
        ForeignKey("cities.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[DriverStatus] = mapped_column(
        Enum(DriverStatus),
        default=DriverStatus.PENDING,
        nullable=False,
        index=True,
    )
    is_available: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    current_latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    current_longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # 0-5
    total_deliveries: Mapped[int] = mapped_column(Integer, default=0)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    vehicle_type: Mapped[VehicleType] = mapped_column(
        Enum(VehicleType),
        default=VehicleType.MOTORCYCLE,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    profile: Mapped["Profile"] = relationship("Profile", lazy="raise")
    city: Mapped[Optional["City"]] = relationship("City", lazy="raise")

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, status={self.status})>"
