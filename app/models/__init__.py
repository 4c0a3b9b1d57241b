"""Models package initialization - imports all models for easy access."""

from app.models.city import City
from app.models.driver import Driver, DriverStatus, Profile, VehicleType
from app.models.order import Order, OrderStatus, Vendor, CLOSED_ORDER_STATUSES
from app.models.assignment import DeliveryAssignment
from app.models.notification import Notification
from app.models.dispatch_score import DispatchScore
from app.models.pricing import PricingPolicy, SurgeRule

__all__ = [
    "City",
    "Driver",
    "DriverStatus",
    "Profile",
    "VehicleType",
    "Order",
    "OrderStatus",
    "Vendor",
    "CLOSED_ORDER_STATUSES",
    "DeliveryAssignment",
    "Notification",
    "DispatchScore",
    "PricingPolicy",
    "SurgeRule",
]
