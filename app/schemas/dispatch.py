"""
Pydantic schemas for the driver dispatch API.
Request and response models for POST /api/v1/driver-dispatch.
"""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class FindNearestDriversRequest(BaseModel):
    """Request for action=find_nearest_drivers."""
    action: Literal["find_nearest_drivers"]
    order_id: Optional[UUID] = Field(None, description="Order to record dispatch scores against")
    restaurant_lat: float = Field(..., ge=-90, le=90, description="Pickup latitude")
    restaurant_lng: float = Field(..., ge=-180, le=180, description="Pickup longitude")
    city_id: Optional[UUID] = Field(None, description="Accepted for compatibility, not used for filtering")


class AutoAssignRequest(BaseModel):
    """Request for action=auto_assign."""
    action: Literal["auto_assign"]
    order_id: UUID


class DeliveryFeeRequest(BaseModel):
    """Request for action=calculate_delivery_fee."""
    action: Literal["calculate_delivery_fee"]
    distance_km: float = Field(..., ge=0, description="Delivery distance in km")
    city_id: UUID


class NearestDriver(BaseModel):
    """A ranked candidate driver with profile details."""
    id: UUID
    user_id: UUID
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    vehicle_type: str
    status: str
    is_available: bool
    rating: Optional[float] = None
    total_deliveries: int = 0
    city_id: Optional[UUID] = None
    current_latitude: float
    current_longitude: float
    score: float = Field(..., ge=0, le=1)
    distance_km: float = Field(..., ge=0, description="Rounded to 1 decimal")
    eta_minutes: int = Field(..., ge=0)


class NearestDriversResponse(BaseModel):
    """Response for action=find_nearest_drivers."""
    drivers: List[NearestDriver] = Field(default_factory=list)


class AutoAssignResponse(BaseModel):
    """
    Response for action=auto_assign.
    assigned=False with an error message is a normal outcome, not a failure.
    """
    assigned: bool
    driver_id: Optional[UUID] = None
    eta_minutes: Optional[int] = None
    distance_km: Optional[float] = None
    score: Optional[float] = None
    error: Optional[str] = None


class DeliveryFeeResponse(BaseModel):
    """Response for action=calculate_delivery_fee."""
    delivery_fee: float
    surge_multiplier: float
    is_surging: bool


class DispatchScoreResponse(BaseModel):
    """Stored dispatch score audit record."""
    id: UUID
    driver_id: UUID
    order_id: UUID
    distance_score: float
    idle_score: float
    rating_score: float
    acceptance_score: float
    total_score: float
    was_assigned: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class DispatchScoresListResponse(BaseModel):
    """Score audit records for an order, best first."""
    order_id: UUID
    scores: List[DispatchScoreResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error body for every non-2xx dispatch response."""
    error: str
