"""Schemas package initialization."""

from app.schemas.dispatch import (
    FindNearestDriversRequest,
    AutoAssignRequest,
    DeliveryFeeRequest,
    NearestDriver,
    NearestDriversResponse,
    AutoAssignResponse,
    DeliveryFeeResponse,
    DispatchScoreResponse,
    DispatchScoresListResponse,
    ErrorResponse,
)

__all__ = [
    "FindNearestDriversRequest",
    "AutoAssignRequest",
    "DeliveryFeeRequest",
    "NearestDriver",
    "NearestDriversResponse",
    "AutoAssignResponse",
    "DeliveryFeeResponse",
    "DispatchScoreResponse",
    "DispatchScoresListResponse",
    "ErrorResponse",
]
