"""
Driver dispatch API endpoint.
Handles POST /api/v1/driver-dispatch, one endpoint with an `action` field:
find_nearest_drivers, auto_assign, calculate_delivery_fee.
Also serves the dispatch score audit trail for an order.
"""

import asyncio
import logging
from typing import Any, Awaitable, Dict, Type, TypeVar, Union
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import (
    DependencyFailureError,
    DependencyTimeoutError,
    MalformedRequestError,
)
from app.database import get_db
from app.schemas.dispatch import (
    AutoAssignRequest,
    AutoAssignResponse,
    DeliveryFeeRequest,
    DeliveryFeeResponse,
    DispatchScoresListResponse,
    ErrorResponse,
    FindNearestDriversRequest,
    NearestDriversResponse,
)
from app.services import dispatch as dispatch_service
from app.services.pricing import calculate_delivery_fee

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dispatch"])

T = TypeVar("T")

ACTION_MODELS: Dict[str, Type[BaseModel]] = {
    "find_nearest_drivers": FindNearestDriversRequest,
    "auto_assign": AutoAssignRequest,
    "calculate_delivery_fee": DeliveryFeeRequest,
}

ACTION_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    200: {
        "description": (
            "find_nearest_drivers: NearestDriversResponse; "
            "auto_assign: AutoAssignResponse; "
            "calculate_delivery_fee: DeliveryFeeResponse"
        ),
    },
}

ERROR_RESPONSES: Dict[Union[int, str], Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid action or request fields"},
    404: {"model": ErrorResponse, "description": "Order not found"},
    409: {"model": ErrorResponse, "description": "Order already assigned"},
    500: {"model": ErrorResponse, "description": "Data store failure"},
    504: {"model": ErrorResponse, "description": "Operation timed out"},
}


async def run_with_deadline(operation: Awaitable[T]) -> T:
    """
    Await a dispatch operation under the configured deadline.

    Data store errors become DependencyFailureError, expiry becomes
    DependencyTimeoutError. Neither is retried here.
    """
    settings = get_settings()
    try:
        return await asyncio.wait_for(operation, timeout=settings.dispatch_timeout_seconds)
    except asyncio.TimeoutError as exc:
        logger.error("Dispatch operation exceeded %.1fs deadline", settings.dispatch_timeout_seconds)
        raise DependencyTimeoutError() from exc
    except SQLAlchemyError as exc:
        logger.exception("Dispatch data store failure")
        raise DependencyFailureError(str(exc.__cause__ or exc)) from exc


def parse_action(payload: Any) -> BaseModel:
    """Validate the body against the model for its `action`."""
    if not isinstance(payload, dict) or payload.get("action") not in ACTION_MODELS:
        raise MalformedRequestError("Invalid action")

    model = ACTION_MODELS[payload["action"]]
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise MalformedRequestError(f"Invalid field '{field}': {first['msg']}") from exc


@router.post(
    "/driver-dispatch",
    # Body shape depends on the action, see ACTION_RESPONSES
    response_model=None,
    responses={**ACTION_RESPONSES, **ERROR_RESPONSES},
    summary="Dispatch drivers and quote delivery fees",
    description="""
    Single action endpoint:
    - `find_nearest_drivers`: top ranked available drivers for a pickup point
    - `auto_assign`: assign the best driver to an order
    - `calculate_delivery_fee`: delivery fee with surge pricing
    """,
)
async def driver_dispatch(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Union[NearestDriversResponse, AutoAssignResponse, DeliveryFeeResponse]:
    """Route a dispatch request to the operation named by `action`."""
    try:
        payload = await request.json()
    except ValueError:
        raise MalformedRequestError("Request body must be JSON")

    body = parse_action(payload)

    if isinstance(body, FindNearestDriversRequest):
        response = await run_with_deadline(
            dispatch_service.find_nearest_drivers(
                db,
                origin_lat=body.restaurant_lat,
                origin_lng=body.restaurant_lng,
                order_id=body.order_id,
            )
        )
        if body.order_id is not None:
            await run_with_deadline(db.commit())
        return response

    if isinstance(body, AutoAssignRequest):
        response = await run_with_deadline(dispatch_service.auto_assign(db, body.order_id))
        if response.assigned:
            await run_with_deadline(db.commit())
        return response

    quote = await run_with_deadline(
        calculate_delivery_fee(db, distance_km=body.distance_km, city_id=body.city_id)
    )
    return DeliveryFeeResponse(
        delivery_fee=quote.delivery_fee,
        surge_multiplier=quote.surge_multiplier,
        is_surging=quote.is_surging,
    )


@router.get(
    "/dispatch/orders/{order_id}/scores",
    response_model=DispatchScoresListResponse,
    responses={500: ERROR_RESPONSES[500], 504: ERROR_RESPONSES[504]},
    summary="Get dispatch scores for an order",
    description="Returns the recorded driver scores for an order, highest first.",
)
async def get_order_dispatch_scores(
    order_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DispatchScoresListResponse:
    """List dispatch score audit records for an order."""
    scores = await run_with_deadline(dispatch_service.list_dispatch_scores(db, order_id))
    return DispatchScoresListResponse(order_id=order_id, scores=scores)
