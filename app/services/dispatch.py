"""
Dispatch orchestration service.
Lists best candidate drivers for an order and auto-assigns the top one.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from app.config import get_settings
from app.core.exceptions import (
    AssignmentConflictError,
    InvalidOrderStateError,
    OrderNotFoundError,
)
from app.models import (
    CLOSED_ORDER_STATUSES,
    DeliveryAssignment,
    DispatchScore,
    Driver,
    DriverStatus,
    Notification,
    Order,
    OrderStatus,
)
from app.schemas.dispatch import (
    AutoAssignResponse,
    DispatchScoreResponse,
    NearestDriver,
    NearestDriversResponse,
)
from app.services.geo import estimate_eta
from app.services.scoring import DriverScore, rank_scores, score_driver

logger = logging.getLogger(__name__)


async def fetch_candidate_drivers(db: AsyncSession) -> List[Driver]:
    """
    Approved, available drivers with a known location.

    Ordered by creation so that ranking ties resolve the same way every time.
    """
    result = await db.execute(
        select(Driver)
        .where(Driver.status == DriverStatus.APPROVED)
        .where(Driver.is_available.is_(True))
        .where(Driver.current_latitude.is_not(None))
        .where(Driver.current_longitude.is_not(None))
        .order_by(Driver.created_at, Driver.id)
    )
    return list(result.scalars().all())


def score_candidates(
    drivers: List[Driver],
    origin_lat: float,
    origin_lng: float,
) -> List[DriverScore]:
    """Score every candidate and return them best first."""
    settings = get_settings()
    scores = [
        score_driver(
            driver,
            origin_lat,
            origin_lng,
            max_distance_km=settings.dispatch_max_distance_km,
        )
        for driver in drivers
    ]
    return rank_scores(scores)


async def find_nearest_drivers(
    db: AsyncSession,
    origin_lat: float,
    origin_lng: float,
    order_id: Optional[UUID] = None,
) -> NearestDriversResponse:
    """
    Rank available drivers for a pickup point and return the top N.

    When `order_id` is given, a DispatchScore row is added for each returned
    driver. The caller commits.

    Args:
        db: Database session
        origin_lat: Pickup latitude
        origin_lng: Pickup longitude
        order_id: Optional order to tag the score records with

    Returns:
        NearestDriversResponse, empty when no driver is available
    """
    settings = get_settings()

    drivers = await fetch_candidate_drivers(db)
    if not drivers:
        logger.info("No available drivers near (%.5f, %.5f)", origin_lat, origin_lng)
        return NearestDriversResponse(drivers=[])

    top_scores = score_candidates(drivers, origin_lat, origin_lng)[:settings.dispatch_top_n]

    if order_id is not None:
        db.add_all([
            DispatchScore(
                driver_id=score.driver_id,
                order_id=order_id,
                distance_score=score.distance_score,
                idle_score=score.idle_score,
                rating_score=score.rating_score,
                acceptance_score=score.acceptance_score,
                total_score=score.total_score,
            )
            for score in top_scores
        ])
        await db.flush()

    # Second read for the profile fields scoring does not need
    result = await db.execute(
        select(Driver)
        .where(Driver.id.in_([score.driver_id for score in top_scores]))
        .options(selectinload(Driver.profile))
    )
    profiles_by_id: Dict[UUID, Driver] = {d.id: d for d in result.scalars().all()}

    ranked: List[NearestDriver] = []
    for score in top_scores:
        driver = profiles_by_id.get(score.driver_id)
        if driver is None:
            logger.warning("Driver %s disappeared between scoring and profile fetch", score.driver_id)
            continue

        ranked.append(NearestDriver(
            id=driver.id,
            user_id=driver.user_id,
            full_name=driver.profile.full_name if driver.profile else None,
            avatar_url=driver.profile.avatar_url if driver.profile else None,
            phone=driver.phone,
            vehicle_type=driver.vehicle_type.value,
            status=driver.status.value,
            is_available=driver.is_available,
            rating=driver.rating,
            total_deliveries=driver.total_deliveries,
            city_id=driver.city_id,
            current_latitude=driver.current_latitude,
            current_longitude=driver.current_longitude,
            score=score.total_score,
            distance_km=round(score.distance_km, 1),
            eta_minutes=estimate_eta(score.distance_km, settings.dispatch_avg_speed_kmh),
        ))

    logger.info(
        "Ranked %d of %d candidates for pickup (%.5f, %.5f)",
        len(ranked), len(drivers), origin_lat, origin_lng,
    )
    return NearestDriversResponse(drivers=ranked)


async def claim_order(
    db: AsyncSession,
    order_id: UUID,
    driver_id: UUID,
    eta_minutes: int,
    distance_km: float,
) -> bool:
    """
    Assign a driver only if the order has none yet.

    This conditional update is what keeps two concurrent auto-assigns of the
    same order from both succeeding: the second one matches zero rows.
    The claimed row is returned and loaded over any copy of the order
    already in the session, so in-memory state matches the database.

    Returns:
        True if this call assigned the order
    """
    result = await db.execute(
        update(Order)
        .where(Order.id == order_id)
        .where(Order.rider_id.is_(None))
        .values(
            rider_id=driver_id,
            status=OrderStatus.ASSIGNED,
            estimated_time_minutes=eta_minutes,
            distance_km=distance_km,
            updated_at=datetime.utcnow(),
        )
        .returning(Order)
        .execution_options(synchronize_session=False, populate_existing=True)
    )
    return result.scalar_one_or_none() is not None


async def auto_assign(db: AsyncSession, order_id: UUID) -> AutoAssignResponse:
    """
    Assign the best-scoring available driver to an order.

    Writes the order claim, a DeliveryAssignment, a Notification for the
    driver and the `was_assigned` flag on an existing score record. All of
    it is flushed into the caller's transaction; the caller commits.

    Raises:
        OrderNotFoundError: Order does not exist
        InvalidOrderStateError: Vendor has no location, or order is closed
        AssignmentConflictError: Order already has a driver
    """
    settings = get_settings()

    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(joinedload(Order.vendor))
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise OrderNotFoundError()

    vendor = order.vendor
    if vendor is None or not vendor.has_location:
        raise InvalidOrderStateError("Restaurant location not set")
    if order.status in CLOSED_ORDER_STATUSES:
        raise InvalidOrderStateError(f"Order cannot be dispatched in status '{order.status.value}'")
    if order.rider_id is not None:
        raise AssignmentConflictError()

    drivers = await fetch_candidate_drivers(db)
    if not drivers:
        logger.info("Auto-assign %s: no available drivers", order_id)
        return AutoAssignResponse(assigned=False, error="No available drivers")

    best = score_candidates(drivers, vendor.latitude, vendor.longitude)[0]
    if best.total_score < settings.dispatch_min_assign_score:
        logger.info(
            "Auto-assign %s: best score %.2f below threshold %.2f",
            order_id, best.total_score, settings.dispatch_min_assign_score,
        )
        return AutoAssignResponse(assigned=False, error="No suitable drivers found")

    driver = next(d for d in drivers if d.id == best.driver_id)
    eta = estimate_eta(best.distance_km, settings.dispatch_avg_speed_kmh)
    distance_km = round(best.distance_km, 1)

    if not await claim_order(db, order.id, driver.id, eta, distance_km):
        logger.warning("Auto-assign %s: order was claimed by a concurrent request", order_id)
        raise AssignmentConflictError()

    db.add(DeliveryAssignment(
        order_id=order.id,
        rider_id=driver.id,
        vendor_id=order.vendor_id,
        status=OrderStatus.ASSIGNED.value,
        pickup_latitude=vendor.latitude,
        pickup_longitude=vendor.longitude,
        customer_latitude=order.delivery_latitude,
        customer_longitude=order.delivery_longitude,
        customer_address=order.delivery_address,
        customer_name=order.customer_name,
        customer_phone=order.customer_phone,
        estimated_time_minutes=eta,
        distance_km=distance_km,
    ))

    db.add(Notification(
        user_id=driver.user_id,
        type="new_delivery",
        title="New Delivery Assignment",
        message=(
            f"You've been assigned order #{order.order_number}. "
            f"Pickup from {vendor.name or 'restaurant'}."
        ),
    ))

    if settings.dispatch_mark_driver_busy:
        driver.is_available = False

    # Only present if find_nearest_drivers ran for this order earlier
    await db.execute(
        update(DispatchScore)
        .where(DispatchScore.driver_id == driver.id)
        .where(DispatchScore.order_id == order.id)
        .values(was_assigned=True)
        .execution_options(synchronize_session="evaluate")
    )

    await db.flush()

    logger.info(
        "Auto-assign %s: driver %s (score %.2f, %.1f km, %d min)",
        order_id, driver.id, best.total_score, distance_km, eta,
    )

    return AutoAssignResponse(
        assigned=True,
        driver_id=driver.id,
        eta_minutes=eta,
        distance_km=distance_km,
        score=best.total_score,
    )


async def list_dispatch_scores(db: AsyncSession, order_id: UUID) -> List[DispatchScoreResponse]:
    """Score audit records for an order, highest total first."""
    result = await db.execute(
        select(DispatchScore)
        .where(DispatchScore.order_id == order_id)
        .order_by(DispatchScore.total_score.desc(), DispatchScore.created_at)
    )
    return [DispatchScoreResponse.model_validate(row) for row in result.scalars().all()]
