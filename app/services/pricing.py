"""
Delivery fee calculation service.
Applies the city's pricing policy and the strongest matching surge rule.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time
from typing import Iterable, Optional
from uuid import UUID
from zoneinfo import ZoneInfo

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models import PricingPolicy, SurgeRule

logger = logging.getLogger(__name__)


@dataclass
class FeeSchedule:
    """Resolved pricing numbers for a city."""
    base_fee: float
    per_km_fee: float
    min_fee: float
    max_fee: float


@dataclass
class FeeQuote:
    """Delivery fee quote returned to callers."""
    delivery_fee: float
    surge_multiplier: float
    is_surging: bool


def resolve_fee_schedule(policy: Optional[PricingPolicy]) -> FeeSchedule:
    """
    Fill in missing policy values from the configured defaults.

    A missing policy, or a zero/empty field on it, falls back per field.
    """
    settings = get_settings()
    return FeeSchedule(
        base_fee=(policy and policy.base_fee) or settings.pricing_default_base_fee,
        per_km_fee=(policy and policy.per_km_fee) or settings.pricing_default_per_km_fee,
        min_fee=(policy and policy.min_fee) or settings.pricing_default_min_fee,
        max_fee=(policy and policy.max_fee) or settings.pricing_default_max_fee,
    )


def resolve_surge_multiplier(rules: Iterable[SurgeRule], now: time) -> float:
    """
    Highest multiplier among rules whose window contains `now`.

    Windows are inclusive at both ends and compared at second precision.
    A window whose end is earlier than its start never matches. Rules do
    not stack: two matching rules of 1.2 and 1.5 give 1.5.

    Returns:
        Multiplier, 1.0 when nothing matches
    """
    now = now.replace(microsecond=0)
    multiplier = 1.0

    for rule in rules:
        if rule.start_time is None or rule.end_time is None:
            continue
        if rule.start_time <= now <= rule.end_time:
            multiplier = max(multiplier, float(rule.multiplier))

    return multiplier


def compute_fee(distance_km: float, schedule: FeeSchedule, surge_multiplier: float = 1.0) -> float:
    """
    fee = clamp(base + distance * per_km, min, max) * surge

    Surge is applied after the clamp, so a surging fee can exceed max_fee.
    """
    fee = schedule.base_fee + distance_km * schedule.per_km_fee
    fee = max(schedule.min_fee, min(schedule.max_fee, fee))
    return round(fee * surge_multiplier, 2)


def current_local_time() -> time:
    """Wall-clock time of day in the configured surge timezone."""
    settings = get_settings()
    return datetime.now(ZoneInfo(settings.surge_timezone)).time()


async def calculate_delivery_fee(
    db: AsyncSession,
    distance_km: float,
    city_id: UUID,
    now: Optional[time] = None,
) -> FeeQuote:
    """
    Quote the delivery fee for a distance in a city.

    Args:
        db: Database session
        distance_km: Pickup-to-drop-off distance
        city_id: City whose policy and surge rules apply
        now: Time of day to evaluate surge windows at (default: current time)

    Returns:
        FeeQuote with the fee rounded to 2 decimals
    """
    settings = get_settings()

    result = await db.execute(
        select(PricingPolicy)
        .where(PricingPolicy.city_id == city_id)
        .where(PricingPolicy.is_active.is_(True))
        .order_by(PricingPolicy.updated_at.desc())
        .limit(1)
    )
    schedule = resolve_fee_schedule(result.scalar_one_or_none())

    surge_multiplier = 1.0
    if settings.surge_pricing_enabled:
        result = await db.execute(
            select(SurgeRule)
            .where(SurgeRule.city_id == city_id)
            .where(SurgeRule.is_active.is_(True))
        )
        rules = result.scalars().all()
        surge_multiplier = resolve_surge_multiplier(rules, now or current_local_time())

    fee = compute_fee(distance_km, schedule, surge_multiplier)
    logger.debug(
        "Delivery fee for city %s: %.2f km -> %.2f (surge x%.2f)",
        city_id, distance_km, fee, surge_multiplier,
    )

    return FeeQuote(
        delivery_fee=fee,
        surge_multiplier=surge_multiplier,
        is_surging=surge_multiplier > 1.0,
    )
