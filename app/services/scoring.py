"""
Driver scoring service.
Turns a candidate driver and a pickup point into a weighted dispatch score.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Union
from uuid import UUID

from app.config import get_settings
from app.services.geo import haversine_distance


class ScorableDriver(Protocol):
    """Anything with the driver fields scoring needs (ORM row or test double)."""
    id: UUID
    current_latitude: float
    current_longitude: float
    rating: Optional[float]


@dataclass
class ScoreWeights:
    """Weight vector for the four sub-scores."""
    distance: float
    idle: float
    rating: float
    acceptance: float

    @classmethod
    def from_settings(cls) -> "ScoreWeights":
        settings = get_settings()
        return cls(
            distance=settings.dispatch_weight_distance,
            idle=settings.dispatch_weight_idle,
            rating=settings.dispatch_weight_rating,
            acceptance=settings.dispatch_weight_acceptance,
        )


@dataclass
class DriverScore:
    """Rounded sub-scores and total for one driver/pickup pair."""
    driver_id: UUID
    distance_score: float
    idle_score: float
    rating_score: float
    acceptance_score: float
    total_score: float
    distance_km: float


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def score_driver(
    driver: ScorableDriver,
    origin_lat: float,
    origin_lng: float,
    max_distance_km: Optional[float] = None,
    weights: Union[ScoreWeights, dict, None] = None,
    idle_score: Optional[float] = None,
    acceptance_score: Optional[float] = None,
) -> DriverScore:
    """
    Score a driver for a pickup at (origin_lat, origin_lng).

    Sub-scores (each clamped to [0, 1]):
        distance   = 1 - distance_km / max_distance_km
        rating     = rating / 5 (missing or zero rating counts as the default)
        idle       = placeholder until idle-time history exists
        acceptance = placeholder until accept-rate history exists

    The weighted total is computed from the unrounded sub-scores; the total
    and each sub-score are then rounded to 2 decimals.

    Args:
        driver: Driver with a known location
        origin_lat: Pickup latitude
        origin_lng: Pickup longitude
        max_distance_km: Distance at which distance_score reaches 0
        weights: ScoreWeights or dict {distance, idle, rating, acceptance}
        idle_score: Override for the idle placeholder
        acceptance_score: Override for the acceptance placeholder

    Returns:
        DriverScore with rounded scores and the raw distance in km
    """
    settings = get_settings()

    if max_distance_km is None:
        max_distance_km = settings.dispatch_max_distance_km
    if weights is None:
        weights = ScoreWeights.from_settings()
    elif isinstance(weights, dict):
        weights = ScoreWeights(**weights)
    if idle_score is None:
        idle_score = settings.dispatch_idle_score_placeholder
    if acceptance_score is None:
        acceptance_score = settings.dispatch_acceptance_score_placeholder

    distance_km = haversine_distance(
        driver.current_latitude,
        driver.current_longitude,
        origin_lat,
        origin_lng,
    )

    distance = _clamp(1.0 - distance_km / max_distance_km) if max_distance_km > 0 else 0.0
    rating = _clamp((driver.rating or settings.dispatch_default_rating) / 5.0)
    idle = _clamp(idle_score)
    acceptance = _clamp(acceptance_score)

    total = (
        weights.distance * distance +
        weights.idle * idle +
        weights.rating * rating +
        weights.acceptance * acceptance
    )

    return DriverScore(
        driver_id=driver.id,
        distance_score=round(distance, 2),
        idle_score=round(idle, 2),
        rating_score=round(rating, 2),
        acceptance_score=round(acceptance, 2),
        total_score=round(total, 2),
        distance_km=distance_km,
    )


def rank_scores(scores: list[DriverScore]) -> list[DriverScore]:
    """
    Order scores best first.

    Python's sort is stable, so equal totals keep the order the candidates
    were fetched in.
    """
    return sorted(scores, key=lambda s: s.total_score, reverse=True)
