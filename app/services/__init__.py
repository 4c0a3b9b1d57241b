"""Services package initialization."""

from app.services.geo import haversine_distance, estimate_eta
from app.services.scoring import DriverScore, ScoreWeights, score_driver, rank_scores
from app.services.pricing import (
    FeeQuote,
    FeeSchedule,
    calculate_delivery_fee,
    compute_fee,
    resolve_fee_schedule,
    resolve_surge_multiplier,
)
from app.services.dispatch import (
    auto_assign,
    claim_order,
    fetch_candidate_drivers,
    find_nearest_drivers,
    list_dispatch_scores,
)

__all__ = [
    "haversine_distance",
    "estimate_eta",
    "DriverScore",
    "ScoreWeights",
    "score_driver",
    "rank_scores",
    "FeeQuote",
    "FeeSchedule",
    "calculate_delivery_fee",
    "compute_fee",
    "resolve_fee_schedule",
    "resolve_surge_multiplier",
    "auto_assign",
    "claim_order",
    "fetch_candidate_drivers",
    "find_nearest_drivers",
    "list_dispatch_scores",
]
