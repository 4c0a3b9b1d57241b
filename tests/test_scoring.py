"""
Unit tests for driver scoring.
Tests sub-score bounds, weighting, placeholders and ranking.
"""

import random
import uuid
from dataclasses import dataclass, field
from typing import Optional

import pytest
from app.services.scoring import DriverScore, ScoreWeights, rank_scores, score_driver
from tests.fixtures.test_data import MANILA, offset_point


@dataclass
class FakeDriver:
    """Minimal driver for pure scoring tests."""
    current_latitude: float
    current_longitude: float
    rating: Optional[float] = 4.5
    id: uuid.UUID = field(default_factory=uuid.uuid4)


def driver_at(north_km: float = 0.0, east_km: float = 0.0, rating: Optional[float] = 4.5) -> FakeDriver:
    lat, lng = offset_point(MANILA[0], MANILA[1], north_km=north_km, east_km=east_km)
    return FakeDriver(current_latitude=lat, current_longitude=lng, rating=rating)


class TestScoreDriver:
    """Tests for the weighted dispatch score."""

    def test_reference_scenario_quezon_city(self):
        """Driver in Manila, vendor in Quezon City (~4.24 km apart)."""
        driver = FakeDriver(current_latitude=14.5995, current_longitude=120.9842, rating=4.5)
        result = score_driver(driver, 14.6091, 121.0223, max_distance_km=10)

        assert result.distance_km == pytest.approx(4.236, abs=0.01)
        assert result.distance_score == 0.58
        assert result.rating_score == 0.9
        assert result.idle_score == 0.5
        assert result.acceptance_score == 0.7
        # 0.4*0.576 + 0.2*0.5 + 0.2*0.9 + 0.2*0.7 = 0.6505
        assert result.total_score == 0.65

    def test_reference_scenario_3_7_km(self):
        """Driver 3.7 km away: 0.4*0.63 + 0.2*0.5 + 0.2*0.9 + 0.2*0.7 = 0.672."""
        driver = driver_at(north_km=3.7, rating=4.5)
        result = score_driver(driver, MANILA[0], MANILA[1], max_distance_km=10)

        assert result.distance_score == 0.63
        assert result.rating_score == 0.9
        assert result.total_score == 0.67

    def test_driver_at_origin(self):
        """Zero distance gives a perfect distance score."""
        result = score_driver(driver_at(rating=5.0), MANILA[0], MANILA[1])
        assert result.distance_score == 1.0
        assert result.distance_km == 0.0
        # 0.4 + 0.1 + 0.2 + 0.14
        assert result.total_score == 0.84

    def test_driver_beyond_max_distance(self):
        """At or beyond max distance the distance score is 0, never negative."""
        at_limit = score_driver(driver_at(north_km=10.0), MANILA[0], MANILA[1], max_distance_km=10)
        far = score_driver(driver_at(north_km=55.0), MANILA[0], MANILA[1], max_distance_km=10)
        assert at_limit.distance_score == 0.0
        assert far.distance_score == 0.0

    def test_missing_rating_defaults_to_four(self):
        result = score_driver(driver_at(rating=None), MANILA[0], MANILA[1])
        assert result.rating_score == 0.8

    def test_zero_rating_defaults_to_four(self):
        """A 0 rating means "not rated yet", same as missing."""
        result = score_driver(driver_at(rating=0), MANILA[0], MANILA[1])
        assert result.rating_score == 0.8

    def test_rating_above_scale_is_clamped(self):
        result = score_driver(driver_at(rating=7.0), MANILA[0], MANILA[1])
        assert result.rating_score == 1.0

    def test_score_bounds(self):
        """Every sub-score and the total stay within [0, 1]."""
        rng = random.Random(7)
        for _ in range(200):
            driver = driver_at(
                north_km=rng.uniform(-40, 40),
                east_km=rng.uniform(-40, 40),
                rating=rng.choice([None, 0, rng.uniform(0, 5)]),
            )
            result = score_driver(driver, MANILA[0], MANILA[1], max_distance_km=rng.uniform(1, 20))
            for value in (
                result.distance_score,
                result.idle_score,
                result.rating_score,
                result.acceptance_score,
                result.total_score,
            ):
                assert 0.0 <= value <= 1.0
            assert result.distance_km >= 0

    def test_distance_score_monotonic(self):
        """Moving the driver further away never increases the distance score."""
        distances = [0.0, 0.5, 1.0, 2.0, 3.7, 5.0, 8.0, 9.99, 10.0, 12.0, 30.0]
        scores = [
            score_driver(driver_at(north_km=d), MANILA[0], MANILA[1], max_distance_km=10).distance_score
            for d in distances
        ]
        assert all(later <= earlier for earlier, later in zip(scores, scores[1:]))

    def test_total_computed_before_rounding(self):
        """Total uses unrounded sub-scores, so it can differ from the rounded parts."""
        weights = ScoreWeights(distance=1.0, idle=1.0, rating=0.0, acceptance=0.0)
        driver = driver_at(north_km=9.96)
        result = score_driver(
            driver, MANILA[0], MANILA[1],
            max_distance_km=10, weights=weights, idle_score=0.004,
        )
        # 0.004 + 0.004 = 0.008; the rounded parts alone would sum to 0
        assert result.distance_score == 0.0
        assert result.idle_score == 0.0
        assert result.total_score == 0.01

    def test_placeholder_overrides(self):
        result = score_driver(
            driver_at(rating=5.0),
            MANILA[0],
            MANILA[1],
            idle_score=1.0,
            acceptance_score=1.0,
        )
        assert result.idle_score == 1.0
        assert result.acceptance_score == 1.0
        assert result.total_score == 1.0

    def test_placeholders_from_settings(self, settings, monkeypatch):
        monkeypatch.setattr(settings, "dispatch_idle_score_placeholder", 0.0)
        monkeypatch.setattr(settings, "dispatch_acceptance_score_placeholder", 0.0)

        result = score_driver(driver_at(rating=5.0), MANILA[0], MANILA[1])
        assert result.idle_score == 0.0
        assert result.acceptance_score == 0.0
        assert result.total_score == 0.6

    def test_custom_weights_dict(self):
        """Weights can be passed as a dict like ScoreWeights."""
        weights = {"distance": 1.0, "idle": 0.0, "rating": 0.0, "acceptance": 0.0}
        result = score_driver(driver_at(north_km=5.0), MANILA[0], MANILA[1], max_distance_km=10, weights=weights)
        assert result.total_score == 0.5

    def test_custom_weights_dataclass(self):
        weights = ScoreWeights(distance=0.0, idle=0.0, rating=1.0, acceptance=0.0)
        result = score_driver(driver_at(rating=3.0), MANILA[0], MANILA[1], weights=weights)
        assert result.total_score == 0.6

    def test_score_carries_driver_id(self):
        driver = driver_at()
        assert score_driver(driver, MANILA[0], MANILA[1]).driver_id == driver.id


class TestRankScores:
    """Tests for ranking order and tie-breaking."""

    @staticmethod
    def _score(total: float) -> DriverScore:
        return DriverScore(
            driver_id=uuid.uuid4(),
            distance_score=0.0,
            idle_score=0.5,
            rating_score=0.8,
            acceptance_score=0.7,
            total_score=total,
            distance_km=0.0,
        )

    def test_rank_descending(self):
        scores = [self._score(t) for t in (0.3, 0.9, 0.5, 0.7)]
        ranked = rank_scores(scores)
        assert [s.total_score for s in ranked] == [0.9, 0.7, 0.5, 0.3]

    def test_rank_ties_keep_input_order(self):
        """Equal totals stay in fetch order."""
        first, second, third = self._score(0.6), self._score(0.6), self._score(0.6)
        better = self._score(0.8)
        ranked = rank_scores([first, second, better, third])
        assert ranked == [better, first, second, third]

    def test_rank_does_not_mutate_input(self):
        scores = [self._score(0.1), self._score(0.9)]
        rank_scores(scores)
        assert [s.total_score for s in scores] == [0.1, 0.9]

    def test_rank_is_deterministic(self):
        scores = [self._score(t) for t in (0.5, 0.5, 0.4, 0.6, 0.5)]
        assert rank_scores(scores) == rank_scores(scores)
