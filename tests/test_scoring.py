"""
Unit tests for scoring and status tiers.
"""

import pytest

from zoning.financial import FinancialCalculator
from zoning.property import AnalysisConfig, LotDimensions, Property
from zoning.scoring import calculate_score, get_status, round_half_up
from zoning.subdivision import SubdivisionEvaluator

calculator = FinancialCalculator()
evaluator = SubdivisionEvaluator()


def score_property(prop, config):
    feasibility = evaluator.evaluate(prop)
    financial = calculator.calculate(float(prop.price), config, feasibility, prop)
    legacy = None if feasibility.can_split else evaluator.legacy_estimate(prop.lot_area, prop.zoning_code)
    return calculate_score(feasibility, financial, config, legacy), feasibility, financial


class TestCalculateScore:
    """Tests for the 0-100 score."""

    def test_reference_scenario(self, splittable_property, config):
        """Test the reference lot scores in the excellent tier."""
        # 28.0 lot size + 40 profit + 10.7 buildable + 10 bonus
        score, _, _ = score_property(splittable_property, config)
        assert score == 89

    def test_infeasible_small_lot_scores_zero(self, small_property, config):
        """Test a lot failing the size gate scores 0 from the legacy ratio."""
        score, feasibility, _ = score_property(small_property, config)
        assert feasibility.can_split is False
        assert score == 0

    def test_infeasible_uses_legacy_ratio(self, config):
        """Test a wide-enough-by-area but narrow lot scores from the legacy estimate."""
        prop = Property(
            address="3 Narrow Way, Austin, TX 78759", price=400_000, lot_area=20_000,
            lot_dimensions=LotDimensions(width=100, depth=200),
        )
        score, feasibility, _ = score_property(prop, config)
        assert feasibility.can_split is False
        assert score == 12  # 11.7

    def test_half_point_rounds_up(self, config):
        """Test a legacy score of exactly 10.5 rounds up to 11."""
        # new lot floor(9800 * 0.9) = 8820; 8820 / 16800 * 20 = 10.5
        prop = Property(
            address="8 Slim Lot Ln, Austin, TX 78759", price=400_000, lot_area=16_800,
            lot_dimensions=LotDimensions(width=50, depth=336),
        )
        score, feasibility, _ = score_property(prop, config)
        assert feasibility.can_split is False
        assert score == 11

    def test_losing_deal_gets_no_profit_points(self):
        """Test negative margins contribute nothing rather than subtracting."""
        config = AnalysisConfig(target_profit_margin=20, renovation_budget=1_000_000)
        prop = Property(address="9 Pricey Pl, Austin, TX 78759", price=2_000_000, lot_area=14_500)
        score, feasibility, financial = score_property(prop, config)
        assert feasibility.can_split is True
        assert financial.profit_margin < 0
        lot_points = min(30, feasibility.split_ratio * 60)
        buildable_points = min(20, feasibility.buildable_area / feasibility.new_lot_area * 30)
        assert score == round_half_up(lot_points + buildable_points)

    @pytest.mark.parametrize("lot_area", [5_000, 11_000, 14_000, 14_500, 30_000, 200_000])
    @pytest.mark.parametrize("price", [100_000, 450_000, 1_500_000])
    def test_score_is_bounded_integer(self, lot_area, price, config):
        """Test score is always an int in [0, 100]."""
        prop = Property(address="1 Any St, Austin, TX 78704", price=price, lot_area=lot_area)
        score, _, _ = score_property(prop, config)
        assert isinstance(score, int)
        assert 0 <= score <= 100


class TestGetStatus:
    """Tests for status tiers and overrides."""

    @pytest.mark.parametrize("score,status", [
        (100, "excellent"),
        (80, "excellent"),
        (79, "good"),
        (60, "good"),
        (59, "poor"),
        (0, "poor"),
    ])
    def test_thresholds(self, score, status):
        assert get_status(score) == status

    def test_over_budget_is_poor(self):
        """Test a property over max price is poor regardless of score."""
        config = AnalysisConfig(max_price=400_000)
        assert get_status(95, price=450_000, config=config) == "poor"
        assert get_status(95, price=400_000, config=config) == "excellent"

    def test_cannot_split_is_poor(self):
        """Test an infeasible lot is poor regardless of score."""
        assert get_status(95, can_split=False) == "poor"


class TestRoundHalfUp:
    """Tests for half-up rounding of scores and exported figures."""

    @pytest.mark.parametrize("value,expected", [
        (0.5, 1),
        (2.5, 3),
        (10.5, 11),
        (10.49, 10),
        (-2.5, -2),
        (-2.6, -3),
        (7.0, 7),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected
