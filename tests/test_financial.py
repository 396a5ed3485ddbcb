"""
Unit tests for the financial viability calculator and market lookups.
"""

import pytest

from zoning.financial import FinancialCalculator
from zoning.property import AnalysisConfig, Property
from zoning.rules.market import (
    MARKET_PROFILES,
    extract_zip_code,
    get_market_profile,
    get_utility_service,
)
from zoning.subdivision import SubdivisionEvaluator

calculator = FinancialCalculator()
evaluator = SubdivisionEvaluator()


class TestZipExtraction:
    """Tests for zip code extraction from addresses."""

    def test_zip_at_end(self):
        assert extract_zip_code("1100 Congress Ave, Austin, TX 78701") == "78701"

    def test_zip_plus_four(self):
        assert extract_zip_code("1100 Congress Ave, Austin, TX 78704-1234") == "78704"

    def test_five_digit_house_number(self):
        """Test that a 5-digit house number does not shadow the zip."""
        assert extract_zip_code("12345 Ranch Rd, Austin, TX 78748") == "78748"

    def test_no_zip(self):
        assert extract_zip_code("1100 Congress Ave, Austin") is None
        assert extract_zip_code(None) is None

    def test_unknown_zip_uses_default_profile(self):
        """Test market and utility lookups fall back to defaults."""
        assert get_market_profile("99999") is MARKET_PROFILES["default"]
        assert get_market_profile(None) is MARKET_PROFILES["default"]
        assert get_utility_service("99999").missing == []


class TestFeasibleEconomics:
    """Economics for the reference 14,500 SF SF-3 lot."""

    def test_values(self, splittable_property, config):
        """Test renovated, lot and construction values."""
        feasibility = evaluator.evaluate(splittable_property)
        result = calculator.calculate(450_000, config, feasibility, splittable_property)

        assert result.renovated_value == pytest.approx(450_000 * 1.15)
        assert result.new_lot_value == pytest.approx(6775 * 40)
        assert result.new_construction_value == pytest.approx(feasibility.buildable_area * 0.4 * 200)
        assert result.total_value == pytest.approx(
            result.renovated_value + result.new_lot_value + 0.3 * result.new_construction_value
        )

    def test_profit_and_target(self, splittable_property, config):
        """Test investment, profit and margin math."""
        feasibility = evaluator.evaluate(splittable_property)
        result = calculator.calculate(450_000, config, feasibility, splittable_property)

        assert result.total_investment == 550_000
        assert result.profit == pytest.approx(result.total_value - 550_000)
        assert result.profit_margin == pytest.approx(result.profit / 550_000 * 100)
        assert result.meets_target is True

    def test_break_even_prices(self, splittable_property, config):
        """Test break-even sale prices for each disposal strategy."""
        feasibility = evaluator.evaluate(splittable_property)
        result = calculator.calculate(450_000, config, feasibility, splittable_property)

        assert result.break_even_renovated_sale == pytest.approx(550_000 - result.new_lot_value)
        assert result.break_even_lot_sale == pytest.approx(550_000 - result.renovated_value)

    def test_appreciation_projection(self, splittable_property, config):
        """Test next-year value uses the zip appreciation rate."""
        feasibility = evaluator.evaluate(splittable_property)
        result = calculator.calculate(450_000, config, feasibility, splittable_property)
        assert result.projected_value_next_year == pytest.approx(result.total_value * 1.05)

    def test_market_multiplier_applied(self, config):
        """Test premium zip codes scale lot and house values."""
        prop = Property(
            address="1501 S 1st St, Austin, TX 78704",
            price=600_000,
            lot_area=16_000,
            livable_area=2_000,
        )
        feasibility = evaluator.evaluate(prop)
        result = calculator.calculate(600_000, config, feasibility, prop)

        assert result.zip_code == "78704"
        assert result.renovated_value == pytest.approx(2_000 * 550 * 1.25)
        assert result.new_lot_value == pytest.approx(feasibility.new_lot_area * 85 * 1.25)


class TestInfeasibleEconomics:
    """Economics when the lot cannot split."""

    def test_no_lot_or_construction_value(self, small_property, config):
        """Test that rejected lots earn only the renovated value."""
        feasibility = evaluator.evaluate(small_property)
        result = calculator.calculate(300_000, config, feasibility, small_property)

        assert result.new_lot_value == 0
        assert result.new_construction_value == 0
        assert result.total_value == pytest.approx(result.renovated_value)

    def test_zero_livable_area_falls_back_to_price_uplift(self, config):
        """Test a missing house size still produces a result."""
        prop = Property(address="7 Empty Lot Rd, Austin, TX 78745", price=200_000,
                        lot_area=6_000, livable_area=0)
        feasibility = evaluator.evaluate(prop)
        result = calculator.calculate(200_000, config, feasibility, prop)

        assert result is not None
        assert result.renovated_value == pytest.approx(230_000)

    def test_target_not_met(self):
        """Test a thin deal misses the target margin."""
        prop = Property(address="5 Thin Margin Ct, Austin, TX 78759", price=500_000, lot_area=6_000)
        feasibility = evaluator.evaluate(prop)
        config = AnalysisConfig(target_profit_margin=20, renovation_budget=100_000)
        result = calculator.calculate(500_000, config, feasibility, prop)

        # 575,000 value on 600,000 invested
        assert result.profit == pytest.approx(-25_000)
        assert result.meets_target is False
