"""
Investment economics for a renovate-and-split strategy.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .property import AnalysisConfig, Property
from .rules.market import MarketProfile, extract_zip_code, get_market_profile
from .subdivision import FeasibilityResult

logger = logging.getLogger(__name__)

RENOVATION_UPLIFT = 1.15  # renovated value never below 115% of purchase price
NEW_CONSTRUCTION_SHARE = 0.4  # share of the new lot's buildable area actually built
NEW_CONSTRUCTION_REALIZED = 0.3  # share of new-construction value counted as profit


@dataclass
class FinancialResult:
    """Economics of buying, renovating and (if possible) splitting a lot."""

    purchase_price: float
    renovation_cost: float
    total_investment: float

    renovated_value: float
    new_lot_value: float
    new_construction_value: float
    total_value: float

    profit: float
    profit_margin: float  # percent of total investment
    meets_target: bool

    # Sale price needed on one asset when the other sells at estimate
    break_even_renovated_sale: float
    break_even_lot_sale: float

    projected_value_next_year: float
    zip_code: Optional[str] = None


class FinancialCalculator:
    """Value a property under the renovate-and-split strategy."""

    def calculate(
        self,
        purchase_price: float,
        config: AnalysisConfig,
        feasibility: FeasibilityResult,
        prop: Property,
    ) -> FinancialResult:
        """Calculate investment economics.

        Args:
            purchase_price: Acquisition price
            config: Investor criteria (renovation budget, target margin)
            feasibility: Subdivision determination for the lot
            prop: Property, for zip code and livable area

        Returns:
            FinancialResult
        """
        zip_code = extract_zip_code(prop.address)
        market = get_market_profile(zip_code)

        renovated_value = self._renovated_value(purchase_price, prop.livable_area, market)

        new_lot_value = 0.0
        new_construction_value = 0.0
        if feasibility.can_split:
            new_lot_value = feasibility.new_lot_area * market.land_value_per_sqft * market.multiplier
            new_construction_value = (
                feasibility.buildable_area
                * NEW_CONSTRUCTION_SHARE
                * market.construction_cost_per_sqft
                * market.multiplier
            )

        total_investment = purchase_price + config.renovation_budget
        total_value = renovated_value + new_lot_value + NEW_CONSTRUCTION_REALIZED * new_construction_value
        profit = total_value - total_investment
        profit_margin = profit / total_investment * 100

        return FinancialResult(
            purchase_price=purchase_price,
            renovation_cost=config.renovation_budget,
            total_investment=total_investment,
            renovated_value=renovated_value,
            new_lot_value=new_lot_value,
            new_construction_value=new_construction_value,
            total_value=total_value,
            profit=profit,
            profit_margin=profit_margin,
            meets_target=profit_margin >= config.target_profit_margin,
            break_even_renovated_sale=total_investment - new_lot_value,
            break_even_lot_sale=total_investment - renovated_value,
            projected_value_next_year=total_value * (1 + market.appreciation_rate),
            zip_code=zip_code,
        )

    def _renovated_value(
        self, purchase_price: float, livable_area: Optional[float], market: MarketProfile,
    ) -> float:
        """Market value of the renovated house, floored at 115% of price."""
        market_value = (livable_area or 0) * market.price_per_sqft * market.multiplier
        return max(market_value, purchase_price * RENOVATION_UPLIFT)
