"""
Main Lot Analyzer - runs feasibility, economics and scoring for each property.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .exceptions import IncompletePropertyError
from .financial import FinancialCalculator, FinancialResult
from .geometry import WIDTH_CHECK_ASPECT_RATIO, resolve_dimensions
from .property import AnalysisConfig, LotDimensions, Property
from .rules.districts import DISTRICTS, DistrictTable
from .scoring import calculate_score, get_status
from .subdivision import FeasibilityResult, SubdivisionEvaluator

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Complete lot split analysis for a property."""

    property: Property
    lot_dimensions: LotDimensions
    feasibility: FeasibilityResult
    financial: FinancialResult
    score: int
    status: str  # excellent, good, poor

    # Investor screens the property misses (informational)
    screening_flags: list[str] = field(default_factory=list)

    @property
    def address(self) -> str:
        return self.property.address

    @property
    def price(self) -> float:
        return self.property.price

    @property
    def lot_area(self) -> float:
        return self.property.lot_area

    def to_report(self) -> str:
        """Generate formatted analysis report."""
        prop = self.property
        feas = self.feasibility
        fin = self.financial
        lines = []

        # Header
        lines.append("═" * 65)
        lines.append(f"  LOT SPLIT ANALYSIS: {prop.address}")
        lines.append("═" * 65)
        lines.append("")

        # Site Information
        lines.append("📍 SITE INFORMATION")
        lines.append(f"   Price: ${prop.price:,.0f}")
        lines.append(f"   Lot Area: {prop.lot_area:,.0f} SF")
        dims = self.lot_dimensions
        lines.append(f"   Dimensions: {dims.width:.0f}' × {dims.depth:.0f}' ({dims.provenance})")
        if prop.livable_area:
            lines.append(f"   Living Area: {prop.livable_area:,.0f} SF")
        if prop.year_built:
            lines.append(f"   Year Built: {prop.year_built}")
        lines.append(f"   Data Source: {prop.data_source}")
        lines.append("")

        lines.append(f"🏗️ ZONING DISTRICT: {feas.district.code} ({feas.district.description})")
        lines.append("")

        # Feasibility
        if feas.can_split:
            lines.append("✅ SUBDIVISION FEASIBLE")
            lines.append(f"   Kept Lot: {feas.kept_lot_area:,.0f} SF")
            lines.append(f"   New Lot: {feas.new_lot_area:,.0f} SF")
            lines.append(f"   Buildable Area: {feas.buildable_area:,.0f} SF")
            lines.append(f"   Max House Footprint: {feas.max_house_footprint:,} SF")
            lines.append(f"   Max Impervious Cover: {feas.max_impervious_cover:,} SF")
            if feas.max_potential_lots and feas.max_potential_lots > 2:
                lines.append(f"   Potential Lots (n-way split): {feas.max_potential_lots}")
            lines.append("")

            lines.append("💵 SUBDIVISION COSTS")
            lines.append(f"   Platting: ${feas.costs.platting:,.0f}")
            lines.append(f"   Utilities: ${feas.costs.utilities:,.0f}")
            lines.append(f"   Survey: ${feas.costs.survey:,.0f}")
            lines.append(f"   Permits: ${feas.costs.permits:,.0f}")
            lines.append(f"   Total: ${feas.costs.total:,.0f}")
            lines.append(f"   Timeline: ~{feas.timeline.total_months} months")
            lines.append("")

            if feas.risks:
                lines.append("⚠️ RISKS")
                for risk in feas.risks:
                    lines.append(f"   • {risk}")
                lines.append("")

            lines.append("📋 REQUIREMENTS")
            for requirement in feas.requirements:
                lines.append(f"   • {requirement}")
            lines.append("")
        else:
            lines.append("❌ CANNOT SPLIT")
            for reason in feas.reasons:
                lines.append(f"   • {reason}")
            lines.append("")

        # Economics
        lines.append("📈 ECONOMICS")
        lines.append(f"   Total Investment: ${fin.total_investment:,.0f}")
        lines.append(f"   Renovated Value: ${fin.renovated_value:,.0f}")
        if feas.can_split:
            lines.append(f"   New Lot Value: ${fin.new_lot_value:,.0f}")
            lines.append(f"   New Construction Value: ${fin.new_construction_value:,.0f}")
        lines.append(f"   Profit: ${fin.profit:,.0f} ({fin.profit_margin:.1f}%)")
        lines.append(f"   Meets Target: {'Yes' if fin.meets_target else 'No'}")
        lines.append("")

        if self.screening_flags:
            lines.append("🔎 SCREENING")
            for flag in self.screening_flags:
                lines.append(f"   • {flag}")
            lines.append("")

        # Footer
        lines.append("─" * 65)
        lines.append(f"Score: {self.score}/100 | Status: {self.status.upper()}")
        lines.append("⚠️ Simplified rules. Verify with Development Services before filing.")
        lines.append("═" * 65)

        return "\n".join(lines)


class LotAnalyzer:
    """Orchestrates lot split analysis for one property or a batch."""

    def __init__(self, districts: DistrictTable = DISTRICTS, max_workers: int = 1):
        self.evaluator = SubdivisionEvaluator(districts)
        self.calculator = FinancialCalculator()
        self.max_workers = max_workers

    def analyze_one(self, prop: Property, config: AnalysisConfig) -> AnalysisResult:
        """Run the full analysis for one property.

        Args:
            prop: Property with address, price and lot area
            config: Investor criteria

        Returns:
            AnalysisResult

        Raises:
            IncompletePropertyError: if address, price or lot area is missing
        """
        missing = prop.missing_fields
        if missing:
            raise IncompletePropertyError(prop.address, missing)

        price = float(prop.price)
        lot_area = float(prop.lot_area)

        dimensions = resolve_dimensions(
            lot_area, prop.lot_dimensions, prop.description, WIDTH_CHECK_ASPECT_RATIO,
        )
        feasibility = self.evaluator.evaluate(prop, dimensions)
        financial = self.calculator.calculate(price, config, feasibility, prop)

        legacy = None
        if not feasibility.can_split:
            legacy = self.evaluator.legacy_estimate(lot_area, prop.zoning_code)

        score = calculate_score(feasibility, financial, config, legacy)
        status = get_status(score, price, config, feasibility.can_split)

        flags = []
        if price > config.max_price:
            flags.append(f"Price ${price:,.0f} exceeds max ${config.max_price:,.0f}")
        if lot_area < config.min_lot_area:
            flags.append(f"Lot {lot_area:,.0f} SF below minimum {config.min_lot_area:,.0f} SF")

        logger.debug(f"{prop.address}: score {score} ({status})")
        return AnalysisResult(
            property=prop,
            lot_dimensions=dimensions,
            feasibility=feasibility,
            financial=financial,
            score=score,
            status=status,
            screening_flags=flags,
        )

    def _try_analyze(self, prop: Property, config: AnalysisConfig) -> Optional[AnalysisResult]:
        try:
            return self.analyze_one(prop, config)
        except IncompletePropertyError as e:
            logger.warning(f"Skipping property: {e}")
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.warning(f"Skipping {getattr(prop, 'address', None)!r}: analysis failed: {e}")
        return None

    def analyze_batch(self, properties: Iterable[Property], config: AnalysisConfig) -> list[AnalysisResult]:
        """Analyze every property and rank the results by score, highest first.

        Properties that are incomplete or fail to analyze are skipped.
        Ties keep their input order.
        """
        properties = list(properties)

        if self.max_workers > 1 and len(properties) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                analyzed = list(pool.map(lambda p: self._try_analyze(p, config), properties))
        else:
            analyzed = [self._try_analyze(p, config) for p in properties]

        results = [r for r in analyzed if r is not None]
        results.sort(key=lambda r: r.score, reverse=True)

        logger.info(f"Analyzed {len(results)} of {len(properties)} properties")
        return results


_default_analyzer = LotAnalyzer()


def analyze_one(prop: Property, config: AnalysisConfig) -> AnalysisResult:
    """Analyze one property with the default Austin rules."""
    return _default_analyzer.analyze_one(prop, config)


def analyze_batch(properties: Iterable[Property], config: AnalysisConfig) -> list[AnalysisResult]:
    """Analyze and rank a batch of properties with the default Austin rules."""
    return _default_analyzer.analyze_batch(properties, config)
