"""
Subdivision feasibility - can a lot be split into two legal lots, and what will it take.
Based on City of Austin Land Development Code, Chapter 25-4 (Subdivision).
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from .geometry import (
    WIDTH_CHECK_ASPECT_RATIO,
    buildable_area_for_lot,
    estimate_dimensions,
    quick_buildable_area,
    resolve_dimensions,
)
from .property import LotDimensions, Property
from .rules.districts import DISTRICTS, DistrictTable, ZoningDistrict
from .rules.market import extract_zip_code, get_utility_service

logger = logging.getLogger(__name__)

INTER_LOT_BUFFER = 10  # feet between the two new lots
MIN_STREET_FRONTAGE = 25  # feet per lot
ONE_ACRE = 43_560  # square feet
USABLE_AREA_FACTOR = 0.95  # 5% reserved for utility easements
FOOTPRINT_COVERAGE = 0.6
LEGACY_NEW_LOT_FACTOR = 0.9

# Fixed subdivision costs (USD)
PLATTING_COST = 15_000
SURVEY_COST = 5_000
PERMIT_COST = 3_000

# Timeline (months)
PLATTING_MONTHS = 6
UTILITY_MONTHS = 3
CLOSEOUT_MONTHS = 2

SUBDIVISION_REQUIREMENTS = (
    "Submit subdivision plat application to Development Services",
    "Drainage study for added impervious cover",
    "Utility survey and service extension plan",
    "Protected tree survey (19 in. diameter and larger)",
    "Historic district review, if applicable",
    "Utility commitment letters from Austin Water and Austin Energy",
    "Parkland dedication and transportation impact fees",
)


@dataclass
class SubdivisionCosts:
    """Estimated out-of-pocket subdivision costs."""

    platting: float = PLATTING_COST
    utilities: float = 0.0
    survey: float = SURVEY_COST
    permits: float = PERMIT_COST

    @property
    def total(self) -> float:
        return self.platting + self.utilities + self.survey + self.permits


@dataclass
class SubdivisionTimeline:
    """Estimated subdivision timeline. Platting and utility work run in parallel."""

    platting_months: int = PLATTING_MONTHS
    utility_months: int = UTILITY_MONTHS

    @property
    def total_months(self) -> int:
        return max(self.platting_months, self.utility_months) + CLOSEOUT_MONTHS


@dataclass
class FeasibilityResult:
    """Subdivision determination for one lot.

    Everything past ``reasons`` is only filled in when ``can_split`` is True.
    """

    can_split: bool
    district: ZoningDistrict
    lot_area: float
    reasons: list[str] = field(default_factory=list)

    kept_lot_area: Optional[float] = None
    new_lot_area: Optional[int] = None
    buildable_area: Optional[float] = None
    max_house_footprint: Optional[int] = None
    max_impervious_cover: Optional[int] = None
    max_potential_lots: Optional[int] = None

    costs: Optional[SubdivisionCosts] = None
    timeline: Optional[SubdivisionTimeline] = None
    risks: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)

    @property
    def split_ratio(self) -> float:
        if not self.can_split or not self.new_lot_area or not self.lot_area:
            return 0.0
        return self.new_lot_area / self.lot_area


@dataclass
class LegacySplitEstimate:
    """Simplified split estimate kept for scoring rejected lots."""

    can_split: bool
    new_lot_area: int = 0
    buildable_area: float = 0.0

    lot_area: float = 0.0

    @property
    def split_ratio(self) -> float:
        return self.new_lot_area / self.lot_area if self.lot_area else 0.0


class SubdivisionEvaluator:
    """Run the subdivision gates for a property."""

    def __init__(self, districts: DistrictTable = DISTRICTS):
        self.districts = districts

    def evaluate(self, prop: Property, dimensions: Optional[LotDimensions] = None) -> FeasibilityResult:
        """Decide whether a lot can be split in two.

        Args:
            prop: Property with a positive lot_area
            dimensions: Pre-resolved lot dimensions (resolved here if None)

        Returns:
            FeasibilityResult with rejection reasons or the split details
        """
        lot_area = float(prop.lot_area)
        district = self.districts.get(prop.zoning_code)
        if dimensions is None:
            dimensions = resolve_dimensions(
                lot_area, prop.lot_dimensions, prop.description, WIDTH_CHECK_ASPECT_RATIO,
            )

        result = FeasibilityResult(can_split=False, district=district, lot_area=lot_area)
        reasons = result.reasons

        # 1. Size
        required_area = 2 * district.min_lot_size
        if lot_area < required_area:
            reasons.append(
                f"Lot too small: {lot_area:,.0f} SF, need {required_area:,.0f} SF "
                f"(2 x {district.min_lot_size:,.0f} SF minimum for {district.code})"
            )

        # 2. Width
        required_width = 2 * district.min_lot_width + INTER_LOT_BUFFER
        if dimensions.width < required_width:
            reasons.append(
                f"Insufficient width: {dimensions.width:,.0f} ft ({dimensions.provenance}), "
                f"need {required_width:,.0f} ft (2 x {district.min_lot_width:,.0f} ft "
                f"+ {INTER_LOT_BUFFER} ft buffer)"
            )

        # 3. Street frontage
        required_frontage = 2 * MIN_STREET_FRONTAGE
        if dimensions.width < required_frontage:
            reasons.append(
                f"Insufficient street frontage: {dimensions.width:,.0f} ft, "
                f"need {required_frontage} ft ({MIN_STREET_FRONTAGE} ft per lot)"
            )

        # 4. Utilities - only blocks alongside another failure
        zip_code = extract_zip_code(prop.address)
        utilities = get_utility_service(zip_code)
        missing = utilities.missing
        utility_risks = []
        if missing:
            area = zip_code or "this area"
            utility_risks.append(
                f"No {' or '.join(missing)} service in {area} - "
                f"new lot needs private service (septic/propane)"
            )
            if reasons:
                reasons.append(f"Utilities unavailable for new lot: {', '.join(missing)}")

        if reasons:
            logger.debug(f"{prop.address}: cannot split - {len(reasons)} reason(s)")
            return result

        result.can_split = True
        result.risks.extend(utility_risks)

        # 5. Drainage - risk only
        if lot_area > ONE_ACRE:
            result.risks.append("Lot exceeds 1 acre - a drainage/runoff study will be required")
        if prop.historic_district:
            result.risks.append(
                f"In {prop.historic_district} historic district - Historic Landmark Commission review"
            )

        usable_area = lot_area * USABLE_AREA_FACTOR
        result.kept_lot_area = district.min_lot_size
        result.new_lot_area = math.floor(usable_area - district.min_lot_size)
        result.max_potential_lots = math.floor(usable_area / district.min_lot_size)
        result.buildable_area = buildable_area_for_lot(result.new_lot_area, district)
        result.max_house_footprint = math.floor(result.buildable_area * FOOTPRINT_COVERAGE)
        result.max_impervious_cover = math.floor(result.new_lot_area * district.max_impervious_cover)

        result.costs = SubdivisionCosts(utilities=utilities.connection_cost)
        result.timeline = SubdivisionTimeline()
        result.requirements = list(SUBDIVISION_REQUIREMENTS)

        logger.debug(f"{prop.address}: can split, new lot {result.new_lot_area} SF")
        return result

    def legacy_estimate(self, lot_area: float, zoning_code: Optional[str]) -> LegacySplitEstimate:
        """Size-only split estimate from the earlier screening rules.

        A lot splits iff it holds two minimum lots; the new lot is 90% of
        what remains after the kept lot.
        """
        district = self.districts.get(zoning_code)
        if lot_area < 2 * district.min_lot_size:
            return LegacySplitEstimate(can_split=False, lot_area=lot_area)

        new_lot_area = math.floor((lot_area - district.min_lot_size) * LEGACY_NEW_LOT_FACTOR)
        envelope = quick_buildable_area(
            estimate_dimensions(new_lot_area, WIDTH_CHECK_ASPECT_RATIO), district,
        )
        return LegacySplitEstimate(
            can_split=True,
            new_lot_area=new_lot_area,
            buildable_area=envelope,
            lot_area=lot_area,
        )
