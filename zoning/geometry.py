"""
Lot geometry estimates - width/depth resolution and buildable envelopes.

Listings rarely carry lot dimensions, so most lots are treated as rectangles
of an assumed aspect ratio. Two envelopes are computed:

- quick_buildable_area: screening estimate used by the width check and the
  legacy split estimate. Fixed 20 ft rear yard, no loss factor.
- buildable_area: detailed estimate for reports. District rear setback and a
  20% loss for driveways, easements and irregular shape.
"""

import logging
import math
import re
from typing import Optional

from .property import LotDimensions
from .rules.districts import ZoningDistrict

logger = logging.getLogger(__name__)

# Width:depth ratios assumed when dimensions are unknown
WIDTH_CHECK_ASPECT_RATIO = 1.5
BUILDABLE_ASPECT_RATIO = 1.2

QUICK_REAR_SETBACK = 20  # feet
NET_BUILDABLE_FACTOR = 0.8
PARSE_TOLERANCE = 0.20  # parsed dimensions must be within 20% of the known area

# "60x120", "60 X 120", "60' x 120'", "60 by 120 ft"
DIMENSION_PATTERN = re.compile(
    r"(\d+(?:\.\d+)?)\s*(?:'|ft|feet)?\s*(?:x|×|by)\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)


def estimate_dimensions(lot_area: float, aspect_ratio: float) -> LotDimensions:
    """Estimate width and depth for a rectangular lot of the given area."""
    if lot_area <= 0:
        raise ValueError(f"Lot area must be positive, got {lot_area}")
    width = math.sqrt(lot_area * aspect_ratio)
    return LotDimensions(width=width, depth=lot_area / width, provenance="estimated")


def parse_dimensions(text: Optional[str], lot_area: float) -> Optional[LotDimensions]:
    """Find an "NxM" dimension pair in free text.

    The first pair whose product lies within 20% of the known lot area is
    accepted. Anything else (room sizes, garage sizes) is ignored.
    """
    if not text:
        return None

    for match in DIMENSION_PATTERN.finditer(str(text)):
        width, depth = float(match.group(1)), float(match.group(2))
        if width <= 0 or depth <= 0:
            continue
        if abs(width * depth - lot_area) <= lot_area * PARSE_TOLERANCE:
            return LotDimensions(width=width, depth=depth, provenance="parsed")
        logger.debug(f"Discarding parsed dimensions {width}x{depth} for {lot_area} SF lot")

    return None


def resolve_dimensions(
    lot_area: float,
    explicit: Optional[LotDimensions] = None,
    description: Optional[str] = None,
    aspect_ratio: float = WIDTH_CHECK_ASPECT_RATIO,
) -> LotDimensions:
    """Best available lot dimensions: explicit, then parsed, then estimated.

    Args:
        lot_area: Lot area in square feet
        explicit: Dimensions supplied by the data source
        description: Free text that may contain "NxM"
        aspect_ratio: Width:depth ratio for the estimate fallback

    Returns:
        LotDimensions tagged with their provenance
    """
    if explicit is not None:
        return LotDimensions(width=explicit.width, depth=explicit.depth, provenance="explicit")

    parsed = parse_dimensions(description, lot_area)
    if parsed is not None:
        return parsed

    return estimate_dimensions(lot_area, aspect_ratio)


def _envelope(width: float, depth: float, side: float, front: float, rear: float) -> float:
    buildable_width = max(0.0, width - 2 * side)
    buildable_depth = max(0.0, depth - front - rear)
    return buildable_width * buildable_depth


def quick_buildable_area(dimensions: LotDimensions, district: ZoningDistrict) -> float:
    """Gross envelope using the front setback and a fixed 20 ft rear yard."""
    return _envelope(
        dimensions.width,
        dimensions.depth,
        district.side_setback,
        district.front_setback,
        QUICK_REAR_SETBACK,
    )


def gross_buildable_area(dimensions: LotDimensions, district: ZoningDistrict) -> float:
    """Envelope left after all district setbacks."""
    return _envelope(
        dimensions.width,
        dimensions.depth,
        district.side_setback,
        district.front_setback,
        district.rear_setback,
    )


def buildable_area(dimensions: LotDimensions, district: ZoningDistrict) -> float:
    """Net buildable area: gross envelope less the real-world loss factor."""
    return gross_buildable_area(dimensions, district) * NET_BUILDABLE_FACTOR


def buildable_area_for_lot(lot_area: float, district: ZoningDistrict) -> float:
    """Net buildable area of a lot with no known dimensions (1.2:1 assumed)."""
    if lot_area <= 0:
        return 0.0
    return buildable_area(estimate_dimensions(lot_area, BUILDABLE_ASPECT_RATIO), district)
