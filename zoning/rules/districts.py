"""
Residential zoning district rules - lot size, width, setbacks, height, impervious cover.
Simplified from the City of Austin Land Development Code, Chapter 25-2.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_DISTRICT = "SF-3"


@dataclass(frozen=True)
class ZoningDistrict:
    """Dimensional and coverage constraints for one zoning district."""

    code: str
    min_lot_size: float  # square feet
    min_lot_width: float  # feet
    front_setback: float  # feet
    side_setback: float  # feet
    rear_setback: float  # feet
    max_height: float  # feet
    max_impervious_cover: float  # fraction of lot, (0, 1]
    description: str = ""

    def __post_init__(self):
        dimensional = (
            self.min_lot_size,
            self.min_lot_width,
            self.front_setback,
            self.side_setback,
            self.rear_setback,
            self.max_height,
        )
        if any(value <= 0 for value in dimensional):
            raise ValueError(f"{self.code}: dimensional limits must be positive")
        if not 0 < self.max_impervious_cover <= 1:
            raise ValueError(f"{self.code}: impervious cover must be in (0, 1]")

    def to_summary(self) -> str:
        """Generate human-readable summary."""
        lines = [f"{self.code} - {self.description}" if self.description else self.code]
        lines.append(f"  Min Lot: {self.min_lot_size:,.0f} SF, {self.min_lot_width:.0f} ft wide")
        lines.append(
            f"  Setbacks: front {self.front_setback:g} ft, "
            f"side {self.side_setback:g} ft, rear {self.rear_setback:g} ft"
        )
        lines.append(f"  Max Height: {self.max_height:g} ft")
        lines.append(f"  Max Impervious Cover: {self.max_impervious_cover:.0%}")
        return "\n".join(lines)


def _district(code: str, **params) -> ZoningDistrict:
    return ZoningDistrict(code=code, **params)


# Single-family residential districts
AUSTIN_DISTRICTS: Mapping[str, ZoningDistrict] = MappingProxyType({
    "SF-1": _district(
        "SF-1", min_lot_size=10_000, min_lot_width=60, front_setback=25, side_setback=5,
        rear_setback=10, max_height=40, max_impervious_cover=0.40,
        description="Single-Family Residence, Large Lot",
    ),
    "SF-2": _district(
        "SF-2", min_lot_size=5_750, min_lot_width=50, front_setback=25, side_setback=5,
        rear_setback=10, max_height=40, max_impervious_cover=0.45,
        description="Single-Family Residence, Standard Lot",
    ),
    "SF-3": _district(
        "SF-3", min_lot_size=7_000, min_lot_width=60, front_setback=25, side_setback=7.5,
        rear_setback=10, max_height=40, max_impervious_cover=0.45,
        description="Family Residence",
    ),
    "SF-4A": _district(
        "SF-4A", min_lot_size=8_500, min_lot_width=65, front_setback=25, side_setback=10,
        rear_setback=10, max_height=40, max_impervious_cover=0.55,
        description="Single-Family Residence, Small Lot",
    ),
    "SF-5": _district(
        "SF-5", min_lot_size=10_000, min_lot_width=70, front_setback=25, side_setback=12,
        rear_setback=10, max_height=40, max_impervious_cover=0.55,
        description="Urban Family Residence",
    ),
    "SF-6": _district(
        "SF-6", min_lot_size=12_500, min_lot_width=80, front_setback=25, side_setback=15,
        rear_setback=10, max_height=40, max_impervious_cover=0.55,
        description="Townhouse and Condominium Residence",
    ),
})


def normalize_code(code: Optional[str]) -> str:
    """Normalize a zoning code: "sf 3" / " SF-3 " / "SF3" -> "SF-3"."""
    if not code:
        return ""
    code = str(code).upper().strip()
    match = re.match(r'^SF[\s\-]?(\d+[A-Z]?)', code)
    if match:
        return f"SF-{match.group(1)}"
    return code


class DistrictTable:
    """Lookup of zoning districts with a fixed fallback district."""

    def __init__(self, districts: Mapping[str, ZoningDistrict] = AUSTIN_DISTRICTS,
                 default: str = DEFAULT_DISTRICT):
        if default not in districts:
            raise ValueError(f"Default district {default} missing from table")
        self.districts = districts
        self.default = default

    def __contains__(self, code: str) -> bool:
        return normalize_code(code) in self.districts

    def get(self, code: Optional[str]) -> ZoningDistrict:
        """Get rules for a district code, falling back to the default district."""
        normalized = normalize_code(code)
        district = self.districts.get(normalized)
        if district is None:
            logger.debug(f"Unknown zoning code {code!r} - using {self.default}")
            return self.districts[self.default]
        return district

    def codes(self) -> list[str]:
        return list(self.districts)


DISTRICTS = DistrictTable()


def get_district(code: Optional[str]) -> ZoningDistrict:
    """Module-level shortcut for the Austin district table."""
    return DISTRICTS.get(code)
