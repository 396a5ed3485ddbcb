"""
Austin market data - per-zipcode pricing and utility availability.
Values are rough 2024 estimates; every lookup falls back to a "default" profile.
"""

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"

ZIP_PATTERN = re.compile(r'\b(\d{5})(?:-\d{4})?\b')


@dataclass(frozen=True)
class MarketProfile:
    """Price and cost assumptions for one zip code."""

    price_per_sqft: float  # renovated resale, per livable SF
    land_value_per_sqft: float  # raw lot, per lot SF
    construction_cost_per_sqft: float
    appreciation_rate: float  # annual, 0.05 = 5%
    multiplier: float = 1.0  # 1.0 = citywide baseline

    def __post_init__(self):
        if self.multiplier < 0:
            raise ValueError("Market multiplier must be non-negative")


@dataclass(frozen=True)
class UtilityService:
    """Utility availability for new lots in one zip code."""

    sewer: bool = True
    gas: bool = True
    connection_cost: float = 15_000

    @property
    def missing(self) -> list[str]:
        services = []
        if not self.sewer:
            services.append("sewer")
        if not self.gas:
            services.append("gas")
        return services


MARKET_PROFILES: Mapping[str, MarketProfile] = MappingProxyType({
    # Central
    "78703": MarketProfile(650, 110, 260, 0.06, 1.40),
    "78704": MarketProfile(550, 85, 240, 0.06, 1.25),
    "78702": MarketProfile(500, 75, 230, 0.07, 1.20),
    "78731": MarketProfile(600, 95, 250, 0.05, 1.30),
    "78757": MarketProfile(450, 60, 220, 0.05, 1.10),
    "78723": MarketProfile(400, 50, 210, 0.06, 1.05),
    # South / East
    "78745": MarketProfile(380, 45, 200, 0.05, 1.00),
    "78748": MarketProfile(340, 35, 195, 0.04, 0.95),
    "78744": MarketProfile(300, 30, 190, 0.05, 0.85),
    # North
    "78753": MarketProfile(290, 28, 190, 0.04, 0.85),
    "78758": MarketProfile(330, 35, 195, 0.04, 0.90),
    # Hill country west of MoPac
    "78733": MarketProfile(520, 55, 260, 0.04, 1.15),
    "78746": MarketProfile(700, 90, 280, 0.05, 1.45),
    DEFAULT_KEY: MarketProfile(350, 40, 200, 0.05, 1.00),
})

UTILITY_SERVICE: Mapping[str, UtilityService] = MappingProxyType({
    "78703": UtilityService(connection_cost=18_000),
    "78704": UtilityService(connection_cost=16_000),
    "78702": UtilityService(connection_cost=14_000),
    "78731": UtilityService(connection_cost=20_000),
    "78744": UtilityService(gas=False, connection_cost=17_000),
    "78748": UtilityService(gas=False, connection_cost=16_500),
    # Septic areas outside the Austin Water service boundary
    "78733": UtilityService(sewer=False, gas=False, connection_cost=35_000),
    "78746": UtilityService(sewer=False, connection_cost=30_000),
    "78732": UtilityService(sewer=False, gas=False, connection_cost=38_000),
    DEFAULT_KEY: UtilityService(),
})


def extract_zip_code(address: Optional[str]) -> Optional[str]:
    """Pull the zip code out of a free-form address.

    The last 5-digit group wins so a 5-digit house number
    ("12345 Ranch Rd, Austin, TX 78748") is not mistaken for the zip.
    """
    if not address:
        return None
    matches = ZIP_PATTERN.findall(str(address))
    return matches[-1] if matches else None


def get_market_profile(zip_code: Optional[str]) -> MarketProfile:
    """Market profile for a zip code, or the citywide default."""
    profile = MARKET_PROFILES.get(zip_code or "")
    if profile is None:
        logger.debug(f"No market profile for zip {zip_code!r} - using default")
        return MARKET_PROFILES[DEFAULT_KEY]
    return profile


def get_utility_service(zip_code: Optional[str]) -> UtilityService:
    """Utility availability for a zip code, or the citywide default."""
    return UTILITY_SERVICE.get(zip_code or "", UTILITY_SERVICE[DEFAULT_KEY])
