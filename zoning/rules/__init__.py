# Austin zoning and market lookup tables
from .districts import DISTRICTS, DistrictTable, ZoningDistrict, get_district
from .market import (
    MarketProfile,
    UtilityService,
    extract_zip_code,
    get_market_profile,
    get_utility_service,
)

__all__ = [
    "DISTRICTS",
    "DistrictTable",
    "ZoningDistrict",
    "get_district",
    "MarketProfile",
    "UtilityService",
    "extract_zip_code",
    "get_market_profile",
    "get_utility_service",
]
