"""
Austin GIS data source - address -> parcel -> zoning -> historic district.

Queries City of Austin / Travis CAD ArcGIS REST services. Lookups are
throttled per host and cached; any failure degrades to an estimated
Property rather than an error.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional

import requests

from config import Settings, get_settings
from rate_limiter import RequestThrottle
from response_cache import LookupCache

from ..exceptions import GISLookupError
from ..property import Property
from ..rules.districts import DEFAULT_DISTRICT

logger = logging.getLogger(__name__)

ACRE_SQFT = 43_560


@dataclass
class ParcelInfo:
    """Parcel and zoning information from Austin GIS."""

    address: str
    matched_address: Optional[str] = None
    x: Optional[float] = None
    y: Optional[float] = None

    # Parcel (Travis CAD)
    parcel_id: Optional[str] = None
    lot_area: Optional[float] = None
    market_value: Optional[float] = None
    year_built: Optional[int] = None
    livable_area: Optional[float] = None

    # Zoning
    zoning_code: Optional[str] = None
    historic_district: Optional[str] = None


class AustinGISClient:
    """Client for Austin parcel, zoning and historic district layers."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[LookupCache] = None,
        throttle: Optional[RequestThrottle] = None,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.cache = cache or LookupCache(
            ttl_hours=self.settings.gis_cache_ttl_hours,
            cache_file=self.settings.gis_cache_file or None,
        )
        self.throttle = throttle or RequestThrottle(self.settings.gis_requests_per_minute)

    def _query(self, url: str, params: dict) -> dict:
        """Execute an ArcGIS REST query, returning {} on failure."""
        params = {"f": "json", **params}
        self.throttle.acquire_url(url)

        try:
            response = self.session.get(url, params=params, timeout=self.settings.gis_timeout_seconds)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"GIS query failed ({url}): {e}")
            return {}

        # ArcGIS reports errors with HTTP 200
        if "error" in data:
            logger.warning(f"GIS query error ({url}): {data['error'].get('message', data['error'])}")
            return {}
        return data

    def _point_query(self, url: str, x: float, y: float, out_fields: str = "*") -> Optional[list[dict]]:
        """Attributes of features intersecting a point, or None if the query failed."""
        data = self._query(url, {
            "geometry": f"{x},{y}",
            "geometryType": "esriGeometryPoint",
            "inSR": 4326,
            "spatialRel": "esriSpatialRelIntersects",
            "outFields": out_fields,
            "returnGeometry": "false",
        })
        if "features" not in data:
            return None
        return [f.get("attributes", {}) for f in data["features"]]

    def geocode(self, address: str) -> tuple[float, float, str]:
        """Geocode an address to (x, y, matched_address) in WGS84.

        Raises:
            GISLookupError: if no candidate is found
        """
        data = self._query(self.settings.gis_geocoder_url, {
            "SingleLine": address,
            "outSR": 4326,
            "maxLocations": 1,
        })
        candidates = data.get("candidates") or []
        if not candidates:
            raise GISLookupError(f"No geocoder match for {address}")

        best = candidates[0]
        location = best.get("location") or {}
        if "x" not in location or "y" not in location:
            raise GISLookupError(f"Geocoder returned no location for {address}")
        return float(location["x"]), float(location["y"]), best.get("address", address)

    def lookup(self, address: str) -> Optional[ParcelInfo]:
        """Look up parcel, zoning and historic status for an address.

        Args:
            address: Street address in Austin

        Returns:
            ParcelInfo or None if the address cannot be located
        """
        cached = self.cache.get(address)
        if cached is not None:
            return ParcelInfo(**cached)

        try:
            x, y, matched = self.geocode(address)
        except GISLookupError as e:
            logger.warning(f"Geocode failed: {e}")
            return None

        info = ParcelInfo(address=address, matched_address=matched, x=x, y=y)

        # 1. Parcel
        parcels = self._point_query(self.settings.gis_parcel_url, x, y)
        if parcels:
            self._apply_parcel(info, parcels[0])
            logger.info(f"Parcel lookup successful: {info.parcel_id}")
        else:
            logger.warning(f"No parcel found at {matched}")

        # 2. Zoning
        zones = self._point_query(self.settings.gis_zoning_url, x, y)
        if zones:
            info.zoning_code = zones[0].get("ZONING_ZTYPE") or zones[0].get("ZONING_BASE")

        # 3. Historic district
        districts = self._point_query(self.settings.gis_historic_url, x, y)
        if districts:
            info.historic_district = districts[0].get("NAME") or districts[0].get("DISTRICT_NAME")
            logger.info(f"Found historic district: {info.historic_district}")

        # Only complete lookups are cached
        if None not in (parcels, zones, districts) and info.lot_area:
            self.cache.set(address, asdict(info))
        else:
            logger.info(f"Not caching incomplete GIS lookup for {address}")
        return info

    def _apply_parcel(self, info: ParcelInfo, attrs: dict):
        info.parcel_id = str(attrs["PROP_ID"]) if attrs.get("PROP_ID") is not None else None
        lot_sqft = self._safe_float(attrs.get("LAND_SQFT"))
        if lot_sqft is None:
            acres = self._safe_float(attrs.get("LAND_ACRES"))
            lot_sqft = acres * ACRE_SQFT if acres is not None else None
        info.lot_area = lot_sqft
        info.market_value = self._safe_float(attrs.get("MARKET_VALUE"))
        info.year_built = self._safe_int(attrs.get("YEAR_BUILT"))
        info.livable_area = self._safe_float(attrs.get("LIVING_AREA"))

    def to_property(self, address: str, price: Optional[float] = None) -> Property:
        """Build a Property for an address from GIS data.

        Falls back to an estimated property (default zoning, typical lot
        size, data_source="estimated") when the lookup fails.

        Args:
            address: Street address
            price: Asking price; the appraised market value is used if None
        """
        try:
            info = self.lookup(address)
        except Exception as e:
            logger.error(f"GIS lookup failed for {address}: {e}")
            info = None

        if info is None or not info.lot_area:
            logger.warning(f"Using estimated lot data for {address}")
            return Property(
                address=address,
                price=price,
                lot_area=self.settings.gis_fallback_lot_area,
                zoning_code=(info.zoning_code if info else None) or DEFAULT_DISTRICT,
                historic_district=info.historic_district if info else None,
                data_source="estimated",
            )

        return Property(
            address=address,
            price=price if price is not None else info.market_value,
            lot_area=info.lot_area,
            zoning_code=info.zoning_code or DEFAULT_DISTRICT,
            livable_area=info.livable_area,
            year_built=info.year_built,
            historic_district=info.historic_district,
            data_source="gis",
        )

    def _safe_float(self, value) -> Optional[float]:
        try:
            return float(value) if value else None
        except (ValueError, TypeError):
            return None

    def _safe_int(self, value) -> Optional[int]:
        try:
            return int(float(value)) if value else None
        except (ValueError, TypeError):
            return None
