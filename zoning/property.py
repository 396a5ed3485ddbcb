"""
Input records for the lot analysis engine: properties and run configuration.
"""

import logging
import math
import re
from dataclasses import dataclass, fields
from typing import Any, Literal, Mapping, Optional

from .rules.districts import DEFAULT_DISTRICT, normalize_code

logger = logging.getLogger(__name__)

Provenance = Literal["explicit", "parsed", "estimated"]


@dataclass(frozen=True)
class LotDimensions:
    """Lot width (street frontage) and depth in feet."""

    width: float
    depth: float
    provenance: Provenance = "explicit"

    @property
    def area(self) -> float:
        return self.width * self.depth


@dataclass(frozen=True)
class Property:
    """One parcel to analyze. Built once from a listing, lookup or manual entry."""

    address: Optional[str]
    price: Optional[float]
    lot_area: Optional[float]  # square feet
    zoning_code: str = DEFAULT_DISTRICT

    # Building info
    livable_area: Optional[float] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    year_built: Optional[int] = None

    # Lot shape
    lot_dimensions: Optional[LotDimensions] = None
    description: Optional[str] = None  # free text that may hold "60x120"

    # Where the record came from: csv, mls, gis, manual, estimated
    data_source: str = "manual"
    historic_district: Optional[str] = None

    def __post_init__(self):
        code = normalize_code(self.zoning_code) or DEFAULT_DISTRICT
        object.__setattr__(self, "zoning_code", code)

    @property
    def missing_fields(self) -> list[str]:
        """Required fields that are absent."""
        missing = []
        if not self.address:
            missing.append("address")
        if not self.price:
            missing.append("price")
        if not self.lot_area:
            missing.append("lot_area")
        return missing

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Property":
        """Build from a JSON-style dict (snake_case keys, nested lot_dimensions)."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        for name in ("address", "price", "lot_area"):
            values.setdefault(name, None)
        dims = values.get("lot_dimensions")
        if isinstance(dims, Mapping):
            values["lot_dimensions"] = LotDimensions(
                width=float(dims["width"]),
                depth=float(dims["depth"]),
                provenance=dims.get("provenance", "explicit"),
            )
        return cls(**values)


@dataclass(frozen=True)
class AnalysisConfig:
    """Investor criteria for one analysis run."""

    max_price: float = 500_000
    min_lot_area: float = 7_000
    target_profit_margin: float = 20  # percent
    renovation_budget: float = 100_000

    # Accepted spellings per field, first match wins
    FIELD_KEYS = {
        "max_price": ("max_price", "maxPrice"),
        "min_lot_area": ("min_lot_area", "minLotArea", "min_lot_size", "minLotSize"),
        "target_profit_margin": (
            "target_profit_margin", "targetProfitMarginPercent", "target_profit", "targetProfit",
        ),
        "renovation_budget": ("renovation_budget", "renovationBudget"),
    }

    @classmethod
    def from_settings(cls, settings) -> "AnalysisConfig":
        return cls(
            max_price=settings.default_max_price,
            min_lot_area=settings.default_min_lot_area,
            target_profit_margin=settings.default_target_profit_margin,
            renovation_budget=settings.default_renovation_budget,
        )

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]], settings=None) -> "AnalysisConfig":
        """Build a config from user input, defaulting any missing or invalid value.

        Args:
            raw: Form/JSON values, e.g. {"maxPrice": "$900,000", "targetProfit": "25"}
            settings: Settings supplying defaults (class defaults if None)

        Returns:
            AnalysisConfig with every field positive
        """
        defaults = cls.from_settings(settings) if settings is not None else cls()
        raw = raw or {}
        values = {}

        for name, keys in cls.FIELD_KEYS.items():
            default = getattr(defaults, name)
            value = given = None
            for key in keys:
                if key in raw and raw[key] not in (None, ""):
                    given = raw[key]
                    value = _positive_number(given)
                    break
            if value is None:
                if given is not None:
                    logger.warning(f"Invalid {name} {given!r} - using default {default}")
                value = default
            values[name] = value

        return cls(**values)


def _positive_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(re.sub(r'[$,%\s]', '', str(value)))
    except (ValueError, TypeError):
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number
