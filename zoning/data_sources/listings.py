"""
Listings data source - properties from CSV exports (Zillow/Redfin style or MLS).
"""

import csv
import io
import logging
import re
from typing import Iterable, Optional

from ..exceptions import ListingParseError
from ..geometry import parse_dimensions
from ..property import LotDimensions, Property
from ..rules.districts import DEFAULT_DISTRICT

logger = logging.getLogger(__name__)

ACRE_SQFT = 43_560

# Candidate column names per field, tried in order
PRICE_FIELDS = ["price", "list price", "asking price", "sale price"]
LOT_SIZE_FIELDS = ["lot size", "lot size sqft", "lot sq ft", "lot area", "land area"]
ACREAGE_FIELDS = ["acres", "lot acres", "lot size acres", "acreage"]
ADDRESS_FIELDS = ["address", "street address", "property address", "full address"]
ZONING_FIELDS = ["zoning", "zone", "zoning code"]
LIVABLE_AREA_FIELDS = ["square feet", "sqft", "living area", "livable area", "building sqft"]
BEDROOM_FIELDS = ["bedrooms", "beds"]
BATHROOM_FIELDS = ["bathrooms", "baths"]
YEAR_BUILT_FIELDS = ["year built", "yearbuilt"]
WIDTH_FIELDS = ["lot width", "frontage", "lot frontage"]
DEPTH_FIELDS = ["lot depth", "depth"]
DESCRIPTION_FIELDS = ["lot dimensions", "lot description", "description", "remarks", "public remarks"]

# Upper acreage bound -> inferred zoning when an MLS row has none
ACREAGE_ZONING_BANDS = [
    (0.25, "SF-2"),
    (0.5, "SF-3"),
    (1.0, "SF-5"),
]
LARGE_LOT_ZONING = "SF-6"


class ListingsReader:
    """Read property listings from CSV text.

    Args:
        mls: Treat the file as an MLS export (acreage lot sizes, inferred zoning)
    """

    def __init__(self, mls: bool = False):
        self.mls = mls
        self.source = "mls" if mls else "csv"

    def read_file(self, path: str) -> list[Property]:
        """Read listings from a CSV file on disk."""
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return self.read(f.read())

    def read(self, text: str) -> list[Property]:
        """Parse CSV text into properties.

        Rows without an address, price or lot size are dropped.

        Raises:
            ListingParseError: if the text has no header or no data rows
        """
        reader = csv.reader(io.StringIO(text), skipinitialspace=True)
        rows = [r for r in reader if any(v.strip() for v in r)]
        if len(rows) < 2:
            raise ListingParseError("CSV must have a header row and at least one data row")

        headers = [self._normalize_header(h) for h in rows[0]]

        properties = []
        skipped = 0
        for values in rows[1:]:
            if len(values) != len(headers):
                skipped += 1
                continue
            row = dict(zip(headers, (v.strip() for v in values)))
            prop = self.parse_row(row)
            if prop is None:
                skipped += 1
                continue
            properties.append(prop)

        logger.info(f"Read {len(properties)} {self.source} listings ({skipped} rows skipped)")
        return properties

    def parse_row(self, row: dict) -> Optional[Property]:
        """Convert one row (normalized headers) into a Property, or None if unusable."""
        address = self._first_text(row, ADDRESS_FIELDS)
        price = self._first_number(row, PRICE_FIELDS)
        lot_area = self._lot_area(row)
        if not address or not price or not lot_area:
            return None

        return Property(
            address=address.replace('"', ''),
            price=price,
            lot_area=lot_area,
            zoning_code=self._zoning(row, lot_area),
            livable_area=self._first_number(row, LIVABLE_AREA_FIELDS),
            bedrooms=self._safe_int(self._first_number(row, BEDROOM_FIELDS)),
            bathrooms=self._first_number(row, BATHROOM_FIELDS),
            year_built=self._safe_int(self._first_number(row, YEAR_BUILT_FIELDS)),
            lot_dimensions=self._dimensions(row),
            description=self._description(row, lot_area),
            data_source=self.source,
        )

    def _lot_area(self, row: dict) -> Optional[float]:
        lot_area = self._first_number(row, LOT_SIZE_FIELDS)
        if lot_area is None and self.mls:
            acres = self._first_number(row, ACREAGE_FIELDS)
            if acres is not None:
                lot_area = acres * ACRE_SQFT
        return lot_area

    def _zoning(self, row: dict, lot_area: float) -> str:
        zoning = self._first_text(row, ZONING_FIELDS)
        if zoning:
            return zoning.upper()
        if self.mls:
            return infer_zoning_from_acreage(lot_area / ACRE_SQFT)
        return DEFAULT_DISTRICT

    def _dimensions(self, row: dict) -> Optional[LotDimensions]:
        width = self._first_number(row, WIDTH_FIELDS)
        depth = self._first_number(row, DEPTH_FIELDS)
        if width and depth:
            return LotDimensions(width=width, depth=depth, provenance="explicit")
        return None

    def _description(self, row: dict, lot_area: float) -> Optional[str]:
        """Free text to mine for "NxM" dimensions - the first column that parses."""
        texts = [row[f] for f in DESCRIPTION_FIELDS if row.get(f)]
        for text in texts:
            if parse_dimensions(text, lot_area):
                return text
        return texts[0] if texts else None

    def _normalize_header(self, header: str) -> str:
        header = header.replace('"', '').replace('﻿', '').strip().lower()
        return re.sub(r'[\s_]+', ' ', header)

    def _first_text(self, row: dict, candidates: Iterable[str]) -> Optional[str]:
        for name in candidates:
            value = row.get(name)
            if value:
                return value
        return None

    def _first_number(self, row: dict, candidates: Iterable[str]) -> Optional[float]:
        for name in candidates:
            number = self._safe_float(row.get(name))
            if number is not None:
                return number
        return None

    def _safe_float(self, value) -> Optional[float]:
        if value is None:
            return None
        cleaned = re.sub(r'[$,\s]', '', str(value))
        cleaned = re.sub(r'(?i)(sq\.?ft|sf|acres?)$', '', cleaned)
        try:
            return float(cleaned) if cleaned else None
        except (ValueError, TypeError):
            return None

    def _safe_int(self, value) -> Optional[int]:
        try:
            return int(value) if value is not None else None
        except (ValueError, TypeError, OverflowError):
            return None


def infer_zoning_from_acreage(acres: float) -> str:
    """Guess a single-family district from lot acreage."""
    for upper_bound, code in ACREAGE_ZONING_BANDS:
        if acres < upper_bound:
            return code
    return LARGE_LOT_ZONING


def read_listings(text: str, mls: bool = False) -> list[Property]:
    """Parse listings CSV text."""
    return ListingsReader(mls=mls).read(text)
