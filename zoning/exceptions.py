"""Exceptions raised by the lot analysis engine and its data sources."""


class LotAnalysisError(Exception):
    """Base exception for lot analysis errors."""


class IncompletePropertyError(LotAnalysisError, ValueError):
    """A property is missing a field the analysis cannot run without."""

    def __init__(self, address: str, missing: list[str]):
        self.address = address
        self.missing = missing
        super().__init__(f"Cannot analyze {address or 'property'}: missing {', '.join(missing)}")


class ListingParseError(LotAnalysisError):
    """A listings document could not be read at all."""


class GISLookupError(LotAnalysisError):
    """A GIS service returned no usable data."""
