# External collaborators that produce Property records
from .listings import ListingsReader, read_listings
from .austin_gis import AustinGISClient, ParcelInfo

__all__ = [
    "ListingsReader",
    "read_listings",
    "AustinGISClient",
    "ParcelInfo",
]
