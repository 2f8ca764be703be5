# ABOUTME: Attribution resolution for media files hosted on MediaWiki sites
# ABOUTME: Exposes the Asset entity, its value types and the Commons API resolver

from commons_attribution.api import AssetApi, CommonsApi
from commons_attribution.asset import Asset, AssetOptions, Author, ImageInfo, Licence
from commons_attribution.errors import (
    AttributionError,
    InvalidConstruction,
    InvalidInput,
    LookupFailure,
)

__all__ = [
    "Asset",
    "AssetApi",
    "AssetOptions",
    "AttributionError",
    "Author",
    "CommonsApi",
    "ImageInfo",
    "InvalidConstruction",
    "InvalidInput",
    "Licence",
    "LookupFailure",
]
