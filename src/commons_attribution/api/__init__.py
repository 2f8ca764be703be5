"""Remote lookups and the parsers behind them."""

from .base import AssetApi, AssetMetadata
from .client import CommonsApi
from .parsing import extract_authors, extract_licence, parse_file_reference

__all__ = [
    "AssetApi", "AssetMetadata", "CommonsApi",
    "extract_authors", "extract_licence", "parse_file_reference",
]
