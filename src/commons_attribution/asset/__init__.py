"""Asset entity and its value types."""

from .asset import Asset
from .licences import CC_ZERO, PUBLIC_DOMAIN, creative_commons, pick_licence
from .models import AssetOptions, Author, ImageInfo, Licence

__all__ = [
    "Asset", "AssetOptions", "Author", "ImageInfo", "Licence",
    "CC_ZERO", "PUBLIC_DOMAIN", "creative_commons", "pick_licence",
]
