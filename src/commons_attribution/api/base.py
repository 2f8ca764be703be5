# ABOUTME: Protocol for the remote capabilities an Asset and its resolver depend on
# ABOUTME: Defines the raw metadata record fetched for one file before it is parsed

from typing import Protocol

from pydantic import BaseModel, Field

from commons_attribution.asset.models import ImageInfo


class AssetMetadata(BaseModel):
    """Raw, unparsed metadata of one file as fetched from the wiki."""

    prefixed_filename: str = Field(..., description="Canonical page title, e.g. File:Foo.jpg")
    title: str = Field(..., description="Human-readable title of the file")
    media_type: str = Field(..., description="Media type as reported by the wiki")
    wiki_url: str = Field(..., description="Protocol-relative root of the wiki the metadata came from")
    author_html: str | None = Field(None, description="Author credit markup (extmetadata Artist)")
    licence_templates: list[str] = Field(default_factory=list, description="Transcluded template titles")
    licence_short_name: str | None = Field(None, description="Licence short name (extmetadata LicenseShortName)")
    attribution_html: str | None = Field(None, description="Attribution markup requested by the uploader")
    file_url: str | None = Field(None, description="Direct URL of the original file")
    image_repository: str | None = Field(None, description="'local' or 'shared' when hosted on a central repository")

    @property
    def is_shared(self) -> bool:
        return self.image_repository == "shared"


class AssetApi(Protocol):
    """Remote capabilities needed to resolve assets and their image information."""

    def get_default_url(self) -> str:
        """Return the protocol-relative wiki root used when no wiki URL is given."""
        ...

    async def fetch_asset_metadata(self, filename: str, wiki_url: str | None = None) -> AssetMetadata:
        """Fetch the raw metadata of a file.

        Raises:
            LookupFailure: If the metadata could not be fetched or the file does not exist
        """
        ...

    async def get_image_info(self, prefixed_filename: str, size: int, wiki_url: str | None = None) -> ImageInfo:
        """Fetch the image information of a file scaled to the given width.

        Raises:
            LookupFailure: If the image information could not be fetched
        """
        ...
