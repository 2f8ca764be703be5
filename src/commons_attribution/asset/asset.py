# ABOUTME: The Asset entity: one reusable media file with its credit, licence and URLs
# ABOUTME: Holds a per-size image info cache filled on demand through the API collaborator

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Literal, overload

from bs4 import BeautifulSoup

from commons_attribution.asset.models import AssetOptions, Author, ImageInfo, Licence
from commons_attribution.errors import InvalidConstruction, InvalidInput
from commons_attribution.utils.logging import get_logger

if TYPE_CHECKING:
    from commons_attribution.api.base import AssetApi

_NAMESPACE_PREFIX = re.compile(r"^[^:]+:")


class Asset:
    """Represents one media file that is to be reused.

    Args:
        prefixed_filename: Namespace-qualified filename, e.g. ``File:Foo.jpg``
        title: Human-readable title
        media_type: Media type as reported by the wiki (``BITMAP``, ``DRAWING``, ...)
        licence: The resolved licence or None when it could not be determined; always explicit
        api: Collaborator used for image info lookups and the default wiki URL
        options: Authors, attribution markup and wiki URL
        url: Direct URL of the file, used when no wiki URL is available

    Raises:
        InvalidConstruction: If a required parameter is missing or of the wrong type
    """

    def __init__(
        self,
        prefixed_filename: str,
        title: str,
        media_type: str,
        licence: Licence | None,
        api: AssetApi,
        options: AssetOptions | None = None,
        url: str | None = None,
    ):
        for name, value in (
            ("prefixed_filename", prefixed_filename),
            ("title", title),
            ("media_type", media_type),
        ):
            if not isinstance(value, str) or not value:
                raise InvalidConstruction(f"{name} needs to be a non-empty string")
        if licence is not None and not isinstance(licence, Licence):
            raise InvalidConstruction("licence needs to be a Licence or None")
        if api is None:
            raise InvalidConstruction("an API collaborator is required")
        if url is not None and not isinstance(url, str):
            raise InvalidConstruction("url needs to be a string or None")
        if options is not None and not isinstance(options, AssetOptions):
            raise InvalidConstruction("options need to be AssetOptions or None")

        options = options or AssetOptions()

        self._prefixed_filename = prefixed_filename
        self._title = title
        self._media_type = media_type
        self._licence = licence
        self._api = api
        self._authors: list[Author] = list(options.authors)
        self._attribution = options.attribution
        self._wiki_url = options.wiki_url or api.get_default_url()
        self._url = url
        self._image_info: dict[int, ImageInfo] = {}
        self.logger = get_logger(__name__)

    @property
    def prefixed_filename(self) -> str:
        return self._prefixed_filename

    @property
    def filename(self) -> str:
        """The filename without its namespace prefix."""
        return _NAMESPACE_PREFIX.sub("", self._prefixed_filename, count=1)

    def get_filename(self) -> str:
        return self.filename

    @property
    def wiki_url(self) -> str | None:
        return self._wiki_url

    def get_wiki_url(self) -> str | None:
        return self._wiki_url

    @property
    def direct_url(self) -> str | None:
        return self._url

    @direct_url.setter
    def direct_url(self, url: str | None) -> None:
        if url is not None and not isinstance(url, str):
            raise InvalidInput("URL needs to be a string or None")
        self._url = url

    def set_url(self, url: str | None) -> None:
        self.direct_url = url

    @property
    def url(self) -> str:
        """The URL to link the asset with; a wiki page URL takes precedence over the direct URL."""
        if self._wiki_url:
            return f"http:{self._wiki_url}wiki/{self._prefixed_filename}"
        if not self._url:
            return ""
        if self._url.startswith("http"):
            return self._url
        return f"http://{self._url}"

    def get_url(self) -> str:
        return self.url

    @property
    def title(self) -> str:
        return self._title

    @title.setter
    def title(self, title: str) -> None:
        if not isinstance(title, str):
            raise InvalidInput("title needs to be a string")
        self._title = title

    def set_title(self, title: str) -> None:
        self.title = title

    def get_title(self) -> str:
        return self._title

    @property
    def media_type(self) -> str:
        return self._media_type

    def get_media_type(self) -> str:
        return self._media_type

    @property
    def licence(self) -> Licence | None:
        return self._licence

    @licence.setter
    def licence(self, licence: Licence | None) -> None:
        if licence is not None and not isinstance(licence, Licence):
            raise InvalidInput("licence needs to be a Licence or None")
        self._licence = licence

    def get_licence(self) -> Licence | None:
        return self._licence

    @property
    def authors(self) -> list[Author]:
        return list(self._authors)

    @authors.setter
    def authors(self, authors: list[Author]) -> None:
        authors = list(authors)
        if not all(isinstance(author, Author) for author in authors):
            raise InvalidInput("authors need to be Author instances")
        self._authors = authors

    def set_authors(self, authors: list[Author]) -> None:
        self.authors = authors

    @overload
    def get_authors(self, format: Literal["list"] = "list") -> list[Author]: ...

    @overload
    def get_authors(self, format: Literal["string"]) -> str: ...

    def get_authors(self, format: str = "list") -> list[Author] | str:
        """Return the credited authors, or their plain texts joined by ``"; "`` for ``format="string"``."""
        if format == "string":
            return "; ".join(author.get_text() for author in self._authors)
        return list(self._authors)

    def get_attribution(self) -> BeautifulSoup | None:
        """Return a copy of the attribution markup; changing it does not affect the asset."""
        if self._attribution is None:
            return None
        return BeautifulSoup(self._attribution, "html.parser")

    async def get_image_info(self, size: int) -> ImageInfo:
        """Retrieve the image information for the given width, fetching it only once per size.

        Raises:
            LookupFailure: If the image information could not be fetched; nothing is cached then
        """
        cached = self._image_info.get(size)
        if cached is not None:
            self.logger.debug("Image info cache hit", filename=self._prefixed_filename, size=size)
            return cached

        image_info = await self._api.get_image_info(self._prefixed_filename, size, self._wiki_url)
        self._image_info[size] = image_info
        return image_info

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Asset):
            return NotImplemented

        other_authors = other.get_authors()
        if len(other_authors) != len(self._authors):
            return False
        if any(mine.get_text() != theirs.get_text() for mine, theirs in zip(self._authors, other_authors)):
            return False

        return (
            other.filename == self.filename
            and other.title == self.title
            and other.url == self.url
            and _licence_id(other.licence) == _licence_id(self.licence)
        )

    __hash__ = None  # type: ignore[assignment]

    def equals(self, other: Asset) -> bool:
        return self == other

    def __repr__(self) -> str:
        licence_id = _licence_id(self._licence)
        return f"Asset({self._prefixed_filename!r}, licence={licence_id!r}, authors={len(self._authors)})"


def _licence_id(licence: Licence | None) -> str | None:
    return licence.id if licence else None
