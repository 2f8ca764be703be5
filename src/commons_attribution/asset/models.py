# ABOUTME: Pydantic value types for credited authors, licences, image info and asset options
# ABOUTME: Authors compare by normalized plain text, licences by their stable id

from typing import Any, Literal

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag
from pydantic import BaseModel, ConfigDict, Field, computed_field

from commons_attribution.errors import InvalidInput


def normalize_text(text: str) -> str:
    """Collapse whitespace runs (including non-breaking spaces) into single spaces."""
    return " ".join(text.split())


def fragment_to_html(fragment: Any) -> str:
    """Serialize a markup fragment given as a string, a bs4 node or a sequence of bs4 nodes.

    Raises:
        InvalidInput: If the fragment is neither markup text nor bs4 nodes
    """
    if isinstance(fragment, NavigableString):
        return fragment.output_ready()
    if isinstance(fragment, Tag):
        return fragment.decode()
    if isinstance(fragment, str):
        return fragment
    if isinstance(fragment, (list, tuple)) and all(isinstance(node, PageElement) for node in fragment):
        return "".join(fragment_to_html(node) for node in fragment)
    raise InvalidInput(f"Expected a markup fragment, got {type(fragment).__name__}")


def html_to_text(html: str) -> str:
    """Derive the normalized plain text of a markup fragment."""
    if not html:
        return ""
    return normalize_text(BeautifulSoup(html, "html.parser").get_text())


class Author(BaseModel):
    """One credited creator of an asset.

    The rich form keeps the credit's inline markup (usually a link to a user page), the plain
    form is what gets compared and joined when a single display string is needed. Two authors
    with differently formatted markup but the same visible credit are equal.
    """

    model_config = ConfigDict(frozen=True)

    html: str = Field(..., description="Inline markup of the credit, links preserved")
    text: str = Field(..., description="Whitespace-normalized plain text of the credit")

    def __init__(self, fragment: Any = None, /, **data: Any):
        if fragment is None:
            fragment = data.get("html")
        if fragment is None:
            raise InvalidInput("An author needs a rich-text fragment; omit the author instead")
        html = fragment_to_html(fragment)
        super().__init__(html=html, text=html_to_text(html))

    def get_text(self) -> str:
        return self.text

    def get_html(self) -> BeautifulSoup:
        """Return a freshly parsed copy of the credit markup."""
        return BeautifulSoup(self.html, "html.parser")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Author):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text


class Licence(BaseModel):
    """A reuse-rights grant identified by a stable short code such as ``cc-by-sa-3.0``."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable short code, e.g. cc-by-sa-3.0, cc-zero, PD")
    name: str = Field(..., description="Display name, e.g. CC BY-SA 3.0")
    url: str | None = Field(None, description="Legal code URL if the licence has one")
    share_alike: bool = Field(default=False, description="Whether derivatives must carry the same licence")
    version: str | None = Field(None, description="Licence version, e.g. 3.0")
    jurisdiction: str | None = Field(None, description="Country code of a ported licence")
    group: Literal["pd", "cc0", "cc"] = Field(default="cc", description="Licence family")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def version_ordinal(self) -> float:
        """Numeric form of the version used when breaking ties, 0.0 for unversioned licences."""
        if not self.version:
            return 0.0
        try:
            return float(self.version)
        except ValueError:
            return 0.0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Licence):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name


class ImageInfo(BaseModel):
    """Size-specific rendering metadata of an asset as returned by the MediaWiki API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: str = Field(..., description="URL of the original file")
    width: int | None = Field(None, description="Width of the original file in pixels")
    height: int | None = Field(None, description="Height of the original file in pixels")
    thumb_url: str | None = Field(None, alias="thumburl", description="URL of the scaled rendition")
    thumb_width: int | None = Field(None, alias="thumbwidth")
    thumb_height: int | None = Field(None, alias="thumbheight")
    description_url: str | None = Field(None, alias="descriptionurl", description="File description page")
    mime: str | None = Field(None, description="MIME type of the original file")


class AssetOptions(BaseModel):
    """Optional attributes of an Asset, passed as one explicit structure."""

    authors: list[Author] = Field(default_factory=list, description="Credited authors in credit order")
    attribution: str | None = Field(None, description="Attribution markup requested by the uploader")
    wiki_url: str | None = Field(None, description="Protocol-relative wiki root, e.g. //commons.wikimedia.org/")
