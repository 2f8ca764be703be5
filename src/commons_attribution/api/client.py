# ABOUTME: MediaWiki action API client resolving filenames into fully populated Assets
# ABOUTME: One metadata request per lookup; failures surface as LookupFailure, never retried here

from pathlib import PurePosixPath
from typing import Any

import httpx
from pydantic import ValidationError

from commons_attribution.api.base import AssetMetadata
from commons_attribution.api.parsing import extract_authors, extract_licence, parse_file_reference
from commons_attribution.asset import Asset, AssetOptions, ImageInfo
from commons_attribution.asset.models import html_to_text
from commons_attribution.config import Config, get_config
from commons_attribution.errors import InvalidInput, LookupFailure
from commons_attribution.tracking import EventSink, NullEventSink
from commons_attribution.utils.logging import get_logger, log_api_call

# extmetadata fields the resolver reads
EXTMETADATA_FIELDS = ["Artist", "LicenseShortName", "Attribution", "ObjectName"]


def _extmetadata_value(extmetadata: dict[str, Any], field: str) -> str | None:
    value = (extmetadata.get(field) or {}).get("value")
    if value is None:
        return None
    return str(value)


def _title_from_filename(prefixed_filename: str) -> str:
    """``File:Foo bar.jpg`` -> ``Foo bar``"""
    filename = prefixed_filename.split(":", 1)[-1]
    return PurePosixPath(filename).stem or filename


class CommonsApi:
    """Resolves files hosted on a MediaWiki site (Wikimedia Commons by default) into Assets.

    The httpx client can be injected, otherwise one is created from the configuration. An
    EventSink receives a tracking event for every settled lookup.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: Config | None = None,
        event_sink: EventSink | None = None,
        default_wiki_url: str | None = None,
    ):
        self.config = config or get_config()
        self.default_wiki_url = default_wiki_url or self.config.default_wiki_url
        self.http_client = client or httpx.AsyncClient(  # Allow for dependency injection
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.request_timeout,
        )
        self.event_sink = event_sink or NullEventSink()
        self.logger = get_logger(__name__)

    async def __aenter__(self) -> "CommonsApi":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.http_client.aclose()

    def get_default_url(self) -> str:
        return self.default_wiki_url

    @staticmethod
    def api_url(wiki_url: str) -> str:
        """``//commons.wikimedia.org/`` -> ``https://commons.wikimedia.org/w/api.php``"""
        return f"https:{wiki_url}w/api.php"

    async def get_asset(self, filename: str) -> Asset:
        """Look up a file and assemble its Asset.

        Args:
            filename: Filename with or without namespace prefix, or a URL pointing at the file

        Returns:
            The asset with its authors, licence (None if undetermined), title, media type and URLs

        Raises:
            InvalidInput: If the filename is empty or the URL does not point at a file
            LookupFailure: If the metadata could not be fetched or the file does not exist
        """
        prefixed_filename, wiki_url = parse_file_reference(filename, self.default_wiki_url)

        try:
            metadata = await self.fetch_asset_metadata(prefixed_filename, wiki_url)
            if metadata.is_shared and wiki_url != self.default_wiki_url:
                # The file lives on the central repository, which also holds its licence templates
                self.logger.debug(
                    "File hosted on shared repository", filename=prefixed_filename, wiki_url=wiki_url
                )
                shared_filename = f"File:{metadata.prefixed_filename.split(':', 1)[-1]}"
                metadata = await self.fetch_asset_metadata(shared_filename, self.default_wiki_url)
        except LookupFailure:
            self.event_sink.track_event("asset", "lookup-failure", prefixed_filename)
            raise

        authors = extract_authors(metadata.author_html, metadata.wiki_url)
        licence = extract_licence(metadata.licence_templates, metadata.licence_short_name)

        self.logger.info(
            "Resolved asset",
            filename=metadata.prefixed_filename,
            authors=len(authors),
            licence=licence.id if licence else None,
            candidate_templates=len(metadata.licence_templates),
        )
        self.event_sink.track_event("asset", "lookup-success", metadata.prefixed_filename)

        return Asset(
            metadata.prefixed_filename,
            metadata.title,
            metadata.media_type,
            licence,
            self,
            AssetOptions(authors=authors, attribution=metadata.attribution_html, wiki_url=metadata.wiki_url),
            url=metadata.file_url,
        )

    @log_api_call("mediawiki-metadata")
    async def fetch_asset_metadata(self, filename: str, wiki_url: str | None = None) -> AssetMetadata:
        """Fetch the raw metadata of a file: credit markup, licence templates, title and media type."""
        wiki_url = wiki_url or self.default_wiki_url
        payload = await self._query(
            wiki_url,
            {
                "titles": filename,
                "prop": "imageinfo|templates",
                "iiprop": "extmetadata|mediatype|url",
                "iiextmetadatafilter": "|".join(EXTMETADATA_FIELDS),
                "tlnamespace": "10",
                "tllimit": "max",
                "redirects": "1",
            },
            filename,
        )
        page, image_info = self._file_page(payload, filename)
        extmetadata = image_info.get("extmetadata") or {}
        prefixed_filename = page.get("title") or filename

        return AssetMetadata(
            prefixed_filename=prefixed_filename,
            title=html_to_text(_extmetadata_value(extmetadata, "ObjectName") or "")
            or _title_from_filename(prefixed_filename),
            media_type=image_info.get("mediatype") or "UNKNOWN",
            wiki_url=wiki_url,
            author_html=_extmetadata_value(extmetadata, "Artist"),
            licence_templates=[template["title"] for template in page.get("templates", []) if "title" in template],
            licence_short_name=_extmetadata_value(extmetadata, "LicenseShortName"),
            attribution_html=_extmetadata_value(extmetadata, "Attribution"),
            file_url=image_info.get("url"),
            image_repository=page.get("imagerepository"),
        )

    @log_api_call("mediawiki-imageinfo")
    async def get_image_info(self, prefixed_filename: str, size: int, wiki_url: str | None = None) -> ImageInfo:
        """Fetch the image information of a file scaled to ``size`` pixels width."""
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise InvalidInput("size needs to be a positive number of pixels")

        payload = await self._query(
            wiki_url or self.default_wiki_url,
            {
                "titles": prefixed_filename,
                "prop": "imageinfo",
                "iiprop": "url|size|mime",
                "iiurlwidth": str(size),
            },
            prefixed_filename,
            size,
        )
        _, image_info = self._file_page(payload, prefixed_filename, size)

        try:
            return ImageInfo.model_validate(image_info)
        except ValidationError as exc:
            raise LookupFailure(
                f"Unexpected image info for {prefixed_filename}", prefixed_filename, size=size
            ) from exc

    async def _query(
        self, wiki_url: str, params: dict[str, str], filename: str, size: int | None = None
    ) -> dict[str, Any]:
        """Run an ``action=query`` request and return its decoded payload."""
        try:
            response = await self.http_client.get(
                self.api_url(wiki_url),
                params={"action": "query", "format": "json", "formatversion": "2", **params},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            raise LookupFailure(
                f"Lookup of {filename} failed with HTTP {status_code}",
                filename,
                size=size,
                status_code=status_code,
                transient=status_code >= 500 or status_code == 429,
            ) from exc
        except httpx.TransportError as exc:
            raise LookupFailure(
                f"Lookup of {filename} failed: {exc}", filename, size=size, transient=True
            ) from exc
        except ValueError as exc:
            raise LookupFailure(f"Lookup of {filename} returned invalid JSON", filename, size=size) from exc

        if not isinstance(payload, dict):
            raise LookupFailure(f"Lookup of {filename} returned an unexpected response", filename, size=size)

        error = payload.get("error")
        if error:
            raise LookupFailure(
                f"Lookup of {filename} failed: {error.get('code')}: {error.get('info')}", filename, size=size
            )
        return payload

    @staticmethod
    def _file_page(
        payload: dict[str, Any], filename: str, size: int | None = None
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Pick the queried page and its first image info record out of a query response."""
        pages = (payload.get("query") or {}).get("pages") or []
        if not pages:
            raise LookupFailure(f"No page returned for {filename}", filename, size=size)

        page = pages[0]
        if page.get("invalid") or (page.get("missing") and not page.get("known")):
            raise LookupFailure(f"File {filename} does not exist", filename, size=size)

        image_infos = page.get("imageinfo") or []
        if not image_infos:
            raise LookupFailure(f"No image information for {filename}", filename, size=size)
        return page, image_infos[0]
