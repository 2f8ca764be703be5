# ABOUTME: Tests for the Asset entity: identity, URL resolution, authors, equality
# ABOUTME: Uses an in-memory API double to verify the per-size image info cache

import asyncio

import pytest

from commons_attribution.asset import Asset, AssetOptions, Author, ImageInfo, creative_commons
from commons_attribution.errors import InvalidConstruction, InvalidInput, LookupFailure


class FakeApi:
    """API double recording image info requests; fails the first ``failures`` calls."""

    def __init__(self, default_url: str = "//commons.example.org/", failures: int = 0):
        self.default_url = default_url
        self.failures = failures
        self.calls: list[tuple[str, int, str | None]] = []

    def get_default_url(self) -> str:
        return self.default_url

    async def fetch_asset_metadata(self, filename, wiki_url=None):
        raise NotImplementedError

    async def get_image_info(self, prefixed_filename: str, size: int, wiki_url: str | None = None) -> ImageInfo:
        self.calls.append((prefixed_filename, size, wiki_url))
        await asyncio.sleep(0)
        if self.failures:
            self.failures -= 1
            raise LookupFailure("Lookup failed", prefixed_filename, size=size, transient=True)
        return ImageInfo(
            url=f"https://upload.example.org/{prefixed_filename}",
            thumb_url=f"https://upload.example.org/{size}px-{prefixed_filename}",
            thumb_width=size,
        )


def _make_asset(api=None, **overrides) -> Asset:
    arguments = {
        "prefixed_filename": "File:Foo.jpg",
        "title": "Foo",
        "media_type": "BITMAP",
        "licence": creative_commons("3.0", share_alike=True),
        "authors": [Author("Jane Doe"), Author('<a href="http://example.org/">John Roe</a>')],
        "wiki_url": "//commons.example.org/",
        "url": None,
    }
    arguments.update(overrides)
    return Asset(
        arguments["prefixed_filename"],
        arguments["title"],
        arguments["media_type"],
        arguments["licence"],
        api or FakeApi(),
        AssetOptions(authors=arguments["authors"], wiki_url=arguments["wiki_url"]),
        url=arguments["url"],
    )


class TestConstruction:
    """Test required identity fields."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("prefixed_filename", ""),
            ("prefixed_filename", None),
            ("title", ""),
            ("media_type", None),
            ("licence", "cc-by-sa-3.0"),
        ],
    )
    def test_invalid_identity_is_rejected(self, field, value):
        with pytest.raises(InvalidConstruction):
            _make_asset(**{field: value})

    def test_missing_api_is_rejected(self):
        with pytest.raises(InvalidConstruction):
            Asset("File:Foo.jpg", "Foo", "BITMAP", None, None)

    @pytest.mark.parametrize("options", ["//commons.wikimedia.org/", {"authors": []}])
    def test_options_of_wrong_type_are_rejected(self, options):
        with pytest.raises(InvalidConstruction):
            Asset("File:Foo.jpg", "Foo", "BITMAP", None, FakeApi(), options)

    def test_licence_may_be_undetermined(self):
        asset = _make_asset(licence=None)

        assert asset.get_licence() is None

    def test_defaults_without_options(self):
        asset = Asset("File:Foo.jpg", "Foo", "BITMAP", None, FakeApi(default_url="//default.example.org/"))

        assert asset.get_authors() == []
        assert asset.get_attribution() is None
        assert asset.get_wiki_url() == "//default.example.org/"


class TestFilename:
    """Test namespace prefix stripping."""

    @pytest.mark.parametrize(
        "prefixed,expected",
        [
            ("File:Foo.jpg", "Foo.jpg"),
            ("Datei:Wien Karlsplatz3.jpg", "Wien Karlsplatz3.jpg"),
            ("File:Ratio 16:9.png", "Ratio 16:9.png"),
            ("Foo.jpg", "Foo.jpg"),
        ],
    )
    def test_get_filename(self, prefixed, expected):
        asset = _make_asset(prefixed_filename=prefixed)

        assert asset.get_filename() == expected
        assert asset.filename == expected


class TestUrl:
    """Test resolution of the reuse URL."""

    def test_wiki_url_takes_precedence(self):
        asset = _make_asset(url="http://example.org/foo.jpg")

        assert asset.get_url() == "http://commons.example.org/wiki/File:Foo.jpg"

    def test_direct_url_without_scheme(self):
        asset = _make_asset(api=FakeApi(default_url=""), wiki_url=None, url="example.org/foo.jpg")

        assert asset.get_url() == "http://example.org/foo.jpg"

    def test_direct_url_with_scheme(self):
        asset = _make_asset(api=FakeApi(default_url=""), wiki_url=None, url="http://example.org/foo.jpg")

        assert asset.get_url() == "http://example.org/foo.jpg"

    def test_no_url(self):
        asset = _make_asset(api=FakeApi(default_url=""), wiki_url=None)

        assert asset.get_url() == ""

    def test_set_url(self):
        asset = _make_asset(api=FakeApi(default_url=""), wiki_url=None)

        asset.set_url("https://example.org/bar.jpg")
        assert asset.get_url() == "https://example.org/bar.jpg"

        asset.set_url(None)
        assert asset.get_url() == ""

    def test_set_url_rejects_other_types(self):
        asset = _make_asset(api=FakeApi(default_url=""), wiki_url=None, url="example.org/foo.jpg")

        with pytest.raises(InvalidInput):
            asset.set_url(42)

        assert asset.get_url() == "http://example.org/foo.jpg"


class TestTitle:
    """Test title updates."""

    def test_set_title(self):
        asset = _make_asset()

        asset.set_title("Bar")

        assert asset.get_title() == "Bar"

    def test_set_title_rejects_non_strings(self):
        asset = _make_asset()

        with pytest.raises(InvalidInput):
            asset.set_title(None)

        assert asset.get_title() == "Foo"


class TestAuthors:
    """Test author access and replacement."""

    def test_get_authors_list(self):
        asset = _make_asset()

        assert [author.get_text() for author in asset.get_authors()] == ["Jane Doe", "John Roe"]

    def test_get_authors_string_keeps_order(self):
        asset = _make_asset(authors=[Author("Zoe"), Author("Adam"), Author("Mia")])

        assert asset.get_authors(format="string") == "Zoe; Adam; Mia"

    def test_returned_list_does_not_alias_state(self):
        asset = _make_asset()

        asset.get_authors().clear()

        assert len(asset.get_authors()) == 2

    def test_set_authors_replaces_wholesale(self):
        asset = _make_asset()

        asset.set_authors([Author("Someone Else")])

        assert asset.get_authors(format="string") == "Someone Else"

    def test_set_authors_rejects_non_authors(self):
        asset = _make_asset()

        with pytest.raises(InvalidInput):
            asset.set_authors(["Jane Doe"])

        assert len(asset.get_authors()) == 2


class TestAttribution:
    """Test copy-on-read of the attribution markup."""

    def test_attribution_is_copied(self):
        asset = Asset(
            "File:Foo.jpg",
            "Foo",
            "BITMAP",
            None,
            FakeApi(),
            AssetOptions(attribution='Photo: <a href="http://example.org/">Jane Doe</a>'),
        )

        attribution = asset.get_attribution()
        attribution.a.string = "Mallory"

        assert asset.get_attribution().a.string == "Jane Doe"
        assert asset.get_attribution().get_text() == "Photo: Jane Doe"


class TestImageInfo:
    """Test the per-size image info cache."""

    @pytest.mark.asyncio
    async def test_fetches_once_per_size(self):
        api = FakeApi()
        asset = _make_asset(api=api)

        first = await asset.get_image_info(320)
        second = await asset.get_image_info(320)

        assert first is second
        assert api.calls == [("File:Foo.jpg", 320, "//commons.example.org/")]

    @pytest.mark.asyncio
    async def test_distinct_sizes_are_fetched_separately(self):
        api = FakeApi()
        asset = _make_asset(api=api)

        small, large = await asyncio.gather(asset.get_image_info(120), asset.get_image_info(800))

        assert small.thumb_width == 120
        assert large.thumb_width == 800
        assert sorted(size for _, size, _ in api.calls) == [120, 800]

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self):
        api = FakeApi(failures=1)
        asset = _make_asset(api=api)

        with pytest.raises(LookupFailure):
            await asset.get_image_info(320)

        info = await asset.get_image_info(320)

        assert info.thumb_width == 320
        assert len(api.calls) == 2


class TestEquality:
    """Test asset equality."""

    def test_identical_inputs_are_equal(self):
        assert _make_asset() == _make_asset()
        assert _make_asset().equals(_make_asset())

    @pytest.mark.parametrize(
        "overrides",
        [
            {"prefixed_filename": "File:Bar.jpg"},
            {"title": "Bar"},
            {"authors": [Author("Jane Doe")]},
            {"authors": [Author("John Roe"), Author("Jane Doe")]},
            {"licence": creative_commons("3.0")},
            {"licence": None},
            {"wiki_url": "//other.example.org/"},
        ],
    )
    def test_changing_one_field_makes_unequal(self, overrides):
        assert _make_asset() != _make_asset(**overrides)

    def test_authors_compare_by_text(self):
        linked = _make_asset(authors=[Author('<a href="http://example.org/">Jane Doe</a>')])
        plain = _make_asset(authors=[Author("Jane Doe")])

        assert linked == plain

    def test_undetermined_licences_are_equal(self):
        assert _make_asset(licence=None) == _make_asset(licence=None)

    def test_not_equal_to_other_types(self):
        assert _make_asset() != "File:Foo.jpg"
