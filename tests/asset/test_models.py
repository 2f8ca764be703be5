# ABOUTME: Tests for the Author, Licence and ImageInfo value types
# ABOUTME: Validates plain-text derivation, structural equality and input validation

import pytest
from bs4 import BeautifulSoup, NavigableString
from pydantic import ValidationError

from commons_attribution.asset import CC_ZERO, PUBLIC_DOMAIN, Author, ImageInfo, Licence, creative_commons
from commons_attribution.errors import InvalidInput


class TestAuthor:
    """Test Author construction and text derivation."""

    def test_plain_text_author(self):
        author = Author("NASA / GSFC / Arizona State Univ. / Lunar Reconnaissance Orbiter")

        assert author.get_text() == "NASA / GSFC / Arizona State Univ. / Lunar Reconnaissance Orbiter"
        assert author.html == "NASA / GSFC / Arizona State Univ. / Lunar Reconnaissance Orbiter"

    def test_linked_author_text_is_anchor_text(self):
        author = Author('<a href="http://commons.wikimedia.org/wiki/User:Fleyx24">Fleyx24</a>')

        assert author.get_text() == "Fleyx24"
        assert author.html == '<a href="http://commons.wikimedia.org/wiki/User:Fleyx24">Fleyx24</a>'

    def test_text_is_whitespace_normalized(self):
        author = Author("©&nbsp;<a href='x'>Ralf   Roletschek</a>\n - studio ")

        assert author.get_text() == "© Ralf Roletschek - studio"

    def test_get_text_is_idempotent(self):
        author = Author("<b>Jane</b>\t Doe")

        assert author.get_text() == author.get_text() == "Jane Doe"

    def test_missing_fragment_is_rejected(self):
        with pytest.raises(InvalidInput):
            Author(None)

        with pytest.raises(InvalidInput):
            Author()

    def test_wrong_fragment_type_is_rejected(self):
        with pytest.raises(InvalidInput):
            Author(42)

    def test_accepts_bs4_nodes(self):
        soup = BeautifulSoup('<a href="http://example.org/">Jane</a> &amp; John', "html.parser")

        assert Author(soup.a).html == '<a href="http://example.org/">Jane</a>'
        assert Author(list(soup.contents)).get_text() == "Jane & John"

    def test_navigable_string_is_escaped(self):
        author = Author(NavigableString("Smith & Sons"))

        assert author.html == "Smith &amp; Sons"
        assert author.get_text() == "Smith & Sons"

    def test_equality_ignores_markup(self):
        linked = Author('<a href="http://commons.wikimedia.org/wiki/User:Jane">Jane Doe</a>')
        plain = Author("Jane  Doe")

        assert linked == plain
        assert hash(linked) == hash(plain)
        assert linked != Author("John Doe")

    def test_get_html_returns_a_copy(self):
        author = Author('<a href="http://example.org/">Jane</a>')

        fragment = author.get_html()
        fragment.a.string = "Mallory"

        assert author.get_text() == "Jane"
        assert author.get_html().a.string == "Jane"

    def test_author_is_immutable(self):
        author = Author("Jane")

        with pytest.raises(ValidationError):
            author.text = "Mallory"


class TestLicence:
    """Test Licence values and their tie-break attributes."""

    def test_creative_commons_unported(self):
        licence = creative_commons("3.0", share_alike=True)

        assert licence.id == "cc-by-sa-3.0"
        assert licence.name == "CC BY-SA 3.0"
        assert licence.url == "https://creativecommons.org/licenses/by-sa/3.0/legalcode"
        assert licence.share_alike is True
        assert licence.version_ordinal == 3.0
        assert licence.jurisdiction is None

    def test_creative_commons_ported(self):
        licence = creative_commons("2.0", jurisdiction="DE")

        assert licence.id == "cc-by-2.0-de"
        assert licence.name == "CC BY 2.0 DE"
        assert licence.url == "https://creativecommons.org/licenses/by/2.0/de/legalcode"
        assert licence.share_alike is False
        assert licence.jurisdiction == "de"

    def test_unversioned_licence_ordinal(self):
        assert PUBLIC_DOMAIN.version_ordinal == 0.0
        assert CC_ZERO.version_ordinal == 1.0

    def test_equality_by_id(self):
        assert creative_commons("4.0") == Licence(id="cc-by-4.0", name="Attribution 4.0")
        assert creative_commons("4.0") != creative_commons("4.0", share_alike=True)
        assert len({creative_commons("4.0"), creative_commons("4.0")}) == 1


class TestImageInfo:
    """Test parsing of API image info records."""

    def test_from_api_record(self):
        info = ImageInfo.model_validate(
            {
                "thumburl": "https://upload.wikimedia.org/thumb/Foo.jpg/320px-Foo.jpg",
                "thumbwidth": 320,
                "thumbheight": 240,
                "url": "https://upload.wikimedia.org/Foo.jpg",
                "descriptionurl": "https://commons.wikimedia.org/wiki/File:Foo.jpg",
                "width": 4000,
                "height": 3000,
                "mime": "image/jpeg",
                "responsiveUrls": {},
            }
        )

        assert info.thumb_url == "https://upload.wikimedia.org/thumb/Foo.jpg/320px-Foo.jpg"
        assert info.thumb_width == 320
        assert info.width == 4000
        assert info.description_url == "https://commons.wikimedia.org/wiki/File:Foo.jpg"

    def test_populate_by_field_name(self):
        info = ImageInfo(url="https://example.org/Foo.jpg", thumb_url="https://example.org/320px-Foo.jpg")

        assert info.thumb_url == "https://example.org/320px-Foo.jpg"
