# ABOUTME: Parsers turning scraped wiki markup into Author and Licence values
# ABOUTME: Also normalizes user input (filenames, wiki page URLs, upload URLs) into file references

import re
from urllib.parse import parse_qs, unquote, urlsplit

from bs4 import BeautifulSoup, Comment, NavigableString, PageElement, Tag

from commons_attribution.asset.licences import licence_from_short_name, licence_from_template, pick_licence
from commons_attribution.asset.models import Author, Licence, html_to_text
from commons_attribution.errors import InvalidInput

# Localized names of the file namespace on the larger Wikimedia projects
FILE_NAMESPACES = {
    "file",
    "image",
    "datei",
    "bild",
    "fichier",
    "archivo",
    "imagen",
    "bestand",
    "immagine",
    "plik",
    "arquivo",
    "файл",
}

# Links trailing a signature, e.g. "Bob (talk | contribs)"
_USER_SUFFIX_LINK = re.compile(r"user[ _]talk:|special:contrib(?:utions|s)/", re.IGNORECASE)
_SUFFIX_SEPARATOR = re.compile(r"^[\s|·•,/-]*$")
_UNKNOWN_AUTHOR = re.compile(
    r"^(?:unknown(?: author| photographer)?|anonymous|author unknown|no machine-readable author.*)\.?$",
    re.IGNORECASE,
)

# Elements that separate one credit from the next
_BLOCK_ELEMENTS = {"p", "div", "li", "ul", "ol", "dl", "dd", "dt", "table", "tr", "td"}
_DROPPED_ELEMENTS = ["script", "style", "sup"]


def absolute_url(href: str, wiki_url: str) -> str:
    """Turn protocol- and site-relative links found in wiki markup into absolute URLs."""
    if href.startswith("//"):
        return f"http:{href}"
    if href.startswith("/"):
        return f"http:{wiki_url.rstrip('/')}{href}"
    return href


def _is_user_suffix_link(node: PageElement) -> bool:
    if not isinstance(node, Tag) or node.name != "a":
        return False
    return bool(_USER_SUFFIX_LINK.search(f"{node.get('href', '')} {node.get('title', '')}"))


def _is_suffix_filler(node: PageElement) -> bool:
    if isinstance(node, NavigableString):
        return bool(_SUFFIX_SEPARATOR.match(node))
    return _is_user_suffix_link(node)


def _strip_talk_links(soup: BeautifulSoup) -> None:
    """Remove user talk and contributions links, with their parentheses once nothing else is left inside."""
    for anchor in soup.find_all("a"):
        if anchor.decomposed or not _is_user_suffix_link(anchor):
            continue

        group = [anchor]
        opening = anchor.previous_sibling
        while opening is not None and _is_suffix_filler(opening):
            group.insert(0, opening)
            opening = opening.previous_sibling
        closing = anchor.next_sibling
        while closing is not None and _is_suffix_filler(closing):
            group.append(closing)
            closing = closing.next_sibling

        if not (
            isinstance(opening, NavigableString)
            and opening.rstrip().endswith("(")
            and isinstance(closing, NavigableString)
            and closing.lstrip().startswith(")")
        ):
            anchor.decompose()
            continue

        opening.replace_with(opening.rstrip()[:-1].rstrip())
        closing.replace_with(closing.lstrip()[1:])
        for node in group:
            if isinstance(node, Tag):
                node.decompose()
            else:
                node.extract()


def _clean_anchor(anchor: Tag, wiki_url: str) -> None:
    href = anchor.get("href")
    rel = anchor.get("rel")
    anchor.attrs = {}
    if href:
        anchor["href"] = absolute_url(href, wiki_url)
    if rel:
        anchor["rel"] = rel


def _flatten(soup: BeautifulSoup, wiki_url: str) -> None:
    """Reduce the markup to text, links and line breaks; block elements become line breaks."""
    for element in soup.find_all(_DROPPED_ELEMENTS):
        element.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for element in soup.find_all(True):
        if element.name == "a" and element.get("href"):
            _clean_anchor(element, wiki_url)
        elif element.name == "br":
            element.attrs = {}
        elif element.name in _BLOCK_ELEMENTS:
            element.insert_before(soup.new_tag("br"))
            element.insert_after(soup.new_tag("br"))
            element.unwrap()
        else:
            element.unwrap()


def _split_credits(nodes: list[PageElement]) -> list[list[PageElement]]:
    """Group top-level nodes into credits separated by line breaks or semicolons."""
    segments: list[list[PageElement]] = [[]]
    for node in nodes:
        if isinstance(node, Tag) and node.name == "br":
            segments.append([])
        elif isinstance(node, NavigableString) and ";" in node:
            first, *rest = str(node).split(";")
            segments[-1].append(NavigableString(first))
            segments.extend([NavigableString(part)] for part in rest)
        else:
            segments[-1].append(node)
    return segments


def _trim(nodes: list[PageElement]) -> list[PageElement]:
    """Drop surrounding whitespace of a credit, leaving inner markup untouched."""
    nodes = list(nodes)
    while nodes and isinstance(nodes[0], NavigableString) and not nodes[0].strip():
        nodes.pop(0)
    while nodes and isinstance(nodes[-1], NavigableString) and not nodes[-1].strip():
        nodes.pop()
    if nodes and isinstance(nodes[0], NavigableString):
        nodes[0] = NavigableString(nodes[0].lstrip())
    if nodes and isinstance(nodes[-1], NavigableString):
        nodes[-1] = NavigableString(nodes[-1].rstrip())
    return nodes


def extract_authors(html: str | None, wiki_url: str) -> list[Author]:
    """Extract the credited authors from an author credit fragment.

    A credit may be plain text, a single link or a mix of text and links; each of those is one
    author with its markup preserved. Several credits separated by semicolons, line breaks or
    block elements yield one author each, in source order. Credits stating the author is unknown
    yield no author.

    Args:
        html: Author credit markup, e.g. the extmetadata ``Artist`` value
        wiki_url: Protocol-relative wiki root used to absolutize site-relative links

    Returns:
        The authors in credit order, empty if none could be identified
    """
    if not html or not html.strip():
        return []

    soup = BeautifulSoup(html, "html.parser")
    _flatten(soup, wiki_url)
    _strip_talk_links(soup)

    authors: list[Author] = []
    for segment in _split_credits(list(soup.contents)):
        nodes = _trim(segment)
        if not nodes:
            continue
        author = Author(nodes)
        if not author.text or _UNKNOWN_AUTHOR.match(author.text):
            continue
        authors.append(author)
    return authors


def extract_licence(templates: list[str], short_name: str | None = None) -> Licence | None:
    """Resolve the licence of a file from its licence templates.

    The licence short name is only consulted when none of the templates is a known licence.

    Args:
        templates: Titles of the templates transcluded on the file page
        short_name: Licence short name markup, e.g. the extmetadata ``LicenseShortName`` value

    Returns:
        The preferred licence, None if no licence could be recognized
    """
    candidates = []
    for template in templates:
        licence = licence_from_template(template)
        if licence is not None:
            candidates.append(licence)

    if not candidates and short_name:
        licence = licence_from_short_name(html_to_text(short_name))
        if licence is not None:
            candidates.append(licence)

    return pick_licence(candidates)


def _with_file_namespace(name: str, required: bool = False) -> str:
    name = " ".join(name.replace("_", " ").split())
    if ":" in name:
        namespace, title = name.split(":", 1)
        if namespace.strip().lower() in FILE_NAMESPACES and title.strip():
            return f"{namespace.strip()}:{title.strip()}"
    if required:
        raise InvalidInput(f"'{name}' does not refer to a file")
    return f"File:{name}"


def _wiki_url_from_upload_path(parts: list[str]) -> str:
    family, project = parts[0], parts[1]
    if project == "commons":
        return "//commons.wikimedia.org/"
    return f"//{project}.{family}.org/"


def parse_file_reference(value: str, default_wiki_url: str) -> tuple[str, str]:
    """Turn a filename or a URL pointing at a file into a prefixed filename and its wiki root.

    Accepts ``Foo.jpg``, ``File:Foo.jpg``, file description page URLs (``/wiki/File:Foo.jpg``,
    ``index.php?title=File:Foo.jpg``), media viewer URLs (``#/media/File:Foo.jpg``) and
    upload.wikimedia.org file or thumbnail URLs.

    Raises:
        InvalidInput: If the value is empty or a URL that does not point at a file
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput("A filename or file URL is required")

    value = value.strip()
    if not re.match(r"^(?:https?:)?//", value, re.IGNORECASE):
        return _with_file_namespace(unquote(value)), default_wiki_url

    parsed = urlsplit(f"http:{value}" if value.startswith("//") else value)
    host = parsed.netloc.lower()

    if host == "upload.wikimedia.org":
        parts = [unquote(part) for part in parsed.path.split("/") if part]
        if len(parts) < 3:
            raise InvalidInput(f"'{value}' is not a file URL")
        if "thumb" in parts and len(parts) > parts.index("thumb") + 3:
            name = parts[parts.index("thumb") + 3]
        else:
            name = parts[-1]
        return _with_file_namespace(name), _wiki_url_from_upload_path(parts)

    wiki_url = f"//{host}/"
    fragment = unquote(parsed.fragment)
    if fragment.startswith("/media/"):
        return _with_file_namespace(fragment[len("/media/") :], required=True), wiki_url

    titles = parse_qs(parsed.query).get("title")
    if titles:
        return _with_file_namespace(titles[0], required=True), wiki_url

    if parsed.path.startswith("/wiki/"):
        return _with_file_namespace(unquote(parsed.path[len("/wiki/") :]), required=True), wiki_url

    raise InvalidInput(f"'{value}' is not a file URL")
