"""
Content Optimizer.

Rewrites CMS HTML fragments for safer, friendlier rendering:

    <img>        loading="lazy", placeholder alt, responsive-image class
    <a href=..>  external links open in a new tab with rel="noopener noreferrer"
    <h1>..<h6>   id anchor derived from the heading text
    <table>      wrapped in div.table-responsive, gains the table class
    <pre>        gains the code-block class

The rules are independent of each other. optimize_content is a pure
function: it builds a fresh parse tree per call and shares no state, so it
is safe to call from concurrent requests.
"""

import re

from bs4 import BeautifulSoup, Tag
from bs4.exceptions import ParserRejectedMarkup

from worship_bff.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE_ALT = "图片"

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

_WHITESPACE_RUN = re.compile(r"\s+")


def heading_anchor(text: str) -> str:
    """Lower-case the text and replace every whitespace run with one hyphen."""
    return _WHITESPACE_RUN.sub("-", text.lower())


def is_external_href(href: str | None) -> bool:
    """An href is external unless it is missing, site-relative or a fragment."""
    return bool(href) and not href.startswith(("/", "#"))


def _add_class(tag: Tag, class_name: str) -> None:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    if class_name not in classes:
        tag["class"] = [*classes, class_name]


def _optimize_images(soup: BeautifulSoup, image_alt: str) -> None:
    for img in soup.find_all("img"):
        img["loading"] = "lazy"
        if not img.get("alt"):
            img["alt"] = image_alt
        _add_class(img, "responsive-image")


def _optimize_links(soup: BeautifulSoup) -> None:
    for link in soup.find_all("a"):
        if is_external_href(link.get("href")):
            link["target"] = "_blank"
            link["rel"] = "noopener noreferrer"
            _add_class(link, "external-link")


def _optimize_headings(soup: BeautifulSoup) -> None:
    for heading in soup.find_all(HEADING_TAGS):
        heading["id"] = heading_anchor(heading.get_text())


def _optimize_tables(soup: BeautifulSoup) -> None:
    for table in soup.find_all("table"):
        table.wrap(soup.new_tag("div", attrs={"class": "table-responsive"}))
        _add_class(table, "table")


def _optimize_code_blocks(soup: BeautifulSoup) -> None:
    for pre in soup.find_all("pre"):
        _add_class(pre, "code-block")


def optimize_content(html: str | None, image_alt: str = DEFAULT_IMAGE_ALT) -> str:
    """
    Apply all rewrite rules to an HTML fragment.

    Args:
        html: HTML fragment (not necessarily a full document)
        image_alt: Alt text for images that have none

    Returns:
        The rewritten fragment. Markup the parser rejects outright is
        returned unchanged; None becomes an empty string.
    """
    if not html:
        return ""

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        logger.warning("HTML rejected by parser, returning it unchanged", extra={"error": str(e)})
        return html

    _optimize_images(soup, image_alt)
    _optimize_links(soup)
    _optimize_headings(soup)
    _optimize_tables(soup)
    _optimize_code_blocks(soup)

    return str(soup)
