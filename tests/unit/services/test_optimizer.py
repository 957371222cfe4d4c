"""
Unit Tests for the Content Optimizer.
"""

from bs4 import BeautifulSoup

from worship_bff.services.optimizer import (
    heading_anchor,
    is_external_href,
    optimize_content,
)


def _parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestImages:
    """Tests for <img> rewriting."""

    def test_adds_lazy_loading_alt_and_class(self):
        """Should add loading, placeholder alt and responsive class."""
        soup = _parse(optimize_content('<p><img src="a.png"></p>'))
        img = soup.find("img")

        assert img["loading"] == "lazy"
        assert img["alt"] == "图片"
        assert img["class"] == ["responsive-image"]

    def test_keeps_existing_alt(self):
        """Should not replace a non-empty alt."""
        img = _parse(optimize_content('<img src="a.png" alt="Choir">')).find("img")
        assert img["alt"] == "Choir"

    def test_replaces_empty_alt(self):
        """Should treat an empty alt like a missing one."""
        img = _parse(optimize_content('<img src="a.png" alt="">')).find("img")
        assert img["alt"] == "图片"

    def test_overwrites_eager_loading(self):
        """Should force lazy loading even when eager was requested."""
        img = _parse(optimize_content('<img src="a.png" loading="eager">')).find("img")
        assert img["loading"] == "lazy"

    def test_keeps_existing_classes_without_duplicates(self):
        """Should append the class once."""
        html = '<img src="a.png" class="wide responsive-image">'
        img = _parse(optimize_content(html)).find("img")
        assert img["class"] == ["wide", "responsive-image"]

    def test_custom_alt_text(self):
        """Should use the configured placeholder alt."""
        img = _parse(optimize_content('<img src="a.png">', image_alt="photo")).find("img")
        assert img["alt"] == "photo"

    def test_every_image_is_rewritten(self):
        """Should rewrite all images in the fragment."""
        soup = _parse(optimize_content('<img src="a.png"><div><img src="b.png" alt=""></div>'))
        images = soup.find_all("img")

        assert len(images) == 2
        assert all(img["loading"] == "lazy" and img["alt"] for img in images)


class TestLinks:
    """Tests for <a> rewriting."""

    def test_external_link_opens_in_new_tab(self):
        """Should mark absolute links as external."""
        link = _parse(optimize_content('<a href="https://example.com">x</a>')).find("a")

        assert link["target"] == "_blank"
        assert link["rel"] == ["noopener", "noreferrer"]
        assert link["class"] == ["external-link"]

    def test_site_relative_link_untouched(self):
        """Should leave /local links alone."""
        link = _parse(optimize_content('<a href="/about">x</a>')).find("a")

        assert link.get("target") is None
        assert link.get("rel") is None
        assert link.get("class") is None

    def test_fragment_link_untouched(self):
        """Should leave #anchor links alone."""
        link = _parse(optimize_content('<a href="#top">x</a>')).find("a")
        assert link.get("target") is None

    def test_link_without_href_untouched(self):
        """Should leave anchors without href alone."""
        link = _parse(optimize_content('<a name="here">x</a>')).find("a")
        assert link.get("target") is None

    def test_is_external_href(self):
        """Should classify hrefs by their first character."""
        assert is_external_href("https://example.com")
        assert is_external_href("mailto:a@example.com")
        assert not is_external_href("/x")
        assert not is_external_href("#x")
        assert not is_external_href("")
        assert not is_external_href(None)


class TestHeadings:
    """Tests for heading anchors."""

    def test_heading_gets_id_from_text(self):
        """Should lower-case text and hyphenate whitespace runs."""
        heading = _parse(optimize_content("<h2>Sunday   Service Times</h2>")).find("h2")
        assert heading["id"] == "sunday-service-times"

    def test_all_levels(self):
        """Should cover h1 through h6."""
        html = "".join(f"<h{n}>Level {n}</h{n}>" for n in range(1, 7))
        soup = _parse(optimize_content(html))

        for n in range(1, 7):
            assert soup.find(f"h{n}")["id"] == f"level-{n}"

    def test_overwrites_existing_id(self):
        """Should replace an id set by the CMS."""
        heading = _parse(optimize_content('<h3 id="old">New Title</h3>')).find("h3")
        assert heading["id"] == "new-title"

    def test_duplicate_headings_share_id(self):
        """Should not deduplicate colliding anchors."""
        soup = _parse(optimize_content("<h2>Notes</h2><h2>Notes</h2>"))
        assert [h["id"] for h in soup.find_all("h2")] == ["notes", "notes"]

    def test_heading_anchor_keeps_non_ascii(self):
        """Should keep CJK characters as they are."""
        assert heading_anchor("欢迎 光临") == "欢迎-光临"


class TestTablesAndCode:
    """Tests for table and pre rewriting."""

    def test_table_is_wrapped(self):
        """Should wrap the table in div.table-responsive and add the table class."""
        soup = _parse(optimize_content("<table><tr><td>1</td></tr></table>"))
        table = soup.find("table")

        assert table.parent.name == "div"
        assert table.parent["class"] == ["table-responsive"]
        assert table["class"] == ["table"]

    def test_every_table_is_wrapped(self):
        """Should wrap each table separately."""
        soup = _parse(optimize_content("<table></table><p>x</p><table></table>"))
        wrappers = soup.find_all("div", class_="table-responsive")

        assert len(wrappers) == 2
        assert all(w.find("table") is not None for w in wrappers)

    def test_pre_gets_code_block_class(self):
        """Should mark pre elements as code blocks."""
        pre = _parse(optimize_content("<pre>print(1)</pre>")).find("pre")
        assert pre["class"] == ["code-block"]


class TestFragments:
    """Tests for input handling."""

    def test_empty_input(self):
        """Should return an empty string for empty or missing input."""
        assert optimize_content("") == ""
        assert optimize_content(None) == ""

    def test_no_document_wrapper(self):
        """Should not wrap the fragment in html/body."""
        result = optimize_content("<p>Hello</p>")

        assert "<html" not in result
        assert "<body" not in result
        assert result == "<p>Hello</p>"

    def test_plain_text_passes_through(self):
        """Should leave text without markup unchanged."""
        assert optimize_content("just words") == "just words"

    def test_malformed_markup_does_not_raise(self):
        """Should tolerate unclosed tags."""
        result = optimize_content("<div><p>open <img src=x.png")
        assert isinstance(result, str)
