"""Tests for shared extraction text primitives."""

import unittest

from bs4 import BeautifulSoup

from src.extraction.text import (
    attribute_text,
    clean_text,
    extract_json_ld,
    find_meta_content,
    make_soup,
    restore_entities,
)


class TestCleanText(unittest.TestCase):
    """Tests for clean_text function."""

    def test_strips_tags_and_collapses_whitespace(self) -> None:
        """Should remove tags and squash whitespace runs."""
        result = clean_text("<p>Hello   <b>big</b>\n\n world</p>")
        self.assertEqual(result, "Hello big world")

    def test_converts_nbsp_to_space(self) -> None:
        """Should treat &nbsp; as a space."""
        self.assertEqual(clean_text("Hello&nbsp;world"), "Hello world")

    def test_collapses_other_entities_to_space(self) -> None:
        """Should replace any other entity with a space."""
        self.assertEqual(clean_text("Fish &amp; chips"), "Fish chips")
        self.assertEqual(clean_text("a&#8217;b"), "a b")

    def test_handles_empty_input(self) -> None:
        """Should return an empty string for empty or missing input."""
        self.assertEqual(clean_text(""), "")
        self.assertEqual(clean_text(None), "")

    def test_cleans_element_inner_html(self) -> None:
        """Should clean the inner HTML of an element."""
        soup = make_soup("<html><body><p>  Fish &amp; <em>chips</em> </p></body></html>")
        self.assertEqual(clean_text(soup.p), "Fish chips")

    def test_collapses_entities_read_from_parsed_elements(self) -> None:
        """Should collapse entities in parsed markup but keep literal characters."""
        soup = make_soup(
            "<html><body><p>It&#8217;s &mdash; done — café&nbsp;time</p></body></html>"
        )
        self.assertEqual(clean_text(soup.p), "It s done — café time")


class TestRestoreEntities(unittest.TestCase):
    """Tests for restore_entities function."""

    def test_decodes_marked_entities(self) -> None:
        """Should turn marked entities back into their characters."""
        soup = make_soup('<html><body><a href="/a?x=1&amp;y=2">Tom &amp; Jerry</a></body></html>')

        self.assertEqual(restore_entities(soup.a.get_text()), "Tom & Jerry")
        self.assertEqual(attribute_text(soup.a, "href"), "/a?x=1&y=2")

    def test_leaves_plain_text_alone(self) -> None:
        """Should return text without markers unchanged."""
        self.assertEqual(restore_entities("Fish & chips"), "Fish & chips")


class TestFindMetaContent(unittest.TestCase):
    """Tests for find_meta_content function."""

    def test_matches_property_attribute(self) -> None:
        """Should match meta tags by property."""
        soup = make_soup('<html><head><meta property="og:title" content="Hello"></head></html>')
        self.assertEqual(find_meta_content(soup, "og:title"), "Hello")

    def test_matches_name_attribute_case_insensitive(self) -> None:
        """Should match meta tags by name, ignoring case."""
        soup = make_soup('<html><head><meta name="Description" content="A page"></head></html>')
        self.assertEqual(find_meta_content(soup, "description"), "A page")

    def test_matches_content_before_name(self) -> None:
        """Should not depend on attribute order."""
        soup = make_soup('<html><head><meta content="Jane" name="author"></head></html>')
        self.assertEqual(find_meta_content(soup, "author"), "Jane")

    def test_skips_empty_content(self) -> None:
        """Should skip tags with blank content and use the next match."""
        soup = make_soup(
            "<html><head>"
            '<meta name="author" content="  ">'
            '<meta name="author" content="Jane Doe">'
            "</head></html>"
        )
        self.assertEqual(find_meta_content(soup, "author"), "Jane Doe")

    def test_collapses_entities_in_content(self) -> None:
        """Should collapse encoded characters in the content value to spaces."""
        soup = make_soup(
            '<html><head><meta property="og:title" content="Tom &amp; Jerry&#8217;s Day">'
            "</head></html>"
        )
        self.assertEqual(find_meta_content(soup, "og:title"), "Tom Jerry s Day")

    def test_returns_decoded_value_without_cleaning(self) -> None:
        """Should decode rather than clean the value when asked."""
        soup = make_soup(
            '<html><head><meta property="og:url" content=" https://a.example/?x=1&amp;y=2 ">'
            "</head></html>"
        )
        self.assertEqual(
            find_meta_content(soup, "og:url", clean=False), "https://a.example/?x=1&y=2"
        )

    def test_returns_empty_string_when_missing(self) -> None:
        """Should return an empty string when no tag matches."""
        soup = make_soup("<html><head></head></html>")
        self.assertEqual(find_meta_content(soup, "og:title"), "")


class TestExtractJsonLd(unittest.TestCase):
    """Tests for extract_json_ld function."""

    def _soup(self, *blocks: str) -> BeautifulSoup:
        scripts = "".join(
            f'<script type="application/ld+json">{block}</script>' for block in blocks
        )
        return make_soup(f"<html><head>{scripts}</head><body></body></html>")

    def test_parses_blocks_in_order(self) -> None:
        """Should return every parsed object in document order."""
        soup = self._soup('{"@type": "Article", "a": 1}', '{"@type": "Person", "b": 2}')
        result = extract_json_ld(soup)

        self.assertEqual([obj["@type"] for obj in result], ["Article", "Person"])

    def test_skips_malformed_blocks(self) -> None:
        """Should skip blocks that are not valid JSON."""
        soup = self._soup("{not json", '{"author": "Jane"}')
        result = extract_json_ld(soup)

        self.assertEqual(result, [{"author": "Jane"}])

    def test_flattens_arrays_and_graphs(self) -> None:
        """Should flatten top-level arrays and @graph entries."""
        soup = self._soup(
            '[{"@type": "WebSite"}, {"@type": "Article"}]',
            '{"@graph": [{"@type": "Person"}]}',
        )
        result = extract_json_ld(soup)

        types = [obj.get("@type") for obj in result]
        self.assertEqual(types, ["WebSite", "Article", None, "Person"])

    def test_ignores_other_script_types(self) -> None:
        """Should ignore scripts that are not JSON-LD."""
        soup = make_soup('<html><head><script>var a = {"author": "x"};</script></head></html>')
        self.assertEqual(extract_json_ld(soup), [])


if __name__ == "__main__":
    unittest.main()
