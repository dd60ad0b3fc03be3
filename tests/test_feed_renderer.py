"""Tests for feed rendering"""
import unittest

from bs4 import BeautifulSoup

from website_generator.feed_filter import filter_by_candidate
from website_generator.feed_renderer import (
    Container,
    ElementSink,
    render_feed_list,
    render_filter_bar,
    render_profile_feed,
)
from tests.test_feed_filter import SAMPLE_ENTRIES


class TestRenderProfileFeed(unittest.TestCase):
    """Profile activity rendering"""

    def test_empty_entries_render_no_activity(self):
        container = Container()
        html = render_profile_feed([], container)
        self.assertIn("No recent activity", html)
        self.assertEqual(container.inner_html, html)

    def test_none_entries_render_no_activity(self):
        container = Container()
        html = render_profile_feed(None, container)
        self.assertIn("No recent activity", html)
        self.assertEqual(container.inner_html, html)

    def test_dict_container(self):
        container = {}
        html = render_profile_feed([], container)
        self.assertEqual(container["inner_html"], html)

    def test_object_with_inner_html_attribute(self):
        class Element:
            inner_html = ""

        element = Element()
        html = render_profile_feed(SAMPLE_ENTRIES[:1], element)
        self.assertEqual(element.inner_html, html)

    def test_renders_cards(self):
        entries = filter_by_candidate(SAMPLE_ENTRIES, "neal-linnartz")
        container = Container()
        html = render_profile_feed(entries, container)
        self.assertIn("feed-card", html)
        self.assertIn("Five Candidates File", html)
        self.assertIn("Linnartz Budget", html)
        self.assertIn("February 8, 2026", html)
        self.assertEqual(container.inner_html, html)

    def test_cards_keep_given_order(self):
        entries = filter_by_candidate(SAMPLE_ENTRIES, "neal-linnartz")
        html = render_profile_feed(entries)
        self.assertLess(html.index("Five Candidates File"), html.index("Linnartz Budget"))

    def test_includes_source_links(self):
        entries = filter_by_candidate(SAMPLE_ENTRIES, "neal-linnartz")
        html = render_profile_feed(entries, Container())
        self.assertIn("feed-card-source", html)
        self.assertIn("https://example.com", html)

    def test_works_without_container(self):
        self.assertIn("No recent activity", render_profile_feed([], None))

    def test_output_independent_of_container(self):
        entries = filter_by_candidate(SAMPLE_ENTRIES, "neal-linnartz")
        self.assertEqual(render_profile_feed(entries), render_profile_feed(entries, Container()))

    def test_escapes_markup_in_fields(self):
        entries = [{
            "id": "x-1", "date": "2026-02-01", "category": "elections", "tags": [],
            "title": "<script>alert(1)</script>", "summary": "<b>bold</b> & more",
            "source": "Herald", "sourceUrl": "https://example.com/?a=1&b=2",
        }]
        html = render_profile_feed(entries)
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)
        self.assertNotIn("<b>bold</b>", html)
        self.assertIn("&amp; more", html)

    def test_unsafe_link_scheme_is_dropped(self):
        entries = [{
            "id": "x-2", "date": "2026-02-01", "category": "elections", "tags": [],
            "title": "Title", "summary": "Summary", "source": "Herald",
            "sourceUrl": "javascript:alert(1)",
        }]
        html = render_profile_feed(entries)
        self.assertNotIn("javascript:", html)
        self.assertIn("Herald", html)

    def test_relative_source_url_is_linked(self):
        entries = [dict(SAMPLE_ENTRIES[0], sourceUrl="/articles/county-judge.html")]
        self.assertIn('href="/articles/county-judge.html"', render_profile_feed(entries))

    def test_malformed_entries_do_not_raise(self):
        html = render_profile_feed(["junk", None])
        self.assertIn("No recent activity", html)

    def test_element_sink_replaces_children(self):
        soup = BeautifulSoup('<div id="candidate-activity"><p>Loading...</p></div>', 'html.parser')
        element = soup.find(id="candidate-activity")
        render_profile_feed(filter_by_candidate(SAMPLE_ENTRIES, "neal-linnartz"), ElementSink(element))
        self.assertNotIn("Loading...", str(soup))
        self.assertEqual(len(element.find_all(class_="feed-card")), 2)

    def test_bare_soup_element_as_container(self):
        soup = BeautifulSoup('<div id="candidate-activity"><p>Loading...</p></div>', 'html.parser')
        element = soup.find(id="candidate-activity")
        render_profile_feed([], element)
        self.assertEqual(element.get_text(strip=True), "No recent activity")


class TestRenderFeedList(unittest.TestCase):
    """Feed page rendering"""

    def test_all_entries_newest_first(self):
        html = render_feed_list(list(reversed(SAMPLE_ENTRIES)))
        self.assertEqual(html.count('class="feed-card"'), len(SAMPLE_ENTRIES))
        self.assertLess(html.index("County Judge Vacant"), html.index("Court Agenda"))

    def test_category_filter(self):
        container = Container()
        html = render_feed_list(SAMPLE_ENTRIES, container, category="county-government")
        self.assertIn("County Judge Vacant", html)
        self.assertIn("Court Agenda", html)
        self.assertNotIn("Five Candidates File", html)
        self.assertEqual(container.inner_html, html)

    def test_unknown_category_renders_empty_message(self):
        html = render_feed_list(SAMPLE_ENTRIES, category="nonexistent")
        self.assertIn("feed-empty", html)
        self.assertNotIn("feed-card", html)

    def test_category_label_and_tags(self):
        entries = [dict(SAMPLE_ENTRIES[0], tags=["roads", "bonds"])]
        html = render_feed_list(entries)
        self.assertIn("County Government", html)
        self.assertIn('<span class="tag">roads</span>', html)


class TestRenderFilterBar(unittest.TestCase):
    """Category filter buttons"""

    def test_all_button_first_and_active_by_default(self):
        html = render_filter_bar(["elections", "legislation"])
        soup = BeautifulSoup(html, 'html.parser')
        buttons = soup.find_all(class_="filter-btn")
        self.assertEqual(len(buttons), 3)
        self.assertEqual(buttons[0]["data-category"], "all")
        self.assertIn("active", buttons[0]["class"])
        self.assertEqual(buttons[1].get_text(strip=True), "Elections")

    def test_active_category_and_links(self):
        html = render_filter_bar(["elections"], active="elections", base_path="/feeds/candidates")
        soup = BeautifulSoup(html, 'html.parser')
        buttons = soup.find_all(class_="filter-btn")
        self.assertEqual(buttons[0]["href"], "/feeds/candidates.html")
        self.assertEqual(buttons[1]["href"], "/feeds/candidates/elections.html")
        self.assertIn("active", buttons[1]["class"])
        self.assertNotIn("active", buttons[0]["class"])

    def test_counts_from_entries(self):
        html = render_filter_bar(["county-government"], entries=SAMPLE_ENTRIES)
        soup = BeautifulSoup(html, 'html.parser')
        counts = [span.get_text() for span in soup.find_all(class_="filter-count")]
        self.assertEqual(counts, [str(len(SAMPLE_ENTRIES)), "2"])

    def test_unknown_category_label_is_title_cased(self):
        html = render_filter_bar(["school-board"])
        self.assertIn("School Board", html)


if __name__ == '__main__':
    unittest.main()
