"""Tests for the site structure checker"""
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import link_checker
from link_checker import (
    check_feeds,
    check_internal_links,
    check_profile_registry,
    check_related_candidates,
    check_site,
    RegistryError,
    extract_hrefs,
    find_html_files,
    is_anchor,
    is_external,
)

PAGE = """<!DOCTYPE html>
<html><head><link rel="stylesheet" href="/css/shared.css"></head>
<body>
<a href="/feeds/missing.html">Missing</a>
<a href="https://example.com/">External</a>
<a href="mailto:tips@example.com">Mail</a>
<a href="#top">Top</a>
<a href="about/">About</a>
<a href="profiles/a.html?ref=home#bio">Profile A</a>
<a href="img/logo.png">Logo</a>
</body></html>
"""


class SiteTestCase(unittest.TestCase):
    """Builds a small site in a temporary directory"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.root = Path(self.temp_dir.name)

    def write(self, relative_path, content):
        path = self.root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        return path

    def write_json(self, relative_path, data):
        return self.write(relative_path, json.dumps(data))


class TestLinkHelpers(unittest.TestCase):
    """href classification"""

    def test_extract_hrefs(self):
        hrefs = extract_hrefs('<a href="/a.html">a</a><link href="/b.css"><a name="x">no href</a>')
        self.assertEqual(hrefs, ["/a.html", "/b.css"])

    def test_is_external(self):
        self.assertTrue(is_external("https://example.com"))
        self.assertTrue(is_external("tel:5551234"))
        self.assertFalse(is_external("/feeds/policy.html"))

    def test_is_anchor(self):
        self.assertTrue(is_anchor("#section"))
        self.assertFalse(is_anchor("/#section"))


class TestInternalLinks(SiteTestCase):
    """Internal link validation"""

    def test_reports_only_broken_site_files(self):
        self.write("index.html", PAGE)
        self.write("css/shared.css", "body {}")
        self.write("profiles/a.html", '<a href="../index.html">Home</a>')

        results = check_internal_links(self.root)

        self.assertEqual(list(results), ["index.html"])
        broken = results["index.html"]
        self.assertEqual(len(broken), 2)
        self.assertTrue(broken[0].startswith("/feeds/missing.html -> "))
        self.assertTrue(broken[1].startswith("about/ -> "))
        self.assertTrue(broken[1].endswith("index.html"))

    def test_skips_tooling_directories(self):
        self.write("index.html", "<p>home</p>")
        self.write("node_modules/pkg/readme.html", '<a href="/nope.html">x</a>')
        self.write("tests/fixture.html", '<a href="/nope.html">x</a>')
        files = [p.relative_to(self.root).as_posix() for p in find_html_files(self.root)]
        self.assertEqual(files, ["index.html"])
        self.assertEqual(check_internal_links(self.root), {})


class TestProfileChecks(SiteTestCase):
    """Profiles for officials and feed candidates"""

    def test_officials_without_profiles(self):
        self.write_json("data/officials.json", {"current_officials": [{"slug": "a"}, {"slug": "b"}]})
        self.write("profiles/a.html", "<p>a</p>")
        self.assertEqual(check_profile_registry(self.root), ["b"])

    def test_missing_registry_reports_nothing(self):
        self.assertEqual(check_profile_registry(self.root), [])

    def test_registry_must_be_an_object(self):
        self.write_json("data/officials.json", [{"slug": "a"}])
        with self.assertRaises(RegistryError):
            check_profile_registry(self.root)

    def test_malformed_registry_is_reported(self):
        self.write("data/officials.json", "{not json")
        problems = check_site(self.root)
        self.assertTrue(any(p.startswith("officials registry:") and "not valid JSON" in p for p in problems))

        stdout = io.StringIO()
        with redirect_stdout(stdout):
            code = link_checker.main(["--root", str(self.root)])
        self.assertEqual(code, 1)
        self.assertIn("officials registry", stdout.getvalue())

    def test_related_candidates_without_profiles(self):
        self.write("profiles/a.html", "<p>a</p>")
        self.write_json("data/candidate-news.json", [
            {"id": "1", "category": "x", "date": "2026-01-01", "relatedCandidate": "a"},
            {"id": "2", "category": "x", "date": "2026-01-01", "relatedCandidate": "b"},
            {"id": "3", "category": "x", "date": "2026-01-01", "relatedCandidate": "b"},
            {"id": "4", "category": "x", "date": "2026-01-01"},
        ])
        self.assertEqual(check_related_candidates(self.root), ["b"])


class TestFeedChecks(SiteTestCase):
    """Feed invariants across the site"""

    def test_reports_missing_and_invalid_feeds(self):
        self.write_json("data/candidate-news.json", [{"id": "1", "category": "", "date": "2026-01-01"}])
        self.write_json("data/policy-feed.json", [{"id": "1", "category": "x", "date": "2026-01-01"}])

        problems = check_feeds(self.root)

        self.assertEqual(problems["data/candidate-news.json"], ["entry 1 has no category"])
        self.assertNotIn("data/policy-feed.json", problems)
        self.assertIn("not found", problems["data/business-watch.json"][0])

    def test_check_site_and_cli(self):
        self.write("index.html", '<a href="/missing.html">x</a>')
        problems = check_site(self.root)
        self.assertTrue(any("broken link /missing.html" in p for p in problems))

        stdout = io.StringIO()
        with redirect_stdout(stdout):
            code = link_checker.main(["--root", str(self.root)])
        self.assertEqual(code, 1)
        self.assertIn("/missing.html", stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
