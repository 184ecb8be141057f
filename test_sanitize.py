# test_sanitize.py
#
# Run:
#   python -m unittest -v

import unittest

import sanitize as m


class TestSanitizeUrl(unittest.TestCase):
    def test_allowed(self):
        for url in ["https://example.com", "http://x.org/a?b=1", "/t/42", "#reply-3"]:
            with self.subTest(url=url):
                self.assertEqual(m.sanitize_url(url), url)

    def test_trims(self):
        self.assertEqual(m.sanitize_url("  /u/ash  "), "/u/ash")

    def test_blocked_schemes(self):
        for url in ["javascript:alert(1)", "JavaScript:alert(1)", "data:text/html,x", "vbscript:x", "file:///etc/passwd"]:
            with self.subTest(url=url):
                self.assertEqual(m.sanitize_url(url), "")

    def test_bare_relative_and_other_schemes(self):
        self.assertEqual(m.sanitize_url("page.html"), "")
        self.assertEqual(m.sanitize_url("ftp://x"), "")

    def test_empty(self):
        self.assertEqual(m.sanitize_url(""), "")
        self.assertEqual(m.sanitize_url(None), "")


class TestSanitizeMarkdown(unittest.TestCase):
    def test_strips_unquoted_handlers(self):
        got = m.sanitize_markdown("<img src=x onerror=alert(1)> hi")
        self.assertNotIn("onerror", got)
        self.assertIn("hi", got)

    def test_strips_dangerous_tags(self):
        got = m.sanitize_markdown("a<script>x()</script>b<iframe src=x></iframe>c<embed src=y>d")
        self.assertEqual(got, "abcd")

    def test_strips_handlers_and_js_scheme(self):
        got = m.sanitize_markdown('<img onerror="x()"> [a](javascript:alert(1))')
        self.assertEqual(got, "<img > [a](alert(1))")

    def test_plain_markdown_untouched(self):
        text = "**bold** and [link](https://x.org)"
        self.assertEqual(m.sanitize_markdown(text), text)

    def test_empty(self):
        self.assertEqual(m.sanitize_markdown(""), "")


class TestSanitizeHtml(unittest.TestCase):
    def test_script_removed_safe_markup_kept(self):
        self.assertEqual(m.sanitize_html('<script>alert("x")</script><p>Safe</p>'), "<p>Safe</p>")

    def test_event_handlers_removed(self):
        got = m.sanitize_html("<img src=x onerror=alert(1)><p onclick='go()'>hi</p>")
        self.assertNotIn("onerror", got)
        self.assertNotIn("onclick", got)
        self.assertIn("<p>hi</p>", got)

    def test_disallowed_tags_stripped_text_kept(self):
        got = m.sanitize_html("<form><button>press</button></form>")
        self.assertEqual(got, "press")

    def test_javascript_href_dropped(self):
        got = m.sanitize_html('<a href="javascript:alert(1)">x</a>')
        self.assertNotIn("javascript", got)
        self.assertIn(">x</a>", got)

    def test_external_links_open_in_new_tab(self):
        got = m.sanitize_html('<a href="https://example.com">ext</a>')
        self.assertIn('target="_blank"', got)
        self.assertIn('rel="noopener noreferrer"', got)

    def test_internal_links_untouched(self):
        got = m.sanitize_html('<a href="/t/42">thread</a>')
        self.assertNotIn("target=", got)
        self.assertIn('href="/t/42"', got)

    def test_comments_removed(self):
        self.assertEqual(m.sanitize_html("a<!-- hidden -->b"), "ab")

    def test_empty(self):
        self.assertEqual(m.sanitize_html(""), "")
        self.assertEqual(m.sanitize_html(None), "")


class TestStripHtml(unittest.TestCase):
    def test_plain_text(self):
        got = m.strip_html("<p>Hello <strong>there</strong></p><script>x()</script>")
        self.assertEqual(got, "Hello there")

    def test_empty(self):
        self.assertEqual(m.strip_html(""), "")


class TestCreateSafeExcerpt(unittest.TestCase):
    def test_short_text_unchanged(self):
        self.assertEqual(m.create_safe_excerpt("<p>short</p>"), "short")

    def test_long_text_truncated(self):
        got = m.create_safe_excerpt("<p>" + "word " * 20 + "</p>", max_length=12)
        self.assertEqual(got, "word word wo...")

    def test_empty(self):
        self.assertEqual(m.create_safe_excerpt(""), "")


if __name__ == "__main__":
    unittest.main(verbosity=2)
