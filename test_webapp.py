# test_webapp.py
#
# Run:
#   python -m unittest -v

import unittest

import webapp as m


class TestWebapp(unittest.TestCase):
    def setUp(self) -> None:
        m.app.config["TESTING"] = True
        self.client = m.app.test_client()

    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json(), {"status": "ok"})

    def test_index_get(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b"<textarea", resp.data)

    def test_index_post_renders_preview(self):
        resp = self.client.post("/", data={"content": "**hi**"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b"<strong>hi</strong>", resp.data)

    def test_preview_block(self):
        resp = self.client.post("/preview", data={"content": "- a\n- b"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn(b'<ul class="content-list">', resp.data)

    def test_preview_inline(self):
        resp = self.client.post("/preview", data={"content": "# Title", "inline": "1"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data, b'<span class="rich-content-inline">Title</span>')

    def test_api_render(self):
        resp = self.client.post("/api/render", json={"content": "Hey @Alice see #pokemon"})
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()
        self.assertEqual(data["mentions"], ["alice"])
        self.assertEqual(data["preview"], "Hey @Alice see #pokemon")
        self.assertEqual(
            [s["type"] for s in data["lines"][0]["segments"]], ["text", "mention", "text", "hashtag"]
        )
        self.assertIn('href="/u/Alice"', data["html"])

    def test_api_render_missing_content(self):
        self.assertEqual(self.client.post("/api/render", json={}).status_code, 400)
        self.assertEqual(self.client.post("/api/render", json={"content": 3}).status_code, 400)
        self.assertEqual(self.client.post("/api/render", data="nope").status_code, 400)

    def test_api_render_too_long(self):
        content = "x" * (m.cfg.max_content_length + 1)
        self.assertEqual(self.client.post("/api/render", json={"content": content}).status_code, 413)


if __name__ == "__main__":
    unittest.main(verbosity=2)
