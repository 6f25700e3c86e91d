import os
import shutil
import tempfile
import unittest
import xml.etree.ElementTree as ET
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

from content_index.errors import ContentDiscoveryError, SlugCollisionError
from content_index.indexer import ContentIndexer
from content_index.post import Post
from feeds import FeedGenerator, build_rss, build_sitemap
from feeds.rss import cdata
from feeds.sitemap import SITEMAP_NAMESPACE, iso_timestamp
from io_ops.file_manager import FileManager
from settings import Settings

NS = {"sm": SITEMAP_NAMESPACE}
NOW = datetime(2025, 6, 1, 12, 30, tzinfo=timezone.utc)


def make_posts():
    return [
        Post(slug="deploy", title="Deployment & Preview", excerpt="Vite auf Vercel", date="2025-05-28"),
        Post(slug="hooks", title="Hooks", excerpt="", date="2024-01-10"),
    ]


class TestSitemap(unittest.TestCase):
    """Test sitemap rendering."""

    def setUp(self):
        self.xml = build_sitemap(
            make_posts(), "https://blog.example.org/", ["/", "/blog"], now=NOW
        )
        self.root = ET.fromstring(self.xml.encode("utf-8"))

    def test_one_entry_per_route_and_post(self):
        locs = [el.text for el in self.root.findall("sm:url/sm:loc", NS)]

        self.assertEqual(
            locs,
            [
                "https://blog.example.org/",
                "https://blog.example.org/blog",
                "https://blog.example.org/blog/deploy",
                "https://blog.example.org/blog/hooks",
            ],
        )

    def test_lastmod_values(self):
        lastmods = [el.text for el in self.root.findall("sm:url/sm:lastmod", NS)]

        self.assertEqual(lastmods[0], "2025-06-01T12:30:00Z")
        self.assertEqual(lastmods[2], "2025-05-28T00:00:00Z")
        self.assertEqual(lastmods[3], "2024-01-10T00:00:00Z")

    def test_declaration_and_trailing_newline(self):
        self.assertTrue(self.xml.startswith('<?xml version="1.0" encoding="UTF-8"?>'))
        self.assertTrue(self.xml.endswith("</urlset>\n"))

    def test_empty_post_list_keeps_static_routes(self):
        xml = build_sitemap([], "https://blog.example.org", ["/"], now=NOW)

        self.assertEqual(xml.count("<url>"), 1)

    def test_iso_timestamp_converts_to_utc(self):
        local = datetime(2025, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))

        self.assertEqual(iso_timestamp(local), "2025-01-01T00:00:00Z")


class TestRss(unittest.TestCase):
    """Test RSS rendering."""

    def setUp(self):
        self.xml = build_rss(
            make_posts(), "https://blog.example.org", "Blog <Test>", "Lernen & Bauen"
        )
        self.channel = ET.fromstring(self.xml.encode("utf-8")).find("channel")

    def test_channel_metadata_is_escaped(self):
        self.assertEqual(self.channel.find("title").text, "Blog <Test>")
        self.assertEqual(self.channel.find("description").text, "Lernen & Bauen")
        self.assertEqual(self.channel.find("link").text, "https://blog.example.org")

    def test_items(self):
        items = self.channel.findall("item")

        self.assertEqual(len(items), 2)
        first = items[0]
        self.assertEqual(first.find("title").text, "Deployment & Preview")
        self.assertEqual(first.find("link").text, "https://blog.example.org/blog/deploy")
        self.assertEqual(first.find("guid").text, first.find("link").text)
        self.assertEqual(first.find("description").text, "Vite auf Vercel")
        self.assertEqual(first.find("pubDate").text, "Wed, 28 May 2025 00:00:00 GMT")

    def test_cdata_terminator_in_title(self):
        xml = build_rss(
            [Post(slug="x", title="a]]>b", date="2025-01-01")], "https://e.org", "T", "D"
        )
        item = ET.fromstring(xml.encode("utf-8")).find("channel/item")

        self.assertEqual(item.find("title").text, "a]]>b")

    def test_cdata_of_empty_text(self):
        self.assertEqual(cdata(""), "<![CDATA[]]>")


class TestFeedGenerator(unittest.TestCase):
    """Test writing both artifacts from a content root."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.content_root = os.path.join(self.temp_dir, "blog")
        self.output_dir = os.path.join(self.temp_dir, "dist")
        os.makedirs(self.content_root)
        with open(os.path.join(self.content_root, "erster.md"), "w", encoding="utf-8") as f:
            f.write("---\ntitle: Erster\ndate: 2025-02-03\nexcerpt: Hallo\n---\nText\n")

        env = patch.dict(os.environ, {"SITE_URL": "https://blog.example.org"})
        env.start()
        self.addCleanup(env.stop)

        self.settings = Settings(settings_file=None, env_file=os.devnull)
        self.settings.content_root = self.content_root
        self.settings.output_dir = self.output_dir

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_generate_writes_both_files(self):
        written = FeedGenerator(self.settings).generate(now=NOW)

        self.assertEqual(written["sitemap"], Path(self.output_dir) / "sitemap.xml")
        sitemap = written["sitemap"].read_text(encoding="utf-8")
        rss = written["rss"].read_text(encoding="utf-8")
        self.assertIn("<loc>https://blog.example.org/blog/erster</loc>", sitemap)
        self.assertIn("<loc>https://blog.example.org/search</loc>", sitemap)
        self.assertIn("<![CDATA[Erster]]>", rss)
        self.assertEqual(sorted(os.listdir(self.output_dir)), ["rss.xml", "sitemap.xml"])

    def test_output_dir_argument_wins(self):
        other = os.path.join(self.temp_dir, "public")

        written = FeedGenerator(self.settings).generate(output_dir=other, now=NOW)

        self.assertTrue(written["rss"].is_file())
        self.assertEqual(written["rss"].parent, Path(other))

    def test_default_site_url_is_reported(self):
        self.settings.site_url = "https://example.com"

        with self.assertLogs("feeds.generator", level="NOTICE") as logs:
            FeedGenerator(self.settings).generate(now=NOW)

        self.assertIn("SITE_URL is not configured", logs.output[0])

    def test_missing_content_root_is_fatal(self):
        self.settings.content_root = os.path.join(self.temp_dir, "missing")

        with self.assertRaises(ContentDiscoveryError):
            FeedGenerator(self.settings).generate(now=NOW)
        self.assertFalse(os.path.exists(self.output_dir))

    def test_strict_slug_collision_is_fatal(self):
        with open(os.path.join(self.content_root, "Erster.md"), "w", encoding="utf-8") as f:
            f.write("Doppelt")
        indexer = ContentIndexer(self.content_root, strict_slugs=True)

        with self.assertRaises(SlugCollisionError):
            FeedGenerator(self.settings, indexer).generate(now=NOW)


class TestFileManager(unittest.TestCase):
    """Test artifact writing helpers."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_write_creates_parents_and_leaves_no_temp_file(self):
        target = Path(self.temp_dir) / "a" / "b" / "out.xml"

        FileManager.write_to_file(target, "<x/>")

        self.assertEqual(target.read_text(encoding="utf-8"), "<x/>")
        self.assertEqual(os.listdir(target.parent), ["out.xml"])

    def test_resolve_relative_output_dir(self):
        self.assertEqual(
            FileManager.resolve_output_dir("dist"), Path.cwd() / "dist"
        )
        self.assertEqual(
            FileManager.resolve_output_dir(self.temp_dir), Path(self.temp_dir)
        )


if __name__ == "__main__":
    unittest.main()
