import unittest

from content_index.frontmatter import SourceFormat
from content_index.post import EPOCH_DATE, Post, RenderSource, derive_slug


class TestDeriveSlug(unittest.TestCase):
    """Test slug derivation from relative paths."""

    def test_spaces_and_case(self):
        self.assertEqual(derive_slug("My Post.md"), "my-post")
        self.assertEqual(derive_slug("my-post.md"), "my-post")

    def test_nested_paths_use_hyphens(self):
        self.assertEqual(derive_slug("guides/Intro Guide.mdx"), "guides-intro-guide")

    def test_only_last_extension_is_removed(self):
        self.assertEqual(derive_slug("release.v2.md"), "release-v2")

    def test_runs_of_separators_collapse(self):
        self.assertEqual(derive_slug("a  b--c_d.md"), "a-b-c-d")

    def test_non_ascii_characters_are_replaced(self):
        self.assertEqual(derive_slug("Über uns.md"), "-ber-uns")

    def test_result_is_url_safe(self):
        slug = derive_slug("2025/05 Deployment (Vercel)!.jsx")

        self.assertRegex(slug, r"^[a-z0-9-]+$")
        self.assertEqual(slug, "2025-05-deployment-vercel-")

    def test_derivation_is_idempotent(self):
        slug = derive_slug("Guides/My First Post.md")

        self.assertEqual(derive_slug(slug + ".md"), slug)


class TestPost(unittest.TestCase):
    """Test the Post record."""

    def test_defaults(self):
        post = Post(slug="a", title="A")

        self.assertEqual(post.excerpt, "")
        self.assertEqual(post.date, EPOCH_DATE)
        self.assertEqual(post.tags, ())
        self.assertIsNone(post.cover)

    def test_posts_are_immutable(self):
        post = Post(slug="a", title="A")

        with self.assertRaises(AttributeError):
            post.title = "B"

    def test_render_source_does_not_affect_equality(self):
        render = RenderSource(path="a.md", raw="raw", fmt=SourceFormat.MARKDOWN)

        self.assertEqual(Post(slug="a", title="A"), Post(slug="a", title="A", render=render))

    def test_to_dict(self):
        render = RenderSource(path="/blog/a.md", raw="raw", fmt=SourceFormat.MARKDOWN)
        post = Post(
            slug="a",
            title="A",
            tags=("react",),
            auto_hashtags=("react",),
            body="text",
            render=render,
        )

        data = post.to_dict()

        self.assertEqual(data["tags"], ["react"])
        self.assertEqual(data["autoHashtags"], ["react"])
        self.assertEqual(data["source"], "/blog/a.md")
        self.assertNotIn("body", data)
        self.assertEqual(post.to_dict(include_body=True)["body"], "text")

    def test_has_tag_and_topic(self):
        post = Post(slug="a", title="A", tags=("react",), topics=("Basics",))

        self.assertTrue(post.has_tag("react"))
        self.assertFalse(post.has_tag("vue"))
        self.assertTrue(post.has_topic("Basics"))


if __name__ == "__main__":
    unittest.main()
