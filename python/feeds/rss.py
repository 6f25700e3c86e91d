from email.utils import format_datetime
from typing import List, Sequence
from xml.sax.saxutils import escape

from content_index.post import Post
from .sitemap import post_datetime, post_url


def cdata(text: str) -> str:
    """Wrap text in CDATA, splitting any embedded terminator."""
    return "<![CDATA[" + (text or "").replace("]]>", "]]]]><![CDATA[>") + "]]>"


def build_rss(
    posts: Sequence[Post], site_url: str, title: str, description: str
) -> str:
    """
    Render an RSS 2.0 feed with one item per post.

    Items carry title, link, guid (same as link), excerpt as description and
    an RFC 822 publish date.
    """
    site_url = site_url.rstrip("/")
    lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0">',
        "<channel>",
        f"  <title>{escape(title)}</title>",
        f"  <link>{escape(site_url)}</link>",
        f"  <description>{escape(description)}</description>",
    ]

    for post in posts:
        link = escape(post_url(site_url, post.slug))
        pub_date = format_datetime(post_datetime(post.date), usegmt=True)
        lines.extend(
            [
                "  <item>",
                f"    <title>{cdata(post.title)}</title>",
                f"    <link>{link}</link>",
                f"    <guid>{link}</guid>",
                f"    <description>{cdata(post.excerpt)}</description>",
                f"    <pubDate>{pub_date}</pubDate>",
                "  </item>",
            ]
        )

    lines.extend(["</channel>", "</rss>"])
    return "\n".join(lines) + "\n"
