from datetime import datetime, timezone
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from content_index.post import Post

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def iso_timestamp(dt: datetime) -> str:
    """UTC ISO 8601 with a trailing Z, e.g. 2025-05-28T00:00:00Z."""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def post_datetime(date: str) -> datetime:
    """Midnight UTC of a post's YYYY-MM-DD date."""
    return datetime.strptime(date, "%Y-%m-%d").replace(tzinfo=timezone.utc)


def post_url(site_url: str, slug: str) -> str:
    return f"{site_url.rstrip('/')}/blog/{slug}"


def build_sitemap(
    posts: Sequence[Post],
    site_url: str,
    static_routes: Sequence[str],
    now: Optional[datetime] = None,
) -> str:
    """
    Render a sitemap urlset: one entry per static route, one per post.

    Static routes use `now` as last-modified, posts their publish date.
    """
    now = now or datetime.now(timezone.utc)
    site_url = site_url.rstrip("/")

    entries = [(f"{site_url}{route}", iso_timestamp(now)) for route in static_routes]
    entries.extend(
        (post_url(site_url, post.slug), iso_timestamp(post_datetime(post.date)))
        for post in posts
    )

    lines: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
    ]
    for loc, lastmod in entries:
        lines.append("  <url>")
        lines.append(f"    <loc>{escape(loc)}</loc>")
        lines.append(f"    <lastmod>{lastmod}</lastmod>")
        lines.append("  </url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
