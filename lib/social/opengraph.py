# =============================================================================
# lib/social/opengraph.py - OpenGraph Metadata Parser
# =============================================================================
# Extracts link-preview metadata (og:*, twitter:*, article:*) from raw HTML.
# This is the parser behind the generic fallback: it must produce a record
# for any HTML page, even one with no preview tags at all.
# =============================================================================

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup

from core.models.social import OpenGraphData
from lib.utils import first_non_empty


def _meta_content(soup: BeautifulSoup, *keys: str) -> str | None:
    """
    Look up the first meta tag matching any key.

    Each key is tried as `property=` (OpenGraph style) and then as `name=`
    (plain/twitter style), so "og:title" and "description" both work.
    """
    for key in keys:
        for attr in ("property", "name"):
            tag = soup.find("meta", attrs={attr: key})
            if tag is None:
                continue
            content = first_non_empty(tag.get("content"))
            if content:
                return content
    return None


def _to_int(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_open_graph(html: str, url: str) -> OpenGraphData:
    """
    Parse preview metadata from an HTML document.

    Lookup order per field:
    - title: og:title, twitter:title, <title>
    - description: og:description, twitter:description, meta description
    - image: og:image, og:image:url, twitter:image (made absolute against url)
    - author: author, article:author

    HTML entities are decoded by the parser.

    Args:
        html: Raw page HTML
        url: Page URL, used to resolve relative image paths and as the
            default for og:url

    Returns:
        OpenGraphData (fields are None when the page doesn't provide them)

    Example:
        og = parse_open_graph('<meta property="og:title" content="Hi">', url)
        og.title  # "Hi"
    """
    soup = BeautifulSoup(html or "", "html.parser")

    title = _meta_content(soup, "og:title", "twitter:title")
    if not title and soup.title is not None:
        title = first_non_empty(soup.title.get_text())

    image = _meta_content(soup, "og:image", "og:image:url", "og:image:secure_url", "twitter:image")
    if image and not image.startswith(("http://", "https://")):
        image = urljoin(url, image)

    return OpenGraphData(
        title=title,
        description=_meta_content(soup, "og:description", "twitter:description", "description"),
        image=image,
        image_width=_to_int(_meta_content(soup, "og:image:width")),
        image_height=_to_int(_meta_content(soup, "og:image:height")),
        site_name=_meta_content(soup, "og:site_name"),
        type=_meta_content(soup, "og:type"),
        url=_meta_content(soup, "og:url") or url,
        author=_meta_content(soup, "author", "article:author"),
        published_time=_meta_content(soup, "article:published_time"),
        twitter_card=_meta_content(soup, "twitter:card"),
        twitter_site=_meta_content(soup, "twitter:site"),
        twitter_creator=_meta_content(soup, "twitter:creator"),
    )
