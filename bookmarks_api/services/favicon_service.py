"""
Best-effort favicon lookup for bookmark URLs
"""
import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup

from ..core.config import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_FAVICON = "https://via.placeholder.com/32x32/cccccc/666666?text=?"

# Checked in order; the first match wins
ICON_LINK_RELS = (
    "icon",
    "shortcut icon",
    "apple-touch-icon",
    "apple-touch-icon-precomposed",
    "mask-icon",
)


def ensure_scheme(url: str) -> str:
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"


def url_origin(url: str) -> Optional[str]:
    parts = urlsplit(ensure_scheme(url))
    if not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc}"


def fallback_favicon(url: str) -> str:
    """``<origin>/favicon.ico`` for the URL, or a placeholder icon"""
    origin = url_origin(url or "")
    if origin is None:
        return PLACEHOLDER_FAVICON
    return f"{origin}/favicon.ico"


def absolutize(href: str, page_url: str) -> Optional[str]:
    """Turn a relative or protocol-relative href into an absolute URL"""
    if href.startswith("http"):
        return href
    parts = urlsplit(page_url)
    if not parts.netloc:
        return None
    if href.startswith("//"):
        return f"{parts.scheme}:{href}"
    if href.startswith("/"):
        return f"{parts.scheme}://{parts.netloc}{href}"
    return f"{parts.scheme}://{parts.netloc}/{href}"


def extract_favicon(html: str, page_url: str) -> Optional[str]:
    """Pick the favicon advertised by a page, defaulting to ``/favicon.ico``"""
    soup = BeautifulSoup(html, "html.parser")

    href = None
    for rel in ICON_LINK_RELS:
        for link in soup.find_all("link", href=True):
            link_rel = link.get("rel") or []
            if isinstance(link_rel, str):
                link_rel = link_rel.split()
            if " ".join(link_rel).lower() == rel:
                href = link["href"].strip()
                break
        if href:
            break

    if not href:
        meta = soup.find("meta", attrs={"property": "og:image"})
        if meta and meta.get("content"):
            href = meta["content"].strip()

    if not href:
        origin = url_origin(page_url)
        return f"{origin}/favicon.ico" if origin else None

    return absolutize(href, page_url)


class FaviconResolver:
    """Fetches a page and resolves its favicon within a bounded timeout"""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        self.timeout = timeout if timeout is not None else settings.FAVICON_TIMEOUT_SECONDS
        self.user_agent = user_agent or settings.FAVICON_USER_AGENT

    async def resolve(self, url: str) -> Optional[str]:
        """
        Resolve the favicon for a URL

        Args:
            url: Bookmark URL, with or without scheme

        Returns:
            Absolute favicon URL, or None on any failure (timeout, non-2xx,
            unparsable page)
        """
        if not url or not isinstance(url, str):
            return None

        full_url = ensure_scheme(url)
        try:
            async with httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            ) as client:
                response = await client.get(full_url)

            if not response.is_success:
                logger.info(f"Failed to fetch {full_url}: {response.status_code}")
                return None

            return extract_favicon(response.text, str(response.url))

        except httpx.TimeoutException:
            logger.warning(f"Timed out fetching favicon for {full_url}")
            return None
        except Exception as e:
            logger.warning(f"Error scraping favicon for {full_url}: {str(e)}")
            return None

    async def resolve_with_fallback(self, url: str) -> str:
        favicon = await self.resolve(url)
        if favicon:
            return favicon
        return fallback_favicon(url)
