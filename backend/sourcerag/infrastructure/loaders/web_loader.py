"""Web page source loader — httpx fetch + BeautifulSoup text and link extraction.

The page's outbound links are appended to its text so questions about
where a page points ("what links does the site have for pricing?") can be
answered from the index.
"""

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from sourcerag.application.interfaces.source_loader import LoadedSource, SourceLoader
from sourcerag.domain.entities import Document, SourceMetadata, SourceType
from sourcerag.domain.exceptions import IngestionError

logger = logging.getLogger(__name__)

LINKS_SECTION_HEADER = "\n\n=== LINKS FOUND ON THIS PAGE ===\n"

_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]
_BLANK_LINES = re.compile(r"\n\s*\n+")


@dataclass(frozen=True)
class PageLink:
    text: str
    url: str


def extract_links(html: str, base_url: str) -> list[PageLink]:
    """Every ``<a href>`` on the page, in document order, as absolute URLs.

    Empty hrefs, in-page anchors and ``javascript:`` pseudo-links are
    skipped. Links are not deduplicated.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: list[PageLink] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.startswith("#") or href.lower().startswith("javascript:"):
            continue
        absolute = urljoin(base_url, href)
        text = anchor.get_text(" ", strip=True)
        links.append(PageLink(text=text or absolute, url=absolute))
    return links


def format_links_section(links: list[PageLink]) -> str:
    if not links:
        return ""
    return LINKS_SECTION_HEADER + "\n".join(f"- {link.text}: {link.url}" for link in links)


class WebSourceLoader(SourceLoader):
    """Loads a single web page by URL."""

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        user_agent: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._timeout = timeout
        self._user_agent = user_agent
        self._http_client = http_client

    @property
    def source_type(self) -> SourceType:
        return SourceType.WEBSITE

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)

    async def load(self, locator: str) -> LoadedSource:
        url = locator.strip()
        if urlparse(url).scheme not in ("http", "https"):
            raise IngestionError(
                f"Unsupported URL: '{locator}'", source_type=SourceType.WEBSITE.value, locator=locator
            )

        html = await self._fetch(url)
        text, title = self._parse(html, url)
        links = extract_links(html, url)

        text += format_links_section(links)
        logger.info("Loaded web page '%s' with %d links", title, len(links))
        if links:
            logger.debug("Sample links extracted: %s", links[:5])

        return LoadedSource(
            documents=[Document(text=text, attributes={"title": title})],
            source=SourceMetadata.for_website(url, title, len(links)),
            counters={"links_extracted": len(links)},
        )

    # ── Private helpers ──────────────────────────────────────────────

    async def _fetch(self, url: str) -> str:
        headers = {"User-Agent": self._user_agent} if self._user_agent else {}
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            response = await client.get(url, headers=headers, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.error("Failed to fetch %s: %s", url, e)
            raise IngestionError(
                f"Could not fetch '{url}': {e}", source_type=SourceType.WEBSITE.value, locator=url
            ) from e
        finally:
            if should_close:
                await client.aclose()

        if response.status_code >= 400:
            raise IngestionError(
                f"Fetching '{url}' returned HTTP {response.status_code}",
                source_type=SourceType.WEBSITE.value,
                locator=url,
            )
        return response.text

    @staticmethod
    def _parse(html: str, url: str) -> tuple[str, str]:
        """Visible page text plus the page title (falls back to the URL)."""
        soup = BeautifulSoup(html, "html.parser")

        title_tag = soup.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""

        for tag in soup(_NON_CONTENT_TAGS):
            tag.decompose()
        body = soup.body or soup
        text = body.get_text(separator="\n")
        lines = (line.strip() for line in text.splitlines())
        text = _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()

        return text, title or url
