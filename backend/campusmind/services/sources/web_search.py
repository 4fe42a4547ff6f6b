"""
General web search for educational material through DuckDuckGo's HTML
endpoint (no API key).

The query is widened with educational terms and restricted to a set of
educational sites. Results that do not look educational are dropped.
"""
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup

from campusmind.core.config import settings
from campusmind.core.logging import get_logger
from campusmind.schemas import (
    AcademicResource,
    AcademicSource,
    ResourceType,
    SearchQuery,
    SearchResult,
)

from .base import BROWSER_USER_AGENT, BaseSource

logger = get_logger(__name__)

SEARCH_URL = "https://html.duckduckgo.com/html/"

EDUCATIONAL_SITES = (
    "site:edu",
    "site:coursera.org",
    "site:edx.org",
    "site:khanacademy.org",
    "site:ocw.mit.edu",
    "site:academia.edu",
    "site:researchgate.net",
)

EDUCATIONAL_DOMAINS = (
    ".edu",
    "coursera.org",
    "edx.org",
    "khanacademy.org",
    "mit.edu",
    "academia.edu",
    "researchgate.net",
    "springer.com",
    "sciencedirect.com",
    "wiley.com",
    "scholar.google",
)

EDUCATIONAL_TITLE_TERMS = ("tutorial", "curso", "manual")

# Checked in order, first hit wins
TYPE_HINTS = (
    (("video", "youtube"), ResourceType.VIDEO),
    (("course", "curso"), ResourceType.COURSE),
    (("book", "libro"), ResourceType.BOOK),
    (("tutorial",), ResourceType.NOTES),
    (("paper", "research"), ResourceType.PAPER),
)


def educational_query(text: str) -> str:
    sites = " OR ".join(EDUCATIONAL_SITES)
    return f'{text} (tutorial OR curso OR manual OR apuntes OR PDF OR "material educativo") ({sites})'


def url_hash(url: str) -> str:
    """
    Stable id for a URL: 31-multiplier string hash over UTF-16 code units,
    wrapped to a signed 32-bit int, absolute value in hex.
    """
    value = 0
    data = url.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + code) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return f"web_{abs(value):x}"


def resolve_redirect(href: str) -> str:
    """DuckDuckGo wraps result links as /l/?uddg=<target>."""
    target = parse_qs(urlparse(href).query).get("uddg")
    return target[0] if target else href


def classify(url: str, title: str, description: str) -> ResourceType:
    if url.endswith(".pdf"):
        return ResourceType.MANUAL
    content = f"{url} {title} {description}".lower()
    for terms, resource_type in TYPE_HINTS:
        if any(t in content for t in terms):
            return resource_type
    return ResourceType.ARTICLE


def is_educational(url: str, title: str) -> bool:
    lowered_url = url.lower()
    lowered_title = title.lower()
    return (
        any(domain in lowered_url for domain in EDUCATIONAL_DOMAINS)
        or url.endswith(".pdf")
        or any(term in lowered_title for term in EDUCATIONAL_TITLE_TERMS)
    )


def domain_of(url: str) -> str:
    host = urlparse(url).hostname
    return host.replace("www.", "") if host else "web"


class WebSearchSource(BaseSource):
    max_per_page = 30

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not kwargs.get("timeout"):
            self.timeout = settings.SCRAPE_TIMEOUT

    @property
    def name(self) -> str:
        return AcademicSource.WEB.value

    async def _search(self, query: SearchQuery) -> SearchResult:
        headers = {"User-Agent": BROWSER_USER_AGENT, "Accept": "text/html"}
        params = {"q": educational_query(query.query), "kl": "es-es"}

        async with self._client() as client:
            response = await self._get(client, SEARCH_URL, params=params, headers=headers)

        items = self.parse_results(response.text, self.clamp_per_page(query.per_page))
        return SearchResult(items=items, total=len(items), page=query.page, per_page=query.per_page, source=self.name)

    def parse_results(self, html: str, limit: int) -> List[AcademicResource]:
        soup = BeautifulSoup(html, "html.parser")
        items = []
        for result in soup.select("div.result")[:limit]:
            item = self._parse_result(result)
            if item is not None:
                items.append(item)
        return items

    def _parse_result(self, result) -> Optional[AcademicResource]:
        link = result.select_one("a.result__a") or result.select_one("a[href]")
        if link is None or not link.get("href"):
            return None

        url = resolve_redirect(link["href"])
        title = link.get_text(" ", strip=True)
        snippet = result.select_one(".result__snippet")
        description = snippet.get_text(" ", strip=True) if snippet else None

        if not is_educational(url, title):
            return None

        return AcademicResource(
            external_id=url_hash(url),
            source=self.name,
            title=title,
            authors=[domain_of(url)],
            abstract=description or None,
            url=url,
            pdf_url=url if url.endswith(".pdf") else None,
            type=classify(url, title, description or ""),
            is_open_access=True,
        )
