"""
Library Genesis mirror data source for academic books.

The mirror set is unreliable. The source keeps a rotating pointer into
MIRRORS: a failed search moves the pointer to the next mirror (wrapping)
before the empty result is returned, so the next independent request
tries a different host. There is never a retry inside one call.

The pointer is shared by all concurrent requests and only moves under a
lock.
"""
import re
import threading
from typing import List, Optional, Sequence

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

MIRRORS = (
    "https://libgen.is",
    "https://libgen.rs",
    "https://libgen.st",
)

_MD5 = re.compile(r"md5=([a-fA-F0-9]+)")

# Columns of the "simple" results view
COL_AUTHORS, COL_TITLE, COL_PUBLISHER, COL_YEAR, COL_PAGES, COL_LANGUAGE, COL_SIZE, COL_EXTENSION = range(1, 9)
MIN_COLUMNS = 10


def _describe(publisher: str, pages: str, extension: str, size: str) -> str:
    parts = []
    if publisher:
        parts.append(f"Publisher: {publisher}.")
    if pages:
        parts.append(f"{pages} pages.")
    parts.append(f"Format: {extension or 'unknown'}.")
    if size:
        parts.append(f"Size: {size}")
    return " ".join(parts)


class LibGenSource(BaseSource):
    max_per_page = 100

    def __init__(self, *args, mirrors: Sequence[str] = MIRRORS, **kwargs):
        super().__init__(*args, **kwargs)
        self.mirrors = tuple(mirrors)
        self._mirror_index = 0
        self._mirror_lock = threading.Lock()
        if not kwargs.get("timeout"):
            self.timeout = settings.SCRAPE_TIMEOUT

    @property
    def name(self) -> str:
        return AcademicSource.LIBGEN.value

    @property
    def current_mirror(self) -> str:
        with self._mirror_lock:
            return self.mirrors[self._mirror_index]

    def rotate_mirror(self) -> str:
        """Advance to the next mirror and return it."""
        with self._mirror_lock:
            self._mirror_index = (self._mirror_index + 1) % len(self.mirrors)
            mirror = self.mirrors[self._mirror_index]
        logger.info(f"LibGen switching to mirror {mirror}")
        return mirror

    def _on_search_failure(self, error: Exception) -> None:
        self.rotate_mirror()

    async def _search(self, query: SearchQuery) -> SearchResult:
        mirror = self.current_mirror
        per_page = self.clamp_per_page(query.per_page)
        params = {
            "req": query.query,
            "lg_topic": "libgen",
            "open": "0",
            "view": "simple",
            "res": str(per_page),
            "phrase": "1",
            "column": "def",
            "page": str(query.page),
        }

        async with self._client() as client:
            response = await self._get(
                client, f"{mirror}/search.php", params=params, headers={"User-Agent": BROWSER_USER_AGENT}
            )

        items = self.parse_results(response.text, mirror, per_page)
        # No total count upstream
        return SearchResult(items=items, total=len(items), page=query.page, per_page=query.per_page, source=self.name)

    def parse_results(self, html: str, mirror: str, limit: int) -> List[AcademicResource]:
        soup = BeautifulSoup(html, "html.parser")
        table = soup.find("table", class_="c")
        if table is None:
            return []

        items = []
        # First row is the header
        for row in table.find_all("tr")[1:limit + 1]:
            cells = row.find_all("td")
            if len(cells) < MIN_COLUMNS:
                continue
            item = self._parse_row(cells, mirror)
            if item is not None:
                items.append(item)
        return items

    def _parse_row(self, cells, mirror: str) -> Optional[AcademicResource]:
        def text(i: int) -> str:
            return cells[i].get_text(" ", strip=True).replace("\xa0", " ").strip()

        link = cells[COL_TITLE].find("a", href=_MD5)
        if link is None:
            return None
        md5 = _MD5.search(link["href"]).group(1)
        title = next(link.stripped_strings, "")
        if not title:
            return None

        authors = [a.strip() for a in text(COL_AUTHORS).split(",") if a.strip()]
        year = text(COL_YEAR)
        extension = text(COL_EXTENSION)
        size = text(COL_SIZE)

        return AcademicResource(
            external_id=md5,
            source=self.name,
            title=title,
            authors=authors,
            abstract=_describe(text(COL_PUBLISHER), text(COL_PAGES), extension, size),
            publication_date=year or None,
            url=f"{mirror}/book/index.php?md5={md5}",
            # No direct download links
            pdf_url=None,
            type=ResourceType.BOOK,
            is_open_access=True,
            publisher=text(COL_PUBLISHER) or None,
            language=text(COL_LANGUAGE) or None,
            extension=extension or None,
            file_size=size or None,
        )
