"""
Google Books data source for books and manuals.

Open access means public-domain full view, all pages viewable, or a
free sale status. With the open-access filter the request itself is
limited to free ebooks.
"""
from typing import Dict, Optional

from campusmind.core.config import settings
from campusmind.core.logging import get_logger
from campusmind.schemas import (
    AcademicResource,
    AcademicSource,
    ResourceType,
    SearchQuery,
    SearchResult,
)

from .base import BaseSource

logger = get_logger(__name__)

BASE_URL = "https://www.googleapis.com/books/v1"

PRINT_TYPES: Dict[str, ResourceType] = {
    "BOOK": ResourceType.BOOK,
    "MAGAZINE": ResourceType.ARTICLE,
}


def is_open_access(item: Dict) -> bool:
    access = item.get("accessInfo") or {}
    sale = item.get("saleInfo") or {}
    return (
        access.get("accessViewStatus") == "FULL_PUBLIC_DOMAIN"
        or access.get("viewability") == "ALL_PAGES"
        or sale.get("saleability") == "FREE"
    )


def extract_download_link(access: Dict) -> Optional[str]:
    for fmt in ("pdf", "epub"):
        info = access.get(fmt) or {}
        if info.get("isAvailable") and info.get("acsTokenLink"):
            return info["acsTokenLink"]
    return None


class GoogleBooksSource(BaseSource):
    # Google Books maxResults ceiling
    max_per_page = 40

    @property
    def name(self) -> str:
        return AcademicSource.GOOGLE_BOOKS.value

    def _key_params(self) -> Dict[str, str]:
        api_key = settings.GOOGLE_BOOKS_API_KEY
        return {"key": api_key} if api_key else {}

    async def _search(self, query: SearchQuery) -> SearchResult:
        max_results = self.clamp_per_page(query.per_page)
        params = {
            "q": query.query,
            "startIndex": str(query.pagination.offset(max_results)),
            "maxResults": str(max_results),
            "printType": "books",
            "langRestrict": query.filters.language or "es",
            "orderBy": "relevance",
            **self._key_params(),
        }
        if query.filters.is_open_access:
            params["filter"] = "free-ebooks"

        async with self._client() as client:
            data = await self._get_json(client, f"{BASE_URL}/volumes", params=params)

        items = [self.normalize_volume(v) for v in data.get("items") or [] if v.get("id")]
        return SearchResult(
            items=items,
            total=data.get("totalItems") or 0,
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        async with self._client() as client:
            volume = await self._get_json(client, f"{BASE_URL}/volumes/{external_id}", params=self._key_params())
        return self.normalize_volume(volume)

    def normalize_volume(self, item: Dict) -> AcademicResource:
        info = item.get("volumeInfo") or {}
        images = info.get("imageLinks") or {}
        isbn13 = next(
            (i.get("identifier") for i in info.get("industryIdentifiers") or [] if i.get("type") == "ISBN_13"),
            None,
        )

        return AcademicResource(
            external_id=item["id"],
            source=self.name,
            title=info.get("title"),
            authors=info.get("authors") or [],
            abstract=info.get("description") or None,
            publication_date=info.get("publishedDate"),
            type=PRINT_TYPES.get(info.get("printType") or "", ResourceType.BOOK),
            categories=info.get("categories") or [],
            url=info.get("infoLink") or info.get("previewLink"),
            pdf_url=extract_download_link(item.get("accessInfo") or {}),
            thumbnail_url=images.get("thumbnail") or images.get("smallThumbnail"),
            is_open_access=is_open_access(item),
            # ISBN-13 stands in for the DOI so editions dedupe across sources
            doi=isbn13,
            publisher=info.get("publisher"),
            page_count=info.get("pageCount"),
            language=info.get("language"),
        )
