"""
Semantic Scholar data source.

Semantic Scholar Graph API covers 200M+ papers.
- Works without a key (shared pool, aggressive throttling)
- An API key raises limits; sent as x-api-key
"""
from datetime import date
from typing import Dict, List, Optional

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

BASE_URL = "https://api.semanticscholar.org/graph/v1"

PAPER_FIELDS = ",".join([
    "paperId",
    "title",
    "abstract",
    "authors",
    "year",
    "publicationDate",
    "venue",
    "isOpenAccess",
    "openAccessPdf",
    "citationCount",
    "referenceCount",
    "publicationTypes",
    "externalIds",
])

PUBLICATION_TYPES: Dict[str, ResourceType] = {
    "JournalArticle": ResourceType.ARTICLE,
    "Conference": ResourceType.CONFERENCE,
    "Book": ResourceType.BOOK,
    "BookSection": ResourceType.BOOK_CHAPTER,
    "Dataset": ResourceType.DATASET,
    "Review": ResourceType.ARTICLE,
}


def map_publication_types(types: Optional[List[str]]) -> ResourceType:
    """First recognised publication type wins; default paper."""
    for t in types or []:
        if t in PUBLICATION_TYPES:
            return PUBLICATION_TYPES[t]
    return ResourceType.PAPER


class SemanticScholarSource(BaseSource):
    max_per_page = 100

    @property
    def name(self) -> str:
        return AcademicSource.SEMANTIC_SCHOLAR.value

    @property
    def _headers(self) -> Dict[str, str]:
        api_key = settings.SEMANTIC_SCHOLAR_API_KEY
        return {"x-api-key": api_key} if api_key else {}

    async def _search(self, query: SearchQuery) -> SearchResult:
        logger.info(f"Searching Semantic Scholar: {query.query[:50]}...")

        limit = self.clamp_per_page(query.per_page)
        params = {
            "query": query.query,
            "fields": PAPER_FIELDS,
            "offset": str(query.pagination.offset(limit)),
            "limit": str(limit),
        }

        f = query.filters
        if f.year:
            params["year"] = str(f.year)
        elif f.year_from or f.year_to:
            params["year"] = f"{f.year_from or 1900}-{f.year_to or date.today().year}"

        if f.is_open_access:
            # Presence-only flag upstream
            params["openAccessPdf"] = ""

        async with self._client() as client:
            data = await self._get_json(
                client, f"{BASE_URL}/paper/search", params=params, headers=self._headers
            )

        items = [self.normalize_paper(p) for p in data.get("data") or []]
        return SearchResult(
            items=items,
            total=data.get("total") or 0,
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        async with self._client() as client:
            paper = await self._get_json(
                client,
                f"{BASE_URL}/paper/{external_id}",
                params={"fields": PAPER_FIELDS},
                headers=self._headers,
            )
        return self.normalize_paper(paper)

    def normalize_paper(self, paper: Dict) -> AcademicResource:
        open_access_pdf = paper.get("openAccessPdf") or {}
        external_ids = paper.get("externalIds") or {}

        return AcademicResource(
            external_id=paper.get("paperId") or "",
            source=self.name,
            title=paper.get("title"),
            authors=[a.get("name") for a in paper.get("authors") or []][:10],
            abstract=paper.get("abstract"),
            publication_date=paper.get("publicationDate"),
            publication_year=paper.get("year"),
            type=map_publication_types(paper.get("publicationTypes")),
            url=open_access_pdf.get("url"),
            pdf_url=open_access_pdf.get("url"),
            is_open_access=bool(paper.get("isOpenAccess", False)),
            citation_count=paper.get("citationCount"),
            reference_count=paper.get("referenceCount"),
            doi=external_ids.get("DOI"),
            venue=paper.get("venue") or None,
        )
