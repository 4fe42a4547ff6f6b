"""
OpenAlex data source.

OpenAlex provides access to 250M+ scholarly works.
- 100,000 calls per day
- 10 requests per second
- No API key required (a contact email joins the polite pool)

Abstracts arrive as an inverted index (word -> positions) and are
rebuilt with reconstruct_abstract().
"""
from typing import Dict, List, Optional

from campusmind.core.config import settings
from campusmind.core.logging import get_logger
from campusmind.schemas import (
    AcademicResource,
    AcademicSource,
    ResourceType,
    SearchQuery,
    SearchResult,
    SortOrder,
)

from .base import BaseSource

logger = get_logger(__name__)

BASE_URL = "https://api.openalex.org"

WORK_TYPES: Dict[str, ResourceType] = {
    "journal-article": ResourceType.ARTICLE,
    "article": ResourceType.ARTICLE,
    "book-chapter": ResourceType.BOOK_CHAPTER,
    "book": ResourceType.BOOK,
    "proceedings-article": ResourceType.CONFERENCE,
    "dissertation": ResourceType.THESIS,
    "preprint": ResourceType.PREPRINT,
    "dataset": ResourceType.DATASET,
    "report": ResourceType.REPORT,
    "standard": ResourceType.STANDARD,
    "reference-entry": ResourceType.REFERENCE,
}


def reconstruct_abstract(inverted_index: Optional[Dict[str, List[int]]]) -> Optional[str]:
    """
    Rebuild abstract text from OpenAlex inverted index format.

    Pairs are stable-sorted by position, so a repeated position keeps
    dictionary order. No index yields None, never an empty string.
    """
    if not inverted_index:
        return None

    words_with_positions = []
    for word, positions in inverted_index.items():
        for pos in positions:
            words_with_positions.append((pos, word))

    words_with_positions.sort(key=lambda x: x[0])
    return " ".join(word for _, word in words_with_positions)


def map_work_type(work_type: Optional[str]) -> ResourceType:
    return WORK_TYPES.get(work_type or "", ResourceType.PAPER)


class OpenAlexSource(BaseSource):
    max_per_page = 200

    @property
    def name(self) -> str:
        return AcademicSource.OPENALEX.value

    @property
    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": f"CampusMind/1.0 (mailto:{settings.API_CONTACT_EMAIL})"}

    async def _search(self, query: SearchQuery) -> SearchResult:
        logger.info(f"Searching OpenAlex: {query.query[:50]}...")

        async with self._client() as client:
            data = await self._get_json(
                client,
                f"{BASE_URL}/works",
                params=self._build_params(query),
                headers=self._headers,
                retry_on_rate_limit=True,
            )

        items = [self.normalize_work(work) for work in data.get("results") or []]
        total = (data.get("meta") or {}).get("count", len(items))

        logger.info(f"OpenAlex: Returned {len(items)} works")
        return SearchResult(
            items=items,
            total=total,
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        # OpenAlex IDs look like: W2741809807
        async with self._client() as client:
            work = await self._get_json(client, f"{BASE_URL}/works/{external_id}", headers=self._headers)
        return self.normalize_work(work)

    def _build_params(self, query: SearchQuery) -> Dict[str, str]:
        params = {"search": query.query}

        filters = []
        f = query.filters
        if f.is_open_access:
            filters.append("is_oa:true")
        if f.year_from:
            filters.append(f"publication_year:>{f.year_from - 1}")
        if f.year_to:
            filters.append(f"publication_year:<{f.year_to + 1}")
        if f.year:
            filters.append(f"publication_year:{f.year}")
        if filters:
            params["filter"] = ",".join(filters)

        params["page"] = str(query.page)
        params["per_page"] = str(self.clamp_per_page(query.per_page))

        # relevance is the upstream default
        if query.sort == SortOrder.DATE:
            params["sort"] = "publication_date:desc"
        elif query.sort == SortOrder.CITATIONS:
            params["sort"] = "cited_by_count:desc"

        return params

    def normalize_work(self, work: Dict) -> AcademicResource:
        primary_location = work.get("primary_location") or {}
        source = primary_location.get("source") or {}
        open_access = work.get("open_access") or {}

        return AcademicResource(
            external_id=(work.get("id") or "").replace("https://openalex.org/", ""),
            source=self.name,
            title=work.get("title") or work.get("display_name"),
            authors=[
                (a.get("author") or {}).get("display_name")
                for a in work.get("authorships") or []
            ][:10],
            abstract=reconstruct_abstract(work.get("abstract_inverted_index")),
            publication_date=work.get("publication_date"),
            publication_year=work.get("publication_year"),
            type=map_work_type(work.get("type")),
            topics=[t.get("display_name") for t in work.get("topics") or [] if t.get("display_name")],
            keywords=[k.get("display_name") for k in work.get("keywords") or [] if k.get("display_name")],
            url=primary_location.get("landing_page_url") or work.get("doi"),
            pdf_url=primary_location.get("pdf_url") or open_access.get("oa_url"),
            is_open_access=bool(open_access.get("is_oa", False)),
            license=primary_location.get("license"),
            citation_count=work.get("cited_by_count"),
            reference_count=work.get("referenced_works_count"),
            doi=work.get("doi"),
            journal=source.get("display_name"),
            publisher=source.get("host_organization_name"),
        )
