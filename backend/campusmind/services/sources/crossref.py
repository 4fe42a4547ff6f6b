"""
CrossRef data source.

CrossRef provides DOI metadata for 140M+ works.
- No API key required (use polite pool with email)
- Great for citation data
- Abstracts are JATS/HTML fragments and get their tags stripped
"""
import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import quote

from campusmind.core.config import settings
from campusmind.core.exceptions import SourceParseError
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

BASE_URL = "https://api.crossref.org"

SELECT_FIELDS = (
    "DOI,title,author,abstract,published,published-online,published-print,type,subject,"
    "is-referenced-by-count,references-count,URL,link,license,container-title,publisher"
)

WORK_TYPES: Dict[str, ResourceType] = {
    "journal-article": ResourceType.ARTICLE,
    "book-chapter": ResourceType.BOOK_CHAPTER,
    "book": ResourceType.BOOK,
    "monograph": ResourceType.BOOK,
    "edited-book": ResourceType.BOOK,
    "proceedings-article": ResourceType.CONFERENCE,
    "proceedings": ResourceType.CONFERENCE,
    "dissertation": ResourceType.THESIS,
    "posted-content": ResourceType.PREPRINT,
    "dataset": ResourceType.DATASET,
    "report": ResourceType.REPORT,
    "standard": ResourceType.STANDARD,
    "reference-entry": ResourceType.REFERENCE,
}

# course, video and friends have no Crossref equivalent
FILTER_TYPES: Dict[ResourceType, str] = {
    ResourceType.ARTICLE: "journal-article",
    ResourceType.PAPER: "journal-article",
    ResourceType.BOOK: "book",
    ResourceType.BOOK_CHAPTER: "book-chapter",
    ResourceType.CONFERENCE: "proceedings-article",
    ResourceType.THESIS: "dissertation",
    ResourceType.PREPRINT: "posted-content",
    ResourceType.DATASET: "dataset",
    ResourceType.REPORT: "report",
    ResourceType.STANDARD: "standard",
    ResourceType.REFERENCE: "reference-entry",
}

_TAG = re.compile(r"<[^>]*>")


def map_work_type(work_type: Optional[str]) -> ResourceType:
    return WORK_TYPES.get(work_type or "", ResourceType.PAPER)


def to_crossref_type(resource_type: Optional[ResourceType]) -> Optional[str]:
    if resource_type is None:
        return None
    return FILTER_TYPES.get(resource_type)


def extract_publication_date(work: Dict) -> Tuple[Optional[str], Optional[int]]:
    """First of published / published-online / published-print, as a partial ISO date."""
    parts: List = []
    for key in ("published", "published-online", "published-print"):
        date_parts = (work.get(key) or {}).get("date-parts") or []
        if date_parts and date_parts[0]:
            parts = date_parts[0]
            break

    if not parts or not parts[0]:
        return None, None

    year = int(parts[0])
    month = int(parts[1]) if len(parts) > 1 and parts[1] else None
    day = int(parts[2]) if len(parts) > 2 and parts[2] else None

    if month and day:
        return f"{year}-{month:02d}-{day:02d}", year
    if month:
        return f"{year}-{month:02d}", year
    return str(year), year


def extract_authors(work: Dict) -> List[str]:
    names = []
    for a in work.get("author") or []:
        if a.get("name"):
            names.append(a["name"])
        elif a.get("given") and a.get("family"):
            names.append(f"{a['given']} {a['family']}")
        elif a.get("family"):
            names.append(a["family"])
    return names[:10]


def extract_pdf_url(work: Dict) -> Optional[str]:
    for link in work.get("link") or []:
        url = link.get("URL") or ""
        if (
            link.get("content-type") == "application/pdf"
            or link.get("intended-application") == "text-mining"
            or url.endswith(".pdf")
        ):
            return url or None
    return None


def is_open_access(work: Dict) -> bool:
    """Creative Commons / version-of-record license, or a free full-text link."""
    for lic in work.get("license") or []:
        if "creativecommons.org" in (lic.get("URL") or "") or lic.get("content-version") == "vor":
            return True
    for link in work.get("link") or []:
        if (
            link.get("intended-application") == "text-mining"
            or link.get("content-type") == "application/pdf"
        ):
            return True
    return False


class CrossrefSource(BaseSource):
    max_per_page = 100

    @property
    def name(self) -> str:
        return AcademicSource.CROSSREF.value

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": f"CampusMind/1.0 (mailto:{settings.API_CONTACT_EMAIL})",
        }

    async def _search(self, query: SearchQuery) -> SearchResult:
        logger.info(f"Searching CrossRef: {query.query[:50]}...")

        async with self._client() as client:
            data = await self._get_json(
                client, f"{BASE_URL}/works", params=self._build_params(query), headers=self._headers
            )

        message = data.get("message") or {}
        if data.get("status") != "ok" or message.get("items") is None:
            raise SourceParseError(self.name, "unexpected response envelope")

        items = [self.normalize_work(work) for work in message["items"]]
        logger.info(f"CrossRef: Returned {len(items)} works")
        return SearchResult(
            items=items,
            total=message.get("total-results") or 0,
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        # Crossref IDs are DOIs (e.g., 10.1000/xyz123)
        doi = external_id if external_id.startswith("10.") else f"10.{external_id}"
        async with self._client() as client:
            data = await self._get_json(
                client, f"{BASE_URL}/works/{quote(doi, safe='')}", headers=self._headers
            )
        if data.get("status") != "ok":
            return None
        return self.normalize_work(data.get("message") or {})

    def _build_params(self, query: SearchQuery) -> Dict[str, str]:
        params = {"query.bibliographic": query.query}

        filters = []
        f = query.filters
        if f.is_open_access:
            filters.append("is-oa:true")
        if f.year_from:
            filters.append(f"from-pub-date:{f.year_from}")
        if f.year_to:
            filters.append(f"until-pub-date:{f.year_to}")
        if f.year:
            filters.append(f"from-pub-date:{f.year}")
            filters.append(f"until-pub-date:{f.year}")
        crossref_type = to_crossref_type(f.type)
        if crossref_type:
            filters.append(f"type:{crossref_type}")
        if filters:
            params["filter"] = ",".join(filters)

        rows = self.clamp_per_page(query.per_page)
        params["offset"] = str(query.pagination.offset(rows))
        params["rows"] = str(rows)

        if query.sort == SortOrder.DATE:
            params["sort"] = "published"
            params["order"] = "desc"
        elif query.sort == SortOrder.CITATIONS:
            params["sort"] = "is-referenced-by-count"
            params["order"] = "desc"
        else:
            params["sort"] = "relevance"

        params["select"] = SELECT_FIELDS
        return params

    def normalize_work(self, work: Dict) -> AcademicResource:
        publication_date, year = extract_publication_date(work)
        doi = work.get("DOI")
        abstract = work.get("abstract")
        titles = work.get("title") or []
        containers = work.get("container-title") or []
        licenses = work.get("license") or []

        return AcademicResource(
            external_id=doi or "",
            source=self.name,
            title=titles[0] if titles else None,
            authors=extract_authors(work),
            abstract=_TAG.sub("", abstract).strip() if abstract else None,
            publication_date=publication_date,
            publication_year=year,
            type=map_work_type(work.get("type")),
            topics=work.get("subject") or [],
            url=work.get("URL") or (f"https://doi.org/{doi}" if doi else None),
            pdf_url=extract_pdf_url(work),
            is_open_access=is_open_access(work),
            license=licenses[0].get("URL") if licenses else None,
            citation_count=work.get("is-referenced-by-count"),
            reference_count=work.get("references-count"),
            doi=f"https://doi.org/{doi}" if doi else None,
            journal=containers[0] if containers else None,
            publisher=work.get("publisher"),
        )
