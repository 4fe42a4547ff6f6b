"""
Internet Archive data source for free books, manuals and educational media.

Everything in the archive is free to access, so resources are always
open access. Type is inferred from the coarse item mediatype.
"""
from typing import Any, Dict, List, Optional

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

BASE_URL = "https://archive.org"

SEARCHED_MEDIA_TYPES = ("texts", "education")
RETURNED_FIELDS = "identifier,title,creator,description,date,mediatype,downloads,subject,language"
TEXTBOOK_TERMS = '(textbook OR manual OR "course material" OR apuntes)'

MEDIA_TYPES: Dict[str, ResourceType] = {
    "texts": ResourceType.BOOK,
    "movies": ResourceType.VIDEO,
    "education": ResourceType.VIDEO,
    "audio": ResourceType.COURSE,
}


def map_media_type(media_type: Optional[str]) -> ResourceType:
    return MEDIA_TYPES.get(media_type or "", ResourceType.OTHER)


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


def _first(value: Any) -> Optional[str]:
    values = _as_list(value)
    return values[0] if values else None


def _as_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ArchiveOrgSource(BaseSource):
    max_per_page = 100

    @property
    def name(self) -> str:
        return AcademicSource.ARCHIVE_ORG.value

    async def _search(self, query: SearchQuery) -> SearchResult:
        media = " OR ".join(f"mediatype:{t}" for t in SEARCHED_MEDIA_TYPES)
        rows = self.clamp_per_page(query.per_page)
        params = {
            "q": f"({query.query}) AND ({media})",
            "output": "json",
            "rows": str(rows),
            "page": str(query.page),
            "fl[]": RETURNED_FIELDS,
        }

        async with self._client() as client:
            data = await self._get_json(client, f"{BASE_URL}/advancedsearch.php", params=params)

        response = data.get("response") or {}
        items = [self.normalize_doc(doc) for doc in response.get("docs") or [] if doc.get("identifier")]
        return SearchResult(
            items=items,
            total=response.get("numFound") or 0,
            page=query.page,
            per_page=query.per_page,
            source=self.name,
        )

    async def search_textbooks(self, query: SearchQuery) -> SearchResult:
        """Search biased towards textbooks, manuals and course notes."""
        return await self.search(query.with_text(f"{query.query} {TEXTBOOK_TERMS}"))

    async def _get_by_id(self, external_id: str) -> Optional[AcademicResource]:
        async with self._client() as client:
            data = await self._get_json(client, f"{BASE_URL}/metadata/{external_id}")
        metadata = data.get("metadata")
        if not metadata:
            return None
        return self.normalize_doc({**metadata, "identifier": external_id})

    def normalize_doc(self, doc: Dict) -> AcademicResource:
        identifier = doc["identifier"]
        media_type = _first(doc.get("mediatype"))
        resource_type = map_media_type(media_type)

        return AcademicResource(
            external_id=identifier,
            source=self.name,
            title=_first(doc.get("title")),
            authors=_as_list(doc.get("creator")),
            abstract=_first(doc.get("description")),
            publication_date=(_first(doc.get("date")) or "").split("T")[0] or None,
            type=resource_type,
            subjects=_as_list(doc.get("subject")),
            url=f"{BASE_URL}/details/{identifier}",
            pdf_url=f"{BASE_URL}/download/{identifier}/{identifier}.pdf" if resource_type == ResourceType.BOOK else None,
            thumbnail_url=f"{BASE_URL}/services/img/{identifier}",
            is_open_access=True,
            # Downloads stand in for popularity
            citation_count=_as_int(doc.get("downloads")),
            language=_first(doc.get("language")),
        )
