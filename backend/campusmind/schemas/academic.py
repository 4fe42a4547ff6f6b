"""
Academic Resource Schemas

Canonical, source-agnostic models shared by every provider and by the
aggregator. All models are frozen: providers build them once per request,
the aggregator only filters and reorders them.

JSON uses camelCase (externalId, isOpenAccess, totalBySource...) through
an alias generator; Python code uses the snake_case field names.
"""
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

UNTITLED = "Untitled"
UNKNOWN_AUTHOR = "Unknown author"

MAX_TOPICS = 5
MAX_KEYWORDS = 10

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 25

_YEAR_PREFIX = re.compile(r"^\s*(\d{4})")


class AcademicSource(str, Enum):
    """Known source identifiers. Resource.source stays a plain string so
    manual or future sources still validate."""
    OPENALEX = "openalex"
    SEMANTIC_SCHOLAR = "semantic_scholar"
    CROSSREF = "crossref"
    YOUTUBE = "youtube"
    GOOGLE_BOOKS = "google_books"
    ARCHIVE_ORG = "archive_org"
    LIBGEN = "libgen"
    WEB = "web"
    MEDICAL_BOOKS = "medical_books"
    OER_COMMONS = "oer_commons"
    MANUAL = "manual"


class ResourceType(str, Enum):
    """Canonical resource taxonomy every provider maps into."""
    PAPER = "paper"
    BOOK = "book"
    BOOK_CHAPTER = "book_chapter"
    ARTICLE = "article"
    THESIS = "thesis"
    CONFERENCE = "conference"
    PREPRINT = "preprint"
    DATASET = "dataset"
    COURSE = "course"
    VIDEO = "video"
    MANUAL = "manual"
    NOTES = "notes"
    REPORT = "report"
    STANDARD = "standard"
    REFERENCE = "reference"
    OTHER = "other"


class SearchCategory(str, Enum):
    ALL = "all"
    PAPERS = "papers"
    BOOKS = "books"
    VIDEOS = "videos"
    COURSES = "courses"
    MEDICAL = "medical"


class SortOrder(str, Enum):
    RELEVANCE = "relevance"
    DATE = "date"
    CITATIONS = "citations"


class CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


def year_from_date(publication_date: Optional[str]) -> Optional[int]:
    """Leading four-digit year of a YYYY, YYYY-MM or YYYY-MM-DD string."""
    if not publication_date:
        return None
    match = _YEAR_PREFIX.match(str(publication_date))
    return int(match.group(1)) if match else None


class AcademicResource(CamelModel):
    """
    Canonical representation of one piece of academic content.

    external_id is only unique within source. type and is_open_access
    are required: every provider resolves its own default.
    """
    external_id: str
    source: str

    title: str = UNTITLED
    authors: Tuple[str, ...] = (UNKNOWN_AUTHOR,)
    abstract: Optional[str] = None
    publication_date: Optional[str] = None
    publication_year: Optional[int] = None

    type: ResourceType
    topics: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    subjects: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()

    url: Optional[str] = None
    pdf_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_open_access: bool
    license: Optional[str] = None

    citation_count: Optional[int] = None
    reference_count: Optional[int] = None

    doi: Optional[str] = None
    journal: Optional[str] = None
    publisher: Optional[str] = None
    venue: Optional[str] = None

    # Media / file details
    duration: Optional[str] = None
    page_count: Optional[int] = None
    language: Optional[str] = None
    extension: Optional[str] = None
    file_size: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _derive_publication_year(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        year = data.get("publication_year", data.get("publicationYear"))
        if year is None:
            date = data.get("publication_date", data.get("publicationDate"))
            derived = year_from_date(date)
            if derived is not None:
                data = {**data, "publication_year": derived}
                data.pop("publicationYear", None)
        return data

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return UNTITLED
        return value

    @field_validator("authors", mode="before")
    @classmethod
    def _default_authors(cls, value: Any) -> Any:
        if not value:
            return (UNKNOWN_AUTHOR,)
        return tuple(a for a in value if a) or (UNKNOWN_AUTHOR,)

    @field_validator("topics", mode="before")
    @classmethod
    def _cap_topics(cls, value: Any) -> Any:
        return tuple(value or ())[:MAX_TOPICS]

    @field_validator("keywords", mode="before")
    @classmethod
    def _cap_keywords(cls, value: Any) -> Any:
        return tuple(value or ())[:MAX_KEYWORDS]


class SearchFilters(CamelModel):
    type: Optional[ResourceType] = None
    year: Optional[int] = None
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    is_open_access: Optional[bool] = None
    language: Optional[str] = None
    topics: Tuple[str, ...] = ()


class Pagination(CamelModel):
    page: int = Field(default=DEFAULT_PAGE, ge=1)
    per_page: int = Field(default=DEFAULT_PER_PAGE, ge=1)

    def offset(self, per_page: Optional[int] = None) -> int:
        return (self.page - 1) * (per_page or self.per_page)


class SearchQuery(CamelModel):
    query: str
    filters: SearchFilters = Field(default_factory=SearchFilters)
    pagination: Pagination = Field(default_factory=Pagination)
    sort: SortOrder = SortOrder.RELEVANCE

    @property
    def page(self) -> int:
        return self.pagination.page

    @property
    def per_page(self) -> int:
        return self.pagination.per_page

    def with_text(self, text: str) -> "SearchQuery":
        """Copy of this query with a different search string."""
        return self.model_copy(update={"query": text})


class SearchResult(CamelModel):
    """One provider's answer to one query."""
    items: Tuple[AcademicResource, ...] = ()
    total: int = 0
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE
    source: str

    @classmethod
    def empty(cls, source: str, query: Optional[SearchQuery] = None) -> "SearchResult":
        """The result every provider returns when its source failed."""
        if query is None:
            return cls(source=source)
        return cls(source=source, page=query.page, per_page=query.per_page)


class AggregatedResult(CamelModel):
    """Deduplicated, ranked results plus the reported total of every dispatched source."""
    results: List[AcademicResource] = Field(default_factory=list)
    total_by_source: Dict[str, int] = Field(default_factory=dict)


class ImportRequest(CamelModel):
    """Resource hand-off to the persistence collaborator."""
    container_id: str = Field(min_length=1)
    resource: AcademicResource
