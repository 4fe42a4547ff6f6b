"""
Academic Search API Routes

Thin FastAPI adapter over the search orchestrator and the curated
library. Input validation (empty queries, page bounds) happens here;
search itself never fails, so search routes always answer 200.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from campusmind.core.config import settings
from campusmind.core.dependencies import (
    get_academic_service,
    get_library,
    get_resource_importer,
    get_usage_gate,
)
from campusmind.core.exceptions import (
    InvalidQueryError,
    ResourceImportError,
    UnknownCareerError,
    UsageLimitExceededError,
)
from campusmind.core.logging import get_logger
from campusmind.core.rate_limit import IMPORT_LIMIT, RECOMMENDATION_LIMIT, SEARCH_LIMIT, limiter
from campusmind.schemas import (
    AcademicResource,
    AcademicSource,
    AggregatedResult,
    Career,
    CareerTextbooks,
    ImportRequest,
    LibraryStats,
    Pagination,
    ResourceType,
    SearchCategory,
    SearchFilters,
    SearchQuery,
    SearchResult,
    SmartRecommendation,
    SortOrder,
    TextbookListing,
)
from campusmind.schemas.academic import DEFAULT_PAGE
from campusmind.services.collaborators import IMPORT_OPERATION, ResourceImporter, UsageGate
from campusmind.services.library import CuratedLibrary
from campusmind.services.search import AcademicService

logger = get_logger(__name__)

router = APIRouter(prefix="/api/academic", tags=["academic"])


def _split(value: Optional[str]) -> List[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def _require_text(value: Optional[str], field: str = "q") -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidQueryError(f"Parameter '{field}' must not be empty")
    return text


def _bad_request(error: InvalidQueryError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.detail)


def search_query(
    q: Optional[str] = Query(default=None, description="Search text"),
    type: Optional[ResourceType] = Query(default=None),
    year: Optional[int] = Query(default=None),
    year_from: Optional[int] = Query(default=None, alias="yearFrom"),
    year_to: Optional[int] = Query(default=None, alias="yearTo"),
    open_access_only: Optional[bool] = Query(default=None, alias="openAccessOnly"),
    language: Optional[str] = Query(default=None),
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    per_page: int = Query(default=settings.DEFAULT_PER_PAGE, ge=1, alias="perPage"),
    sort: SortOrder = Query(default=SortOrder.RELEVANCE),
) -> SearchQuery:
    """Shared query-string parsing for every search route."""
    try:
        text = _require_text(q)
    except InvalidQueryError as e:
        raise _bad_request(e)

    return SearchQuery(
        query=text,
        filters=SearchFilters(
            type=type,
            year=year,
            year_from=year_from,
            year_to=year_to,
            is_open_access=open_access_only,
            language=language,
        ),
        pagination=Pagination(page=page, per_page=per_page),
        sort=sort,
    )


# === Search ===

@router.get("/search", response_model=SearchResult)
@limiter.limit(SEARCH_LIMIT)
async def search(
    request: Request,
    source: str = Query(default=AcademicSource.OPENALEX.value),
    query: SearchQuery = Depends(search_query),
    service: AcademicService = Depends(get_academic_service),
):
    """Search a single source. Unknown sources return an empty result."""
    return await service.search(query, source)


@router.get("/search/multi", response_model=AggregatedResult)
@limiter.limit(SEARCH_LIMIT)
async def search_multiple(
    request: Request,
    sources: Optional[str] = Query(default=None, description="Comma-separated source ids"),
    query: SearchQuery = Depends(search_query),
    service: AcademicService = Depends(get_academic_service),
):
    return await service.search_multiple(query, _split(sources) or None)


@router.get("/search/all", response_model=AggregatedResult)
@limiter.limit(SEARCH_LIMIT)
async def search_all(
    request: Request,
    category: str = Query(default=SearchCategory.ALL.value),
    query: SearchQuery = Depends(search_query),
    service: AcademicService = Depends(get_academic_service),
):
    """Search every source routed for a category. Unknown categories search all."""
    return await service.search_all(query, category)


@router.get("/search/textbooks", response_model=SearchResult)
@limiter.limit(SEARCH_LIMIT)
async def search_textbooks(
    request: Request,
    query: SearchQuery = Depends(search_query),
    service: AcademicService = Depends(get_academic_service),
):
    return await service.search_textbooks(query)


@router.get("/resource/{source}/{external_id:path}", response_model=AcademicResource)
async def get_resource(
    source: str,
    external_id: str,
    service: AcademicService = Depends(get_academic_service),
):
    resource = await service.get_by_id(external_id, source)
    if resource is None:
        raise HTTPException(status_code=404, detail=f"Resource {external_id} not found in {source}")
    return resource


# === Recommendations ===

@router.get("/recommendations")
@limiter.limit(RECOMMENDATION_LIMIT)
async def recommendations(
    request: Request,
    topics: Optional[str] = Query(default=None, description="Comma-separated topics"),
    open_access_only: Optional[bool] = Query(default=None, alias="openAccessOnly"),
    limit: int = Query(default=10, ge=1, le=50),
    category: str = Query(default=SearchCategory.ALL.value),
    service: AcademicService = Depends(get_academic_service),
) -> Dict[str, Any]:
    items = await service.get_recommendations(
        _split(topics),
        is_open_access=open_access_only,
        limit=limit,
        category=category,
    )
    return {"recommendations": items, "total": len(items)}


@router.get("/recommendations/smart", response_model=SmartRecommendation)
@limiter.limit(RECOMMENDATION_LIMIT)
async def smart_recommendations(
    request: Request,
    subject: Optional[str] = Query(default=None),
    library: CuratedLibrary = Depends(get_library),
):
    """Textbooks for a subject name, matched by keywords against categories and careers."""
    try:
        subject_name = _require_text(subject, "subject")
    except InvalidQueryError as e:
        raise _bad_request(e)
    return library.smart_recommendations(subject_name)


# === Curated library ===

@router.get("/library/textbooks", response_model=TextbookListing)
async def library_textbooks(
    category: Optional[str] = Query(default=None),
    library: CuratedLibrary = Depends(get_library),
):
    return library.get_textbooks(category)


@router.get("/library/categories")
async def library_categories(library: CuratedLibrary = Depends(get_library)) -> Dict[str, Any]:
    categories = library.get_categories()
    return {
        "categories": [c.id for c in categories],
        "descriptions": {c.id: c.description for c in categories},
    }


@router.get("/library/stats", response_model=LibraryStats)
async def library_stats(library: CuratedLibrary = Depends(get_library)):
    return library.get_library_stats()


@router.get("/careers")
async def careers(library: CuratedLibrary = Depends(get_library)) -> Dict[str, Any]:
    listed = library.get_careers()
    return {"careers": listed, "total": len(listed)}


@router.get("/careers/{career_id}", response_model=Career)
async def career(career_id: str, library: CuratedLibrary = Depends(get_library)):
    try:
        return library.get_career(career_id)
    except UnknownCareerError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/careers/{career_id}/textbooks", response_model=CareerTextbooks)
async def career_textbooks(career_id: str, library: CuratedLibrary = Depends(get_library)):
    try:
        return library.get_textbooks_for_career(career_id)
    except UnknownCareerError as e:
        raise HTTPException(status_code=404, detail=str(e))


# === Import ===

@router.post("/import", status_code=status.HTTP_201_CREATED)
@limiter.limit(IMPORT_LIMIT)
async def import_resource(
    request: Request,
    body: ImportRequest,
    gate: UsageGate = Depends(get_usage_gate),
    importer: ResourceImporter = Depends(get_resource_importer),
) -> Dict[str, Any]:
    """Hand a resource to the persistence collaborator after the usage check."""
    try:
        await gate.check(IMPORT_OPERATION)
    except UsageLimitExceededError as e:
        raise HTTPException(status_code=429, detail=str(e))

    try:
        record = await importer.import_resource(body)
    except ResourceImportError as e:
        logger.error(f"Import into {body.container_id} failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"Imported {body.resource.source}:{body.resource.external_id} into {body.container_id}")
    return {"imported": True, "containerId": body.container_id, "record": record}
