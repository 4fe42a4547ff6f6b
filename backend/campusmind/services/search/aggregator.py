"""
Scatter-gather orchestrator over the registered sources.

Every multi-source call dispatches one task per source, waits for all of
them to settle and only then merges. A source that raises, times out or
is unknown contributes its empty result; the aggregate call itself never
fails. Cancelling the awaiting task cancels every outstanding dispatch.
"""
import asyncio
from typing import List, Mapping, Optional, Sequence, Union

from campusmind.core.logging import get_logger
from campusmind.schemas import (
    AcademicResource,
    AcademicSource,
    AggregatedResult,
    Pagination,
    SearchCategory,
    SearchFilters,
    SearchQuery,
    SearchResult,
    SortOrder,
)
from campusmind.services.sources import ArchiveOrgSource, BaseSource

from .ranking import merge_results
from .router import resolve_category

logger = get_logger(__name__)

DEFAULT_SOURCE = AcademicSource.OPENALEX.value
DEFAULT_MULTI_SOURCES = (
    AcademicSource.OPENALEX.value,
    AcademicSource.SEMANTIC_SCHOLAR.value,
    AcademicSource.CROSSREF.value,
)
DEFAULT_RECOMMENDATION_LIMIT = 10


class AcademicService:
    """
    Federated search over a fixed registry of sources.

    Args:
        sources: Source identifier -> provider instance, built once at startup
    """

    def __init__(self, sources: Mapping[str, BaseSource]):
        self._sources = dict(sources)

    @property
    def source_names(self) -> List[str]:
        return list(self._sources)

    def get_source(self, source: str) -> Optional[BaseSource]:
        return self._sources.get(source)

    async def search(self, query: SearchQuery, source: str = DEFAULT_SOURCE) -> SearchResult:
        """Search exactly one source. Unknown sources yield an empty result."""
        provider = self._sources.get(source)
        if provider is None:
            logger.warning(f"Unknown source requested: {source}")
            return SearchResult.empty(source, query)

        logger.info(f"Searching {source} for: {query.query}")
        return await self._dispatch(provider, query)

    async def search_multiple(
        self,
        query: SearchQuery,
        sources: Optional[Sequence[str]] = None,
    ) -> AggregatedResult:
        """Search several sources concurrently and merge the results."""
        names = list(sources) if sources else list(DEFAULT_MULTI_SOURCES)
        logger.info(f"Dispatching '{query.query}' to {len(names)} sources: {', '.join(names)}")

        results = await asyncio.gather(*(self.search(query, name) for name in names))

        for result in results:
            logger.debug(f"{result.source}: {len(result.items)} items, total {result.total}")

        merged = merge_results(results)
        logger.info(f"Merged {len(merged.results)} unique results from {len(names)} sources")
        return merged

    async def search_all(
        self,
        query: SearchQuery,
        category: Optional[Union[str, SearchCategory]] = SearchCategory.ALL,
    ) -> AggregatedResult:
        """Search every source routed for a category (unknown -> all)."""
        return await self.search_multiple(query, resolve_category(category))

    async def get_by_id(self, external_id: str, source: str) -> Optional[AcademicResource]:
        provider = self._sources.get(source)
        if provider is None:
            logger.warning(f"Unknown source for lookup: {source}")
            return None
        return await provider.get_by_id(external_id)

    async def get_recommendations(
        self,
        topics: Sequence[str],
        is_open_access: Optional[bool] = None,
        limit: int = DEFAULT_RECOMMENDATION_LIMIT,
        category: Optional[Union[str, SearchCategory]] = SearchCategory.ALL,
    ) -> List[AcademicResource]:
        """
        Open-access resources for a set of topics.

        Topics are OR-joined into one query; open access defaults to True
        unless explicitly set. Returns the first `limit` ranked items.
        """
        if not topics:
            return []

        query = SearchQuery(
            query=" OR ".join(topics),
            filters=SearchFilters(is_open_access=True if is_open_access is None else is_open_access),
            pagination=Pagination(page=1, per_page=limit),
            sort=SortOrder.RELEVANCE,
        )
        aggregated = await self.search_all(query, category)
        return aggregated.results[:limit]

    async def search_textbooks(self, query: SearchQuery) -> SearchResult:
        """Textbook-biased search on the Internet Archive."""
        provider = self._sources.get(AcademicSource.ARCHIVE_ORG.value)
        if not isinstance(provider, ArchiveOrgSource):
            return SearchResult.empty(AcademicSource.ARCHIVE_ORG.value, query)
        return await provider.search_textbooks(query)

    async def _dispatch(self, provider: BaseSource, query: SearchQuery) -> SearchResult:
        try:
            return await provider.search(query)
        except Exception as e:
            logger.error(f"Error searching {provider.name}: {e}")
            return SearchResult.empty(provider.name, query)
