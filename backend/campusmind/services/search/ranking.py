"""
Merge, deduplication and ranking of per-source results.

Deduplication keeps the first occurrence of each key while walking the
results in dispatch order. When two sources index the same work, the
copy from whichever source the category lists first is kept; this is a
deterministic tie-break, not a choice of the best record. Two different
resources that share a generic landing-page URL (and no DOI) also
collapse into one.

Ranking is a fixed heuristic, not a relevance model:
score = 2 * has_thumbnail + 1 * has_abstract, descending, stable.
"""
from typing import Dict, Iterable, List, Sequence

from campusmind.schemas import AcademicResource, AggregatedResult, SearchResult

THUMBNAIL_WEIGHT = 2
ABSTRACT_WEIGHT = 1


def dedup_key(resource: AcademicResource) -> str:
    """doi, else url, else source:external_id."""
    if resource.doi:
        return resource.doi
    if resource.url:
        return resource.url
    return f"{resource.source}:{resource.external_id}"


def deduplicate(resources: Iterable[AcademicResource]) -> List[AcademicResource]:
    seen = set()
    unique = []
    for resource in resources:
        key = dedup_key(resource)
        if key in seen:
            continue
        seen.add(key)
        unique.append(resource)
    return unique


def score(resource: AcademicResource) -> int:
    return THUMBNAIL_WEIGHT * bool(resource.thumbnail_url) + ABSTRACT_WEIGHT * bool(resource.abstract)


def rank_results(resources: Sequence[AcademicResource]) -> List[AcademicResource]:
    # sorted() is stable, so ties keep dedup order
    return sorted(resources, key=score, reverse=True)


def totals_by_source(results: Sequence[SearchResult]) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for result in results:
        totals[result.source] = result.total
    return totals


def merge_results(results: Sequence[SearchResult]) -> AggregatedResult:
    """
    Combine per-source results into one ranked list.

    Args:
        results: One SearchResult per dispatched source, in dispatch order.
            Failed sources are included as empty results.

    Returns:
        AggregatedResult with ranked unique items and every source's total
    """
    items = (item for result in results for item in result.items)
    return AggregatedResult(
        results=rank_results(deduplicate(items)),
        total_by_source=totals_by_source(results),
    )
