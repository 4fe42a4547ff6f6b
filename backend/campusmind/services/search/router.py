"""
Category router: coarse category -> ordered list of source identifiers.

Order is the dispatch order and the tie-break order in deduplication
(first seen wins).
"""
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from campusmind.schemas import AcademicSource, SearchCategory

_S = AcademicSource

CATEGORY_SOURCES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    SearchCategory.PAPERS.value: (
        _S.OPENALEX.value,
        _S.SEMANTIC_SCHOLAR.value,
        _S.CROSSREF.value,
    ),
    SearchCategory.BOOKS.value: (
        _S.GOOGLE_BOOKS.value,
        _S.ARCHIVE_ORG.value,
        _S.LIBGEN.value,
        _S.MEDICAL_BOOKS.value,
    ),
    SearchCategory.VIDEOS.value: (
        _S.YOUTUBE.value,
    ),
    SearchCategory.COURSES.value: (
        _S.GOOGLE_BOOKS.value,
        _S.WEB.value,
    ),
    SearchCategory.MEDICAL.value: (
        _S.MEDICAL_BOOKS.value,
        _S.OPENALEX.value,
        _S.SEMANTIC_SCHOLAR.value,
    ),
    SearchCategory.ALL.value: (
        _S.OPENALEX.value,
        _S.ARCHIVE_ORG.value,
        _S.YOUTUBE.value,
        _S.GOOGLE_BOOKS.value,
        _S.CROSSREF.value,
        _S.MEDICAL_BOOKS.value,
    ),
})


def resolve_category(category: Optional[Union[str, SearchCategory]]) -> Tuple[str, ...]:
    """Sources for a category. Unknown or missing categories fall back to 'all'."""
    key = category.value if isinstance(category, SearchCategory) else category
    return CATEGORY_SOURCES.get(key or "", CATEGORY_SOURCES[SearchCategory.ALL.value])
