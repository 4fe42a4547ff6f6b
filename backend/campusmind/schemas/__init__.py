"""
Schemas Module

Contains all Pydantic models (DTOs) for:
- the canonical academic resource every provider normalizes into
- search queries and per-source / aggregated results
- the curated library, careers and smart recommendations
"""
from .academic import (
    AcademicResource,
    AcademicSource,
    AggregatedResult,
    ImportRequest,
    Pagination,
    ResourceType,
    SearchCategory,
    SearchFilters,
    SearchQuery,
    SearchResult,
    SortOrder,
    UNKNOWN_AUTHOR,
    UNTITLED,
)
from .library import (
    Career,
    CareerSummary,
    CareerTextbooks,
    CategoryCount,
    LibraryCategory,
    LibraryStats,
    SmartRecommendation,
    TextbookListing,
)

__all__ = [
    "AcademicResource",
    "AcademicSource",
    "AggregatedResult",
    "ImportRequest",
    "Pagination",
    "ResourceType",
    "SearchCategory",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "SortOrder",
    "UNKNOWN_AUTHOR",
    "UNTITLED",
    "Career",
    "CareerSummary",
    "CareerTextbooks",
    "CategoryCount",
    "LibraryCategory",
    "LibraryStats",
    "SmartRecommendation",
    "TextbookListing",
]
