"""
Curated library service: browse the open-textbook catalog by category
or career, and recommend textbooks for a free-text subject name.
"""
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from campusmind.core.exceptions import UnknownCareerError
from campusmind.core.logging import get_logger
from campusmind.schemas import (
    AcademicResource,
    Career,
    CareerSummary,
    CareerTextbooks,
    CategoryCount,
    LibraryCategory,
    LibraryStats,
    SmartRecommendation,
    TextbookListing,
)

from . import catalog
from .recommendations import careers_with_category, match_category, match_career

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 10


def unique_by_external_id(resources: Iterable[AcademicResource]) -> List[AcademicResource]:
    seen = set()
    unique = []
    for resource in resources:
        if resource.external_id in seen:
            continue
        seen.add(resource.external_id)
        unique.append(resource)
    return unique


class CuratedLibrary:
    """
    Read-only view over a textbook catalog.

    Defaults to the bundled catalog; tests pass their own tables.
    """

    def __init__(
        self,
        categories: Sequence[LibraryCategory] = catalog.CATEGORIES,
        textbooks: Mapping[str, Sequence[AcademicResource]] = catalog.TEXTBOOKS,
        careers: Sequence[Career] = catalog.CAREERS,
    ):
        self._categories = tuple(categories)
        self._textbooks = {k: tuple(v) for k, v in textbooks.items()}
        self._careers = tuple(careers)
        self._careers_by_id: Dict[str, Career] = {c.id: c for c in self._careers}

    # === Catalog browsing ===

    def get_categories(self) -> List[LibraryCategory]:
        return list(self._categories)

    def get_textbooks(self, category: Optional[str] = None) -> TextbookListing:
        """Textbooks of one category, or the whole catalog when category is None."""
        if category:
            books = list(self._textbooks.get(category, ()))
            description = next((c.description for c in self._categories if c.id == category), "")
        else:
            books = self._collect(self._textbooks)
            description = "All curated open textbooks"

        return TextbookListing(
            textbooks=books,
            categories=[c.id for c in self._categories],
            total=len(books),
            source=catalog.CATALOG_SOURCE,
            description=description,
        )

    def get_library_stats(self) -> LibraryStats:
        counts = [CategoryCount(category=c.id, count=len(self._textbooks.get(c.id, ()))) for c in self._categories]
        return LibraryStats(
            total_books=len(self._collect(self._textbooks)),
            total_categories=len(self._categories),
            total_careers=len(self._careers),
            categories_with_counts=counts,
            careers=[
                CareerSummary(id=c.id, name=c.name, categories_count=len(c.categories))
                for c in self._careers
            ],
        )

    def get_careers(self) -> List[Career]:
        return list(self._careers)

    def get_career(self, career_id: str) -> Career:
        career = self._careers_by_id.get(career_id)
        if career is None:
            raise UnknownCareerError(career_id)
        return career

    def get_textbooks_for_career(self, career_id: str) -> CareerTextbooks:
        career = self.get_career(career_id)
        books = self._books_for_categories(career.categories)
        return CareerTextbooks(
            career=career,
            textbooks=books,
            total=len(books),
            categories=list(career.categories),
        )

    # === Smart recommendations ===

    def smart_recommendations(self, subject_name: str) -> SmartRecommendation:
        """
        Recommend textbooks for a subject name.

        A category match wins over a career match. A career-only match
        pools the textbooks of all its categories. At most 10 results.
        """
        category_match = match_category(subject_name, self._categories)
        if category_match.count > 0:
            category = category_match.candidate
            owners = careers_with_category(category.id, self._careers)
            books = list(self._textbooks.get(category.id, ()))[:MAX_RECOMMENDATIONS]
            logger.info(f"Subject '{subject_name}' matched category {category.id} ({category_match.count} keywords)")
            return SmartRecommendation(
                subject_name=subject_name,
                career=owners[0] if owners else None,
                matched_category=category.id,
                recommendations=books,
                matched_keywords=list(category_match.keywords),
                total=len(books),
            )

        career_match = match_career(subject_name, self._careers)
        if career_match.count > 0:
            career = career_match.candidate
            books = self._books_for_categories(career.categories)[:MAX_RECOMMENDATIONS]
            logger.info(f"Subject '{subject_name}' matched career {career.id} ({career_match.count} keywords)")
            return SmartRecommendation(
                subject_name=subject_name,
                career=career,
                recommendations=books,
                matched_keywords=list(career_match.keywords),
                total=len(books),
            )

        logger.debug(f"No library match for subject '{subject_name}'")
        return SmartRecommendation(subject_name=subject_name)

    def _books_for_categories(self, category_ids: Tuple[str, ...]) -> List[AcademicResource]:
        return unique_by_external_id(b for cid in category_ids for b in self._textbooks.get(cid, ()))

    @staticmethod
    def _collect(textbooks: Mapping[str, Sequence[AcademicResource]]) -> List[AcademicResource]:
        return unique_by_external_id(b for books in textbooks.values() for b in books)
