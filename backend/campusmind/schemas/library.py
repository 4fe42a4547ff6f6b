"""
Curated Library Schemas

Models for the curated open-textbook catalog, career profiles and the
keyword-based recommendation response.
"""
from typing import List, Optional, Tuple

from pydantic import Field

from .academic import AcademicResource, CamelModel


class LibraryCategory(CamelModel):
    """A fine-grained subject area with its matching keywords."""
    id: str
    description: str
    keywords: Tuple[str, ...] = ()


class Career(CamelModel):
    """A degree programme grouping several library categories."""
    id: str
    name: str
    description: str
    icon: str = "book"
    gradient: str = "from-slate-500 to-slate-700"
    categories: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()


class TextbookListing(CamelModel):
    textbooks: List[AcademicResource] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    total: int = 0
    source: str = "oer_commons"
    description: str = ""


class CategoryCount(CamelModel):
    category: str
    count: int


class CareerSummary(CamelModel):
    id: str
    name: str
    categories_count: int


class LibraryStats(CamelModel):
    total_books: int
    total_categories: int
    total_careers: int
    categories_with_counts: List[CategoryCount] = Field(default_factory=list)
    careers: List[CareerSummary] = Field(default_factory=list)


class CareerTextbooks(CamelModel):
    career: Career
    textbooks: List[AcademicResource] = Field(default_factory=list)
    total: int = 0
    categories: List[str] = Field(default_factory=list)


class SmartRecommendation(CamelModel):
    """Outcome of matching a free-text subject name against the library."""
    subject_name: str
    career: Optional[Career] = None
    matched_category: Optional[str] = None
    recommendations: List[AcademicResource] = Field(default_factory=list)
    matched_keywords: List[str] = Field(default_factory=list)
    total: int = 0
