"""
Curated open-textbook library, career profiles and keyword-based
subject recommendations.
"""
from .catalog import CAREERS, CATEGORIES, TEXTBOOKS
from .library import CuratedLibrary, unique_by_external_id
from .recommendations import match_career, match_category, normalize_text

__all__ = [
    "CAREERS",
    "CATEGORIES",
    "TEXTBOOKS",
    "CuratedLibrary",
    "unique_by_external_id",
    "match_career",
    "match_category",
    "normalize_text",
]
