"""
Data sources for academic resource search.

Each source is implemented in its own module for maintainability.
All sources share the BaseSource contract: async search() that never
raises, optional get_by_id().

To add a new source:
1. Create a new file (e.g., new_source.py) with a BaseSource subclass
2. Export it here and add it to build_registry()
3. Add it to the category table in services/search/router.py
"""
from typing import Dict, Optional

import httpx

from .archive_org import ArchiveOrgSource
from .base import BaseSource
from .crossref import CrossrefSource
from .google_books import GoogleBooksSource
from .libgen import LibGenSource
from .medical_books import MedicalBooksSource
from .openalex import OpenAlexSource
from .semantic_scholar import SemanticScholarSource
from .web_search import WebSearchSource
from .youtube import YouTubeSource

SOURCE_CLASSES = (
    OpenAlexSource,
    SemanticScholarSource,
    CrossrefSource,
    YouTubeSource,
    GoogleBooksSource,
    ArchiveOrgSource,
    LibGenSource,
    WebSearchSource,
    MedicalBooksSource,
)


def build_registry(transport: Optional[httpx.AsyncBaseTransport] = None) -> Dict[str, BaseSource]:
    """One instance per source, keyed by source identifier."""
    registry = {}
    for source_class in SOURCE_CLASSES:
        source = source_class(transport=transport)
        registry[source.name] = source
    return registry


__all__ = [
    "BaseSource",
    "OpenAlexSource",
    "SemanticScholarSource",
    "CrossrefSource",
    "YouTubeSource",
    "GoogleBooksSource",
    "ArchiveOrgSource",
    "LibGenSource",
    "WebSearchSource",
    "MedicalBooksSource",
    "build_registry",
]
