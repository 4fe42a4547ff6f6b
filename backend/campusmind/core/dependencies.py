"""
FastAPI Dependencies

Dependency providers for settings, the search orchestrator, the curated
library and the external collaborators. Each is built once (lru_cache)
and can be swapped in tests through app.dependency_overrides.

Example test override:
    app.dependency_overrides[get_academic_service] = lambda: AcademicService(fake_sources)
"""
from functools import lru_cache

from campusmind.core.config import Settings
from campusmind.services.collaborators import (
    AllowAllGate,
    ResourceImporter,
    UnconfiguredImporter,
    UsageGate,
)
from campusmind.services.library import CuratedLibrary
from campusmind.services.search import AcademicService
from campusmind.services.sources import build_registry


@lru_cache()
def get_settings() -> Settings:
    """Application settings, loaded once."""
    return Settings()


@lru_cache()
def get_academic_service() -> AcademicService:
    """
    The search orchestrator with one instance per source.

    Sources are process-wide singletons so LibGen's mirror pointer and
    the per-source counters persist across requests.
    """
    return AcademicService(build_registry())


@lru_cache()
def get_library() -> CuratedLibrary:
    return CuratedLibrary()


@lru_cache()
def get_usage_gate() -> UsageGate:
    return AllowAllGate()


@lru_cache()
def get_resource_importer() -> ResourceImporter:
    return UnconfiguredImporter()
