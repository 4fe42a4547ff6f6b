"""Tests for core/dependencies.py - FastAPI dependency injection."""
import pytest


class TestGetSettings:
    """Test the get_settings dependency."""

    def test_get_settings_returns_settings(self):
        """get_settings should return a Settings instance."""
        from campusmind.core.config import Settings
        from campusmind.core.dependencies import get_settings

        assert isinstance(get_settings(), Settings)

    def test_get_settings_is_cached(self):
        """get_settings should return the same instance (cached)."""
        from campusmind.core.dependencies import get_settings

        assert get_settings() is get_settings()


class TestGetAcademicService:
    """Test the orchestrator dependency."""

    def test_returns_service_with_every_source(self):
        """The service should hold one instance per known source."""
        from campusmind.core.dependencies import get_academic_service

        service = get_academic_service()
        assert set(service.source_names) == {
            "openalex", "semantic_scholar", "crossref", "youtube", "google_books",
            "archive_org", "libgen", "web", "medical_books",
        }

    def test_service_is_cached(self):
        """Sources are singletons so stateful providers keep their state."""
        from campusmind.core.dependencies import get_academic_service

        assert get_academic_service() is get_academic_service()
        assert get_academic_service().get_source("libgen") is get_academic_service().get_source("libgen")

    def test_every_routed_source_is_registered(self):
        """The category table should only name registered sources."""
        from campusmind.core.dependencies import get_academic_service
        from campusmind.services.search import CATEGORY_SOURCES

        registered = set(get_academic_service().source_names)
        for sources in CATEGORY_SOURCES.values():
            assert set(sources) <= registered


class TestCollaboratorDefaults:
    """Test the default collaborator implementations."""

    @pytest.mark.asyncio
    async def test_default_gate_allows(self):
        """The default usage gate should allow every operation."""
        from campusmind.core.dependencies import get_usage_gate

        assert await get_usage_gate().check("resource_import") is None

    @pytest.mark.asyncio
    async def test_default_importer_is_unconfigured(self, resource_factory):
        """The default importer should refuse with ResourceImportError."""
        from campusmind.core.dependencies import get_resource_importer
        from campusmind.core.exceptions import ResourceImportError
        from campusmind.schemas import ImportRequest

        request = ImportRequest(container_id="course-1", resource=resource_factory())
        with pytest.raises(ResourceImportError):
            await get_resource_importer().import_resource(request)

    def test_defaults_satisfy_protocols(self):
        """Default collaborators should satisfy their protocols."""
        from campusmind.core.dependencies import get_resource_importer, get_usage_gate
        from campusmind.services.collaborators import ResourceImporter, UsageGate

        assert isinstance(get_usage_gate(), UsageGate)
        assert isinstance(get_resource_importer(), ResourceImporter)

    def test_get_library_is_cached(self):
        """The curated library should be built once."""
        from campusmind.core.dependencies import get_library

        assert get_library() is get_library()
