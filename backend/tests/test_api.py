"""Tests for API endpoints."""
import pytest

from campusmind.core.dependencies import (
    get_academic_service,
    get_library,
    get_resource_importer,
    get_usage_gate,
)
from campusmind.core.exceptions import ResourceImportError, UsageLimitExceededError
from campusmind.main import app
from campusmind.services.library import CuratedLibrary
from campusmind.services.search import AcademicService
from conftest import FakeSource, make_resource


@pytest.fixture
def fake_service(fake_sources):
    """Swap the real source registry for fakes."""
    service = AcademicService(fake_sources)
    app.dependency_overrides[get_academic_service] = lambda: service
    return service


class RecordingImporter:
    def __init__(self):
        self.requests = []

    async def import_resource(self, request):
        self.requests.append(request)
        return {"id": "rec-1", "type": "document"}


class FailingImporter:
    async def import_resource(self, request):
        raise ResourceImportError(request.container_id, "storage offline")


class DenyingGate:
    async def check(self, operation):
        raise UsageLimitExceededError(operation, "monthly quota used")


class TestHealthCheck:
    """Test the health check endpoint."""

    def test_health_check_returns_200(self, test_client):
        """Root endpoint should return 200."""
        response = test_client.get("/")

        assert response.status_code == 200

    def test_health_check_returns_status(self, test_client):
        """Health check should return status information."""
        data = test_client.get("/").json()

        assert data["status"] == "active"
        assert data["project"] == "CampusMind Academic Search"

    def test_health_check_lists_providers(self, test_client):
        """Health check should list every registered source."""
        data = test_client.get("/").json()

        assert "libgen" in data["providers"]
        assert data["categories"]["videos"] == ["youtube"]

    def test_health_check_returns_rate_limit_info(self, test_client):
        data = test_client.get("/").json()

        assert data["rate_limiting"]["enabled"] is False
        assert data["rate_limiting"]["storage"] == "memory"


class TestSearchEndpoints:
    """Test the search routes."""

    def test_blank_query_is_400(self, test_client, fake_service):
        assert test_client.get("/api/academic/search", params={"q": "  "}).status_code == 400
        assert test_client.get("/api/academic/search/all").status_code == 400

    def test_invalid_page_is_422(self, test_client, fake_service):
        response = test_client.get("/api/academic/search", params={"q": "x", "page": 0})
        assert response.status_code == 422

    def test_single_source(self, test_client, fake_service, fake_sources):
        response = test_client.get("/api/academic/search", params={
            "q": "anatomy", "perPage": 5, "page": 2, "openAccessOnly": "true", "yearFrom": 2015,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "openalex"
        assert data["total"] == 120
        assert data["items"][0]["externalId"] == "oa-1"

        sent = fake_sources["openalex"].queries[0]
        assert (sent.page, sent.per_page) == (2, 5)
        assert sent.filters.is_open_access is True
        assert sent.filters.year_from == 2015

    def test_per_page_defaults_to_setting(self, test_client, fake_service, fake_sources):
        from campusmind.core.config import settings

        test_client.get("/api/academic/search", params={"q": "anatomy"})

        sent = fake_sources["openalex"].queries[0]
        assert (sent.page, sent.per_page) == (1, settings.DEFAULT_PER_PAGE)

    def test_failing_source_still_200(self, test_client, fake_service):
        response = test_client.get("/api/academic/search", params={"q": "x", "source": "youtube"})

        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_multi(self, test_client, fake_service):
        response = test_client.get("/api/academic/search/multi", params={"q": "x", "sources": "openalex, crossref,youtube"})

        data = response.json()
        assert data["totalBySource"] == {"openalex": 120, "crossref": 40, "youtube": 0}
        assert [r["externalId"] for r in data["results"]] == ["oa-1", "oa-2"]

    def test_all_by_category(self, test_client):
        service = AcademicService({"youtube": FakeSource("youtube", [make_resource("v1", "youtube")])})
        app.dependency_overrides[get_academic_service] = lambda: service

        data = test_client.get("/api/academic/search/all", params={"q": "x", "category": "videos"}).json()

        assert data["totalBySource"] == {"youtube": 1}
        assert data["results"][0]["externalId"] == "v1"


class TestResourceEndpoint:
    def test_found(self, test_client, fake_service, fake_sources):
        fake_sources["crossref"].lookups["10.1/abc"] = make_resource("10.1/abc", "crossref")

        response = test_client.get("/api/academic/resource/crossref/10.1/abc")

        assert response.status_code == 200
        assert response.json()["externalId"] == "10.1/abc"

    def test_missing_is_404(self, test_client, fake_service):
        assert test_client.get("/api/academic/resource/openalex/W404").status_code == 404
        assert test_client.get("/api/academic/resource/scopus/W1").status_code == 404


class TestRecommendationEndpoints:
    def test_recommendations(self, test_client, fake_service, fake_sources):
        response = test_client.get("/api/academic/recommendations", params={
            "topics": "anatomy,physiology", "limit": 1, "category": "papers",
        })

        data = response.json()
        assert data["total"] == 1
        assert len(data["recommendations"]) == 1
        assert fake_sources["openalex"].queries[0].query == "anatomy OR physiology"

    def test_no_topics(self, test_client, fake_service):
        assert test_client.get("/api/academic/recommendations").json() == {"recommendations": [], "total": 0}

    def test_limit_bounds(self, test_client, fake_service):
        assert test_client.get("/api/academic/recommendations", params={"topics": "x", "limit": 51}).status_code == 422

    def test_smart(self, test_client):
        data = test_client.get("/api/academic/recommendations/smart", params={"subject": "Kinesiologia"}).json()

        assert data["subjectName"] == "Kinesiologia"
        assert data["matchedCategory"] == "biomechanics"
        assert data["career"]["id"] == "kinesiology"
        assert data["total"] == 2

    def test_smart_requires_subject(self, test_client):
        assert test_client.get("/api/academic/recommendations/smart").status_code == 400


class TestLibraryEndpoints:
    def test_textbooks(self, test_client):
        data = test_client.get("/api/academic/library/textbooks", params={"category": "calculus"}).json()

        assert data["total"] == 2
        assert data["source"] == "oer_commons"
        assert data["textbooks"][0]["isOpenAccess"] is True

    def test_categories(self, test_client):
        data = test_client.get("/api/academic/library/categories").json()

        assert data["categories"][0] == "anatomy"
        assert set(data["descriptions"]) == set(data["categories"])
        assert all(isinstance(d, str) and d for d in data["descriptions"].values())

    def test_stats(self, test_client):
        data = test_client.get("/api/academic/library/stats").json()

        assert data["totalBooks"] == 20
        assert data["totalCareers"] == 7

    def test_careers(self, test_client):
        data = test_client.get("/api/academic/careers").json()

        assert [c["id"] for c in data["careers"]][:2] == ["kinesiology", "medicine"]
        assert data["total"] == len(data["careers"]) == 7

    def test_career_and_textbooks(self, test_client):
        assert test_client.get("/api/academic/careers/nursing").json()["name"] == "Enfermería"
        data = test_client.get("/api/academic/careers/nursing/textbooks").json()
        assert data["categories"][0] == "nursing"

    def test_unknown_career_is_404(self, test_client):
        assert test_client.get("/api/academic/careers/astrology").status_code == 404
        assert test_client.get("/api/academic/careers/astrology/textbooks").status_code == 404

    def test_library_override(self, test_client):
        app.dependency_overrides[get_library] = lambda: CuratedLibrary(categories=[], textbooks={}, careers=[])
        assert test_client.get("/api/academic/library/stats").json()["totalBooks"] == 0


class TestImportEndpoint:
    """Test the hand-off to the persistence collaborator."""

    @pytest.fixture
    def payload(self):
        resource = make_resource("W1", url="https://x.org/w1").model_dump(by_alias=True, mode="json")
        return {"containerId": "course-42", "resource": resource}

    def test_import(self, test_client, payload):
        importer = RecordingImporter()
        app.dependency_overrides[get_resource_importer] = lambda: importer

        response = test_client.post("/api/academic/import", json=payload)

        assert response.status_code == 201
        assert response.json() == {"imported": True, "containerId": "course-42", "record": {"id": "rec-1", "type": "document"}}
        assert importer.requests[0].resource.external_id == "W1"

    def test_gate_rejects(self, test_client, payload):
        importer = RecordingImporter()
        app.dependency_overrides[get_usage_gate] = lambda: DenyingGate()
        app.dependency_overrides[get_resource_importer] = lambda: importer

        response = test_client.post("/api/academic/import", json=payload)

        assert response.status_code == 429
        assert importer.requests == []

    def test_importer_failure_is_503(self, test_client, payload):
        app.dependency_overrides[get_resource_importer] = lambda: FailingImporter()
        assert test_client.post("/api/academic/import", json=payload).status_code == 503

    def test_default_importer_is_503(self, test_client, payload):
        assert test_client.post("/api/academic/import", json=payload).status_code == 503

    def test_missing_container_is_422(self, test_client, payload):
        payload["containerId"] = ""
        assert test_client.post("/api/academic/import", json=payload).status_code == 422
