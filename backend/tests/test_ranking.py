"""Tests for category routing, deduplication and ranking."""
from campusmind.schemas import SearchCategory, SearchResult
from campusmind.services.search import CATEGORY_SOURCES, resolve_category
from campusmind.services.search.ranking import (
    dedup_key,
    deduplicate,
    merge_results,
    rank_results,
    score,
    totals_by_source,
)
from conftest import make_resource


class TestResolveCategory:
    """Test the category -> sources table."""

    def test_known_categories(self):
        assert resolve_category("papers") == ("openalex", "semantic_scholar", "crossref")
        assert resolve_category(SearchCategory.VIDEOS) == ("youtube",)
        assert resolve_category("courses") == ("google_books", "web")

    def test_courses_and_books_lead_with_the_same_catalog(self):
        """courses, books and all agree on which catalog is google_books."""
        assert resolve_category("courses")[0] == resolve_category("books")[0] == resolve_category("all")[3]

    def test_unknown_falls_back_to_all(self):
        assert resolve_category("podcasts") == CATEGORY_SOURCES["all"]
        assert resolve_category(None) == CATEGORY_SOURCES["all"]
        assert resolve_category("") == CATEGORY_SOURCES["all"]

    def test_every_category_is_routed(self):
        assert set(CATEGORY_SOURCES) == {c.value for c in SearchCategory}

    def test_no_duplicate_sources_within_a_category(self):
        for sources in CATEGORY_SOURCES.values():
            assert len(sources) == len(set(sources))


class TestDedupKey:
    """doi, else url, else source:external_id."""

    def test_doi_wins(self):
        assert dedup_key(make_resource("a", doi="10.1/x", url="https://x.org")) == "10.1/x"

    def test_url_when_no_doi(self):
        assert dedup_key(make_resource("a", url="https://x.org")) == "https://x.org"

    def test_source_scoped_id_last(self):
        assert dedup_key(make_resource("a", "libgen")) == "libgen:a"

    def test_same_id_different_sources_differ(self):
        assert dedup_key(make_resource("1", "libgen")) != dedup_key(make_resource("1", "web"))


class TestDeduplicate:
    def test_first_seen_wins(self):
        first = make_resource("a", "openalex", doi="10.1/x")
        second = make_resource("b", "crossref", doi="10.1/x", abstract="better")
        assert deduplicate([first, second]) == [first]

    def test_idempotent(self):
        items = [
            make_resource("a", doi="10.1/x"),
            make_resource("b", doi="10.1/x"),
            make_resource("c", url="https://c.org"),
            make_resource("d"),
        ]
        once = deduplicate(items)
        assert deduplicate(once) == once
        assert [r.external_id for r in once] == ["a", "c", "d"]

    def test_shared_landing_url_collapses(self):
        """Resources with no DOI and the same generic URL collapse into one."""
        items = [make_resource("a", url="https://portal.org"), make_resource("b", "web", url="https://portal.org")]
        assert len(deduplicate(items)) == 1


class TestRanking:
    """score = 2 * thumbnail + 1 * abstract, descending, stable."""

    def test_scores(self):
        assert score(make_resource()) == 0
        assert score(make_resource(abstract="x")) == 1
        assert score(make_resource(thumbnail_url="https://t")) == 2
        assert score(make_resource(abstract="x", thumbnail_url="https://t")) == 3

    def test_descending_order(self):
        bare = make_resource("bare")
        abstract = make_resource("abstract", abstract="x")
        thumb = make_resource("thumb", thumbnail_url="https://t")
        both = make_resource("both", abstract="x", thumbnail_url="https://t")

        ranked = rank_results([bare, abstract, thumb, both])

        assert [r.external_id for r in ranked] == ["both", "thumb", "abstract", "bare"]

    def test_ties_keep_input_order(self):
        items = [make_resource(str(i)) for i in range(5)]
        assert [r.external_id for r in rank_results(items)] == ["0", "1", "2", "3", "4"]


class TestMergeResults:
    def test_totals_include_empty_sources(self):
        results = [
            SearchResult(source="openalex", total=120, items=[make_resource("a")]),
            SearchResult(source="youtube"),
        ]
        assert totals_by_source(results) == {"openalex": 120, "youtube": 0}

    def test_merge(self):
        shared = "https://doi.org/10.1/shared"
        results = [
            SearchResult(source="openalex", total=10, items=[
                make_resource("oa-1", doi=shared),
                make_resource("oa-2", abstract="has abstract"),
            ]),
            SearchResult(source="crossref", total=3, items=[
                make_resource("cr-1", "crossref", doi=shared, thumbnail_url="https://t"),
            ]),
        ]

        merged = merge_results(results)

        assert [r.external_id for r in merged.results] == ["oa-2", "oa-1"]
        assert merged.total_by_source == {"openalex": 10, "crossref": 3}

    def test_merge_nothing(self):
        merged = merge_results([])
        assert merged.results == []
        assert merged.total_by_source == {}

    def test_merging_the_same_results_twice_is_idempotent(self):
        results = [
            SearchResult(source="openalex", total=2, items=[
                make_resource("oa-1", doi="https://doi.org/10.1/a"),
                make_resource("oa-2", abstract="x"),
            ]),
            SearchResult(source="crossref", total=1, items=[
                make_resource("cr-1", "crossref", doi="https://doi.org/10.1/a"),
            ]),
            SearchResult(source="libgen", items=[make_resource("lg-1", "libgen")]),
        ]

        assert merge_results(results + results).results == merge_results(results).results
