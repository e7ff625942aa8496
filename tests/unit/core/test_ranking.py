"""Tests for ranking strategies."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from docsearch.core.ranking import FieldSortRanking, RankedDocument, RelevanceRanking, build_ranking
from docsearch.models.document import DocumentRecord
from docsearch.models.query import QueryDescriptor, SortField, SortOrder

RecordFactory = Callable[..., DocumentRecord]


def _slugs(ranked: list[RankedDocument]) -> list[str]:
    return [d.record.slug for d in ranked]


class TestBuildRanking:
    def test_relevance_with_query(self) -> None:
        ranking = build_ranking(QueryDescriptor.from_params({"q": "api"}))
        assert isinstance(ranking, RelevanceRanking)
        assert ranking.includes_score

    def test_relevance_without_query_uses_date_desc(self) -> None:
        ranking = build_ranking(QueryDescriptor(sort_field=SortField.RELEVANCE, sort_order=SortOrder.ASC))
        assert isinstance(ranking, FieldSortRanking)
        assert ranking.field is SortField.DATE
        assert ranking.order is SortOrder.DESC

    def test_explicit_field_sort_with_query(self) -> None:
        ranking = build_ranking(QueryDescriptor.from_params({"q": "api", "sort": "author", "order": "asc"}))
        assert isinstance(ranking, FieldSortRanking)
        assert ranking.field is SortField.AUTHOR
        assert not ranking.includes_score

    def test_relevance_ranking_requires_term(self) -> None:
        with pytest.raises(ValueError):
            RelevanceRanking("")

    def test_field_sort_rejects_relevance(self) -> None:
        with pytest.raises(ValueError):
            FieldSortRanking(SortField.RELEVANCE)


class TestRelevanceRanking:
    def test_title_match_outranks_content_match(self, make_record: RecordFactory) -> None:
        corpus = [
            make_record(slug="content-hit", title="Overview", contentText="call the api"),
            make_record(slug="title-hit", title="API Guide"),
            make_record(slug="no-hit", title="Other"),
        ]
        ranked = RelevanceRanking("api").rank(corpus)
        assert _slugs(ranked)[:2] == ["title-hit", "content-hit"]
        assert [d.score for d in ranked] == [8.0, 1.0, 0.0]

    def test_weights_follow_field_order(self, make_record: RecordFactory) -> None:
        corpus = [
            make_record(slug="author", author="zeta"),
            make_record(slug="content", contentText="zeta"),
            make_record(slug="tags", tags=["zeta"]),
            make_record(slug="title", title="Zeta"),
        ]
        assert _slugs(RelevanceRanking("zeta").rank(corpus)) == ["title", "tags", "author", "content"]

    def test_scores_are_summed(self, make_record: RecordFactory) -> None:
        record = make_record(title="PDF export", tags=["pdf"], contentText="pdf")
        assert RelevanceRanking("pdf").score(record) == 13.0

    def test_ties_broken_by_recency_then_slug(self, make_record: RecordFactory) -> None:
        corpus = [
            make_record(slug="b-old", title="api", updatedAt="2025-01-01T00:00:00Z"),
            make_record(slug="b-new", title="api", updatedAt="2025-03-01T00:00:00Z"),
            make_record(slug="a-new", title="api", updatedAt="2025-03-01T00:00:00Z"),
        ]
        assert _slugs(RelevanceRanking("api").rank(corpus)) == ["a-new", "b-new", "b-old"]


class TestFieldSortRanking:
    def test_date_ascending_and_descending(self, library: list[DocumentRecord]) -> None:
        asc = _slugs(FieldSortRanking(SortField.DATE, SortOrder.ASC).rank(library))
        desc = _slugs(FieldSortRanking(SortField.DATE, SortOrder.DESC).rank(library))
        assert asc == [
            "archived-pdf-notes",
            "getting-started",
            "print-layouts",
            "api-reference",
            "export-pdf",
            "word-templates",
        ]
        assert desc == list(reversed(asc))

    @pytest.mark.parametrize("order", [SortOrder.ASC, SortOrder.DESC])
    def test_author_ties_always_newest_first(self, make_record: RecordFactory, order: SortOrder) -> None:
        corpus = [
            make_record(slug="old", author="core", updatedAt="2025-01-01T00:00:00Z"),
            make_record(slug="new", author="core", updatedAt="2025-02-01T00:00:00Z"),
            make_record(slug="other", author="tools", updatedAt="2025-01-15T00:00:00Z"),
        ]
        ranked = _slugs(FieldSortRanking(SortField.AUTHOR, order).rank(corpus))
        assert ranked.index("new") < ranked.index("old")
        if order is SortOrder.ASC:
            assert ranked == ["new", "old", "other"]
        else:
            assert ranked == ["other", "new", "old"]

    def test_no_scores(self, library: list[DocumentRecord]) -> None:
        ranked = FieldSortRanking(SortField.DATE).rank(library)
        assert all(d.score is None for d in ranked)

    def test_identical_timestamps_ordered_by_slug(self, make_record: RecordFactory) -> None:
        corpus = [make_record(slug=s, updatedAt="2025-01-01T00:00:00Z") for s in ("c", "a", "b")]
        for order in SortOrder:
            assert _slugs(FieldSortRanking(SortField.DATE, order).rank(corpus)) == ["a", "b", "c"]

    def test_ranking_is_deterministic(self, library: list[DocumentRecord]) -> None:
        ranking = FieldSortRanking(SortField.AUTHOR, SortOrder.ASC)
        assert _slugs(ranking.rank(library)) == _slugs(ranking.rank(list(reversed(library))))


class TestOpenSearchSort:
    def test_relevance_sort(self) -> None:
        assert RelevanceRanking("x").to_opensearch_sort() == [
            {"_score": {"order": "desc"}},
            {"updatedAt": {"order": "desc"}},
            {"slug": {"order": "asc"}},
        ]

    def test_author_sort_keeps_recency_tiebreak(self) -> None:
        assert FieldSortRanking(SortField.AUTHOR, SortOrder.ASC).to_opensearch_sort() == [
            {"author": {"order": "asc"}},
            {"updatedAt": {"order": "desc"}},
            {"slug": {"order": "asc"}},
        ]

    def test_date_sort(self) -> None:
        assert FieldSortRanking(SortField.DATE, SortOrder.ASC).to_opensearch_sort() == [
            {"updatedAt": {"order": "asc"}},
            {"slug": {"order": "asc"}},
        ]
