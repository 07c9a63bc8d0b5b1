"""Tests for merge_records() and sort_articles() in mcq_compare/record_merger.py."""

from __future__ import annotations

import json

import pytest

from conftest import make_question
from mcq_compare.errors import BatchReport, MalformedRecordError, MissingKeyError
from mcq_compare.models import Article, ArticleBundle
from mcq_compare.record_merger import MergePolicy, merge_records, sort_articles


class TestMergeBasics:
    """Grouping records into articles."""

    def test_three_sources_one_article(self):
        """Headline from A, payloads from B and C, nothing under A."""
        q_b = [make_question("B?")]
        q_c = [make_question("C?")]

        articles = merge_records([
            ("A", [{"id": "x1", "headline": "H"}]),
            ("B", [{"id": "x1", "questions": q_b}]),
            ("C", [{"id": "x1", "questions": q_c}]),
        ])

        assert len(articles) == 1
        article = articles[0]
        assert article.key == "x1"
        assert article.headline == "H"
        assert "A" not in article.question_types
        assert article.question_types == {"B": q_b, "C": q_c}

    def test_first_occurrence_order(self):
        """Articles follow first appearance across streams."""
        articles = merge_records([
            ("type1", [{"id": "b"}, {"id": "a"}]),
            ("type2", [{"id": "c"}, {"id": "a"}, {"id": "d"}]),
        ])
        assert [a.key for a in articles] == ["b", "a", "c", "d"]

    def test_order_counter_is_sequential(self):
        articles = merge_records([("t", [{"id": "a"}, {"id": "b"}, {"id": "a"}])])
        assert [a.order for a in articles] == [0, 1]

    def test_news_item_id_wins_over_id(self):
        articles = merge_records([
            ("t1", [{"news_item_id": "n1", "id": "legacy-1"}]),
            ("t2", [{"id": "n1", "questions": []}]),
        ])
        assert len(articles) == 1
        assert articles[0].news_item_id == "n1"
        assert articles[0].id == "legacy-1"

    def test_integer_keys(self):
        articles = merge_records([("t1", [{"id": 7}]), ("t2", [{"id": 7, "questions": []}])])
        assert len(articles) == 1
        assert articles[0].key == 7

    def test_same_label_overwrites_payload(self):
        """A second record of the same type replaces that type's payload only."""
        articles = merge_records([
            ("t1", [
                {"id": "a", "questions": [make_question("old")]},
                {"id": "a", "questions": [make_question("new")]},
            ]),
        ])
        assert articles[0].question_types["t1"][0]["question"] == "new"

    def test_missing_questions_leave_payload_absent(self):
        articles = merge_records([("t1", [{"id": "a", "questions": None}])])
        assert articles[0].question_types == {}

    def test_empty_input(self):
        assert merge_records([]) == []
        assert merge_records([("t1", [])]) == []


class TestMergePolicy:
    """Descriptive field precedence."""

    def test_first_write_wins_by_default(self, article_record):
        articles = merge_records([
            ("type1", [article_record("n1", headline="First", sub_headline=None)]),
            ("type2", [article_record("n1", headline="Second", sub_headline="Sub")]),
        ])
        assert articles[0].headline == "First"
        assert articles[0].sub_headline is None

    def test_last_write_coalesce(self, article_record):
        articles = merge_records(
            [
                ("type1", [article_record("n1", headline="First", provider_id="jiji")]),
                ("type2", [article_record("n1", headline="Second", provider_id=None)]),
            ],
            policy=MergePolicy.LAST_WRITE_COALESCE,
        )
        assert articles[0].headline == "Second"
        assert articles[0].provider_id == "jiji"

    def test_key_never_changes(self):
        articles = merge_records(
            [
                ("t1", [{"id": "a"}]),
                ("t2", [{"news_item_id": None, "id": "a", "headline": "New"}]),
            ],
            policy=MergePolicy.LAST_WRITE_COALESCE,
        )
        assert len(articles) == 1
        assert articles[0].key == "a"
        assert articles[0].headline == "New"

    def test_policy_from_cli_value(self):
        assert MergePolicy("first") is MergePolicy.FIRST_WRITE
        assert MergePolicy("last") is MergePolicy.LAST_WRITE_COALESCE


class TestMergeIssues:
    """Recoverable problems are counted and skipped."""

    def test_missing_key_dropped(self, caplog):
        report = BatchReport()
        articles = merge_records(
            [("t1", [{"headline": "no id"}, {"id": "", "news_item_id": None}, {"id": "ok"}])],
            report=report,
        )
        assert [a.key for a in articles] == ["ok"]
        assert report.missing_keys == 2
        assert all(isinstance(issue, MissingKeyError) for issue in report.issues)
        assert "without stable id" in caplog.text

    def test_non_mapping_record_is_malformed(self):
        report = BatchReport()
        articles = merge_records([("t1", ["text", None, {"id": "a"}])], report=report)
        assert len(articles) == 1
        assert report.malformed_records == 2

    def test_unhashable_key_is_malformed(self):
        report = BatchReport()
        articles = merge_records([("t1", [{"id": ["x"]}, {"id": True}])], report=report)
        assert articles == []
        assert report.malformed_records == 2

    def test_bad_questions_keep_article(self):
        report = BatchReport()
        articles = merge_records(
            [("t1", [{"id": "a", "headline": "H", "questions": "oops"}])], report=report
        )
        assert articles[0].headline == "H"
        assert articles[0].question_types == {}
        assert report.malformed_records == 1
        assert isinstance(report.issues[0], MalformedRecordError)

    def test_issues_do_not_fail_the_batch(self):
        report = BatchReport()
        merge_records([("t1", [{"x": 1}, "y"])], report=report)
        assert report.exit_code == 0


class TestMergeProperties:
    """Properties that hold for any input."""

    @pytest.fixture
    def streams(self, article_record):
        return [
            ("type1", [article_record("a"), article_record("b"), {"id": "c"}]),
            ("type2", [article_record("b"), {"headline": "no key"}, article_record("d")]),
            ("type3", [{"id": "c", "questions": []}, article_record("a")]),
        ]

    def test_keys_unique_and_non_empty(self, streams):
        keys = [a.key for a in merge_records(streams)]
        assert all(keys)
        assert len(keys) == len(set(keys))

    def test_key_set_independent_of_stream_order(self, streams):
        forward = {a.key for a in merge_records(streams)}
        backward = {a.key for a in merge_records(list(reversed(streams)))}
        assert forward == backward == {"a", "b", "c", "d"}

    def test_idempotent(self, streams):
        first = ArticleBundle(types=["1", "2", "3"], articles=merge_records(streams), generated_at="t")
        second = ArticleBundle(types=["1", "2", "3"], articles=merge_records(streams), generated_at="t")
        assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())

    def test_input_records_not_mutated(self, streams):
        snapshot = json.dumps(streams, sort_keys=True)
        merge_records(streams)
        assert json.dumps(streams, sort_keys=True) == snapshot


class TestSerialization:
    """Article and bundle JSON shape."""

    def test_order_not_serialized(self):
        article = merge_records([("type1", [{"id": "a", "questions": []}])])[0]
        data = article.to_dict()
        assert "order" not in data
        assert "key" not in data
        assert data["questionTypes"] == {"type1": []}
        assert data["headline"] is None

    def test_bundle_shape(self):
        bundle = ArticleBundle(types=["1", "7"], articles=merge_records([("type1", [{"id": "a"}])]))
        data = bundle.to_dict()
        assert list(data) == ["generatedAt", "types", "articleCount", "articles"]
        assert data["articleCount"] == 1
        assert data["generatedAt"].endswith("Z")

    def test_round_trip_through_json(self, article_record):
        articles = merge_records([("type1", [article_record("n1")])])
        bundle = ArticleBundle.from_dict(
            json.loads(json.dumps(ArticleBundle(types=["1"], articles=articles).to_dict()))
        )
        assert bundle.articles[0] == articles[0]


class TestSortArticles:
    """Presentation ordering."""

    def _article(self, key, date_time, headline, order):
        return Article(key=key, date_time=date_time, headline=headline, order=order)

    def test_date_sort_newest_first_then_headline(self):
        articles = [
            self._article("a", "2024-05-01", "B", 0),
            self._article("b", "2024-05-02", "Z", 1),
            self._article("c", "2024-05-01", "A", 2),
            self._article("d", None, "A", 3),
        ]
        assert [a.key for a in sort_articles(articles, by="date")] == ["b", "c", "a", "d"]

    def test_date_sort_with_numeric_fields(self):
        articles = [
            self._article("a", 20240501, "B", 0),
            self._article("b", "2024-05-02", 7, 1),
            self._article("c", 20240501, 3, 2),
            self._article("d", None, None, 3),
        ]
        assert [a.key for a in sort_articles(articles, by="date")] == ["c", "a", "b", "d"]

    def test_order_sort(self):
        articles = [self._article("x", "2024", "H", 1), self._article("y", "2023", "H", 0)]
        assert [a.key for a in sort_articles(articles, by="order")] == ["y", "x"]

    def test_unknown_sort_key(self):
        with pytest.raises(ValueError, match="Unknown sort key"):
            sort_articles([], by="headline")
