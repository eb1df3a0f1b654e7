"""Tests for search, sort and suggestions over the catalogue."""

import pytest

from app.catalog.query import collation_key, search_titles, sort_titles, suggest_titles
from app.models import TitleRecord
from app.storage import TitleCatalog


def titles(results):
    return [title for title, _ in results]


class TestSearch:
    """Case-insensitive substring search over title and description."""

    def test_empty_query_returns_everything(self, catalog):
        assert titles(search_titles(catalog, "")) == list(catalog)

    def test_none_query_returns_everything(self, catalog):
        assert len(search_titles(catalog, None)) == len(catalog)

    def test_matches_title(self, sample_catalog):
        assert titles(search_titles(sample_catalog, "路痴")) == ["路痴哥"]

    def test_matches_description(self, catalog):
        assert titles(search_titles(catalog, "迷路")) == ["路痴哥"]

    def test_case_insensitive(self, catalog):
        assert titles(search_titles(catalog, "ppt")) == ["PPT大师"]
        assert titles(search_titles(catalog, "LuNcH")) == ["干饭王"]

    def test_no_match_is_empty_not_error(self, catalog):
        assert search_titles(catalog, "zzz-nothing") == []

    @pytest.mark.parametrize("query", ["哥", "a", "Rust", "%", " ", "2024", "&"])
    def test_only_matching_records_returned(self, catalog, query):
        """Every result contains the query; every non-result does not."""
        needle = query.lower()
        found = set(titles(search_titles(catalog, query)))
        for title, record in catalog.get_all().items():
            contains = needle in title.lower() or needle in record.description.lower()
            assert (title in found) == contains


class TestSortByDate:
    """Newest first, stable on ties, malformed dates last."""

    def test_scenario_descending(self, sample_catalog):
        results = sort_titles(search_titles(sample_catalog, ""), "date")
        assert titles(results) == ["报备哥", "路痴哥"]

    def test_ties_keep_input_order(self, catalog):
        results = sort_titles(search_titles(catalog, ""), "date")
        # 干饭王 precedes 熬夜冠军 in the catalogue and both are 2024-05-20.
        assert titles(results)[:2] == ["干饭王", "熬夜冠军"]

        reversed_input = list(reversed(search_titles(catalog, "")))
        assert titles(sort_titles(reversed_input, "date"))[:2] == ["熬夜冠军", "干饭王"]

    def test_malformed_dates_sort_last(self, catalog):
        results = sort_titles(search_titles(catalog, ""), "date")
        assert titles(results)[-1] == "100% 纯度"

    def test_malformed_dates_keep_relative_order(self):
        results = [
            ("x", TitleRecord(date="bad")),
            ("y", TitleRecord(date="2024-01-01")),
            ("z", TitleRecord(date="")),
        ]
        assert titles(sort_titles(results, "date")) == ["y", "x", "z"]

    def test_datetimes_and_timezones_compare(self):
        results = [
            ("a", TitleRecord(date="2024-01-01")),
            ("b", TitleRecord(date="2024-01-01T12:00:00Z")),
            ("c", TitleRecord(date="2024-01-01T08:00:00+08:00")),
        ]
        # c is midnight UTC, b is noon UTC.
        assert titles(sort_titles(results, "date")) == ["b", "a", "c"]

    def test_input_not_mutated(self, catalog):
        results = search_titles(catalog, "")
        before = list(results)
        sort_titles(results, "date")
        assert results == before


class TestSortByName:
    """zh-CN collation: pinyin for Han characters, case-insensitive Latin."""

    def test_pinyin_order(self):
        results = [(t, TitleRecord(date="2024-01-01")) for t in ["路痴哥", "banana", "报备哥", "Apple"]]
        assert titles(sort_titles(results, "name")) == ["Apple", "banana", "报备哥", "路痴哥"]

    def test_idempotent(self, catalog):
        once = sort_titles(search_titles(catalog, ""), "name")
        twice = sort_titles(once, "name")
        assert titles(once) == titles(twice)

    def test_independent_of_input_order(self, catalog):
        forward = sort_titles(search_titles(catalog, ""), "name")
        backward = sort_titles(list(reversed(search_titles(catalog, ""))), "name")
        assert titles(forward) == titles(backward)

    def test_collation_key_ties_on_raw_title(self):
        assert collation_key("abc") != collation_key("ABC")


class TestSortRandom:
    """Deterministic pseudo-random order derived from a seed."""

    def test_same_seed_same_order(self, catalog):
        results = search_titles(catalog, "")
        first = sort_titles(results, "random", seed=catalog.fingerprint)
        second = sort_titles(list(reversed(results)), "random", seed=catalog.fingerprint)
        assert titles(first) == titles(second)

    def test_is_permutation(self, catalog):
        results = search_titles(catalog, "")
        shuffled = sort_titles(results, "random", seed="abc")
        assert sorted(titles(shuffled)) == sorted(titles(results))

    def test_seed_changes_order(self, catalog):
        results = search_titles(catalog, "")
        orders = {tuple(titles(sort_titles(results, "random", seed=str(i)))) for i in range(10)}
        assert len(orders) > 1

    def test_input_not_mutated(self, catalog):
        results = search_titles(catalog, "")
        before = list(results)
        sort_titles(results, "random", seed="x")
        assert results == before


class TestUnknownSort:
    def test_returns_copy_in_input_order(self, catalog):
        results = search_titles(catalog, "")
        sorted_results = sort_titles(results, "popularity")
        assert sorted_results == results
        assert sorted_results is not results


class TestSuggestions:
    """Top-N title suggestions."""

    def test_limit_applies(self):
        catalog = TitleCatalog.from_dict({f"称号{i}": {"date": "2024-01-01"} for i in range(10)})
        assert suggest_titles(catalog, "称号") == [f"称号{i}" for i in range(5)]
        assert len(suggest_titles(catalog, "称号", limit=3)) == 3

    def test_matches_titles_only(self, catalog):
        # "迷路" only appears in a description.
        assert suggest_titles(catalog, "迷路") == []
        assert suggest_titles(catalog, "哥") == ["报备哥", "路痴哥"]

    def test_case_insensitive(self, catalog):
        assert suggest_titles(catalog, "ppt") == ["PPT大师"]

    def test_empty_query_has_no_suggestions(self, catalog):
        assert suggest_titles(catalog, "") == []
