"""Tests for masonry / grid / list projection."""

from app.catalog.query import search_titles, sort_titles
from app.models import TitleRecord
from app.view.layouts import format_date, project_layout


class TestFormatDate:
    def test_zh_cn_format(self):
        assert format_date("2024-03-01") == "2024年3月1日"

    def test_datetime_uses_date_part(self):
        assert format_date("2023-11-11T20:30:00") == "2023年11月11日"

    def test_malformed_is_returned_verbatim(self):
        assert format_date("not-a-date") == "not-a-date"
        assert format_date("") == ""


class TestProjection:
    """All layouts carry the same cards in the same query order."""

    def test_layouts_share_cards(self, catalog):
        results = sort_titles(search_titles(catalog, ""), "date")
        expected = [title for title, _ in results]
        for layout in ("masonry", "grid", "list"):
            view = project_layout(results, layout, columns=3)
            assert view.layout == layout
            assert view.total == len(results)
            assert [card.title for card in view.cards()] == expected

    def test_grid_rows(self, catalog):
        results = search_titles(catalog, "")
        view = project_layout(results, "grid", columns=3)
        assert [len(row) for row in view.rows] == [3, 3, 2]
        assert view.columns == [] and view.items == []

    def test_masonry_uses_requested_columns(self, catalog):
        view = project_layout(search_titles(catalog, ""), "masonry", columns=4)
        assert len(view.columns) == 4
        assert sum(len(column) for column in view.columns) == len(catalog)

    def test_masonry_balances_heights(self):
        """A tall card pushes following cards into the other column."""
        results = [
            ("tall", TitleRecord(date="2024-01-01", description="x" * 200, image="/a.jpg")),
            ("s1", TitleRecord(date="2024-01-01")),
            ("s2", TitleRecord(date="2024-01-01")),
            ("s3", TitleRecord(date="2024-01-01")),
        ]
        view = project_layout(results, "masonry", columns=2)
        assert [card.title for card in view.columns[0]] == ["tall"]
        assert [card.title for card in view.columns[1]] == ["s1", "s2", "s3"]

    def test_list_is_linear(self, catalog):
        view = project_layout(search_titles(catalog, ""), "list")
        assert [card.position for card in view.items] == list(range(len(catalog)))

    def test_unknown_layout_falls_back_to_masonry(self, catalog):
        view = project_layout(search_titles(catalog, ""), "carousel")
        assert view.layout == "masonry"

    def test_empty_results(self):
        view = project_layout([], "grid")
        assert view.total == 0
        assert view.rows == []


class TestCards:
    """Card contents, links and image placeholders."""

    def test_card_fields(self, sample_catalog):
        view = project_layout(search_titles(sample_catalog, ""), "list")
        card = view.items[0]
        assert card.title == "报备哥"
        assert card.href == "/title/%E6%8A%A5%E5%A4%87%E5%93%A5"
        assert card.date_label == "2024年3月1日"
        assert card.image == "/img/baobei.jpg"
        assert card.placeholder is False

    def test_missing_image_uses_placeholder(self, sample_catalog):
        view = project_layout(search_titles(sample_catalog, ""), "list")
        card = view.items[1]
        assert card.image is None
        assert card.placeholder is True

    def test_failed_image_uses_placeholder(self, sample_catalog):
        view = project_layout(search_titles(sample_catalog, ""), "list", image_errors=["/img/baobei.jpg"])
        card = view.items[0]
        assert card.image is None
        assert card.placeholder is True
