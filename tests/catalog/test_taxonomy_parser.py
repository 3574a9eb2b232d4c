"""Tests for line-format taxonomy parser."""

import pytest

from listing_engine.catalog.taxonomy import TaxonomyParser


class TestTaxonomyParser:
    """Tests for TaxonomyParser."""

    @pytest.fixture
    def parser(self) -> TaxonomyParser:
        """Create parser with embedded taxonomy."""
        parser = TaxonomyParser()
        parser.parse_embedded()
        return parser

    def test_parse_embedded(self, parser: TaxonomyParser) -> None:
        """Embedded taxonomy is parsed."""
        assert len(parser.get_all()) == 16

    def test_dashed_ids(self, parser: TaxonomyParser) -> None:
        """Ids containing dashes are kept whole."""
        category = parser.get_by_id("1-1-1")
        assert category is not None
        assert category.name == "Elbiseler"
        assert category.parent_id == "1-1"
        assert category.full_path == "Giyim & Aksesuar > Kadın Giyim > Elbiseler"

    def test_root_categories(self, parser: TaxonomyParser) -> None:
        """Top-level categories have no parent."""
        roots = parser.get_root_categories()
        assert [c.name for c in roots] == ["Giyim & Aksesuar", "Ev & Yaşam", "Elektronik"]
        assert all(c.parent_id is None for c in roots)

    def test_children_in_file_order(self, parser: TaxonomyParser) -> None:
        """Children are returned in file order."""
        children = parser.get_children("1-1")
        assert [c.id for c in children] == ["1-1-1", "1-1-2", "1-1-3"]

    def test_same_name_under_different_parents(self, parser: TaxonomyParser) -> None:
        """Same-named categories resolve to their own parents."""
        womens = parser.get_by_id("1-1-3")
        mens = parser.get_by_id("1-2-2")
        assert womens is not None and mens is not None
        assert womens.name == mens.name == "Pantolonlar"
        assert womens.parent_id == "1-1"
        assert mens.parent_id == "1-2"

    def test_leaf_has_no_children(self, parser: TaxonomyParser) -> None:
        """Leaves and unknown ids have no children."""
        assert parser.get_children("2-1") == []
        assert parser.get_children("missing") == []

    def test_leaf_categories(self, parser: TaxonomyParser) -> None:
        """Leaf listing excludes categories with children."""
        leaf_ids = {c.id for c in parser.get_leaf_categories()}
        assert "1-1-1" in leaf_ids
        assert "3-3" in leaf_ids
        assert "1" not in leaf_ids
        assert "1-2" not in leaf_ids

    def test_search_by_path(self, parser: TaxonomyParser) -> None:
        """Search matches the full path case-insensitively."""
        results = parser.search("erkek giyim")
        assert {c.id for c in results} == {"1-2", "1-2-1", "1-2-2"}

    def test_out_of_order_lines(self) -> None:
        """Parents are resolved even when listed after children."""
        parser = TaxonomyParser()
        parser.parse_text(
            """
            # comment
            10-1 - Hobi > Boya
            10 - Hobi
            not a category line
            """
        )
        child = parser.get_by_id("10-1")
        assert child is not None
        assert child.parent_id == "10"
        assert [c.id for c in parser.get_root_categories()] == ["10"]

    def test_parse_file(self, tmp_path) -> None:
        """Taxonomy can be read from a file."""
        path = tmp_path / "taxonomy.txt"
        path.write_text("1 - A\n2 - A > B\n", encoding="utf-8")

        parser = TaxonomyParser()
        categories = parser.parse_file(path)

        assert len(categories) == 2
        assert parser.get_by_id("2").parent_id == "1"
