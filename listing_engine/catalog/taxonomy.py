"""Line-format category taxonomy parser.

Static taxonomies are kept as one category per line with its full path:

    1 - Giyim & Aksesuar
    1-1 - Giyim & Aksesuar > Kadın Giyim
    1-1-1 - Giyim & Aksesuar > Kadın Giyim > Elbiseler

Ids may themselves contain dashes; only " - " separates id from path.
Parents are resolved by path, so lines may appear in any order.
"""

from pathlib import Path

from listing_engine.domain.categories import CategoryNode


class TaxonomyParser:
    """Parser for line-format taxonomy text.

    Example usage:
        parser = TaxonomyParser()
        parser.parse_embedded()
        roots = parser.get_children(None)
    """

    # Fallback categories for marketplaces without an API connection
    EMBEDDED_TAXONOMY = '''
1 - Giyim & Aksesuar
1-1 - Giyim & Aksesuar > Kadın Giyim
1-1-1 - Giyim & Aksesuar > Kadın Giyim > Elbiseler
1-1-2 - Giyim & Aksesuar > Kadın Giyim > Üstler
1-1-3 - Giyim & Aksesuar > Kadın Giyim > Pantolonlar
1-2 - Giyim & Aksesuar > Erkek Giyim
1-2-1 - Giyim & Aksesuar > Erkek Giyim > Gömlekler
1-2-2 - Giyim & Aksesuar > Erkek Giyim > Pantolonlar
2 - Ev & Yaşam
2-1 - Ev & Yaşam > Mobilya
2-2 - Ev & Yaşam > Dekorasyon
2-3 - Ev & Yaşam > Mutfak
3 - Elektronik
3-1 - Elektronik > Telefon & Aksesuar
3-2 - Elektronik > Bilgisayar
3-3 - Elektronik > Ses Sistemleri
'''.strip()

    def __init__(self) -> None:
        """Initialize parser with empty category storage."""
        self._categories: dict[str, CategoryNode] = {}
        self._children: dict[str | None, list[CategoryNode]] = {}

    def parse_embedded(self) -> list[CategoryNode]:
        """Parse the embedded fallback taxonomy.

        Returns:
            List of all categories.
        """
        return self.parse_text(self.EMBEDDED_TAXONOMY)

    def parse_file(self, path: str | Path) -> list[CategoryNode]:
        """Parse taxonomy from file.

        Args:
            path: Path to taxonomy file.

        Returns:
            List of all categories.
        """
        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
        return self._parse_lines(lines)

    def parse_text(self, text: str) -> list[CategoryNode]:
        """Parse taxonomy from a string.

        Args:
            text: Taxonomy lines.

        Returns:
            List of all categories.
        """
        return self._parse_lines(text.splitlines())

    def _parse_lines(self, lines: list[str]) -> list[CategoryNode]:
        self._categories.clear()
        self._children.clear()

        # First pass: collect ids and paths
        entries: list[tuple[str, tuple[str, ...]]] = []
        for line in lines:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if " - " not in line:
                continue

            id_part, path_part = line.split(" - ", 1)
            cat_id = id_part.strip()
            parts = tuple(p.strip() for p in path_part.split(">") if p.strip())
            if not cat_id or not parts:
                continue
            entries.append((cat_id, parts))

        # Second pass: resolve parents by path
        by_path = {parts: cat_id for cat_id, parts in entries}
        for cat_id, parts in entries:
            parent_id = by_path.get(parts[:-1]) if len(parts) > 1 else None
            node = CategoryNode(id=cat_id, name=parts[-1], parent_id=parent_id, path=parts)
            self._categories[cat_id] = node
            self._children.setdefault(parent_id, []).append(node)

        return list(self._categories.values())

    def get_by_id(self, category_id: str) -> CategoryNode | None:
        """Get category by ID.

        Args:
            category_id: Category ID.

        Returns:
            CategoryNode if found, None otherwise.
        """
        return self._categories.get(category_id)

    def get_children(self, parent_id: str | None) -> list[CategoryNode]:
        """Get direct children of a category.

        Args:
            parent_id: Parent category id, or None for top-level categories.

        Returns:
            Children in file order (empty for leaves and unknown ids).
        """
        return list(self._children.get(parent_id, []))

    def get_root_categories(self) -> list[CategoryNode]:
        """Get top-level categories."""
        return self.get_children(None)

    def get_all(self) -> list[CategoryNode]:
        """Get all categories."""
        return list(self._categories.values())

    def get_leaf_categories(self) -> list[CategoryNode]:
        """Get categories with no children (leaf nodes).

        Returns:
            List of leaf categories.
        """
        return [c for c in self._categories.values() if c.id not in self._children]

    def search(self, query: str) -> list[CategoryNode]:
        """Search categories by name or path (case-insensitive).

        Args:
            query: Search query.

        Returns:
            List of matching categories.
        """
        query_lower = query.lower()
        return [
            c for c in self._categories.values()
            if query_lower in c.name.lower() or query_lower in c.full_path.lower()
        ]
