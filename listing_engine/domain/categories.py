"""Category taxonomy models.

A marketplace taxonomy is a tree of categories loaded one level at a time.
Only leaf categories can be assigned to a listing, and a leaf may declare
attributes that must be filled before publishing.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Self


@dataclass(frozen=True)
class AttributeValue:
    """A predefined value of a category attribute.

    Attributes:
        id: Value identifier on the marketplace.
        name: Display name (e.g., "Siyah").
    """

    id: str
    name: str


@dataclass(frozen=True)
class Attribute:
    """An attribute declared by a leaf category.

    Attributes:
        id: Attribute identifier on the marketplace.
        name: Display name (e.g., "Renk").
        required: Whether a value is needed to publish.
        allow_custom: Whether free-text values are accepted.
        values: Predefined values, if any.
    """

    id: str
    name: str
    required: bool = False
    allow_custom: bool = False
    values: tuple[AttributeValue, ...] = ()

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Attribute":
        """Create from a category attribute payload.

        Accepts both the nested marketplace shape
        (``{"attribute": {"id", "name"}, "attributeValues": [...]}``)
        and a flat ``{"id", "name", "values"}`` shape.

        Args:
            data: API response data.

        Returns:
            Attribute instance.
        """
        head = data.get("attribute", data)
        raw_values = data.get("attributeValues", data.get("values", []))
        return cls(
            id=str(head["id"]),
            name=head["name"],
            required=bool(data.get("required", False)),
            allow_custom=bool(data.get("allowCustom", data.get("allow_custom", False))),
            values=tuple(
                AttributeValue(id=str(v["id"]), name=v["name"]) for v in raw_values
            ),
        )


@dataclass(frozen=True)
class CategoryNode:
    """A category in a marketplace taxonomy.

    Attributes:
        id: Category identifier on the marketplace.
        name: Category name (leaf part).
        parent_id: Parent category id (None for roots).
        is_leaf: True/False once known, None until children were checked.
        path: Category names from root to this node, when known.
        required_attributes: Attributes resolved for a selected leaf.
    """

    id: str
    name: str
    parent_id: str | None = None
    is_leaf: bool | None = field(default=None, compare=False)
    path: tuple[str, ...] = field(default=(), compare=False)
    required_attributes: tuple[Attribute, ...] | None = field(default=None, compare=False)

    @property
    def path_parts(self) -> list[str]:
        """Get list of path components.

        Returns:
            Names from root to this category, or just the name if the
            path is unknown.
        """
        return list(self.path) if self.path else [self.name]

    @property
    def full_path(self) -> str:
        """Full category path (e.g., "Moda > Erkek Giyim > Gömlekler")."""
        return " > ".join(self.path_parts)

    def as_leaf(self, is_leaf: bool) -> Self:
        """Return a copy with leaf-ness resolved."""
        return replace(self, is_leaf=is_leaf)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "CategoryNode":
        """Create from a category list payload.

        Args:
            data: API response data with ``id``, ``name`` and an optional
                ``parentId`` / ``parent_id``.

        Returns:
            CategoryNode instance.
        """
        parent = data.get("parentId", data.get("parent_id"))
        return cls(
            id=str(data["id"]),
            name=data["name"],
            parent_id=str(parent) if parent is not None else None,
            path=tuple(data.get("path") or ()),
        )
