# salesdesk/api/repositories/categories_repo.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..client import ApiClient
from ...errors import CategoryNotEmpty, FetchFailure
from .products_repo import Product


@dataclass
class Category:
    category_id: str
    name: str
    description: str = ""
    products: List[Product] = field(default_factory=list)

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "Category":
        try:
            return cls(
                category_id=str(d["id"]),
                name=str(d.get("name") or ""),
                description=str(d.get("description") or ""),
                products=[Product.from_api(p) for p in (d.get("products") or [])],
            )
        except (KeyError, TypeError) as e:
            raise FetchFailure(f"Malformed category record: {e}") from e

    @property
    def product_count(self) -> int:
        return len(self.products)

    def can_delete(self) -> bool:
        """A category that still embeds products must not be deleted."""
        return not self.products


class CategoriesRepo:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list_categories(self) -> List[Category]:
        rows = await self.client.get_list("/categories")
        return [Category.from_api(r) for r in rows]

    async def create(self, name: str, description: str = "") -> Category:
        data = await self.client.post_json("/categories", {"name": name, "description": description})
        return Category.from_api(data)

    async def update(self, category_id: str, name: str, description: str = "") -> Category:
        data = await self.client.put_json(
            f"/categories/{category_id}", {"name": name, "description": description}
        )
        return Category.from_api(data)

    async def delete(self, category: Category) -> None:
        """Delete a category; refuses locally when it still has products."""
        if not category.can_delete():
            raise CategoryNotEmpty(
                f"Category '{category.name}' has {category.product_count} product(s). "
                "Remove or reassign them first."
            )
        await self.client.delete(f"/categories/{category.category_id}")
