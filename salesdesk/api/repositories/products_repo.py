# salesdesk/api/repositories/products_repo.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..client import ApiClient
from ...errors import FetchFailure
from ...utils.helpers import to_decimal


@dataclass
class Product:
    product_id: str
    name: str
    price: Decimal
    description: str
    stock: int
    category_id: Optional[str]

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "Product":
        try:
            return cls(
                product_id=str(d["id"]),
                name=str(d.get("name") or ""),
                price=to_decimal(d.get("price")),
                description=str(d.get("description") or ""),
                stock=int(d.get("stock") or 0),
                category_id=(str(d["categoryId"]) if d.get("categoryId") else None),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailure(f"Malformed product record: {e}") from e


def product_payload(
    *,
    name: str,
    price: Decimal,
    description: str,
    stock: int,
    category_id: Optional[str],
) -> Dict[str, Any]:
    return {
        "name": name,
        "price": float(price),
        "description": description,
        "stock": int(stock),
        "categoryId": category_id,
    }


class ProductsRepo:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list_products(self) -> List[Product]:
        rows = await self.client.get_list("/products")
        return [Product.from_api(r) for r in rows]

    async def list_by_category(self, category_id: str | None) -> List[Product]:
        """All products, or only those of one category when an id is given."""
        if not category_id:
            return await self.list_products()
        rows = await self.client.get_list(f"/products/category/{category_id}")
        return [Product.from_api(r) for r in rows]

    async def create(self, **fields) -> Product:
        data = await self.client.post_json("/products", product_payload(**fields))
        return Product.from_api(data)

    async def update(self, product_id: str, **fields) -> Product:
        data = await self.client.put_json(f"/products/{product_id}", product_payload(**fields))
        return Product.from_api(data)

    async def delete(self, product_id: str) -> None:
        await self.client.delete(f"/products/{product_id}")
