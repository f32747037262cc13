# salesdesk/api/repositories/sales_repo.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..client import ApiClient
from ...errors import FetchFailure
from ...utils.helpers import parse_timestamp, to_decimal


@dataclass(frozen=True)
class SaleItem:
    product_id: str
    quantity: int
    price: Decimal  # unit price snapshot taken when the product was picked

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "SaleItem":
        return cls(
            product_id=str(d.get("productId") or ""),
            quantity=int(d.get("quantity") or 0),
            price=to_decimal(d.get("price")),
        )

    def to_api(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "quantity": int(self.quantity),
            "price": float(self.price),
        }


@dataclass(frozen=True)
class Sale:
    sale_id: str
    customer_id: str
    items: tuple[SaleItem, ...] = field(default_factory=tuple)
    payment_method: str = ""
    discount_percentage: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    final_amount: Decimal = Decimal("0")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, d: Dict[str, Any]) -> "Sale":
        try:
            return cls(
                sale_id=str(d["saleId"]),
                customer_id=str(d.get("customerId") or ""),
                items=tuple(SaleItem.from_api(i) for i in (d.get("saleItems") or [])),
                payment_method=str(d.get("paymentMethod") or ""),
                discount_percentage=to_decimal(d.get("discountPercentage")),
                total_amount=to_decimal(d.get("totalAmount")),
                final_amount=to_decimal(d.get("finalAmount")),
                created_at=parse_timestamp(d.get("createdAt")),
                updated_at=parse_timestamp(d.get("updatedAt")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailure(f"Malformed sale record: {e}") from e

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def units_sold(self) -> int:
        return sum(i.quantity for i in self.items)


def sale_payload(
    *,
    customer_id: str,
    items: List[SaleItem],
    payment_method: str,
    discount_percentage: Decimal,
) -> Dict[str, Any]:
    """Body for POST /sales. Totals are left to the server."""
    return {
        "customerId": customer_id,
        "saleItems": [i.to_api() for i in items],
        "paymentMethod": payment_method,
        "discountPercentage": float(discount_percentage),
    }


class SalesRepo:
    def __init__(self, client: ApiClient):
        self.client = client

    async def list_sales(self) -> List[Sale]:
        rows = await self.client.get_list("/sales")
        return [Sale.from_api(r) for r in rows]

    async def create(self, **fields) -> Sale:
        """POST the sale; the returned record carries the authoritative totals."""
        data = await self.client.post_json("/sales", sale_payload(**fields))
        if not isinstance(data, dict):
            raise FetchFailure("Server did not return the created sale.")
        return Sale.from_api(data)
