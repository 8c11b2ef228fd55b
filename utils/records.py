"""Domain records shared by the parsers, the order store and the agents."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass(frozen=True)
class Component:
    id: str
    name: str
    sku: str
    category: str
    unit: str
    current_stock: float
    unit_cost: float
    supplier: str
    lead_time_days: float
    safety_stock: float
    reorder_qty: float


@dataclass(frozen=True)
class ConsumptionEvent:
    component_id: str
    date: date
    units_consumed: float


@dataclass(frozen=True)
class OrderRecord:
    """One line item of a sold-order-items export."""

    transaction_id: str
    order_id: str
    sale_date: str
    item_name: str
    ship_name: str
    quantity: int
    price: float
    discount_amount: float
    shipping: float
    item_total: float
    date_shipped: str
    ship_city: str
    ship_state: str
    ship_country: str

    @property
    def is_shipped(self) -> bool:
        return bool(self.date_shipped)


@dataclass(frozen=True)
class SaleSummaryRecord:
    """One order (not one line item) of a sold-orders export."""

    order_id: str
    sale_date: str
    full_name: str
    ship_city: str
    ship_state: str
    ship_country: str
    order_value: float
    num_items: int


@dataclass(frozen=True)
class ListingRecord:
    title: str
    description: str
    price: float
    quantity: int
    tags: List[str] = field(default_factory=list)
    materials: str = ""
    images: List[str] = field(default_factory=list)
    sku: str = ""
