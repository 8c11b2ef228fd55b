"""Positional row mappers for the known export layouts.

Each layout is fixed by the upload flow that produced it; nothing is
auto-detected from the header. A mapper returns ``None`` when the row's key
column is blank, which the caller counts as a parse error.
"""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

from utils.records import ListingRecord, OrderRecord, SaleSummaryRecord

# Sold order items export: one row per transaction (line item)
ORDER_ITEM_COLUMNS = {
    "sale_date": 0,
    "item_name": 1,
    "buyer": 2,
    "quantity": 3,
    "price": 4,
    "discount_amount": 7,
    "shipping": 9,
    "item_total": 11,
    "transaction_id": 13,
    "date_shipped": 16,
    "ship_name": 17,
    "ship_city": 20,
    "ship_state": 21,
    "ship_country": 23,
    "order_id": 24,
}

# Sold orders export: one row per order
SALE_SUMMARY_COLUMNS = {
    "sale_date": 0,
    "order_id": 1,
    "buyer": 2,
    "full_name": 3,
    "num_items": 6,
    "date_shipped": 8,
    "ship_city": 11,
    "ship_state": 12,
    "ship_country": 14,
    "order_value": 16,
}

# Listings export: TITLE,DESCRIPTION,PRICE,CURRENCY_CODE,QUANTITY,TAGS,
# MATERIALS,IMAGE1..IMAGE10,VARIATION columns...,SKU
LISTING_COLUMNS = {
    "title": 0,
    "description": 1,
    "price": 2,
    "quantity": 4,
    "tags": 5,
    "materials": 6,
    "image1": 7,
    "sku": 23,
}
LISTING_IMAGE_COUNT = 10


def field_at(fields: Sequence[str], index: int) -> str:
    """Trimmed value at ``index``; empty string when the row is too short."""
    if 0 <= index < len(fields):
        return fields[index].strip()
    return ""


def to_float(raw: str, default: float = 0.0) -> float:
    try:
        value = float(raw.strip())
    except (AttributeError, ValueError):
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def to_int(raw: str, default: int = 0) -> int:
    """Integer coercion that accepts ``"3"`` and ``"3.0"`` alike."""
    value = to_float(raw, float(default))
    try:
        return int(value)
    except (OverflowError, ValueError):
        return default


def map_order_item(fields: Sequence[str]) -> Optional[OrderRecord]:
    col = ORDER_ITEM_COLUMNS
    transaction_id = field_at(fields, col["transaction_id"])
    if not transaction_id:
        return None
    return OrderRecord(
        transaction_id=transaction_id,
        order_id=field_at(fields, col["order_id"]),
        sale_date=field_at(fields, col["sale_date"]),
        item_name=field_at(fields, col["item_name"]),
        ship_name=field_at(fields, col["ship_name"]) or field_at(fields, col["buyer"]),
        quantity=to_int(field_at(fields, col["quantity"])),
        price=to_float(field_at(fields, col["price"])),
        discount_amount=to_float(field_at(fields, col["discount_amount"])),
        shipping=to_float(field_at(fields, col["shipping"])),
        item_total=to_float(field_at(fields, col["item_total"])),
        date_shipped=field_at(fields, col["date_shipped"]),
        ship_city=field_at(fields, col["ship_city"]),
        ship_state=field_at(fields, col["ship_state"]),
        ship_country=field_at(fields, col["ship_country"]),
    )


def map_sale_summary(fields: Sequence[str]) -> Optional[SaleSummaryRecord]:
    col = SALE_SUMMARY_COLUMNS
    order_id = field_at(fields, col["order_id"])
    if not order_id:
        return None
    return SaleSummaryRecord(
        order_id=order_id,
        sale_date=field_at(fields, col["sale_date"]),
        full_name=field_at(fields, col["full_name"]) or field_at(fields, col["buyer"]),
        ship_city=field_at(fields, col["ship_city"]),
        ship_state=field_at(fields, col["ship_state"]),
        ship_country=field_at(fields, col["ship_country"]),
        order_value=to_float(field_at(fields, col["order_value"])),
        num_items=to_int(field_at(fields, col["num_items"])),
    )


def split_tags(raw: str) -> List[str]:
    return [t.strip() for t in raw.split(",") if t.strip()]


def map_listing(fields: Sequence[str]) -> Optional[ListingRecord]:
    col = LISTING_COLUMNS
    title = field_at(fields, col["title"])
    if not title:
        return None
    images = [field_at(fields, col["image1"] + i) for i in range(LISTING_IMAGE_COUNT)]
    return ListingRecord(
        title=title,
        description=field_at(fields, col["description"]),
        price=to_float(field_at(fields, col["price"])),
        quantity=to_int(field_at(fields, col["quantity"])),
        tags=split_tags(field_at(fields, col["tags"])),
        materials=field_at(fields, col["materials"]),
        images=[url for url in images if url],
        sku=field_at(fields, col["sku"]),
    )
