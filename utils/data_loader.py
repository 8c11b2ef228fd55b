from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

import pandas as pd

from utils.csv_text import iter_rows
from utils.preprocess import clean_components, clean_consumption
from utils.records import (
    Component,
    ConsumptionEvent,
    ListingRecord,
    OrderRecord,
    SaleSummaryRecord,
)
from utils.row_mappers import map_listing, map_order_item, map_sale_summary

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ParseResult(Generic[T]):
    """Records mapped from an export plus the number of rows that were skipped."""

    records: List[T] = field(default_factory=list)
    parse_errors: int = 0

    @property
    def is_empty(self) -> bool:
        """True when nothing usable came out of the file ("nothing to import")."""
        return not self.records


def _parse(text: str, mapper: Callable[[Sequence[str]], Optional[T]], kind: str) -> ParseResult[T]:
    if text is None:
        raise TypeError("text must be a string, not None")
    result: ParseResult[T] = ParseResult()
    for fields in iter_rows(text):
        record = mapper(fields)
        if record is None:
            result.parse_errors += 1
        else:
            result.records.append(record)
    logger.info("Parsed %s export: %d records, %d skipped rows", kind, len(result.records), result.parse_errors)
    return result


def parse_orders(text: str) -> ParseResult[OrderRecord]:
    """Parse a sold-order-items export (one row per line item)."""
    return _parse(text, map_order_item, "order items")


def parse_order_summaries(text: str) -> ParseResult[SaleSummaryRecord]:
    """Parse a sold-orders export (one row per order)."""
    return _parse(text, map_sale_summary, "order summaries")


def parse_listings(text: str) -> ParseResult[ListingRecord]:
    return _parse(text, map_listing, "listings")


def read_text(path: str | Path) -> str:
    # utf-8-sig strips the BOM some spreadsheet tools prepend
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return f.read()


def load_consumption_csv(path: str | Path) -> List[ConsumptionEvent]:
    df = clean_consumption(pd.read_csv(path))
    return consumption_events(df)


def load_components_csv(path: str | Path) -> List[Component]:
    df = clean_components(pd.read_csv(path))
    return components_from_frame(df)


def load_components_json(path: str | Path) -> List[Component]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # Expect list of components or {'components': [...]}
    if isinstance(data, dict) and "components" in data:
        data = data["components"]
    if not isinstance(data, list):
        raise ValueError("Component JSON must contain a list or {'components': [...]} structure")
    df = clean_components(pd.DataFrame(data))
    return components_from_frame(df)


def consumption_events(df: pd.DataFrame) -> List[ConsumptionEvent]:
    """Convert a cleaned consumption frame into events."""
    return [
        ConsumptionEvent(
            component_id=str(row.component_id),
            date=row.date.date(),
            units_consumed=float(row.units_consumed),
        )
        for row in df.itertuples(index=False)
    ]


def components_from_frame(df: pd.DataFrame) -> List[Component]:
    return [
        Component(
            id=str(row.id),
            name=str(row.name),
            sku=str(row.sku),
            category=str(row.category),
            unit=str(row.unit),
            current_stock=float(row.current_stock),
            unit_cost=float(row.unit_cost),
            supplier=str(row.supplier),
            lead_time_days=float(row.lead_time_days),
            safety_stock=float(row.safety_stock),
            reorder_qty=float(row.reorder_qty),
        )
        for row in df.itertuples(index=False)
    ]
