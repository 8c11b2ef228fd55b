from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from utils.geo import US_COUNTRY, state_label
from utils.records import OrderRecord, SaleSummaryRecord

T = TypeVar("T", OrderRecord, SaleSummaryRecord)


@dataclass
class RegionStat:
    key: str  # state abbreviation or raw country name
    label: str
    count: int
    revenue: float


def to_sale_summaries(items: Iterable[OrderRecord]) -> List[SaleSummaryRecord]:
    """Roll line items up to one summary per order id.

    Order value is the sum of item totals and the item count the sum of
    quantities; the first line item of an order supplies date, name and
    address. Orders keep first-seen order.
    """
    totals: Dict[str, dict] = {}
    for item in items:
        acc = totals.get(item.order_id)
        if acc is None:
            totals[item.order_id] = {
                "order_id": item.order_id,
                "sale_date": item.sale_date,
                "full_name": item.ship_name,
                "ship_city": item.ship_city,
                "ship_state": item.ship_state,
                "ship_country": item.ship_country,
                "order_value": item.item_total,
                "num_items": item.quantity,
            }
        else:
            acc["order_value"] += item.item_total
            acc["num_items"] += item.quantity
    return [SaleSummaryRecord(**acc) for acc in totals.values()]


def _accumulate(groups: Dict[str, RegionStat], key: str, label: str, value: float) -> None:
    stat = groups.get(key)
    if stat is None:
        groups[key] = RegionStat(key=key, label=label, count=1, revenue=value)
    else:
        stat.count += 1
        stat.revenue += value


def _by_count(groups: Dict[str, RegionStat]) -> List[RegionStat]:
    # Ties keep no particular order
    return sorted(groups.values(), key=lambda s: s.count, reverse=True)


def stats_by_us_state(orders: Iterable[SaleSummaryRecord]) -> List[RegionStat]:
    groups: Dict[str, RegionStat] = {}
    for o in orders:
        if o.ship_country != US_COUNTRY:
            continue
        abbr = o.ship_state.upper()
        if not abbr:
            continue
        _accumulate(groups, abbr, state_label(abbr), o.order_value)
    return _by_count(groups)


def stats_by_country(orders: Iterable[SaleSummaryRecord]) -> List[RegionStat]:
    groups: Dict[str, RegionStat] = {}
    for o in orders:
        key = o.ship_country.strip()
        if not key:
            continue
        _accumulate(groups, key, key, o.order_value)
    return _by_count(groups)


def regional_stats(orders: Sequence[SaleSummaryRecord]) -> Dict[str, List[RegionStat]]:
    if orders is None:
        raise TypeError("orders must be a sequence of SaleSummaryRecord, not None")
    orders = list(orders)
    return {
        "by_state": stats_by_us_state(orders),
        "by_country": stats_by_country(orders),
    }


def extract_year(sale_date: str) -> str:
    """Four-digit year of an ``M/D/YY`` or ``M/D/YYYY`` sale date, '' if absent."""
    parts = sale_date.split("/")
    if len(parts) < 3:
        return ""
    year = parts[2].strip()
    return f"20{year}" if len(year) == 2 else year


def available_years(records: Iterable[T]) -> List[str]:
    """Distinct sale years, newest first."""
    years = {extract_year(r.sale_date) for r in records}
    return sorted((y for y in years if y), reverse=True)


def filter_by_year(records: Iterable[T], year: Optional[str]) -> List[T]:
    if not year or year == "all":
        return list(records)
    return [r for r in records if extract_year(r.sale_date) == year]


class RegionAgent:
    """Regional sales breakdown for either export flavour."""

    def summarize(self, items: Sequence[OrderRecord], year: Optional[str] = None) -> Dict[str, List[RegionStat]]:
        return regional_stats(to_sale_summaries(filter_by_year(items, year)))

    def summarize_orders(self, orders: Sequence[SaleSummaryRecord], year: Optional[str] = None) -> Dict[str, List[RegionStat]]:
        return regional_stats(filter_by_year(orders, year))
