from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from agents.forecast_agent import ForecastResult
from utils.calculations import RiskStatus
from utils.records import OrderRecord


def parse_sale_date(raw: str) -> Optional[date]:
    """Parse an export sale date (``M/D/YY`` or ``M/D/YYYY``)."""
    parts = raw.strip().split("/")
    if len(parts) != 3:
        return None
    try:
        month, day, year = (int(p) for p in parts)
        if year < 100:
            year += 2000
        return date(year, month, day)
    except ValueError:
        return None


class ReportAgent:
    """Builds dashboard summaries from forecast results and stored order items."""

    def __init__(self, top_items: int = 5, top_countries: int = 3, trailing_months: int = 6, recent_days: int = 30):
        self.top_items = max(0, int(top_items))
        self.top_countries = max(0, int(top_countries))
        self.trailing_months = max(1, int(trailing_months))
        self.recent_days = recent_days

    def inventory_summary(self, results: Sequence[ForecastResult]) -> Dict[str, Any]:
        critical = sum(1 for r in results if r.risk_status is RiskStatus.CRITICAL)
        warning = sum(1 for r in results if r.risk_status is RiskStatus.WARNING)
        return {
            "total_components": len(results),
            "critical_count": critical,
            "warning_count": warning,
            "needs_reorder_count": critical + warning,
            "total_inventory_value": float(sum(r.total_inventory_value for r in results)),
        }

    def items_frame(self, items: Sequence[OrderRecord]) -> pd.DataFrame:
        df = pd.DataFrame(
            [
                {
                    "order_id": i.order_id,
                    "item_name": i.item_name,
                    "quantity": i.quantity,
                    "item_total": i.item_total,
                    "date_shipped": i.date_shipped,
                    "ship_country": i.ship_country,
                    "sale_date": parse_sale_date(i.sale_date),
                }
                for i in items
            ],
            columns=["order_id", "item_name", "quantity", "item_total", "date_shipped", "ship_country", "sale_date"],
        )
        df["sale_date"] = pd.to_datetime(df["sale_date"], errors="coerce")
        return df

    def sales_metrics(self, items: Sequence[OrderRecord], as_of: Optional[date] = None) -> Dict[str, Any]:
        """
        Args:
            items: stored line items
            as_of: reference day for the 30-day and monthly windows, defaults to today
        Returns:
            dict with revenue_30d, revenue_all_time, orders_30d, avg_order_value,
            unshipped_count, monthly_revenue, top_items, top_countries
        """
        as_of = as_of or date.today()
        months = self._month_keys(as_of)
        if not items:
            return {
                "revenue_30d": 0.0,
                "revenue_all_time": 0.0,
                "orders_30d": 0,
                "avg_order_value": 0.0,
                "unshipped_count": 0,
                "monthly_revenue": [{"month": m, "revenue": 0.0} for m in months],
                "top_items": [],
                "top_countries": [],
            }

        df = self.items_frame(items)
        revenue_all_time = float(df["item_total"].sum())
        distinct_orders = df["order_id"].nunique()

        cutoff = pd.Timestamp(as_of - timedelta(days=self.recent_days))
        recent = df[df["sale_date"] >= cutoff]
        unshipped = df[df["date_shipped"] == ""]

        month_key = df["sale_date"].dt.strftime("%b %y")
        by_month = df.groupby(month_key)["item_total"].sum()
        monthly = [{"month": m, "revenue": float(by_month.get(m, 0.0))} for m in months]

        top_items = (
            df.groupby("item_name")
            .agg(units=("quantity", "sum"), revenue=("item_total", "sum"))
            .sort_values("revenue", ascending=False)
            .head(self.top_items)
            .reset_index()
        )
        countries = df[df["ship_country"] != ""]["ship_country"].value_counts().head(self.top_countries)

        return {
            "revenue_30d": float(recent["item_total"].sum()),
            "revenue_all_time": revenue_all_time,
            "orders_30d": int(recent["order_id"].nunique()),
            "avg_order_value": revenue_all_time / distinct_orders if distinct_orders else 0.0,
            "unshipped_count": int(unshipped["order_id"].nunique()),
            "monthly_revenue": monthly,
            "top_items": [
                {"name": r.item_name, "units": int(r.units), "revenue": float(r.revenue)}
                for r in top_items.itertuples(index=False)
            ],
            "top_countries": [{"country": c, "count": int(n)} for c, n in countries.items()],
        }

    def _month_keys(self, as_of: date) -> List[str]:
        keys = []
        for back in range(self.trailing_months - 1, -1, -1):
            year, month = as_of.year, as_of.month - back
            while month <= 0:
                month += 12
                year -= 1
            keys.append(date(year, month, 1).strftime("%b %y"))
        return keys
