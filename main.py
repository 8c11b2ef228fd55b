"""CLI / programmatic orchestrator for ShopSense (non-API)."""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

import pandas as pd

from agents import ForecastAgent, RegionAgent, ReportAgent
from agents.order_store import OrderStore, order_item_store, sale_summary_store
from utils.config import ORDERS_STORE_FILE, SUMMARIES_STORE_FILE
from utils.data_loader import (
    load_components_csv,
    load_components_json,
    load_consumption_csv,
    parse_order_summaries,
    parse_orders,
    read_text,
)
from utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def open_store(kind: str, path: Optional[str] = None) -> OrderStore:
    if kind == "summaries":
        return sale_summary_store(path or SUMMARIES_STORE_FILE)
    return order_item_store(path or ORDERS_STORE_FILE)


def import_orders(csv_path: str, store: OrderStore, kind: str = "items") -> int:
    text = read_text(csv_path)
    parsed = parse_orders(text) if kind == "items" else parse_order_summaries(text)
    if parsed.is_empty:
        print(f"Nothing to import from {csv_path} ({parsed.parse_errors} rows skipped)")
        return 1
    result = store.merge(parsed.records)
    print(f"+{result.added} new · {result.duplicates} skipped · {parsed.parse_errors} unreadable rows")
    if not result.persisted:
        print(f"Warning: changes were not saved: {result.error}")
        return 2
    return 0


def run_forecast(components_path: str, consumption_path: str, as_of: Optional[date] = None) -> pd.DataFrame:
    if Path(components_path).suffix.lower() == ".json":
        components = load_components_json(components_path)
    else:
        components = load_components_csv(components_path)
    events = load_consumption_csv(consumption_path)

    agent = ForecastAgent()
    results = agent.forecast(components, events, as_of=as_of)
    summary = ReportAgent().inventory_summary(results)
    logger.info(
        "Forecast for %d components: %d critical, %d warning",
        summary["total_components"], summary["critical_count"], summary["warning_count"],
    )
    return agent.to_frame(results)


def region_tables(store: OrderStore, kind: str = "items", year: Optional[str] = None) -> List[pd.DataFrame]:
    agent = RegionAgent()
    records = store.snapshot()
    stats = agent.summarize(records, year) if kind == "items" else agent.summarize_orders(records, year)
    return [
        pd.DataFrame([vars(s) for s in stats[view]], columns=["key", "label", "count", "revenue"])
        for view in ("by_state", "by_country")
    ]


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Run ShopSense ingestion and forecasting")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p_import = sub.add_parser("import", help="Merge an order export into the store")
    p_import.add_argument("csv", help="Path to order export CSV")
    p_import.add_argument("--kind", choices=["items", "summaries"], default="items")
    p_import.add_argument("--store", default=None, help="Store file path")

    p_clear = sub.add_parser("clear", help="Remove every stored order")
    p_clear.add_argument("--kind", choices=["items", "summaries"], default="items")
    p_clear.add_argument("--store", default=None, help="Store file path")
    p_clear.add_argument("--yes", action="store_true", help="Skip confirmation")

    p_regions = sub.add_parser("regions", help="Print order count and revenue by region")
    p_regions.add_argument("--kind", choices=["items", "summaries"], default="items")
    p_regions.add_argument("--store", default=None, help="Store file path")
    p_regions.add_argument("--year", default=None, help="Four-digit sale year")

    p_forecast = sub.add_parser("forecast", help="Compute reorder forecasts")
    p_forecast.add_argument("components", help="Component catalog (.csv or .json)")
    p_forecast.add_argument("consumption", help="Consumption log CSV")
    p_forecast.add_argument("--as-of", default=None, help="Evaluation date YYYY-MM-DD (default today)")
    p_forecast.add_argument("--out", default="outputs/reorder_forecast.csv", help="Output CSV path")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if args.command == "import":
        raise SystemExit(import_orders(args.csv, open_store(args.kind, args.store), args.kind))

    if args.command == "clear":
        if not args.yes and input("Clear all stored orders? [y/N] ").strip().lower() != "y":
            raise SystemExit(1)
        open_store(args.kind, args.store).clear()
        print("Order store cleared")

    elif args.command == "regions":
        by_state, by_country = region_tables(open_store(args.kind, args.store), args.kind, args.year)
        print(by_state.to_string(index=False))
        print()
        print(by_country.to_string(index=False))

    elif args.command == "forecast":
        as_of = date.fromisoformat(args.as_of) if args.as_of else None
        df = run_forecast(args.components, args.consumption, as_of)
        Path(args.out).parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.out, index=False)
        print(f"Forecast written to {args.out}")
