from __future__ import annotations

from functools import lru_cache

from agents.forecast_agent import ForecastAgent
from agents.order_store import order_item_store, sale_summary_store
from agents.region_agent import RegionAgent
from agents.report_agent import ReportAgent
from utils.config import (
    CONSUMPTION_WINDOW_DAYS,
    CRITICAL_DAYS,
    ORDERS_STORE_FILE,
    SUMMARIES_STORE_FILE,
    WARNING_DAYS,
)


def get_forecast_agent():
    return ForecastAgent(window_days=CONSUMPTION_WINDOW_DAYS, critical_days=CRITICAL_DAYS, warning_days=WARNING_DAYS)


def get_region_agent():
    return RegionAgent()


def get_report_agent():
    return ReportAgent()


# One store object per process so its lock covers every request.
@lru_cache(maxsize=None)
def get_item_store():
    return order_item_store(ORDERS_STORE_FILE)


@lru_cache(maxsize=None)
def get_summary_store():
    return sale_summary_store(SUMMARIES_STORE_FILE)
