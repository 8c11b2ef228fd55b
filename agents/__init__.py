"""Top-level agents package for ShopSense.

Exposes the order store, reorder forecasting, regional breakdown and reporting
agents used by the API and the CLI.
"""

from .forecast_agent import ForecastAgent
from .order_store import OrderStore
from .region_agent import RegionAgent
from .report_agent import ReportAgent
