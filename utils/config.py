from __future__ import annotations
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env if present
load_dotenv()

def _get_float(name: str, default: float) -> float:
	try:
		return float(os.getenv(name, default))
	except Exception:
		return default

def _get_int(name: str, default: int) -> int:
	try:
		return int(float(os.getenv(name, default)))
	except Exception:
		return default

def _get_str(name: str, default: str) -> str:
	value = os.getenv(name)
	if value is None or not value.strip():
		return default
	return value.strip()

# Persisted order collections (one JSON blob per logical store)
DATA_DIR = Path(_get_str("SHOPSENSE_DATA_DIR", "data"))
ORDERS_STORE_FILE = DATA_DIR / _get_str("ORDERS_STORE_FILE", "salesmap_orders.json")
SUMMARIES_STORE_FILE = DATA_DIR / _get_str("SUMMARIES_STORE_FILE", "salesmap_summaries.json")

# Reorder forecasting
CONSUMPTION_WINDOW_DAYS = _get_int("CONSUMPTION_WINDOW_DAYS", 30)
CRITICAL_DAYS = _get_float("CRITICAL_DAYS", 3.0)
WARNING_DAYS = _get_float("WARNING_DAYS", 7.0)

# Logging
LOG_LEVEL = _get_str("LOG_LEVEL", "INFO")
LOG_FORMAT = _get_str("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")
