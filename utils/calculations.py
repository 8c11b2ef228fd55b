from __future__ import annotations

import math
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from utils.config import CRITICAL_DAYS, WARNING_DAYS


class RiskStatus(str, Enum):
    CRITICAL = "Critical"
    WARNING = "Warning"
    OK = "OK"


def reorder_point(demand_mean_per_day: float, lead_time_days: float, safety_stock_value: float) -> float:
    return demand_mean_per_day * lead_time_days + safety_stock_value


# None means "never due": no recent consumption, so stock never runs down.
def days_until_reorder(current_stock: float, reorder_point_value: float, avg_daily: float) -> Optional[float]:
    if avg_daily <= 0:
        return None
    return (current_stock - reorder_point_value) / avg_daily


def days_of_stock_remaining(current_stock: float, avg_daily: float) -> Optional[float]:
    if avg_daily <= 0:
        return None
    return current_stock / avg_daily


def risk_status(
    days_until: Optional[float],
    critical_days: float = CRITICAL_DAYS,
    warning_days: float = WARNING_DAYS,
) -> RiskStatus:
    """Classify days-until-reorder; boundaries fall into the more severe bucket."""
    if days_until is None:
        return RiskStatus.OK
    if days_until <= critical_days:
        return RiskStatus.CRITICAL
    if days_until <= warning_days:
        return RiskStatus.WARNING
    return RiskStatus.OK


def predicted_reorder_date(days_until: Optional[float], as_of: date) -> Optional[date]:
    """Reorder date, clamped to ``as_of`` when the reorder point is already passed."""
    if days_until is None:
        return None
    return as_of + timedelta(days=math.floor(max(0.0, days_until)))
