from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from utils.calculations import (
    RiskStatus,
    days_of_stock_remaining,
    days_until_reorder,
    predicted_reorder_date,
    reorder_point,
    risk_status,
)
from utils.config import CONSUMPTION_WINDOW_DAYS, CRITICAL_DAYS, WARNING_DAYS
from utils.records import Component, ConsumptionEvent


@dataclass(frozen=True)
class ForecastResult:
    component_id: str
    avg_daily_consumption: float
    reorder_point: float
    # None: no recent consumption, never due for reorder
    days_until_reorder: Optional[float]
    days_of_stock_remaining: Optional[float]
    risk_status: RiskStatus
    # None: unknown, only set when days_until_reorder is finite
    predicted_reorder_date: Optional[date]
    total_inventory_value: float

    @property
    def never_due(self) -> bool:
        return self.days_until_reorder is None


def average_daily_consumption(
    component_id: str,
    events: Iterable[ConsumptionEvent],
    as_of: date,
    window_days: int = CONSUMPTION_WINDOW_DAYS,
) -> float:
    """Average daily usage over the trailing window ending at ``as_of``.

    Events count when ``as_of - window_days < event.date <= as_of``. The sum
    is always divided by the nominal window length, not by the number of days
    that have data, so sparse history reads low.
    """
    if window_days <= 0:
        raise ValueError("window_days must be positive")
    start = as_of - timedelta(days=window_days)
    total = 0.0
    matched = False
    for e in events:
        if e.component_id == component_id and start < e.date <= as_of:
            total += e.units_consumed
            matched = True
    if not matched:
        return 0.0
    return total / window_days


class ForecastAgent:
    """
    Reorder forecasting agent.

    Turns a consumption log and static component attributes into reorder
    point, days until reorder, stock cover and a Critical/Warning/OK risk
    status per component. Results depend only on (component, log, as_of).
    """

    def __init__(
        self,
        window_days: int = CONSUMPTION_WINDOW_DAYS,
        critical_days: float = CRITICAL_DAYS,
        warning_days: float = WARNING_DAYS,
    ):
        if window_days <= 0:
            raise ValueError("window_days must be positive")
        if critical_days > warning_days:
            raise ValueError("critical_days must not exceed warning_days")
        self.window_days = window_days
        self.critical_days = critical_days
        self.warning_days = warning_days

    def consumption_by_component(
        self, events: Iterable[ConsumptionEvent], as_of: date
    ) -> Dict[str, float]:
        """Windowed average daily consumption for every component with events."""
        start = as_of - timedelta(days=self.window_days)
        totals: Dict[str, float] = {}
        for e in events:
            if start < e.date <= as_of:
                totals[e.component_id] = totals.get(e.component_id, 0.0) + e.units_consumed
        return {cid: total / self.window_days for cid, total in totals.items()}

    def evaluate(self, component: Component, avg_daily: float, as_of: date) -> ForecastResult:
        rop = reorder_point(avg_daily, component.lead_time_days, component.safety_stock)
        days_until = days_until_reorder(component.current_stock, rop, avg_daily)
        return ForecastResult(
            component_id=component.id,
            avg_daily_consumption=avg_daily,
            reorder_point=rop,
            days_until_reorder=days_until,
            days_of_stock_remaining=days_of_stock_remaining(component.current_stock, avg_daily),
            risk_status=risk_status(days_until, self.critical_days, self.warning_days),
            predicted_reorder_date=predicted_reorder_date(days_until, as_of),
            total_inventory_value=component.current_stock * component.unit_cost,
        )

    def forecast(
        self,
        components: Sequence[Component],
        consumption_log: Iterable[ConsumptionEvent],
        as_of: Optional[date] = None,
    ) -> List[ForecastResult]:
        """
        Args:
            components: component catalog for this run
            consumption_log: append-only consumption events (duplicates sum)
            as_of: evaluation date, defaults to today
        Returns:
            One ForecastResult per component, in input order.
        """
        if components is None:
            raise TypeError("components must be a sequence of Component, not None")
        if consumption_log is None:
            raise TypeError("consumption_log must be an iterable of ConsumptionEvent, not None")
        as_of = as_of or date.today()

        averages = self.consumption_by_component(consumption_log, as_of)
        return [self.evaluate(c, averages.get(c.id, 0.0), as_of) for c in components]

    @staticmethod
    def to_frame(results: Sequence[ForecastResult]) -> pd.DataFrame:
        """
        Returns:
            DataFrame columns: [component_id, avg_daily_consumption, reorder_point,
            days_until_reorder, days_of_stock_remaining, risk_status,
            predicted_reorder_date, total_inventory_value]
        """
        columns = [
            "component_id", "avg_daily_consumption", "reorder_point", "days_until_reorder",
            "days_of_stock_remaining", "risk_status", "predicted_reorder_date", "total_inventory_value",
        ]
        records = []
        for r in results:
            row = asdict(r)
            row["risk_status"] = r.risk_status.value
            records.append(row)
        return pd.DataFrame.from_records(records, columns=columns)


def forecast(
    components: Sequence[Component],
    consumption_log: Iterable[ConsumptionEvent],
    as_of: Optional[date] = None,
) -> List[ForecastResult]:
    return ForecastAgent().forecast(components, consumption_log, as_of)
