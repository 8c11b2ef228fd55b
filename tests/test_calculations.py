from datetime import date, timedelta

import pytest

from utils.calculations import (
	RiskStatus,
	days_of_stock_remaining,
	days_until_reorder,
	predicted_reorder_date,
	reorder_point,
	risk_status,
)


def test_reorder_point():
	assert reorder_point(10, 10, 20) == 120


@pytest.mark.parametrize("days,expected", [
	(-5.0, RiskStatus.CRITICAL),
	(0.0, RiskStatus.CRITICAL),
	(3.0, RiskStatus.CRITICAL),
	(3.0001, RiskStatus.WARNING),
	(7.0, RiskStatus.WARNING),
	(7.0001, RiskStatus.OK),
	(365.0, RiskStatus.OK),
	(None, RiskStatus.OK),
])
def test_risk_status_boundaries(days, expected):
	assert risk_status(days, 3, 7) is expected


def test_zero_consumption_sentinels():
	assert days_until_reorder(0, 20, 0) is None
	assert days_of_stock_remaining(0, 0) is None


def test_predicted_reorder_date_clamps_past_dates():
	today = date(2026, 1, 1)
	assert predicted_reorder_date(-3.7, today) == today
	assert predicted_reorder_date(0.99, today) == today
	assert predicted_reorder_date(4.2, today) == today + timedelta(days=4)
	assert predicted_reorder_date(None, today) is None
