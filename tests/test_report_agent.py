from datetime import date

from agents.forecast_agent import ForecastResult
from agents.report_agent import ReportAgent, parse_sale_date
from utils.calculations import RiskStatus
from utils.records import OrderRecord


def result(status, value):
	return ForecastResult(
		component_id='x', avg_daily_consumption=1.0, reorder_point=1.0, days_until_reorder=1.0,
		days_of_stock_remaining=1.0, risk_status=status, predicted_reorder_date=None,
		total_inventory_value=value,
	)


def line(txn, order_id, name, total, qty=1, sale_date='3/20/26', shipped='', country='United States'):
	return OrderRecord(
		transaction_id=txn, order_id=order_id, sale_date=sale_date, item_name=name, ship_name='x',
		quantity=qty, price=total, discount_amount=0.0, shipping=0.0, item_total=total,
		date_shipped=shipped, ship_city='c', ship_state='CA', ship_country=country,
	)


def test_inventory_summary_counts():
	results = [result(RiskStatus.CRITICAL, 10), result(RiskStatus.WARNING, 5), result(RiskStatus.OK, 1)]
	out = ReportAgent().inventory_summary(results)
	assert out == {
		'total_components': 3,
		'critical_count': 1,
		'warning_count': 1,
		'needs_reorder_count': 2,
		'total_inventory_value': 16.0,
	}


def test_parse_sale_date():
	assert parse_sale_date('12/30/25') == date(2025, 12, 30)
	assert parse_sale_date('2/29/2024') == date(2024, 2, 29)
	assert parse_sale_date('13/1/25') is None
	assert parse_sale_date('') is None


def test_sales_metrics():
	items = [
		line('1', 'A', 'Mug', 20.0, qty=2, shipped='3/21/26'),
		line('2', 'A', 'Vase', 25.0),
		line('3', 'B', 'Mug', 10.0, sale_date='1/5/26', shipped='1/6/26', country='Canada'),
	]
	out = ReportAgent().sales_metrics(items, as_of=date(2026, 3, 31))
	assert out['revenue_all_time'] == 55.0
	assert out['revenue_30d'] == 45.0
	assert out['orders_30d'] == 1
	assert out['avg_order_value'] == 27.5
	assert out['unshipped_count'] == 1
	assert out['top_items'][0] == {'name': 'Mug', 'units': 3, 'revenue': 30.0}
	assert out['top_countries'][0] == {'country': 'United States', 'count': 2}
	months = {m['month']: m['revenue'] for m in out['monthly_revenue']}
	assert list(months) == ['Oct 25', 'Nov 25', 'Dec 25', 'Jan 26', 'Feb 26', 'Mar 26']
	assert months['Mar 26'] == 45.0
	assert months['Jan 26'] == 10.0


def test_sales_metrics_empty():
	out = ReportAgent().sales_metrics([], as_of=date(2026, 3, 31))
	assert out['revenue_all_time'] == 0.0
	assert out['top_items'] == []
	assert len(out['monthly_revenue']) == 6
