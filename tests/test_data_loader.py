import json
from datetime import date

import pandas as pd
import pytest

from utils.data_loader import (
	load_components_csv,
	load_components_json,
	load_consumption_csv,
	parse_listings,
	parse_order_summaries,
	parse_orders,
	read_text,
)

ORDER_HEADER = ",".join(f"col{i}" for i in range(25))


def order_line(txn, order_id, item="Mug", total="10.00"):
	fields = [""] * 25
	fields[0] = "12/30/25"
	fields[1] = item
	fields[3] = "1"
	fields[11] = total
	fields[13] = txn
	fields[23] = "United States"
	fields[24] = order_id
	return ",".join(fields)


def test_parse_orders_counts_skipped_rows():
	text = "\n".join([ORDER_HEADER, order_line("1", "A"), order_line("", "B"), order_line("3", "C")])
	result = parse_orders(text)
	assert [r.transaction_id for r in result.records] == ["1", "3"]
	assert result.parse_errors == 1
	assert not result.is_empty


def test_parse_orders_header_only_is_nothing_to_import():
	result = parse_orders(ORDER_HEADER + "\n")
	assert result.is_empty
	assert result.parse_errors == 0


def test_parse_orders_quoted_item_name_with_comma():
	text = ORDER_HEADER + "\n" + order_line("7", "X", item='"Mug, large ""XL"""')
	result = parse_orders(text)
	assert result.records[0].item_name == 'Mug, large "XL"'


def test_parse_orders_rejects_none():
	with pytest.raises(TypeError):
		parse_orders(None)


def test_parse_order_summaries():
	fields = [""] * 17
	fields[0], fields[1], fields[3], fields[6] = "1/5/26", "500", "Ann", "2"
	fields[14], fields[16] = "Canada", "40.5"
	result = parse_order_summaries("header\n" + ",".join(fields) + "\n,,,\n")
	assert len(result.records) == 1
	assert result.records[0].order_value == 40.5
	assert result.parse_errors == 1


def test_parse_listings_multiline_description():
	fields = [""] * 24
	fields[0] = "Vase"
	fields[1] = '"Para one.\n\nPara two, with comma."'
	fields[5] = '"tall,blue"'
	text = "TITLE,DESCRIPTION\n" + ",".join(fields) + "\n"
	result = parse_listings(text)
	assert len(result.records) == 1
	assert result.records[0].description == "Para one.\n\nPara two, with comma."
	assert result.records[0].tags == ["tall", "blue"]


def test_read_text_strips_bom(tmp_path):
	p = tmp_path / "orders.csv"
	p.write_bytes("\ufeffh\r\nrow\r\n".encode("utf-8"))
	assert read_text(p).startswith("h")


def test_load_consumption_csv(tmp_path):
	p = tmp_path / "consumption.csv"
	pd.DataFrame({
		'Date': ['2025-01-01', '2025-01-02', 'not a date'],
		'component_id': ['C1', 'C1', 'C1'],
		'Units': [1, 'x', 3]
	}).to_csv(p, index=False)
	events = load_consumption_csv(str(p))
	assert len(events) == 2
	assert events[0].date == date(2025, 1, 1)
	assert events[1].units_consumed == 0.0


def test_load_consumption_csv_missing_column(tmp_path):
	p = tmp_path / "consumption.csv"
	pd.DataFrame({'component_id': ['C1'], 'units_consumed': [1]}).to_csv(p, index=False)
	with pytest.raises(ValueError):
		load_consumption_csv(str(p))


def test_load_components_csv_defaults(tmp_path):
	p = tmp_path / "components.csv"
	pd.DataFrame({'id': ['C1'], 'currentStock': [100], 'lead_time_days': [10], 'safety_stock': [20]}).to_csv(p, index=False)
	comps = load_components_csv(str(p))
	assert len(comps) == 1
	assert comps[0].current_stock == 100.0
	assert comps[0].unit_cost == 0.0
	assert comps[0].lead_time_days == 10.0


def test_load_components_json(tmp_path):
	p = tmp_path / "components.json"
	p.write_text(json.dumps({"components": [{"id": "C2", "name": "Resistor", "unit_cost": 0.02}]}))
	comps = load_components_json(p)
	assert comps[0].name == "Resistor"
	assert comps[0].unit_cost == 0.02
