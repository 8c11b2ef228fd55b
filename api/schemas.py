from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field


class ComponentIn(BaseModel):
    id: str = Field(min_length=1)
    name: str = ""
    sku: str = ""
    category: str = ""
    unit: str = ""
    current_stock: float = 0.0
    unit_cost: float = 0.0
    supplier: str = ""
    lead_time_days: float = Field(default=0.0, ge=0)
    safety_stock: float = Field(default=0.0, ge=0)
    reorder_qty: float = 0.0


class ConsumptionIn(BaseModel):
    component_id: str = Field(min_length=1)
    date: dt.date
    units_consumed: float


class ForecastRequest(BaseModel):
    components: List[ComponentIn]
    consumption: List[ConsumptionIn] = []
    as_of: Optional[dt.date] = None


class ForecastRow(BaseModel):
    component_id: str
    avg_daily_consumption: float
    reorder_point: float
    days_until_reorder: Optional[float] = None
    days_of_stock_remaining: Optional[float] = None
    risk_status: str
    predicted_reorder_date: Optional[dt.date] = None
    total_inventory_value: float


class InventorySummary(BaseModel):
    total_components: int
    critical_count: int
    warning_count: int
    needs_reorder_count: int
    total_inventory_value: float


class ForecastResponse(BaseModel):
    as_of: dt.date
    count: int
    rows: List[ForecastRow]
    summary: InventorySummary


class UploadResponse(BaseModel):
    kind: str
    parsed: int
    parse_errors: int
    added: int
    duplicates: int
    persisted: bool
    total: int
    error: Optional[str] = None


class ClearResponse(BaseModel):
    kind: str
    persisted: bool
    error: Optional[str] = None


class RegionStatOut(BaseModel):
    key: str
    label: str
    count: int
    revenue: float


class RegionResponse(BaseModel):
    year: Optional[str] = None
    available_years: List[str]
    total_orders: int
    total_revenue: float
    by_state: List[RegionStatOut]
    by_country: List[RegionStatOut]


class ListingOut(BaseModel):
    title: str
    description: str
    price: float
    quantity: int
    tags: List[str]
    materials: str
    images: List[str]
    sku: str


class ListingsResponse(BaseModel):
    count: int
    parse_errors: int
    listings: List[ListingOut]
