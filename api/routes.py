from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from .schemas import (
    ClearResponse,
    ForecastRequest,
    ForecastResponse,
    ForecastRow,
    InventorySummary,
    ListingOut,
    ListingsResponse,
    RegionResponse,
    RegionStatOut,
    UploadResponse,
)
from .deps import (
    get_forecast_agent,
    get_item_store,
    get_region_agent,
    get_report_agent,
    get_summary_store,
)
from agents.forecast_agent import ForecastAgent
from agents.order_store import OrderStore
from agents.region_agent import RegionAgent, available_years, filter_by_year, to_sale_summaries
from agents.report_agent import ReportAgent
from utils.data_loader import parse_listings, parse_order_summaries, parse_orders
from utils.records import Component, ConsumptionEvent

logger = logging.getLogger(__name__)

router = APIRouter()

ORDER_KINDS = ("items", "summaries")


def _store_for(kind: str, item_store: OrderStore, summary_store: OrderStore) -> OrderStore:
    if kind not in ORDER_KINDS:
        raise HTTPException(status_code=400, detail=f"kind must be one of {ORDER_KINDS}")
    return item_store if kind == "items" else summary_store


async def _read_upload(file: UploadFile) -> str:
    name = (file.filename or "").lower()
    if not name.endswith(".csv"):
        raise HTTPException(status_code=400, detail="Unsupported file type; use .csv")
    content = await file.read()
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File is not valid UTF-8 text")


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/orders/upload", response_model=UploadResponse)
async def upload_orders(
    file: UploadFile = File(...),
    kind: str = Query("items"),
    item_store: OrderStore = Depends(get_item_store),
    summary_store: OrderStore = Depends(get_summary_store),
):
    store = _store_for(kind, item_store, summary_store)
    text = await _read_upload(file)
    parsed = parse_orders(text) if kind == "items" else parse_order_summaries(text)
    if parsed.is_empty:
        raise HTTPException(
            status_code=422,
            detail=f"Nothing to import: no usable rows ({parsed.parse_errors} skipped)",
        )
    result = await run_in_threadpool(store.merge, parsed.records)
    if not result.persisted:
        logger.warning("Upload %s merged in memory only: %s", file.filename, result.error)
    return UploadResponse(
        kind=kind,
        parsed=len(parsed.records),
        parse_errors=parsed.parse_errors,
        added=result.added,
        duplicates=result.duplicates,
        persisted=result.persisted,
        total=await run_in_threadpool(len, store),
        error=result.error,
    )


@router.delete("/orders", response_model=ClearResponse)
def clear_orders(
    kind: str = Query("items"),
    item_store: OrderStore = Depends(get_item_store),
    summary_store: OrderStore = Depends(get_summary_store),
):
    result = _store_for(kind, item_store, summary_store).clear()
    return ClearResponse(kind=kind, persisted=result.persisted, error=result.error)


@router.get("/orders/regions", response_model=RegionResponse)
def order_regions(
    kind: str = Query("items"),
    year: Optional[str] = Query(None),
    item_store: OrderStore = Depends(get_item_store),
    summary_store: OrderStore = Depends(get_summary_store),
    region_agent: RegionAgent = Depends(get_region_agent),
):
    records = _store_for(kind, item_store, summary_store).snapshot()
    years = available_years(records)
    summaries = filter_by_year(records, year)
    if kind == "items":
        summaries = to_sale_summaries(summaries)
    stats = region_agent.summarize_orders(summaries)
    return RegionResponse(
        year=year,
        available_years=years,
        total_orders=len(summaries),
        total_revenue=float(sum(o.order_value for o in summaries)),
        by_state=[RegionStatOut(**asdict(s)) for s in stats["by_state"]],
        by_country=[RegionStatOut(**asdict(s)) for s in stats["by_country"]],
    )


@router.get("/orders/metrics")
def order_metrics(
    item_store: OrderStore = Depends(get_item_store),
    report_agent: ReportAgent = Depends(get_report_agent),
):
    return report_agent.sales_metrics(item_store.snapshot())


@router.post("/forecast", response_model=ForecastResponse)
def forecast(
    payload: ForecastRequest,
    forecast_agent: ForecastAgent = Depends(get_forecast_agent),
    report_agent: ReportAgent = Depends(get_report_agent),
):
    components = [
        Component(
            id=c.id, name=c.name, sku=c.sku, category=c.category, unit=c.unit,
            current_stock=c.current_stock, unit_cost=c.unit_cost, supplier=c.supplier,
            lead_time_days=c.lead_time_days, safety_stock=c.safety_stock, reorder_qty=c.reorder_qty,
        )
        for c in payload.components
    ]
    events = [ConsumptionEvent(e.component_id, e.date, e.units_consumed) for e in payload.consumption]
    as_of = payload.as_of or date.today()
    results = forecast_agent.forecast(components, events, as_of=as_of)

    rows = []
    for r in results:
        row = asdict(r)
        row["risk_status"] = r.risk_status.value
        rows.append(ForecastRow(**row))
    summary = report_agent.inventory_summary(results)
    return ForecastResponse(
        as_of=as_of,
        count=len(rows),
        rows=rows,
        summary=InventorySummary(**summary),
    )


@router.post("/listings/parse", response_model=ListingsResponse)
async def parse_listing_upload(file: UploadFile = File(...)):
    text = await _read_upload(file)
    parsed = parse_listings(text)
    if parsed.is_empty:
        raise HTTPException(
            status_code=422,
            detail=f"Nothing to import: no usable rows ({parsed.parse_errors} skipped)",
        )
    listings = [ListingOut(**asdict(listing)) for listing in parsed.records]
    return ListingsResponse(count=len(listings), parse_errors=parsed.parse_errors, listings=listings)
