from __future__ import annotations

import pandas as pd

_ACCEPTABLE_COMPONENT_ID_COLUMNS = ["component_id", "componentid", "component", "id", "sku"]
_ACCEPTABLE_DATE_COLUMNS = ["date", "dates", "consumption_date", "usage_date"]
_ACCEPTABLE_UNITS_COLUMNS = ["units_consumed", "unitsconsumed", "units", "quantity", "qty"]

_COMPONENT_DEFAULTS = {
    "name": "",
    "sku": "",
    "category": "",
    "unit": "",
    "supplier": "",
    "current_stock": 0.0,
    "unit_cost": 0.0,
    "lead_time_days": 0.0,
    "safety_stock": 0.0,
    "reorder_qty": 0.0,
}
_COMPONENT_NUMERIC = ["current_stock", "unit_cost", "lead_time_days", "safety_stock", "reorder_qty"]
_COMPONENT_ALIASES = {
    "currentstock": "current_stock",
    "stock": "current_stock",
    "unitcost": "unit_cost",
    "cost": "unit_cost",
    "leadtimedays": "lead_time_days",
    "lead_time": "lead_time_days",
    "safetystock": "safety_stock",
    "reorderqty": "reorder_qty",
    "reorder_quantity": "reorder_qty",
}


def _lower_columns(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.rename(columns={c: str(c).strip().lower() for c in df.columns}, inplace=True)
    return df


def clean_consumption(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize and validate a raw consumption log.

    Accepts variant column names for the component, date and units columns
    and normalizes them to canonical: component_id, date, units_consumed.
    Raises ValueError with a clear message when a column cannot be resolved.
    Rows with an unparseable date or blank component are dropped; unparseable
    units count as zero. Duplicate (component, date) rows are kept: they sum
    during aggregation.
    """
    if df is None:
        raise ValueError("Provided consumption data is missing.")

    original_cols = list(df.columns)
    df = _lower_columns(df)

    resolved = {}
    for canonical, candidates in (
        ("component_id", _ACCEPTABLE_COMPONENT_ID_COLUMNS),
        ("date", _ACCEPTABLE_DATE_COLUMNS),
        ("units_consumed", _ACCEPTABLE_UNITS_COLUMNS),
    ):
        col = next((c for c in candidates if c in df.columns), None)
        if not col:
            raise ValueError(
                f"No {canonical} column found. Expected one of {candidates}. Got: {original_cols}"
            )
        resolved[col] = canonical
    df = df[list(resolved)].rename(columns=resolved).copy()

    df["date"] = pd.to_datetime(df["date"], errors="coerce").dt.normalize()
    df["component_id"] = df["component_id"].astype("string").str.strip()
    df = df[df["component_id"].notna() & (df["component_id"] != "")]
    df = df.dropna(subset=["date"]).copy()

    df["units_consumed"] = pd.to_numeric(df["units_consumed"], errors="coerce").fillna(0.0).astype(float)

    return df.sort_values(["component_id", "date"]).reset_index(drop=True)


def clean_components(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize a component catalog frame.

    Requires an ``id`` column; every other attribute is optional and
    defaults to empty text or zero.
    """
    if df is None:
        raise ValueError("Provided component data is missing.")

    df = _lower_columns(df)
    df.rename(columns={k: v for k, v in _COMPONENT_ALIASES.items() if k in df.columns}, inplace=True)

    if "id" not in df.columns:
        raise ValueError(f"Missing 'id' column in component data. Got: {list(df.columns)}")

    for col, default in _COMPONENT_DEFAULTS.items():
        if col not in df.columns:
            df[col] = default

    for col in _COMPONENT_NUMERIC:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)
    for col in ("id", "name", "sku", "category", "unit", "supplier"):
        df[col] = df[col].fillna("").astype(str).str.strip()

    df = df[df["id"] != ""]
    return df[["id"] + list(_COMPONENT_DEFAULTS)].reset_index(drop=True)
