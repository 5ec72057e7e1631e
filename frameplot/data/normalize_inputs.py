"""Input normalization for air-quality CSV headers.

Provides mappings from the raw column labels found in exported
measurement tables to the internal column names used by the reshaper
and the plotting scripts.
"""

import pandas as pd

COLUMN_MAP = {
    "日期": "date",
    "Date": "date",
    "date": "date",
    "AQI": "aqi",
    "aqi": "aqi",
    "质量等级": "quality",
    "Quality": "quality",
    "PM2.5": "pm25",
    "PM10": "pm10",
    "SO2": "so2",
    "CO": "co",
    "NO2": "no2",
    "O3_8h": "o3",
    "O3": "o3",
}


def _repair_mojibake(label: str) -> str:
    """Undo a UTF-8 header that was decoded as cp1252 or latin-1."""
    for codec in ("cp1252", "latin-1"):
        try:
            return label.encode(codec).decode("utf-8")
        except UnicodeError:
            continue
    return label


def normalize_column(label: str) -> str:
    """Normalize one raw header to its internal identifier.

    Unknown labels are returned stripped but otherwise unchanged.
    """
    label = str(label).lstrip("\ufeff").strip()
    if label in COLUMN_MAP:
        return COLUMN_MAP[label]
    repaired = _repair_mojibake(label)
    return COLUMN_MAP.get(repaired, label)


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``df`` with headers mapped through ``COLUMN_MAP``."""
    return df.rename(columns={c: normalize_column(c) for c in df.columns})
