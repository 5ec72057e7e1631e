"""Monthly reshaping of the daily air-quality table.

The source table lists one row per day, newest first, with a few days
missing. The month boundaries are therefore fixed row ranges rather than
anything derivable from the data, and are kept as an explicit lookup.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

import pandas as pd

from frameplot.core.config import CSV_ENCODING
from frameplot.core.errors import OutOfRangeError
from frameplot.data.normalize_inputs import normalize_columns

logger = logging.getLogger(__name__)

# (start_row, end_row, month), 1-based and inclusive, in output order
MONTH_ROW_RANGES: list[tuple[int, int, int]] = [
    (1, 31, 12),
    (32, 60, 11),
    (61, 91, 10),
    (92, 121, 9),
    (122, 152, 8),
    (153, 183, 7),
    (184, 212, 6),
    (213, 242, 5),
    (243, 271, 4),
    (272, 301, 3),
    (302, 328, 2),
    (329, 359, 1),
]


def required_rows(ranges: Sequence[tuple[int, int, int]] = MONTH_ROW_RANGES) -> int:
    return max(end for _, end, _ in ranges)


def month_of_row(
    row: int, ranges: Sequence[tuple[int, int, int]] = MONTH_ROW_RANGES
) -> int:
    """Return the month assigned to a 1-based row number."""
    for start, end, month in ranges:
        if start <= row <= end:
            return month
    last = required_rows(ranges)
    raise OutOfRangeError(row, last, f"row {row} is outside the month table (rows 1..{last})")


def read_measurements(
    path: str,
    encoding: str = CSV_ENCODING,
    columns: Iterable[str] | None = None,
) -> pd.DataFrame:
    """Read a measurement CSV and normalize its headers.

    Args:
        path: CSV file to read.
        encoding: Text encoding of the file; exports are not always UTF-8.
        columns: Optional internal column names to keep, in order.

    Returns:
        The measurement table with normalized column names.
    """
    df = pd.read_csv(path, encoding=encoding)
    df = normalize_columns(df)
    if columns is not None:
        df = df[list(columns)]
    logger.info("read %d rows (%s) from %s", len(df), ", ".join(map(str, df.columns)), path)
    return df


def reshape_by_month(
    df: pd.DataFrame,
    ranges: Sequence[tuple[int, int, int]] = MONTH_ROW_RANGES,
) -> pd.DataFrame:
    """Tag fixed row ranges with their month and concatenate them.

    Args:
        df: Measurement table, one row per day in source order.
        ranges: ``(start_row, end_row, month)`` tuples, 1-based inclusive.
            The output follows the order of this list.

    Returns:
        A new table with an integer ``month`` column.

    Raises:
        OutOfRangeError: If ``df`` has fewer rows than ``ranges`` reaches.
    """
    needed = required_rows(ranges)
    if len(df) < needed:
        raise OutOfRangeError(needed, len(df))
    if len(df) > needed:
        logger.warning(
            "dropping %d rows past the last month range (row %d)",
            len(df) - needed,
            needed,
        )

    parts = []
    for start, end, month in ranges:
        part = df.iloc[start - 1 : end].copy()
        part["month"] = month
        parts.append(part)
    out = pd.concat(parts, ignore_index=True)
    out["month"] = out["month"].astype(int)
    return out
