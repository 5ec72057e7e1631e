import logging

import pandas as pd
import pytest

from frameplot.core.errors import OutOfRangeError
from frameplot.data.monthly import (
    MONTH_ROW_RANGES,
    month_of_row,
    read_measurements,
    required_rows,
    reshape_by_month,
)


def test_month_table_is_contiguous():
    assert [m for _, _, m in MONTH_ROW_RANGES] == list(range(12, 0, -1))
    assert MONTH_ROW_RANGES[0][0] == 1
    for (_, end, _), (start, _, _) in zip(MONTH_ROW_RANGES, MONTH_ROW_RANGES[1:]):
        assert start == end + 1
    assert required_rows() == 359


def test_reshape_keeps_every_row(measurements):
    out = reshape_by_month(measurements)

    assert len(out) == len(measurements)
    assert list(out["aqi"]) == list(measurements["aqi"])
    assert out["month"].is_monotonic_decreasing


def test_first_and_last_month_blocks(measurements):
    out = reshape_by_month(measurements)

    assert (out["month"].iloc[:31] == 12).all()
    assert (out["month"].iloc[-31:] == 1).all()
    assert out["month"].dtype.kind == "i"
    assert out.loc[31, "month"] == 11


def test_reshape_does_not_mutate_input(measurements):
    reshape_by_month(measurements)
    assert "month" not in measurements.columns


def test_too_few_rows_raises(measurements):
    with pytest.raises(OutOfRangeError) as exc:
        reshape_by_month(measurements.iloc[:300])
    assert exc.value.required == 359
    assert exc.value.available == 300


def test_extra_rows_are_dropped_with_warning(measurements, caplog):
    extra = pd.concat([measurements, measurements.iloc[:5]], ignore_index=True)
    with caplog.at_level(logging.WARNING, logger="frameplot.data.monthly"):
        out = reshape_by_month(extra)
    assert len(out) == 359
    assert "dropping 5 rows" in caplog.text


def test_custom_ranges_follow_table_order():
    df = pd.DataFrame({"v": range(6)})
    out = reshape_by_month(df, ranges=[(4, 6, 2), (1, 3, 1)])
    assert list(out["v"]) == [3, 4, 5, 0, 1, 2]
    assert list(out["month"]) == [2, 2, 2, 1, 1, 1]


@pytest.mark.parametrize("row,month", [(1, 12), (31, 12), (32, 11), (60, 11), (329, 1), (359, 1)])
def test_month_of_row(row, month):
    assert month_of_row(row) == month


def test_month_of_row_outside_table():
    with pytest.raises(OutOfRangeError, match="row 360 is outside the month table") as exc:
        month_of_row(360)
    assert exc.value.required == 360
    assert exc.value.available == 359


def test_read_measurements_with_encoding(tmp_path):
    path = tmp_path / "aq.csv"
    path.write_bytes("日期,AQI,质量等级\n1973-12-31,55,良\n".encode("gbk"))

    df = read_measurements(str(path), encoding="gbk")

    assert list(df.columns) == ["date", "aqi", "quality"]
    assert df.loc[0, "quality"] == "良"


def test_read_measurements_selects_columns(tmp_path):
    path = tmp_path / "aq.csv"
    path.write_text("Date,AQI,PM10\n1973-12-31,55,70\n", encoding="utf-8")

    df = read_measurements(str(path), columns=["date", "aqi"])

    assert list(df.columns) == ["date", "aqi"]
