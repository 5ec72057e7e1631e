"""
Animated monthly air-quality charts.

Reads a daily air-quality CSV (newest day first), tags each day with its
month and animates one month per frame, either as bars of the daily value
by day of month or as a cumulative line over the year.

Run:
  python scripts/airquality_monthly.py data/airquality.csv --out aqi.gif
  python scripts/airquality_monthly.py data/airquality.csv --mode line --out aqi.mp4
"""

import argparse
import logging

import pandas as pd

from frameplot.core.config import CSV_ENCODING
from frameplot.core.logs import configure_logging
from frameplot.data.monthly import read_measurements, reshape_by_month
from frameplot.visuals import Layer, Plot, animate

logger = logging.getLogger("airquality_monthly")

QUALITY_ORDER = ["优", "良", "轻度污染", "中度污染", "重度污染", "严重污染"]


def monthly_bar_plot(df: pd.DataFrame, value: str, facet: str | None = None) -> Plot:
    df = df.copy()
    df["day"] = pd.to_datetime(df["date"]).dt.day
    return Plot(
        title="Daily " + value.upper() + ", month",
        xlabel="Day of month",
        ylabel=value.upper(),
        facet=facet,
    ).add(Layer(df, x="day", y=value, geom="bar", frame="month", color=facet))


def cumulative_line_plot(df: pd.DataFrame, value: str) -> Plot:
    df = df.copy()
    df["date"] = pd.to_datetime(df["date"])
    return Plot(xlabel="Date", ylabel=value.upper()).add(
        Layer(df, x="date", y=value, geom="line", frame="month", cumulative=True)
    )


def main():
    parser = argparse.ArgumentParser(description="Animate daily air-quality data by month.")
    parser.add_argument("csv", help="Input CSV with a date column and a value column.")
    parser.add_argument("--value", default="aqi", help="Value column (after header normalization).")
    parser.add_argument("--encoding", default=CSV_ENCODING, help="Text encoding of the CSV.")
    parser.add_argument("--mode", choices=["bar", "line"], default="bar")
    parser.add_argument("--facet", default=None, help="Optional column to facet bars by, e.g. quality.")
    parser.add_argument("--out", default=None, help="Output file; format follows the extension.")
    parser.add_argument("--saver", default=None, help="Saver name overriding the extension.")
    parser.add_argument("--fps", type=int, default=1)
    args = parser.parse_args()

    configure_logging()

    df = read_measurements(args.csv, encoding=args.encoding)
    monthly = reshape_by_month(df)
    if args.facet == "quality" and "quality" in monthly.columns:
        present = [q for q in QUALITY_ORDER if q in set(monthly["quality"])]
        monthly["quality"] = pd.Categorical(monthly["quality"], categories=present)

    if args.mode == "bar":
        plot = monthly_bar_plot(monthly, args.value, facet=args.facet)
        anim = animate(plot, args.out, saver=args.saver, fps=args.fps)
    else:
        plot = cumulative_line_plot(monthly, args.value)
        anim = animate(plot, args.out, saver=args.saver, title_frame=False, fps=args.fps)

    if anim.saved:
        logger.info("Saved: %s", anim.filename)
    else:
        logger.info("Prepared %d frames; pass --out to render them", len(anim))


if __name__ == "__main__":
    main()
