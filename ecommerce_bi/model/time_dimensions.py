"""
Calendar and DateTime dimensions.

Both tables span the observed purchase range with no gaps, so date
intelligence works even over days or minutes without any orders.

Weekday numbering follows pandas `dayofweek`: Monday=0 ... Sunday=6,
so Saturday and Sunday (>= 5) are the weekend.
"""

from typing import Iterable

import pandas as pd

from ecommerce_bi.columns import CALENDAR_COLUMNS, DATETIME_COLUMNS
from ecommerce_bi.logger import setup_logger

logger = setup_logger("model.time_dimensions")

WEEKEND_START = 5
ONE_MINUTE = pd.Timedelta(minutes=1)


def _to_timestamps(values: Iterable) -> pd.Series:
    return pd.to_datetime(pd.Series(list(values), dtype="object"), errors="coerce").dropna()


def build_calendar(dates: Iterable) -> pd.DataFrame:
    """
    One row per day from the earliest to the latest date, inclusive.

    Accepts dates or timestamps; time of day is ignored.
    """
    stamps = _to_timestamps(dates)
    if stamps.empty:
        logger.warning("No dates supplied, calendar dimension is empty")
        return pd.DataFrame(columns=CALENDAR_COLUMNS)

    days = pd.date_range(stamps.min().normalize(), stamps.max().normalize(), freq="D")

    calendar = pd.DataFrame({"date": days.date})
    calendar["date_key"] = days.strftime("%Y%m%d")
    calendar["year"] = days.year.astype("int64")
    calendar["month"] = days.month.astype("int64")
    calendar["day"] = days.day.astype("int64")
    calendar["month_name"] = days.month_name()
    calendar["month_short"] = days.strftime("%b")
    calendar["month_year"] = days.strftime("%b %Y")
    calendar["quarter"] = [f"Q{quarter}" for quarter in days.quarter]
    calendar["weekday"] = days.dayofweek.astype("int64")
    calendar["weekday_name"] = days.day_name()
    calendar["is_weekend"] = calendar["weekday"] >= WEEKEND_START
    calendar["year_month"] = calendar["year"] * 100 + calendar["month"]

    logger.info(f"Calendar dimension: {len(calendar)} days ({days[0].date()} to {days[-1].date()})")
    return calendar[CALENDAR_COLUMNS]


def build_datetime(timestamps: Iterable) -> pd.DataFrame:
    """
    One row per whole minute from the earliest timestamp onwards, up to the
    latest: floor(total minutes between them) + 1 rows.
    """
    stamps = _to_timestamps(timestamps)
    if stamps.empty:
        logger.warning("No timestamps supplied, datetime dimension is empty")
        return pd.DataFrame(columns=DATETIME_COLUMNS)

    start, end = stamps.min(), stamps.max()
    periods = int((end - start) // ONE_MINUTE) + 1
    minutes = pd.date_range(start=start, periods=periods, freq="min")

    datetime_dim = pd.DataFrame({"datetime": minutes})
    datetime_dim["date"] = minutes.date
    datetime_dim["time"] = minutes.time
    datetime_dim["hour"] = minutes.hour.astype("int64")
    datetime_dim["minute"] = minutes.minute.astype("int64")
    datetime_dim["second"] = minutes.second.astype("int64")
    datetime_dim["hour_bucket"] = [f"{hour:02d}:00" for hour in minutes.hour]
    datetime_dim["date_key"] = minutes.strftime("%Y%m%d")

    logger.info(f"DateTime dimension: {periods} minutes from {start} to {end}")
    return datetime_dim[DATETIME_COLUMNS]


def minute_of(timestamps: pd.Series, start: pd.Timestamp) -> pd.Series:
    """Map each timestamp onto the DateTime row (minute step from `start`) it falls in."""
    return start + (timestamps - start).dt.floor("min")
