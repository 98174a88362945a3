# SPDX-License-Identifier: MIT

from typing import Optional, TypeAlias, cast

import pendulum

TABLE_TIMESTAMP_FORMAT = "YYYY-MM-DD HH:mm:ss"

TimezoneLike: TypeAlias = str | pendulum.Timezone | pendulum.FixedTimezone


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def resolve_timezone(tz: TimezoneLike) -> pendulum.Timezone | pendulum.FixedTimezone:
    if isinstance(tz, str):
        return pendulum.timezone(tz) if tz != "local" else pendulum.local_timezone()
    return tz


def resolve_utc_offset(tz: TimezoneLike) -> pendulum.FixedTimezone:
    """
    Freeze the zone's current UTC offset. Every row of an edit table uses this
    one offset, so no two instants print as the same wall-clock string when
    the clocks go back.
    """
    if isinstance(tz, pendulum.FixedTimezone):
        return tz
    offset = now_utc().in_tz(resolve_timezone(tz)).offset
    return pendulum.fixed_timezone(offset if offset is not None else 0)


def datetime_from_unix(seconds: int | float) -> pendulum.DateTime:
    return pendulum.from_timestamp(seconds, tz="UTC")


def datetime_from_unix_optional(
    seconds: Optional[int | float],
) -> Optional[pendulum.DateTime]:
    if seconds is None:
        return None
    return datetime_from_unix(seconds)


def datetime_to_unix(datetime: pendulum.DateTime) -> int:
    return datetime.int_timestamp


def datetime_to_iso_str(datetime: pendulum.DateTime) -> str:
    return datetime.isoformat()


def datetime_to_iso_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_iso_str(datetime)


def datetime_to_table_str(
    datetime: pendulum.DateTime, tz: pendulum.Timezone | pendulum.FixedTimezone
) -> str:
    """Format an instant as local wall-clock time for the edit table."""
    return datetime.in_tz(tz).format(TABLE_TIMESTAMP_FORMAT)


def datetime_from_table_str_utc(
    datetime: str, tz: pendulum.Timezone | pendulum.FixedTimezone
) -> pendulum.DateTime:
    """
    Parse a wall-clock timestamp from the edit table, interpreted in `tz`,
    and normalize it to UTC.

    Raises ValueError if the text does not match the table format.
    """
    pendulum_date_time = cast(
        pendulum.DateTime,
        pendulum.from_format(datetime, TABLE_TIMESTAMP_FORMAT, tz=tz),
    )
    return pendulum_date_time.in_tz("UTC")


def local_date(
    datetime: pendulum.DateTime, tz: pendulum.Timezone | pendulum.FixedTimezone
) -> pendulum.Date:
    return datetime.in_tz(tz).date()
