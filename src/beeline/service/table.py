# SPDX-License-Identifier: MIT

import math
from typing import Optional

from beeline.model.datapoint import Datapoint, EditableDatapoint
from beeline.template.datapoint import get_editable_datapoint_template
from beeline.time import (
    TimezoneLike,
    datetime_from_table_str_utc,
    datetime_to_table_str,
    resolve_utc_offset,
)

TABLE_HEADER = "TIMESTAMP\tVALUE\tCOMMENT\tID"
FIELD_SEPARATOR = "\t"


class TableParseError(Exception):
    """Raised when an edited datapoint table cannot be parsed."""

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}: {line!r}")


def format_value(value: float) -> str:
    """
    Format a datapoint value as a plain decimal.

    Whole numbers drop the trailing ".0" so that 3.0 is shown as "3".
    """
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def write_datapoints_table(
    datapoints: list[Datapoint], tz: TimezoneLike = "local"
) -> str:
    """
    Serialize datapoints into the tab separated table shown in the editor.

    Rows keep the input order. Comments are written verbatim, so a comment
    containing a tab or newline will not survive a round trip.
    """
    timezone = resolve_utc_offset(tz)

    lines = [TABLE_HEADER]
    for datapoint in datapoints:
        lines.append(
            FIELD_SEPARATOR.join(
                [
                    datetime_to_table_str(datapoint["timestamp"], timezone),
                    format_value(datapoint["value"]),
                    datapoint["comment"] or "",
                    datapoint["id"],
                ]
            )
        )
    return "\n".join(lines) + "\n"


def read_datapoints_table(
    text: str, tz: TimezoneLike = "local"
) -> list[EditableDatapoint]:
    """
    Parse an edited table back into editable datapoints.

    The first line is taken to be the header and is skipped without checking.
    Any malformed row fails the whole table, blank lines included.

    Raises:
        TableParseError: If a row is missing its timestamp or value, or either
            one cannot be parsed.
    """
    timezone = resolve_utc_offset(tz)

    datapoints: list[EditableDatapoint] = []
    lines = _split_lines(text)
    for index, line in enumerate(lines[1:], start=2):
        fields = line.split(FIELD_SEPARATOR)

        timestamp_str = _field(fields, 0)
        value_str = _field(fields, 1)
        if timestamp_str is None:
            raise TableParseError(index, line, "missing timestamp")
        if value_str is None:
            raise TableParseError(index, line, "missing value")

        try:
            timestamp = datetime_from_table_str_utc(timestamp_str, timezone)
        except ValueError:
            raise TableParseError(
                index, line, f"invalid timestamp {timestamp_str!r}"
            ) from None

        try:
            value = _parse_value(value_str)
        except ValueError:
            raise TableParseError(index, line, f"invalid value {value_str!r}") from None

        comment = _field(fields, 2)
        id = _field(fields, 3)

        datapoint = get_editable_datapoint_template()
        datapoint["id"] = id if id else None
        datapoint["timestamp"] = timestamp
        datapoint["value"] = value
        datapoint["comment"] = comment if comment is not None else ""
        datapoint["line"] = index
        datapoints.append(datapoint)

    return datapoints


def _split_lines(text: str) -> list[str]:
    # Only "\n" ends a row; comments may hold U+2028, form feeds and the like
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _parse_value(value_str: str) -> float:
    """Plain finite decimals only: no padding, digit separators, nan or inf."""
    if value_str != value_str.strip() or "_" in value_str:
        raise ValueError(value_str)
    value = float(value_str)
    if not math.isfinite(value):
        raise ValueError(value_str)
    return value


def _field(fields: list[str], position: int) -> Optional[str]:
    if position < len(fields):
        return fields[position]
    return None
