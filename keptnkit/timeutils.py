"""Keptn timestamp formatting and evaluation timeframe calculation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from fractions import Fraction

KEPTN_TIME_FORMAT_ISO8601 = "%Y-%m-%dT%H:%M:%S.%fZ"

_DEFAULT_EVALUATION_TIMEFRAME = "5m"

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile(r"(?P<whole>\d*)(?:\.(?P<frac>\d*))?(?P<unit>[^\d.]*)")


def get_keptn_timestamp(timestamp: datetime) -> str:
    """Format a timestamp the way Keptn does (ISO 8601 with milliseconds)."""
    return f"{timestamp:%Y-%m-%dT%H:%M:%S}.{timestamp.microsecond // 1000:03d}Z"


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``"5m"``, ``"1h30m"`` or ``"-1.5s"``."""
    invalid = ValueError(f'time: invalid duration "{text}"')
    rest = text
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise invalid
    total = Fraction(0)
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        whole, frac, unit = match.group("whole"), match.group("frac"), match.group("unit")
        if not whole and not frac:
            raise invalid
        if not unit:
            raise ValueError(f'time: missing unit in duration "{text}"')
        if unit not in _UNIT_NANOSECONDS:
            raise ValueError(f'time: unknown unit "{unit}" in duration "{text}"')
        number = Fraction(int(whole or "0"))
        if frac:
            number += Fraction(int(frac), 10 ** len(frac))
        total += number * _UNIT_NANOSECONDS[unit]
        pos = match.end()
    microseconds = int(total / 1000)
    return timedelta(microseconds=-microseconds if negative else microseconds)


def _parse_timestamp(text: str, time_format: str) -> datetime:
    parsed = datetime.strptime(text, time_format)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class GetStartEndTimeParams:
    """Input for :func:`get_start_end_time`; ``time_format`` is a strptime format."""

    start_date: str = ""
    end_date: str = ""
    timeframe: str = ""
    time_format: str = ""

    def validate(self) -> None:
        """Raise ``ValueError`` for inconsistent combinations of parameters."""
        if self.start_date and not self.end_date and not self.timeframe:
            raise ValueError("no timeframe or end date provided")
        if self.end_date and self.timeframe:
            raise ValueError("'end' and 'timeframe' are mutually exclusive")
        if self.end_date and not self.start_date:
            raise ValueError("start date is required when using an end date")


def get_start_end_time(params: GetStartEndTimeParams) -> tuple[datetime, datetime]:
    """Work out the evaluation start and end from dates and/or a timeframe."""
    time_format = params.time_format or KEPTN_TIME_FORMAT_ISO8601
    params.validate()

    try:
        timeframe = parse_duration(params.timeframe or _DEFAULT_EVALUATION_TIMEFRAME)
    except ValueError as exc:
        raise ValueError(f"could not parse provided timeframe: {exc}") from exc

    end = datetime.now(timezone.utc)
    start = datetime.now(timezone.utc) - timeframe

    if params.start_date:
        start = _parse_timestamp(params.start_date, time_format)
    if params.end_date:
        end = _parse_timestamp(params.end_date, time_format)

    if params.start_date and not params.end_date and params.timeframe:
        end = start + timeframe

    if (end - start).total_seconds() / 60 < 1:
        raise ValueError("end date must be at least 1 minute after start date")

    return start, end