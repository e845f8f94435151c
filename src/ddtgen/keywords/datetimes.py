"""Relative datetime generation from a builder or a ``[datetime]`` keyword.

A generated datetime is a start instant (now, unless given) re-expressed in a
target zone, shifted by an accumulated calendar offset and then by an
accumulated clock offset:

* calendar offsets (years, months, weeks, days) are wall-clock arithmetic.
  ``{+1d}`` at 18:00 the evening before a daylight saving change gives 18:00
  the next day even though 23 or 25 real hours have passed.  A wall time that
  falls into a DST gap is moved forward by the gap length; an ambiguous one
  takes the earlier offset.
* clock offsets (hours, minutes) are elapsed time.  Use ``{+24h}`` rather
  than ``{+1d}`` when the DST shift must be accounted for.

Offsets accumulate within their class: ``{+2y}{+2y}`` equals ``{+4y}`` and
``{+5M}{+7M}`` equals ``{+1y}``.  Calendar offsets are always applied before
clock offsets.

Keyword form (unit letters are case sensitive, ``M`` is months and ``m``
minutes; the leading ``+`` is optional)::

    [datetime]                                now in the system zone
    [datetime{+1y}{-3d}{zoneid=UTC}]
    [datetime{start=2016-03-12T18:00-05:00[America/New_York]}{+1d}]

``{start}`` takes an ISO-8601 timestamp with an offset, optionally followed
by a bracketed region id.  ``{zoneid}`` takes an IANA zone id, ``UTC``/``Z``
or a fixed offset such as ``-07:00``.  Each may appear at most once.

Without ``{zoneid}`` the result stays in the zone of the start instant
(``"start"`` policy) or is moved to the system default zone (``"system"``
policy); see ``datetimes.default_zone`` in the configuration.  Builders
default to the system zone.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from ..config import ConfigModel
from ..utils.errors import InvalidArgumentError
from ..utils.logging import get_logger
from .base import KeywordFamily, ModifierRule, is_keyword, parse_keyword, parse_signed_int

__all__ = [
    "ZonePolicy",
    "TemporalSpec",
    "DateTimeBuilder",
    "DATETIME_RULES",
    "generate_from_keyword",
    "is_datetime_keyword",
    "parse_start",
    "resolve_zone",
    "system_zone",
]

log = get_logger(__name__)

ZonePolicy = Literal["start", "system"]
Clock = Callable[[], datetime]

_OFFSET_ZONE_RX: re.Pattern[str] = re.compile(
    r"(?:UTC|GMT|UT)?(?P<sign>[+-])(?P<hours>[0-9]{1,2})(?::?(?P<minutes>[0-9]{2}))?",
    re.IGNORECASE,
)
_START_RX: re.Pattern[str] = re.compile(r"(?P<stamp>[^\[\]]+?)\s*(?:\[(?P<region>[^\[\]]+)\])?")

_CALENDAR_UNITS: dict[str, str] = {"y": "years", "M": "months", "w": "weeks", "d": "days"}
_CLOCK_UNITS: dict[str, str] = {"h": "hours", "m": "minutes"}


# ---------------------------------------------------------------------------
# Zones and instants
# ---------------------------------------------------------------------------


def system_zone() -> tzinfo:
    """Return the system default zone, DST rules included."""

    return tz.tzlocal()


def _system_now() -> datetime:
    return datetime.now(system_zone())


def resolve_zone(zone_id: str) -> tzinfo:
    """Return a ``tzinfo`` for an IANA id, ``UTC``/``Z`` or a fixed offset."""

    value = zone_id.strip()
    if value == "Z":
        return timezone.utc
    m = _OFFSET_ZONE_RX.fullmatch(value)
    if m:
        hours = int(m.group("hours"))
        minutes = int(m.group("minutes") or 0)
        if hours > 18 or minutes > 59:
            raise InvalidArgumentError(f"'{zone_id}' is not a valid zone offset")
        delta = timedelta(hours=hours, minutes=minutes)
        return timezone(-delta if m.group("sign") == "-" else delta)
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidArgumentError(f"'{zone_id}' is not a valid zone id") from exc


def parse_start(text: str) -> datetime:
    """Parse an ISO-8601 zoned timestamp such as ``2015-06-01T10:15:30+01:00[Europe/Paris]``."""

    m = _START_RX.fullmatch(text.strip())
    if not m:
        raise InvalidArgumentError(f"'{text}' is not a valid start datetime")
    try:
        start = isoparse(m.group("stamp").strip())
    except (ValueError, OverflowError) as exc:
        raise InvalidArgumentError(f"'{text}' is not a valid start datetime") from exc
    if start.tzinfo is None or start.utcoffset() is None:
        raise InvalidArgumentError(f"'{text}' is not a valid start datetime; an offset is required")
    if m.group("region"):
        start = start.astimezone(resolve_zone(m.group("region")))
    return start


def _normalize(value: datetime, zone: tzinfo) -> datetime:
    # round trip through UTC resolves DST gaps and overlaps
    return value.astimezone(timezone.utc).astimezone(zone)


# ---------------------------------------------------------------------------
# Temporal specification
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class TemporalSpec:
    """Accumulated offsets plus optional start instant and zone."""

    calendar: relativedelta = field(default_factory=relativedelta)
    clock: timedelta = field(default_factory=timedelta)
    start: datetime | None = None
    zone: tzinfo | None = None

    def add(self, unit: str, amount: int) -> None:
        """Accumulate ``amount`` of ``unit`` (``y M w d h m``)."""

        if unit not in _CALENDAR_UNITS and unit not in _CLOCK_UNITS:
            raise InvalidArgumentError(f"unknown temporal unit '{unit}'")
        try:
            if unit in _CALENDAR_UNITS:
                self.calendar += relativedelta(**{_CALENDAR_UNITS[unit]: amount})
            else:
                self.clock += timedelta(**{_CLOCK_UNITS[unit]: amount})
        except (ValueError, OverflowError) as exc:
            raise InvalidArgumentError(f"offset '{amount:+d}{unit}' is out of range") from exc

    def resolve(self, *, default_zone: ZonePolicy = "system", clock: Clock | None = None) -> datetime:
        """Return the start instant with all offsets applied."""

        start = self.start if self.start is not None else (clock or _system_now)()
        if self.zone is not None:
            zone = self.zone
        elif default_zone == "start" and start.tzinfo is not None:
            zone = start.tzinfo
        else:
            zone = system_zone()
        try:
            local = start.astimezone(zone)
            shifted = _normalize(local + self.calendar, zone)
            result = (shifted.astimezone(timezone.utc) + self.clock).astimezone(zone)
        except (ValueError, OverflowError) as exc:
            raise InvalidArgumentError(
                f"offsets {self.calendar!r} and {self.clock} applied to "
                f"'{start.isoformat()}' are out of range"
            ) from exc
        log.debug(
            "datetime: start=%s zone=%s calendar=%r clock=%s -> %s",
            start.isoformat(),
            zone,
            self.calendar,
            self.clock,
            result.isoformat(),
        )
        return result


# ---------------------------------------------------------------------------
# Keyword form
# ---------------------------------------------------------------------------


def _parse_start(match: re.Match[str]) -> datetime:
    return parse_start(match.group("value"))


def _parse_zone(match: re.Match[str]) -> tzinfo:
    return resolve_zone(match.group("value"))


def _parse_offset(match: re.Match[str]) -> tuple[str, int]:
    return match.group("unit"), parse_signed_int(match.group("amount"), match.group(0))


DATETIME_RULES: tuple[ModifierRule, ...] = (
    ModifierRule(
        "start",
        re.compile(r"\{\s*start\s*=(?P<value>[^{}]*)\}", re.IGNORECASE),
        max_count=1,
        parser=_parse_start,
    ),
    ModifierRule(
        "zoneid",
        re.compile(r"\{\s*zoneid\s*=(?P<value>[^{}]*)\}", re.IGNORECASE),
        max_count=1,
        parser=_parse_zone,
    ),
    ModifierRule(
        "offset",
        re.compile(r"\{\s*(?P<amount>[+-]?[0-9]+)(?P<unit>[yMwdhm])\s*\}"),
        parser=_parse_offset,
    ),
    ModifierRule("empty", re.compile(r"\{\s*\}")),
)


def is_datetime_keyword(text: str) -> bool:
    """Return ``True`` when ``text`` is a ``[datetime ...]`` keyword."""

    return is_keyword(text, KeywordFamily.DATETIME)


def generate_from_keyword(
    parameter_string: str,
    *,
    cfg: ConfigModel | None = None,
    default_zone: ZonePolicy | None = None,
    clock: Clock | None = None,
) -> datetime:
    """Return the datetime described by a ``[datetime ...]`` keyword.

    ``default_zone`` overrides ``cfg.datetimes.default_zone``; with neither,
    the ``"start"`` policy applies.  ``clock`` supplies "now".
    """

    parsed = parse_keyword(parameter_string, KeywordFamily.DATETIME, DATETIME_RULES)
    spec = TemporalSpec(start=parsed.first("start"), zone=parsed.first("zoneid"))
    for unit, amount in parsed.all("offset"):
        spec.add(unit, amount)
    if default_zone is None:
        default_zone = cfg.datetimes.default_zone if cfg is not None else "start"
    return spec.resolve(default_zone=default_zone, clock=clock)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class DateTimeBuilder:
    """Build datetimes relative to now (or a given start).

    Adjustments are stored and only applied by :meth:`build`, calendar units
    first (years, months, weeks, days) and clock units last (hours,
    minutes).  Without :meth:`zone` the result is in the system zone.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._clock = clock
        self._spec = TemporalSpec()

    def years(self, amount: int) -> DateTimeBuilder:
        self._spec.add("y", amount)
        return self

    def months(self, amount: int) -> DateTimeBuilder:
        self._spec.add("M", amount)
        return self

    def weeks(self, amount: int) -> DateTimeBuilder:
        self._spec.add("w", amount)
        return self

    def days(self, amount: int) -> DateTimeBuilder:
        """Adjust by calendar days, which are not always 24 hours long."""

        self._spec.add("d", amount)
        return self

    def hours(self, amount: int) -> DateTimeBuilder:
        self._spec.add("h", amount)
        return self

    def minutes(self, amount: int) -> DateTimeBuilder:
        self._spec.add("m", amount)
        return self

    def start(self, value: datetime | str) -> DateTimeBuilder:
        """Generate relative to ``value`` instead of now; set at most once."""

        if self._spec.start is not None:
            raise InvalidArgumentError("start can only be specified once")
        if isinstance(value, str):
            value = parse_start(value)
        elif value.tzinfo is None or value.utcoffset() is None:
            raise InvalidArgumentError(f"start datetime '{value.isoformat()}' must be timezone aware")
        self._spec.start = value
        return self

    def zone(self, zone: str | tzinfo) -> DateTimeBuilder:
        """Express the result in ``zone``; set at most once."""

        if self._spec.zone is not None:
            raise InvalidArgumentError("zone can only be specified once")
        self._spec.zone = resolve_zone(zone) if isinstance(zone, str) else zone
        return self

    @property
    def calendar_offset(self) -> relativedelta:
        return self._spec.calendar

    @property
    def clock_offset(self) -> timedelta:
        return self._spec.clock

    def build(self) -> datetime:
        """Return the datetime with all adjustments applied."""

        return self._spec.resolve(default_zone="system", clock=self._clock)

    def clear(self) -> None:
        self._spec = TemporalSpec()

    def build_and_clear(self) -> datetime:
        value = self.build()
        self.clear()
        return value
