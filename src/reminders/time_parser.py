# teambot - Slack Workspace Bot
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Time Parser Module

Turns a free-text time expression into a schedule. Recurring phrases
("every monday at 9am", "every 1st at 10am", "every september 15 at 9am")
become a cron-like schedule tuple; anything else is resolved to a single
absolute fire time with dateparser ("tomorrow at 10am", "in 2 hours").
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union

import dateparser
import pytz
from croniter import croniter

from .errors import PastTimeError, TimeParseError

logger = logging.getLogger("teambot.reminders.time_parser")

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

WEEKDAYS = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

_MONTH_ALT = "|".join(MONTHS)
_WEEKDAY_ALT = "|".join(WEEKDAYS)
_HOUR = r"(\d{1,2})\s*(am|pm)"

YEARLY_PATTERN = re.compile(
    rf"every\s+({_MONTH_ALT})\s+(\d{{1,2}})\s+at\s+{_HOUR}", re.IGNORECASE
)
MONTHLY_PATTERN = re.compile(
    rf"every\s+(\d{{1,2}})(?:st|nd|rd|th)\s+at\s+{_HOUR}", re.IGNORECASE
)
WEEKLY_PATTERN = re.compile(
    rf"every\s+({_WEEKDAY_ALT})\s+at\s+{_HOUR}", re.IGNORECASE
)


@dataclass(frozen=True)
class OneTimeSchedule:
    """Fires once at an absolute time."""

    fire_at: datetime  # UTC timestamp

    @property
    def is_recurring(self) -> bool:
        return False


@dataclass(frozen=True)
class RecurringSchedule:
    """
    Cron-like schedule tuple. None means "any" for the calendar fields.

    Exactly one calendar rule is constrained per kind: yearly fixes
    month and day-of-month, monthly fixes day-of-month, weekly fixes
    day-of-week.
    """

    kind: str  # "yearly" | "monthly" | "weekly"
    minute: int
    hour: int
    day_of_month: Optional[int] = None
    month: Optional[int] = None
    day_of_week: Optional[int] = None

    @property
    def is_recurring(self) -> bool:
        return True

    @property
    def cron_expression(self) -> str:
        def field(value: Optional[int]) -> str:
            return "*" if value is None else str(value)

        return " ".join(
            [
                str(self.minute),
                str(self.hour),
                field(self.day_of_month),
                field(self.month),
                field(self.day_of_week),
            ]
        )


Schedule = Union[OneTimeSchedule, RecurringSchedule]


def validate_timezone(tz_name: str) -> bool:
    """
    Validate that a timezone name is valid.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")

    Returns:
        True if valid, False otherwise
    """
    try:
        pytz.timezone(tz_name)
        return True
    except pytz.UnknownTimeZoneError:
        return False


def is_recurring_expression(expr: str) -> bool:
    """Recurring if the text contains "every" anywhere (plain substring test)."""
    return "every" in expr.lower()


def to_24_hour(hour: int, meridian: str) -> int:
    """
    Convert a 12-hour clock value to 24-hour.

    12am is midnight (0), 12pm stays 12, other pm hours get +12.

    Raises:
        TimeParseError: If the hour is outside 1-12
    """
    if hour < 1 or hour > 12:
        raise TimeParseError(f"Invalid hour: {hour}{meridian}. Use 1-12 with am/pm.")

    meridian = meridian.lower()
    if meridian == "am":
        return 0 if hour == 12 else hour
    return hour if hour == 12 else hour + 12


def _yearly(match: re.Match) -> RecurringSchedule:
    month_name, day, hour, meridian = match.groups()
    return RecurringSchedule(
        kind="yearly",
        minute=0,
        hour=to_24_hour(int(hour), meridian),
        day_of_month=int(day),
        month=MONTHS[month_name.lower()],
    )


def _monthly(match: re.Match) -> RecurringSchedule:
    day, hour, meridian = match.groups()
    return RecurringSchedule(
        kind="monthly",
        minute=0,
        hour=to_24_hour(int(hour), meridian),
        day_of_month=int(day),
    )


def _weekly(match: re.Match) -> RecurringSchedule:
    weekday_name, hour, meridian = match.groups()
    return RecurringSchedule(
        kind="weekly",
        minute=0,
        hour=to_24_hour(int(hour), meridian),
        day_of_week=WEEKDAYS[weekday_name.lower()],
    )


# Checked in order, first match wins
RECURRING_MATCHERS: list[tuple[re.Pattern, Callable[[re.Match], RecurringSchedule]]] = [
    (YEARLY_PATTERN, _yearly),
    (MONTHLY_PATTERN, _monthly),
    (WEEKLY_PATTERN, _weekly),
]


def parse_recurring_expression(expr: str) -> RecurringSchedule:
    """
    Parse a recurring phrase into a schedule tuple.

    Day values are taken as-is from the phrase; a day that can never
    occur is only rejected once the schedule is registered.

    Raises:
        TimeParseError: If no recurring pattern matches
    """
    for pattern, build in RECURRING_MATCHERS:
        match = pattern.search(expr)
        if match:
            return build(match)

    raise TimeParseError(
        f"Could not parse recurring schedule: '{expr}'. "
        "Try 'every monday at 9am', 'every 1st at 10am' or 'every september 15 at 9am'."
    )


def calculate_next_execution(
    cron_expr: str,
    user_tz: pytz.BaseTzInfo,
    after: Optional[datetime] = None,
) -> datetime:
    """
    Calculate the next execution time for a CRON expression.

    Args:
        cron_expr: CRON expression (5 fields)
        user_tz: Timezone the schedule is expressed in
        after: Reference time (defaults to now); the result is strictly later

    Returns:
        Next execution time in UTC

    Raises:
        ValueError: If the expression is invalid or never matches
    """
    now = after.astimezone(user_tz) if after else datetime.now(user_tz)
    cron = croniter(cron_expr, now)
    next_local = cron.get_next(datetime)

    # Ensure timezone awareness and convert to UTC
    if next_local.tzinfo is None:
        next_local = user_tz.localize(next_local)

    return next_local.astimezone(pytz.UTC)


def resolve_one_time(
    expr: str,
    user_tz: pytz.BaseTzInfo,
    now: datetime,
) -> OneTimeSchedule:
    """
    Resolve a one-time phrase to an absolute future time.

    Raises:
        TimeParseError: If dateparser cannot understand the phrase
        PastTimeError: If the resolved time is not after `now`
    """
    settings = {
        "TIMEZONE": user_tz.zone,
        "RETURN_AS_TIMEZONE_AWARE": True,
        "PREFER_DATES_FROM": "future",
        "RELATIVE_BASE": now.astimezone(user_tz).replace(tzinfo=None),
    }

    parsed = dateparser.parse(expr, settings=settings)

    if parsed is None:
        raise TimeParseError(
            f"Could not understand time: '{expr}'. "
            "Try formats like 'in 2 hours', 'tomorrow at 10am' or 'monday 3pm'."
        )

    if parsed <= now:
        raise PastTimeError(
            f"Time '{expr}' is in the past. "
            "Try specifying a future date like 'tomorrow at 10am'."
        )

    return OneTimeSchedule(fire_at=parsed.astimezone(pytz.UTC))


def parse_time_expression(
    expr: str,
    user_timezone: str = "UTC",
    now: Optional[datetime] = None,
) -> Schedule:
    """
    Parse a time expression into a schedule.

    Args:
        expr: The time expression to parse
        user_timezone: Timezone (IANA name) the expression is read in
        now: Scheduling moment (defaults to the current time)

    Returns:
        RecurringSchedule if the phrase contains "every", else OneTimeSchedule

    Raises:
        TimeParseError: If the expression cannot be parsed
        PastTimeError: If a one-time expression resolves to the past
    """
    expr = expr.strip()
    if not expr:
        raise TimeParseError("Empty time expression")

    if not validate_timezone(user_timezone):
        logger.warning(f"Invalid timezone '{user_timezone}', falling back to UTC")
        user_timezone = "UTC"

    user_tz = pytz.timezone(user_timezone)
    now = now or datetime.now(pytz.UTC)

    if is_recurring_expression(expr):
        return parse_recurring_expression(expr)

    return resolve_one_time(expr, user_tz, now)
