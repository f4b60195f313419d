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
Scheduled Reminders Package

Provides per-channel reminders with natural-language one-time and
recurring schedules.
"""

from .errors import (
    ReminderError,
    MalformedRequestError,
    TimeParseError,
    PastTimeError,
    ReminderNotFoundError,
)
from .time_parser import (
    OneTimeSchedule,
    RecurringSchedule,
    Schedule,
    parse_time_expression,
    parse_recurring_expression,
    is_recurring_expression,
    calculate_next_execution,
    validate_timezone,
)
from .manager import ActiveReminder, ReminderManager, ReminderRegistry, ReminderRequest
from .scheduler import ReminderScheduler

__all__ = [
    "ReminderError",
    "MalformedRequestError",
    "TimeParseError",
    "PastTimeError",
    "ReminderNotFoundError",
    "OneTimeSchedule",
    "RecurringSchedule",
    "Schedule",
    "parse_time_expression",
    "parse_recurring_expression",
    "is_recurring_expression",
    "calculate_next_execution",
    "validate_timezone",
    "ActiveReminder",
    "ReminderManager",
    "ReminderRegistry",
    "ReminderRequest",
    "ReminderScheduler",
]
