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

"""Reminder error types, all reported to the user at the command boundary."""


class ReminderError(Exception):
    """Base class for user-facing reminder errors."""

    pass


class MalformedRequestError(ReminderError):
    """Raised when a command is missing its required quoted segments."""

    pass


class TimeParseError(ReminderError):
    """Raised when a time expression cannot be parsed."""

    pass


class PastTimeError(ReminderError):
    """Raised when a one-time expression resolves to a time that is not in the future."""

    pass


class ReminderNotFoundError(ReminderError):
    """Raised when a channel or task has no active reminder."""

    pass
