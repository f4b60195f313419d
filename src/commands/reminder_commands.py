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
Reminder Slash Commands

Slack slash commands for managing per-channel reminders.
"""

import logging
from typing import Optional

from slack_bolt.async_app import AsyncApp

from analytics import track
from reminders import (
    MalformedRequestError,
    PastTimeError,
    ReminderError,
    ReminderManager,
    ReminderRequest,
    TimeParseError,
)

from .arguments import quoted_segments

logger = logging.getLogger("teambot.commands.reminder")

USAGE = 'Usage: `/remindme "task" "time"`, e.g. `/remindme "standup" "every monday at 9am"`'

EXAMPLES = (
    "*Examples:*\n"
    "- `tomorrow at 10am`\n"
    "- `in 2 hours`\n"
    "- `every monday at 9am`\n"
    "- `every 1st at 10am`\n"
    "- `every september 15 at 9am`"
)


def parse_remindme(text: str, channel_id: str) -> ReminderRequest:
    """
    Build a request from `"task" "time expression"`.

    Raises:
        MalformedRequestError: If either quoted segment is missing or empty
    """
    segments = quoted_segments(text)
    if len(segments) < 2 or not segments[0] or not segments[1]:
        raise MalformedRequestError(USAGE)
    return ReminderRequest(task=segments[0], raw_expression=segments[1], channel_id=channel_id)


def parse_cancel_target(text: str) -> Optional[str]:
    """Task name from a quoted segment or the bare text; None if blank."""
    segments = quoted_segments(text)
    if segments:
        return segments[0] or None
    return (text or "").strip() or None


class ReminderCommands:
    """
    Slash commands for reminder management.

    Commands:
    - /remindme "task" "time" - Create a reminder in this channel
    - /listreminders - List this channel's reminders
    - /cancelme [task] - Cancel a reminder (most recent if no task given)
    """

    def __init__(self, manager: ReminderManager):
        self.manager = manager

    def register(self, app: AsyncApp) -> None:
        app.command("/remindme")(self.remind_me)
        app.command("/listreminders")(self.list_reminders)
        app.command("/cancelme")(self.cancel_me)

    def _format_next(self, reminder) -> str:
        next_fire = self.manager.next_fire_at(reminder)
        return "N/A" if next_fire is None else self.manager.format_time(next_fire)

    # =========================================================================
    # /remindme
    # =========================================================================

    async def remind_me(self, ack, command, respond):
        """Create a new reminder."""
        await ack()

        track(
            "command_used",
            "command",
            user_id=command.get("user_id"),
            channel_id=command.get("channel_id"),
            team_id=command.get("team_id"),
            properties={"command_name": "remindme"},
        )

        try:
            request = parse_remindme(command.get("text", ""), command["channel_id"])
            reminder = self.manager.create_reminder(request)
        except MalformedRequestError as e:
            await respond(text=str(e), response_type="ephemeral")
            return
        except (TimeParseError, PastTimeError) as e:
            await respond(text=f"{e}\n\n{EXAMPLES}", response_type="ephemeral")
            return
        except Exception as e:
            logger.error(f"Failed to create reminder: {e}", exc_info=True)
            await respond(
                text="Something went wrong creating that reminder.",
                response_type="ephemeral",
            )
            return

        if reminder.schedule.is_recurring:
            when = f"{reminder.human_schedule} (next: {self._format_next(reminder)})"
        else:
            when = f"at {reminder.human_schedule}"

        await respond(
            text=f'Got it! I\'ll remind this channel about "{reminder.task}" {when}.',
            response_type="ephemeral",
        )

        track(
            "reminder_created",
            "reminder",
            user_id=command.get("user_id"),
            channel_id=command["channel_id"],
            team_id=command.get("team_id"),
            properties={"is_recurring": reminder.schedule.is_recurring},
        )

    # =========================================================================
    # /listreminders
    # =========================================================================

    async def list_reminders(self, ack, command, respond):
        """List this channel's reminders."""
        await ack()

        track(
            "command_used",
            "command",
            user_id=command.get("user_id"),
            channel_id=command.get("channel_id"),
            team_id=command.get("team_id"),
            properties={"command_name": "listreminders"},
        )

        try:
            reminders = self.manager.list_reminders(command["channel_id"])
        except ReminderError as e:
            await respond(
                text=f"{e} Use `/remindme` to create one!",
                response_type="ephemeral",
            )
            return

        lines = ["*Active reminders:*"]
        for rem in reminders:
            lines.append(
                f"- *{rem.task}* ({rem.kind}): {rem.human_schedule} "
                f"| next: {self._format_next(rem)}"
            )

        await respond(text="\n".join(lines), response_type="ephemeral")

    # =========================================================================
    # /cancelme
    # =========================================================================

    async def cancel_me(self, ack, command, respond):
        """Cancel a reminder by name, or the most recent one."""
        await ack()

        track(
            "command_used",
            "command",
            user_id=command.get("user_id"),
            channel_id=command.get("channel_id"),
            team_id=command.get("team_id"),
            properties={"command_name": "cancelme"},
        )

        task = parse_cancel_target(command.get("text", ""))

        try:
            reminder = self.manager.cancel_reminder(command["channel_id"], task)
        except ReminderError as e:
            await respond(text=str(e), response_type="ephemeral")
            return

        await respond(
            text=f'Reminder "{reminder.task}" has been cancelled.',
            response_type="ephemeral",
        )
