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
Reminder Manager Module

Owns the per-channel registry of active reminders and their lifecycle:
scheduling, firing, listing and cancellation. State is in memory only and
does not survive a restart.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

from analytics import track

from .errors import ReminderNotFoundError, TimeParseError
from .scheduler import ReminderScheduler
from .time_parser import Schedule, parse_time_expression

logger = logging.getLogger("teambot.reminders.manager")

SendMessage = Callable[[str, str], Awaitable[None]]


@dataclass
class ReminderRequest:
    task: str
    raw_expression: str
    channel_id: str


@dataclass
class ActiveReminder:
    task: str
    channel_id: str
    schedule: Schedule
    handle: int
    human_schedule: str
    created_at: datetime

    @property
    def kind(self) -> str:
        return "recurring" if self.schedule.is_recurring else "one-time"


class ReminderRegistry:
    """
    Active reminders, keyed by channel then task.

    Each channel's reminders keep insertion order; the last one is the
    most recently added.
    """

    def __init__(self):
        self._channels: dict[str, dict[str, ActiveReminder]] = {}

    def add(self, reminder: ActiveReminder) -> Optional[ActiveReminder]:
        """Store a reminder, returning the one it replaced (if any)."""
        channel = self._channels.setdefault(reminder.channel_id, {})
        previous = channel.pop(reminder.task, None)
        channel[reminder.task] = reminder
        return previous

    def get(self, channel_id: str, task: str) -> Optional[ActiveReminder]:
        return self._channels.get(channel_id, {}).get(task)

    def remove(self, channel_id: str, task: str) -> Optional[ActiveReminder]:
        channel = self._channels.get(channel_id)
        if not channel:
            return None
        reminder = channel.pop(task, None)
        if not channel:
            del self._channels[channel_id]
        return reminder

    def most_recent(self, channel_id: str) -> Optional[ActiveReminder]:
        channel = self._channels.get(channel_id)
        if not channel:
            return None
        return next(reversed(channel.values()))

    def list_channel(self, channel_id: str) -> list[ActiveReminder]:
        return list(self._channels.get(channel_id, {}).values())

    def __len__(self) -> int:
        return sum(len(channel) for channel in self._channels.values())


class ReminderManager:
    """
    Schedules, fires, lists and cancels reminders.

    Provides methods used by the slash commands; firings are driven by the
    ReminderScheduler and delivered through `send_message`.
    """

    def __init__(
        self,
        scheduler: ReminderScheduler,
        send_message: SendMessage,
        registry: Optional[ReminderRegistry] = None,
    ):
        """
        Initialize the reminder manager.

        Args:
            scheduler: Job scheduler that drives firings; its timezone is
                the one time expressions are read in
            send_message: Async callable posting text to a channel
            registry: Active reminder registry (a fresh one if omitted)
        """
        self.scheduler = scheduler
        self.send_message = send_message
        self.registry = registry if registry is not None else ReminderRegistry()

    @property
    def timezone(self) -> str:
        return self.scheduler.tz.zone

    def create_reminder(self, request: ReminderRequest) -> ActiveReminder:
        """
        Parse and schedule a reminder.

        A reminder with the same task name in the same channel is replaced.

        Raises:
            TimeParseError: If the expression cannot be parsed or never fires
            PastTimeError: If a one-time expression resolves to the past
        """
        now = self.scheduler.clock()
        schedule = parse_time_expression(request.raw_expression, self.timezone, now)

        try:
            handle = self.scheduler.register(
                schedule,
                lambda: self._fire(request.channel_id, request.task, handle),
            )
        except (ValueError, KeyError) as e:
            raise TimeParseError(
                f"Schedule '{request.raw_expression}' never fires: {e}"
            )

        if schedule.is_recurring:
            human_schedule = request.raw_expression.strip()
        else:
            human_schedule = self.format_time(schedule.fire_at)

        reminder = ActiveReminder(
            task=request.task,
            channel_id=request.channel_id,
            schedule=schedule,
            handle=handle,
            human_schedule=human_schedule,
            created_at=now,
        )

        previous = self.registry.add(reminder)
        if previous is not None:
            self.scheduler.cancel(previous.handle)
            logger.info(
                f"Replaced reminder '{request.task}' in channel {request.channel_id}"
            )

        logger.info(
            f"Created reminder '{request.task}' in channel {request.channel_id}: "
            f"recurring={schedule.is_recurring}, next={self.scheduler.next_fire_at(handle)}"
        )
        return reminder

    def list_reminders(self, channel_id: str) -> list[ActiveReminder]:
        """
        List a channel's active reminders in insertion order.

        Raises:
            ReminderNotFoundError: If the channel has no active reminders
        """
        reminders = self.registry.list_channel(channel_id)
        if not reminders:
            raise ReminderNotFoundError("There are no active reminders in this channel.")
        return reminders

    def next_fire_at(self, reminder: ActiveReminder) -> Optional[datetime]:
        return self.scheduler.next_fire_at(reminder.handle)

    def cancel_reminder(self, channel_id: str, task: Optional[str] = None) -> ActiveReminder:
        """
        Cancel a reminder by exact task name, or the most recent one if no name.

        Raises:
            ReminderNotFoundError: If nothing matches; the registry is unchanged
        """
        if task:
            reminder = self.registry.get(channel_id, task)
            if reminder is None:
                raise ReminderNotFoundError(f"No active reminder named '{task}' in this channel.")
        else:
            reminder = self.registry.most_recent(channel_id)
            if reminder is None:
                raise ReminderNotFoundError("There are no active reminders in this channel.")

        self.scheduler.cancel(reminder.handle)
        self.registry.remove(channel_id, reminder.task)
        logger.info(f"Cancelled reminder '{reminder.task}' in channel {channel_id}")
        return reminder

    async def _fire(self, channel_id: str, task: str, handle: int) -> None:
        reminder = self.registry.get(channel_id, task)
        if reminder is None or reminder.handle != handle:
            # Cancelled or replaced after the job was picked up
            return

        if not reminder.schedule.is_recurring:
            self.registry.remove(channel_id, task)

        await self._deliver(reminder)

    async def _deliver(self, reminder: ActiveReminder) -> None:
        """Post the notification; failures are logged, never retried."""
        if reminder.schedule.is_recurring:
            text = f"Your {reminder.schedule.kind} reminder: {reminder.task}"
        else:
            text = f"Reminder: {reminder.task}"

        try:
            await self.send_message(reminder.channel_id, text)
            logger.info(f"Delivered reminder '{reminder.task}' to channel {reminder.channel_id}")

            track(
                "reminder_delivered",
                "reminder",
                channel_id=reminder.channel_id,
                properties={"is_recurring": reminder.schedule.is_recurring},
            )
        except Exception as e:
            logger.error(
                f"Failed to deliver reminder '{reminder.task}' to {reminder.channel_id}: {e}",
                exc_info=True,
            )
            track(
                "reminder_delivery_error",
                "error",
                channel_id=reminder.channel_id,
                properties={
                    "error_type": type(e).__name__,
                    "error_message": str(e)[:200],
                },
            )

    def format_time(self, when: datetime) -> str:
        """Render a UTC instant in the reminder timezone."""
        local = when.astimezone(self.scheduler.tz)
        return local.strftime("%Y-%m-%d %H:%M %Z")
