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
Reminder Scheduler Module

In-process job ticker for reminder firings. A background asyncio task wakes
every few seconds, runs every job whose next fire time has passed, and
re-arms recurring jobs from their cron expression. One-time jobs are dropped
before their callback runs so they fire exactly once.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

import pytz

from analytics import track

from .time_parser import Schedule, calculate_next_execution

logger = logging.getLogger("teambot.reminders.scheduler")

JobCallback = Callable[[], Awaitable[None]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


@dataclass
class _Job:
    handle: int
    schedule: Schedule
    callback: JobCallback
    next_fire_at: datetime


class ReminderScheduler:
    """
    Background scheduler for reminder jobs.

    Exposes a small capability interface: register a schedule with a
    callback to get a handle, cancel by handle. Callbacks run one at a
    time on the event loop, in fire-time order.
    """

    def __init__(
        self,
        timezone: str = "UTC",
        tick_seconds: float = 15.0,
        clock: Clock = utc_now,
    ):
        """
        Initialize the reminder scheduler.

        Args:
            timezone: IANA timezone recurring schedules are evaluated in
            tick_seconds: Delay between checks for due jobs
            clock: Current time source (timezone-aware)
        """
        self.tz = pytz.timezone(timezone)
        self.tick_seconds = tick_seconds
        self.clock = clock
        self._jobs: dict[int, _Job] = {}
        self._handles = itertools.count(1)
        self._task: Optional[asyncio.Task] = None

    def register(self, schedule: Schedule, callback: JobCallback) -> int:
        """
        Register a job.

        Args:
            schedule: When the job fires
            callback: Coroutine function run on each firing

        Returns:
            Opaque handle used to cancel the job

        Raises:
            ValueError: If a recurring schedule can never fire
        """
        if schedule.is_recurring:
            next_fire_at = calculate_next_execution(
                schedule.cron_expression, self.tz, after=self.clock()
            )
        else:
            next_fire_at = schedule.fire_at

        handle = next(self._handles)
        self._jobs[handle] = _Job(handle, schedule, callback, next_fire_at)
        logger.debug(f"Registered job {handle}, next at {next_fire_at}")
        return handle

    def cancel(self, handle: int) -> bool:
        """Cancel a job. Returns False if the handle is unknown or already done."""
        job = self._jobs.pop(handle, None)
        if job is None:
            return False
        logger.debug(f"Cancelled job {handle}")
        return True

    def next_fire_at(self, handle: int) -> Optional[datetime]:
        job = self._jobs.get(handle)
        return job.next_fire_at if job else None

    def __contains__(self, handle: int) -> bool:
        return handle in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)

    async def run_pending(self, now: Optional[datetime] = None) -> int:
        """
        Run every job that is due at `now`.

        Recurring jobs that missed several matches fire once and are re-armed
        from `now`.

        Returns:
            Number of callbacks run
        """
        now = now or self.clock()
        due = sorted(
            (job for job in self._jobs.values() if job.next_fire_at <= now),
            key=lambda job: job.next_fire_at,
        )

        fired = 0
        for job in due:
            # An earlier callback in this batch may have cancelled it
            if job.handle not in self._jobs:
                continue

            if job.schedule.is_recurring:
                job.next_fire_at = calculate_next_execution(
                    job.schedule.cron_expression, self.tz, after=now
                )
            else:
                del self._jobs[job.handle]

            try:
                await job.callback()
            except Exception as e:
                logger.error(f"Job {job.handle} callback failed: {e}", exc_info=True)
            fired += 1

        return fired

    def start(self) -> None:
        """Start the scheduler loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._loop())
            logger.info("Reminder scheduler started")

    async def stop(self) -> None:
        """Stop the scheduler loop and wait for it to exit."""
        if self._task is not None:
            task, self._task = self._task, None
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("Reminder scheduler stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_pending()
            except Exception as e:
                logger.error(f"Error in reminder scheduler loop: {e}", exc_info=True)
                track(
                    "scheduler_error",
                    "error",
                    properties={
                        "error_type": type(e).__name__,
                        "error_message": str(e)[:200],
                    },
                )
            await asyncio.sleep(self.tick_seconds)
