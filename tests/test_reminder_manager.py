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

"""Tests for the reminder registry and lifecycle."""

import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytz

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders import (
    PastTimeError,
    ReminderManager,
    ReminderNotFoundError,
    ReminderRequest,
    ReminderScheduler,
    TimeParseError,
)

# Sunday
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=pytz.UTC)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def send_message():
    return AsyncMock()


@pytest.fixture
def manager(clock, send_message):
    return ReminderManager(ReminderScheduler(clock=clock), send_message)


def request(task, expression, channel="C1"):
    return ReminderRequest(task=task, raw_expression=expression, channel_id=channel)


class TestCreateReminder:
    def test_recurring_reminder_registered(self, manager):
        reminder = manager.create_reminder(request("standup", "every monday at 9am"))

        assert reminder.kind == "recurring"
        assert reminder.human_schedule == "every monday at 9am"
        assert manager.registry.get("C1", "standup") is reminder
        assert manager.next_fire_at(reminder) == datetime(2026, 10, 19, 9, 0, tzinfo=pytz.UTC)

    def test_one_time_reminder_registered(self, manager):
        reminder = manager.create_reminder(request("deploy", "2026-10-20 15:00"))

        assert reminder.kind == "one-time"
        assert reminder.human_schedule == "2026-10-20 15:00 UTC"
        assert manager.next_fire_at(reminder) == datetime(2026, 10, 20, 15, 0, tzinfo=pytz.UTC)

    def test_past_time_creates_nothing(self, manager):
        with pytest.raises(PastTimeError):
            manager.create_reminder(request("deploy", "2020-01-01 09:00"))

        assert len(manager.registry) == 0
        assert len(manager.scheduler) == 0

    def test_unparseable_recurring_creates_nothing(self, manager):
        with pytest.raises(TimeParseError):
            manager.create_reminder(request("standup", "every blue moon"))

        assert len(manager.registry) == 0
        assert len(manager.scheduler) == 0

    def test_never_firing_day_rejected(self, manager):
        with pytest.raises(TimeParseError):
            manager.create_reminder(request("rent", "every 45th at 9am"))

        assert len(manager.registry) == 0
        assert len(manager.scheduler) == 0

    def test_same_task_replaces_previous(self, manager):
        first = manager.create_reminder(request("standup", "every monday at 9am"))
        second = manager.create_reminder(request("standup", "every friday at 10am"))

        assert manager.registry.list_channel("C1") == [second]
        assert first.handle not in manager.scheduler
        assert second.handle in manager.scheduler

    def test_same_task_in_other_channel_is_separate(self, manager):
        manager.create_reminder(request("standup", "every monday at 9am", channel="C1"))
        manager.create_reminder(request("standup", "every monday at 9am", channel="C2"))

        assert len(manager.registry) == 2


class TestListReminders:
    def test_lists_in_insertion_order(self, manager):
        manager.create_reminder(request("standup", "every monday at 9am"))
        manager.create_reminder(request("deploy", "2026-10-20 15:00"))

        tasks = [rem.task for rem in manager.list_reminders("C1")]
        assert tasks == ["standup", "deploy"]

    def test_scoped_per_channel(self, manager):
        manager.create_reminder(request("standup", "every monday at 9am", channel="C1"))

        with pytest.raises(ReminderNotFoundError):
            manager.list_reminders("C2")

    def test_empty_channel(self, manager):
        with pytest.raises(ReminderNotFoundError):
            manager.list_reminders("C1")


class TestCancelReminder:
    def test_cancel_by_name(self, manager):
        reminder = manager.create_reminder(request("standup", "every monday at 9am"))

        cancelled = manager.cancel_reminder("C1", "standup")

        assert cancelled is reminder
        assert len(manager.registry) == 0
        assert reminder.handle not in manager.scheduler

    def test_cancel_without_name_targets_most_recent(self, manager):
        manager.create_reminder(request("standup", "every monday at 9am"))
        manager.create_reminder(request("deploy", "2026-10-20 15:00"))

        cancelled = manager.cancel_reminder("C1")

        assert cancelled.task == "deploy"
        assert [rem.task for rem in manager.list_reminders("C1")] == ["standup"]

    def test_replaced_task_counts_as_most_recent(self, manager):
        manager.create_reminder(request("standup", "every monday at 9am"))
        manager.create_reminder(request("deploy", "2026-10-20 15:00"))
        manager.create_reminder(request("standup", "every tuesday at 9am"))

        assert manager.cancel_reminder("C1").task == "standup"

    def test_cancel_unknown_task_leaves_registry(self, manager):
        manager.create_reminder(request("standup", "every monday at 9am"))

        with pytest.raises(ReminderNotFoundError):
            manager.cancel_reminder("C1", "lunch")

        assert [rem.task for rem in manager.list_reminders("C1")] == ["standup"]
        assert len(manager.scheduler) == 1

    def test_cancel_in_empty_channel(self, manager):
        with pytest.raises(ReminderNotFoundError):
            manager.cancel_reminder("C1")


class TestFiring:
    @pytest.mark.asyncio
    async def test_one_time_round_trip(self, manager, clock, send_message):
        manager.create_reminder(request("deploy", "2026-10-20 15:00"))

        clock.now = datetime(2026, 10, 20, 14, 59, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()
        send_message.assert_not_awaited()

        clock.now = datetime(2026, 10, 20, 15, 0, 10, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()
        clock.now += timedelta(hours=1)
        await manager.scheduler.run_pending()

        send_message.assert_awaited_once_with("C1", "Reminder: deploy")
        assert manager.registry.get("C1", "deploy") is None

    @pytest.mark.asyncio
    async def test_recurring_persists_across_firings(self, manager, clock, send_message):
        reminder = manager.create_reminder(request("standup", "every monday at 9am"))

        clock.now = datetime(2026, 10, 19, 9, 0, 30, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()

        send_message.assert_awaited_once_with("C1", "Your weekly reminder: standup")
        assert manager.list_reminders("C1") == [reminder]
        assert manager.next_fire_at(reminder) == datetime(2026, 10, 26, 9, 0, tzinfo=pytz.UTC)

        clock.now = datetime(2026, 10, 19, 10, 0, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()
        assert send_message.await_count == 1

        clock.now = datetime(2026, 10, 26, 9, 0, 5, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()
        assert send_message.await_count == 2

    @pytest.mark.asyncio
    async def test_cancelled_reminder_does_not_fire(self, manager, clock, send_message):
        manager.create_reminder(request("deploy", "2026-10-20 15:00"))
        manager.cancel_reminder("C1", "deploy")

        clock.now = datetime(2026, 10, 21, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()

        send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_stale_handle_is_a_no_op(self, manager, send_message):
        reminder = manager.create_reminder(request("deploy", "2026-10-20 15:00"))
        manager.registry.remove("C1", "deploy")

        await manager._fire("C1", "deploy", reminder.handle)

        send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delivery_failure_is_not_retried(self, manager, clock, send_message):
        send_message.side_effect = RuntimeError("channel_not_found")
        reminder = manager.create_reminder(request("standup", "every monday at 9am"))
        manager.create_reminder(request("deploy", "2026-10-19 08:00"))

        clock.now = datetime(2026, 10, 19, 9, 0, 30, tzinfo=pytz.UTC)
        await manager.scheduler.run_pending()
        await manager.scheduler.run_pending()

        assert send_message.await_count == 2
        assert manager.list_reminders("C1") == [reminder]


class TestTimezone:
    @pytest.fixture
    def berlin_manager(self, clock, send_message):
        return ReminderManager(ReminderScheduler(timezone="Europe/Berlin", clock=clock), send_message)

    def test_timezone_follows_scheduler(self, berlin_manager):
        assert berlin_manager.timezone == "Europe/Berlin"

    def test_one_time_and_recurring_share_timezone(self, berlin_manager):
        one_time = berlin_manager.create_reminder(request("call", "tomorrow at 10am"))
        recurring = berlin_manager.create_reminder(request("standup", "every monday at 10am"))

        # 10:00 CEST is 08:00 UTC
        expected = datetime(2026, 10, 19, 8, 0, tzinfo=pytz.UTC)
        assert berlin_manager.next_fire_at(one_time) == expected
        assert berlin_manager.next_fire_at(recurring) == expected
        assert one_time.human_schedule == "2026-10-19 10:00 CEST"
