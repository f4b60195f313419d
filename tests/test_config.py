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

"""Tests for configuration and analytics gating."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import analytics
from config import DEFAULT_FOUNDERS_MESSAGE, BotConfig


class TestBotConfig:
    def test_defaults(self):
        config = BotConfig()
        assert config.timezone == "UTC"
        assert config.tick_seconds == 15.0
        assert config.checkin_channel == "checkin_details"

    def test_from_env_default(self):
        with patch.dict("os.environ", {}, clear=True):
            config = BotConfig.from_env()
            assert config.slack_bot_token is None
            assert config.timezone == "UTC"
            assert config.founders_message == DEFAULT_FOUNDERS_MESSAGE

    def test_from_env_custom_values(self):
        with patch.dict("os.environ", {
            "SLACK_BOT_TOKEN": "xoxb-test",
            "SLACK_APP_TOKEN": "xapp-test",
            "REMINDER_TIMEZONE": "Europe/Berlin",
            "REMINDER_TICK_SECONDS": "5",
            "CHECKIN_CHANNEL": "standups",
        }, clear=True):
            config = BotConfig.from_env()
            assert config.slack_bot_token == "xoxb-test"
            assert config.slack_app_token == "xapp-test"
            assert config.timezone == "Europe/Berlin"
            assert config.tick_seconds == 5.0
            assert config.checkin_channel == "standups"

    def test_invalid_timezone_falls_back(self):
        with patch.dict("os.environ", {"REMINDER_TIMEZONE": "Mars/Olympus"}, clear=True):
            assert BotConfig.from_env().timezone == "UTC"


class TestAnalyticsGating:
    def test_disabled_without_database(self):
        with patch.dict("os.environ", {}, clear=True):
            assert analytics.is_enabled() is False

    def test_disabled_by_flag(self):
        with patch.dict("os.environ", {
            "DATABASE_URL": "postgresql://localhost/teambot",
            "ANALYTICS_ENABLED": "false",
        }, clear=True):
            assert analytics.is_enabled() is False

    def test_enabled_with_database(self):
        with patch.dict("os.environ", {"DATABASE_URL": "postgresql://localhost/teambot"}, clear=True):
            assert analytics.is_enabled() is True

    @pytest.mark.asyncio
    async def test_track_async_noop_when_disabled(self):
        with patch.dict("os.environ", {}, clear=True):
            assert await analytics.track_async("command_used", "command") is False
