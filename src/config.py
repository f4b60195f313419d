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
Bot Configuration

Values are read from environment variables (a .env file is loaded by the
entry point) with defaults for everything except the Slack tokens.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from reminders.time_parser import validate_timezone

logger = logging.getLogger("teambot.config")

DEFAULT_FOUNDERS_MESSAGE = (
    "The co-founders of Code Blossom are Marion Schleifer and Nadia Baldelli."
)


@dataclass
class BotConfig:
    """Configuration for the Slack bot."""

    # Slack credentials
    slack_bot_token: Optional[str] = None
    slack_app_token: Optional[str] = None
    slack_signing_secret: Optional[str] = None

    # Reminder settings
    timezone: str = "UTC"
    tick_seconds: float = 15.0

    # Check-in submissions are relayed here
    checkin_channel: str = "checkin_details"

    founders_message: str = DEFAULT_FOUNDERS_MESSAGE

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Create config from environment variables with defaults."""
        timezone = os.getenv("REMINDER_TIMEZONE", "UTC")
        if not validate_timezone(timezone):
            logger.warning(f"Invalid REMINDER_TIMEZONE '{timezone}', falling back to UTC")
            timezone = "UTC"

        return cls(
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN"),
            slack_app_token=os.getenv("SLACK_APP_TOKEN"),
            slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET"),
            timezone=timezone,
            tick_seconds=float(os.getenv("REMINDER_TICK_SECONDS", "15")),
            checkin_channel=os.getenv("CHECKIN_CHANNEL", "checkin_details"),
            founders_message=os.getenv("FOUNDERS_MESSAGE", DEFAULT_FOUNDERS_MESSAGE),
        )
