"""
teambot Slack Bot

Runs the workspace bot over Socket Mode: reminder, poll, check-in and basic
slash commands, plus the background reminder scheduler.
"""

import asyncio
import logging
from typing import Optional

from dotenv import load_dotenv
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

import analytics
from commands.basic_commands import BasicCommands
from commands.checkin_commands import CheckinCommands
from commands.poll_commands import PollCommands
from commands.reminder_commands import ReminderCommands
from config import BotConfig
from polls import PollRegistry
from reminders import ReminderManager, ReminderRegistry, ReminderScheduler

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("teambot")


class SlackBot:
    """Slack app with its command handlers and reminder scheduler."""

    def __init__(self, config: BotConfig, app: Optional[AsyncApp] = None):
        self.config = config
        self.app = app or AsyncApp(
            token=config.slack_bot_token,
            signing_secret=config.slack_signing_secret,
        )

        self.scheduler = ReminderScheduler(
            timezone=config.timezone,
            tick_seconds=config.tick_seconds,
        )
        self.reminder_manager = ReminderManager(
            self.scheduler,
            self.post_message,
            registry=ReminderRegistry(),
        )
        self.poll_registry = PollRegistry()

        ReminderCommands(self.reminder_manager).register(self.app)
        PollCommands(self.poll_registry).register(self.app)
        CheckinCommands(config.checkin_channel).register(self.app)
        BasicCommands(config.founders_message).register(self.app)

    async def post_message(self, channel_id: str, text: str) -> None:
        """Post a channel-visible message."""
        await self.app.client.chat_postMessage(channel=channel_id, text=text)

    async def run(self) -> None:
        """Connect over Socket Mode and run until cancelled."""
        handler = AsyncSocketModeHandler(self.app, self.config.slack_app_token)
        self.scheduler.start()
        try:
            await handler.start_async()
        finally:
            await self.scheduler.stop()
            await handler.close_async()
            await analytics.shutdown()


async def main():
    """Run the bot."""
    config = BotConfig.from_env()

    logger.info(f"Setup: SLACK_BOT_TOKEN={'set' if config.slack_bot_token else 'missing'}")
    logger.info(f"Setup: SLACK_APP_TOKEN={'set' if config.slack_app_token else 'missing'}")
    logger.info(f"Setup: REMINDER_TIMEZONE={config.timezone}")
    logger.info(f"Setup: analytics={'enabled' if analytics.is_enabled() else 'disabled'}")

    if not config.slack_bot_token or not config.slack_app_token:
        logger.error("SLACK_BOT_TOKEN and SLACK_APP_TOKEN are required")
        return

    bot = SlackBot(config)
    await bot.run()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
