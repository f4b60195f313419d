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

"""Greeting and arithmetic slash commands."""

import logging
import math
from typing import Union

from slack_bolt.async_app import AsyncApp

from analytics import track

logger = logging.getLogger("teambot.commands.basic")


def sum_numbers(text: str) -> Union[int, float]:
    """
    Sum whitespace-separated numbers. Blank input sums to 0.

    Raises:
        ValueError: If a token is not a number or the sum is not finite
    """
    total = sum((float(token) for token in text.split()), 0.0)
    if not math.isfinite(total):
        raise ValueError(f"Sum is not a finite number: {text!r}")
    return int(total) if total.is_integer() else total


class BasicCommands:
    """
    Small request/response commands.

    Commands:
    - /hello - Greet the caller
    - /say_name - Echo the caller's name
    - /founders - Post the founders message
    - /add_numbers 1 2 3 - Sum the given numbers
    """

    def __init__(self, founders_message: str):
        self.founders_message = founders_message

    def register(self, app: AsyncApp) -> None:
        app.command("/hello")(self.hello)
        app.command("/say_name")(self.say_name)
        app.command("/founders")(self.founders)
        app.command("/add_numbers")(self.add_numbers)

    def _track(self, command: dict, name: str) -> None:
        track(
            "command_used",
            "command",
            user_id=command.get("user_id"),
            channel_id=command.get("channel_id"),
            team_id=command.get("team_id"),
            properties={"command_name": name},
        )

    async def hello(self, ack, command, say):
        await ack()
        self._track(command, "hello")
        await say(f"Hello, <@{command['user_id']}>!")

    async def say_name(self, ack, command, say):
        await ack()
        self._track(command, "say_name")
        await say(f"Your name is <@{command['user_id']}>.")

    async def founders(self, ack, command, say):
        await ack()
        self._track(command, "founders")
        await say(self.founders_message)

    async def add_numbers(self, ack, command, say, respond):
        await ack()
        self._track(command, "add_numbers")

        try:
            total = sum_numbers(command.get("text", ""))
        except ValueError:
            await respond(
                text="Usage: `/add_numbers 1 2 3` (numbers separated by spaces)",
                response_type="ephemeral",
            )
            return

        await say(f"The sum of the numbers is {total}.")
