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
Daily Check-In Commands

/checkin opens a modal; submissions are relayed to the check-in channel.
"""

import logging

from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackApiError

from analytics import track

from .views import CHECKIN_CALLBACK_ID, checkin_modal

logger = logging.getLogger("teambot.commands.checkin")


def _input_value(values: dict, block_id: str, action_id: str) -> str:
    return (values.get(block_id, {}).get(action_id, {}).get("value") or "").strip()


class CheckinCommands:
    """Daily check-in modal and its submission handler."""

    def __init__(self, checkin_channel: str):
        self.checkin_channel = checkin_channel

    def register(self, app: AsyncApp) -> None:
        app.command("/checkin")(self.open_checkin)
        app.view(CHECKIN_CALLBACK_ID)(self.submit_checkin)

    async def open_checkin(self, ack, command, client):
        """Open the check-in modal for the caller."""
        await ack()

        try:
            await client.views_open(trigger_id=command["trigger_id"], view=checkin_modal())
        except SlackApiError as e:
            logger.error(f"Error opening check-in modal: {e.response.get('error', e)}")

    async def submit_checkin(self, ack, body, view, client):
        """Relay a submitted check-in to the check-in channel."""
        values = view["state"]["values"]
        mood = _input_value(values, "mood_block", "mood_input")
        work = _input_value(values, "work_block", "work_input")

        if not mood:
            await ack(
                response_action="errors",
                errors={"mood_block": "Please tell us how you're feeling."},
            )
            return

        await ack(response_action="clear")

        user_id = body["user"]["id"]
        message = f"Today's daily check-in from <@{user_id}>. Mood: {mood} Work: {work}"

        try:
            await client.chat_postMessage(channel=self.checkin_channel, text=message)
            logger.info(f"Relayed check-in from {user_id} to {self.checkin_channel}")
        except SlackApiError as e:
            logger.error(
                f"Failed to post check-in to {self.checkin_channel}: "
                f"{e.response.get('error', e)}"
            )
            return

        track(
            "checkin_submitted",
            "checkin",
            user_id=user_id,
            team_id=body.get("team", {}).get("id"),
        )
