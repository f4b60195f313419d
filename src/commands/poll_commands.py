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
Poll Commands

/poll posts a poll with vote buttons, button clicks update the tallies in
place, and /closepoll closes the channel's most recent open poll.
"""

import logging
import re

from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackApiError

from analytics import track
from polls import Poll, PollError, PollRegistry, validate_poll

from .arguments import quoted_segments
from .views import POLL_VOTE_ACTION_PREFIX, poll_blocks, poll_text

logger = logging.getLogger("teambot.commands.poll")

USAGE = 'Usage: `/poll "Question?" "Option 1" "Option 2"`'

VOTE_ACTION = re.compile(rf"^{POLL_VOTE_ACTION_PREFIX}\d+$")


class PollCommands:
    """
    Slash commands and button actions for polls.

    Commands:
    - /poll "question" "option" "option" ... - Start a poll
    - /closepoll - Close the most recent open poll in this channel
    """

    def __init__(self, registry: PollRegistry):
        self.registry = registry

    def register(self, app: AsyncApp) -> None:
        app.command("/poll")(self.start_poll)
        app.command("/closepoll")(self.close_poll)
        app.action(VOTE_ACTION)(self.vote)

    async def start_poll(self, ack, command, client, respond):
        """Post a new poll to the channel."""
        await ack()

        segments = quoted_segments(command.get("text", ""))
        if not segments:
            await respond(text=USAGE, response_type="ephemeral")
            return

        question, options = segments[0], [option for option in segments[1:] if option]
        try:
            validate_poll(question, options)
        except PollError as e:
            await respond(text=f"{e}\n{USAGE}", response_type="ephemeral")
            return

        channel_id = command["channel_id"]
        poll = Poll(
            channel_id=channel_id,
            message_ts="",
            question=question,
            options=options,
            creator_id=command["user_id"],
        )

        try:
            response = await client.chat_postMessage(
                channel=channel_id,
                text=poll_text(poll),
                blocks=poll_blocks(poll),
            )
        except SlackApiError as e:
            logger.error(f"Failed to post poll in {channel_id}: {e.response.get('error', e)}")
            await respond(text="I couldn't post the poll here.", response_type="ephemeral")
            return

        poll.message_ts = response["ts"]
        self.registry.add(poll)

        track(
            "poll_created",
            "poll",
            user_id=command["user_id"],
            channel_id=channel_id,
            team_id=command.get("team_id"),
            properties={"option_count": len(options)},
        )

    async def vote(self, ack, body, action, client, respond):
        """Record a vote and refresh the poll message."""
        await ack()

        channel_id = body["channel"]["id"]
        message_ts = body["message"]["ts"]
        user_id = body["user"]["id"]

        try:
            poll = self.registry.vote(channel_id, message_ts, user_id, int(action["value"]))
        except PollError as e:
            await respond(text=str(e), response_type="ephemeral", replace_original=False)
            return

        try:
            await client.chat_update(
                channel=channel_id,
                ts=message_ts,
                text=poll_text(poll),
                blocks=poll_blocks(poll),
            )
        except SlackApiError as e:
            logger.error(f"Failed to update poll {message_ts}: {e.response.get('error', e)}")

    async def close_poll(self, ack, command, client, respond):
        """Close the most recent open poll and post the results."""
        await ack()

        channel_id = command["channel_id"]
        try:
            poll = self.registry.close(channel_id)
        except PollError as e:
            await respond(text=str(e), response_type="ephemeral")
            return

        try:
            await client.chat_update(
                channel=channel_id,
                ts=poll.message_ts,
                text=poll_text(poll),
                blocks=poll_blocks(poll),
            )
            await client.chat_postMessage(
                channel=channel_id,
                text=f"Final results\n{poll_text(poll)}",
            )
        except SlackApiError as e:
            logger.error(f"Failed to publish results for poll {poll.message_ts}: {e.response.get('error', e)}")
