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
Poll Registry

In-memory polls keyed by channel and the timestamp of the poll message.
One vote per user; voting again moves the vote.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger("teambot.polls.registry")

MIN_OPTIONS = 2
MAX_OPTIONS = 10


class PollError(Exception):
    """Raised for invalid poll operations."""

    pass


class PollNotFoundError(PollError):
    """Raised when a channel has no matching poll."""

    pass


@dataclass
class Poll:
    channel_id: str
    message_ts: str
    question: str
    options: list[str]
    creator_id: str
    votes: dict[str, int] = field(default_factory=dict)  # user_id -> option index
    closed: bool = False

    def tallies(self) -> list[int]:
        counts = [0] * len(self.options)
        for index in self.votes.values():
            counts[index] += 1
        return counts

    @property
    def total_votes(self) -> int:
        return len(self.votes)


def validate_poll(question: str, options: list[str]) -> None:
    """
    Raises:
        PollError: If the question is empty or the option count is out of range
    """
    if not question.strip():
        raise PollError("A poll needs a question.")
    if not MIN_OPTIONS <= len(options) <= MAX_OPTIONS:
        raise PollError(f"A poll needs between {MIN_OPTIONS} and {MAX_OPTIONS} options.")


class PollRegistry:
    """Polls per channel, in creation order."""

    def __init__(self):
        self._channels: dict[str, dict[str, Poll]] = {}

    def add(self, poll: Poll) -> None:
        self._channels.setdefault(poll.channel_id, {})[poll.message_ts] = poll
        logger.info(f"Poll {poll.message_ts} opened in channel {poll.channel_id}")

    def get(self, channel_id: str, message_ts: str) -> Optional[Poll]:
        return self._channels.get(channel_id, {}).get(message_ts)

    def most_recent_open(self, channel_id: str) -> Optional[Poll]:
        for poll in reversed(list(self._channels.get(channel_id, {}).values())):
            if not poll.closed:
                return poll
        return None

    def vote(self, channel_id: str, message_ts: str, user_id: str, option_index: int) -> Poll:
        """
        Record or move a user's vote.

        Raises:
            PollNotFoundError: If the poll is unknown
            PollError: If the poll is closed or the option does not exist
        """
        poll = self.get(channel_id, message_ts)
        if poll is None:
            raise PollNotFoundError("This poll is no longer available.")
        if poll.closed:
            raise PollError("This poll is closed.")
        if not 0 <= option_index < len(poll.options):
            raise PollError(f"Unknown option {option_index}.")

        poll.votes[user_id] = option_index
        return poll

    def close(self, channel_id: str) -> Poll:
        """
        Close the most recent open poll in a channel.

        Raises:
            PollNotFoundError: If the channel has no open poll
        """
        poll = self.most_recent_open(channel_id)
        if poll is None:
            raise PollNotFoundError("There is no open poll in this channel.")
        poll.closed = True
        logger.info(f"Poll {poll.message_ts} closed in channel {channel_id}")
        return poll
