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
Slack UI Payloads

Block Kit builders for the daily check-in modal and poll messages.
"""

from polls import Poll

CHECKIN_CALLBACK_ID = "daily_checkin_modal"
POLL_VOTE_ACTION_PREFIX = "poll_vote_"

# Width of the text tally bar at 100%
BAR_WIDTH = 10


def checkin_modal() -> dict:
    """
    Build the daily check-in modal.

    Block and action IDs are read back by the submission handler.
    """
    return {
        "type": "modal",
        "callback_id": CHECKIN_CALLBACK_ID,
        "title": {"type": "plain_text", "text": "Daily Check-In"},
        "submit": {"type": "plain_text", "text": "Submit"},
        "close": {"type": "plain_text", "text": "Cancel"},
        "blocks": [
            {
                "type": "input",
                "block_id": "mood_block",
                "label": {"type": "plain_text", "text": "How are you feeling today?"},
                "element": {"type": "plain_text_input", "action_id": "mood_input"},
            },
            {
                "type": "input",
                "block_id": "work_block",
                "label": {"type": "plain_text", "text": "What did you work on today?"},
                "element": {
                    "type": "plain_text_input",
                    "multiline": True,
                    "action_id": "work_input",
                },
            },
        ],
    }


def _tally_bar(count: int, total: int) -> str:
    filled = round(BAR_WIDTH * count / total) if total else 0
    return "█" * filled + "░" * (BAR_WIDTH - filled)


def poll_text(poll: Poll) -> str:
    """Plain-text fallback with the current tallies."""
    lines = [f"Poll: {poll.question}"]
    for option, count in zip(poll.options, poll.tallies()):
        lines.append(f"- {option}: {count}")
    return "\n".join(lines)


def poll_blocks(poll: Poll) -> list[dict]:
    """
    Build the poll message: question, one section per option with its
    tally, and vote buttons while the poll is open.
    """
    total = poll.total_votes
    header = f"*{poll.question}*"
    if poll.closed:
        header += " (closed)"

    blocks: list[dict] = [{"type": "section", "text": {"type": "mrkdwn", "text": header}}]

    for option, count in zip(poll.options, poll.tallies()):
        votes = "vote" if count == 1 else "votes"
        blocks.append(
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"{option}\n`{_tally_bar(count, total)}` {count} {votes}",
                },
            }
        )

    if not poll.closed:
        blocks.append(
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {"type": "plain_text", "text": option[:75]},
                        "action_id": f"{POLL_VOTE_ACTION_PREFIX}{index}",
                        "value": str(index),
                    }
                    for index, option in enumerate(poll.options)
                ],
            }
        )

    blocks.append(
        {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": f"Created by <@{poll.creator_id}> | {total} total votes",
                }
            ],
        }
    )
    return blocks
