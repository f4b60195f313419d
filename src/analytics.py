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
Lightweight analytics tracking for teambot.

Events go to an `analytics_events` table when DATABASE_URL is set and
ANALYTICS_ENABLED is not "false". Tracking never raises.

Usage:
    from analytics import track, track_async

    # Synchronous (fire-and-forget, uses background task)
    track("command_used", "command", user_id="U123", properties={"command_name": "remindme"})

    # Async (when you need to await completion)
    await track_async("reminder_delivered", "reminder", channel_id="C123")
"""

import asyncio
import json
import logging
import os
from typing import Any, Optional

import asyncpg

logger = logging.getLogger("teambot.analytics")

# Module-level connection pool (initialized lazily)
_pool: Optional[asyncpg.Pool] = None


def is_enabled() -> bool:
    return (
        os.getenv("ANALYTICS_ENABLED", "true").lower() == "true"
        and bool(os.getenv("DATABASE_URL"))
    )


async def _get_pool() -> Optional[asyncpg.Pool]:
    """Get or create the connection pool."""
    global _pool
    if _pool is None:
        try:
            _pool = await asyncpg.create_pool(
                os.getenv("DATABASE_URL"), min_size=1, max_size=3
            )
        except Exception as e:
            logger.warning(f"Analytics pool creation failed: {e}")
            return None
    return _pool


async def track_async(
    event_name: str,
    event_category: str,
    user_id: Optional[str] = None,
    channel_id: Optional[str] = None,
    team_id: Optional[str] = None,
    properties: Optional[dict[str, Any]] = None,
) -> bool:
    """
    Track an event asynchronously.

    Args:
        event_name: Specific event identifier (e.g., "reminder_created")
        event_category: One of: command, reminder, poll, checkin, error, system
        user_id: Slack user ID (optional)
        channel_id: Slack channel ID (optional)
        team_id: Slack workspace ID (optional)
        properties: Additional event data as key-value pairs

    Returns:
        True if event was recorded, False otherwise
    """
    if not is_enabled():
        return False

    pool = await _get_pool()
    if pool is None:
        return False

    try:
        await pool.execute(
            """
            INSERT INTO analytics_events
                (event_name, event_category, user_id, channel_id, team_id, properties)
            VALUES ($1, $2, $3, $4, $5, $6)
            """,
            event_name,
            event_category,
            user_id,
            channel_id,
            team_id,
            json.dumps(properties or {}),
        )
        return True
    except Exception as e:
        logger.debug(f"Analytics tracking failed: {e}")
        return False


def track(
    event_name: str,
    event_category: str,
    user_id: Optional[str] = None,
    channel_id: Optional[str] = None,
    team_id: Optional[str] = None,
    properties: Optional[dict[str, Any]] = None,
) -> None:
    """
    Track an event (fire-and-forget).

    Creates a background task to record the event without blocking.
    Safe to call from sync or async contexts.
    """
    if not is_enabled():
        return

    try:
        loop = asyncio.get_running_loop()
        loop.create_task(
            track_async(event_name, event_category, user_id, channel_id, team_id, properties)
        )
    except RuntimeError:
        # No running loop - skip tracking
        pass


async def shutdown() -> None:
    """Close the connection pool. Call on bot shutdown."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
