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

"""Slash command argument helpers."""

import re

# Slack clients may send curly quotes
QUOTED_SEGMENT = re.compile(r"[\"“”]([^\"“”]*)[\"“”]")


def quoted_segments(text: str) -> list[str]:
    """Return the stripped contents of each double-quoted segment, in order."""
    return [segment.strip() for segment in QUOTED_SEGMENT.findall(text or "")]
