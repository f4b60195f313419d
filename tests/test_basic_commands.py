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

"""Tests for greeting and arithmetic commands."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from commands.basic_commands import BasicCommands, sum_numbers


def slash_command(text=""):
    return {"text": text, "channel_id": "C1", "user_id": "U42", "team_id": "T1"}


class TestSumNumbers:
    def test_integers(self):
        assert sum_numbers("1 2 3") == 6

    def test_decimals(self):
        assert sum_numbers("1 2 3.5") == 6.5

    def test_negative_and_extra_spaces(self):
        assert sum_numbers("  10   -4 ") == 6

    def test_blank_is_zero(self):
        assert sum_numbers("") == 0
        assert isinstance(sum_numbers(""), int)

    def test_rejects_words(self):
        with pytest.raises(ValueError):
            sum_numbers("1 two 3")

    def test_rejects_non_finite(self):
        for text in ("nan", "1 inf", "-inf 2", "1e308 1e308"):
            with pytest.raises(ValueError):
                sum_numbers(text)


class TestBasicCommands:
    @pytest.fixture
    def basic(self):
        return BasicCommands("Founded by the team.")

    @pytest.mark.asyncio
    async def test_hello(self, basic):
        ack, say = AsyncMock(), AsyncMock()
        await basic.hello(ack, slash_command(), say)
        ack.assert_awaited_once()
        say.assert_awaited_once_with("Hello, <@U42>!")

    @pytest.mark.asyncio
    async def test_say_name(self, basic):
        say = AsyncMock()
        await basic.say_name(AsyncMock(), slash_command(), say)
        say.assert_awaited_once_with("Your name is <@U42>.")

    @pytest.mark.asyncio
    async def test_founders(self, basic):
        say = AsyncMock()
        await basic.founders(AsyncMock(), slash_command(), say)
        say.assert_awaited_once_with("Founded by the team.")

    @pytest.mark.asyncio
    async def test_add_numbers(self, basic):
        ack, say, respond = AsyncMock(), AsyncMock(), AsyncMock()
        await basic.add_numbers(ack, slash_command("4 5 6"), say, respond)
        ack.assert_awaited_once()
        say.assert_awaited_once_with("The sum of the numbers is 15.")
        respond.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_numbers_rejects_words(self, basic):
        say, respond = AsyncMock(), AsyncMock()
        await basic.add_numbers(AsyncMock(), slash_command("4 apples"), say, respond)
        say.assert_not_awaited()
        assert respond.call_args.kwargs["text"].startswith("Usage:")

    @pytest.mark.asyncio
    async def test_add_numbers_blank_is_zero(self, basic):
        say, respond = AsyncMock(), AsyncMock()
        await basic.add_numbers(AsyncMock(), slash_command(""), say, respond)
        say.assert_awaited_once_with("The sum of the numbers is 0.")
        respond.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_numbers_rejects_nan(self, basic):
        say, respond = AsyncMock(), AsyncMock()
        await basic.add_numbers(AsyncMock(), slash_command("1 nan"), say, respond)
        say.assert_not_awaited()
        assert respond.call_args.kwargs["text"].startswith("Usage:")
