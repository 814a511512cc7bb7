"""Test channel handle and resolver."""

import pytest

from corrade_bridge.errors import ChannelNotFound
from corrade_bridge.gateway.channel import ChannelHandle, ChannelResolver, RelayTarget, find_channel
from tests.mocks import CHANNEL, GUILD, FakeChannel, FakeGuild


def _channels():
    return [
        FakeChannel(1, "general", FakeGuild("Other Guild")),
        FakeChannel(2, "voice", FakeGuild(GUILD)),
        FakeChannel(3, CHANNEL, FakeGuild(GUILD)),
        FakeChannel(4, CHANNEL, FakeGuild(GUILD)),
    ]


class TestChannelHandle:
    def test_starts_unresolved(self):
        handle = ChannelHandle()
        assert handle.resolved is False
        assert handle.channel_id is None

    def test_set_once(self):
        # Arrange
        handle = ChannelHandle()

        # Act
        first = handle.set("123")
        second = handle.set("456")

        # Assert
        assert first is True
        assert second is False
        assert handle.channel_id == "123"

    def test_set_stores_string(self):
        handle = ChannelHandle()
        handle.set(123)
        assert handle.channel_id == "123"


class TestFindChannel:
    def test_first_match_by_name_and_guild(self):
        assert find_channel(_channels(), RelayTarget(GUILD, CHANNEL)).id == 3

    def test_no_match_raises(self):
        with pytest.raises(ChannelNotFound):
            find_channel(_channels(), RelayTarget(GUILD, "missing"))

    def test_channel_without_guild_skipped(self):
        with pytest.raises(ChannelNotFound):
            find_channel([FakeChannel(9, CHANNEL, None)], RelayTarget(GUILD, CHANNEL))


class TestChannelResolver:
    def test_resolve_sets_handle(self):
        # Arrange
        handle = ChannelHandle()
        resolver = ChannelResolver(RelayTarget(GUILD, CHANNEL), handle)

        # Act
        result = resolver.resolve(_channels())

        # Assert
        assert result == "3"
        assert handle.channel_id == "3"

    def test_resolve_twice_is_noop(self):
        # Arrange
        handle = ChannelHandle()
        resolver = ChannelResolver(RelayTarget(GUILD, CHANNEL), handle)
        resolver.resolve(_channels())

        # Act
        result = resolver.resolve([FakeChannel(77, CHANNEL, FakeGuild(GUILD))])

        # Assert
        assert result == "3"
        assert handle.channel_id == "3"

    def test_not_found_logs_error_and_stays_unresolved(self, logs):
        # Arrange
        handle = ChannelHandle()
        resolver = ChannelResolver(RelayTarget(GUILD, "missing"), handle)

        # Act
        result = resolver.resolve(_channels())

        # Assert
        assert result is None
        assert handle.resolved is False
        assert len(logs.at("ERROR")) == 1

    def test_later_ready_can_resolve_after_miss(self):
        handle = ChannelHandle()
        resolver = ChannelResolver(RelayTarget(GUILD, CHANNEL), handle)
        resolver.resolve([])
        assert resolver.resolve(_channels()) == "3"
