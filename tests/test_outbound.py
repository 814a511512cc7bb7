"""Test Discord -> group chat filtering."""

import pytest

from corrade_bridge.events import GroupCommandOut, discord_message_in
from corrade_bridge.protocol import decode
from tests.mocks import CHANNEL_ID, GROUP, GUILD, PASSWORD


def _message(**overrides):
    kwargs = {
        "author_name": "Bob",
        "author_discriminator": "0001",
        "channel_id": CHANNEL_ID,
        "guild_name": GUILD,
        "content": "hello",
    }
    kwargs.update(overrides)
    _, evt = discord_message_in(**kwargs)
    return evt


class TestDiscordToGroup:
    def test_relays_text_message(self, harness):
        # Act
        harness.bus.publish("discord", _message())

        # Assert
        assert len(harness.corrade.events) == 1
        out = harness.corrade.events[0]
        assert isinstance(out, GroupCommandOut)
        assert out.topic == f"{GROUP}/{PASSWORD}/group"
        assert decode(out.payload) == {
            "command": "tell",
            "group": GROUP,
            "password": PASSWORD,
            "entity": "group",
            "message": "Bob#0001 [Discord]: hello",
        }

    def test_bot_author_dropped(self, harness):
        harness.bus.publish("discord", _message(author_is_bot=True, content="spam"))
        assert harness.corrade.events == []

    def test_empty_message_dropped(self, harness):
        assert harness.relay.discord_to_group.handle(_message(content="")) is False

    def test_whitespace_message_dropped(self, harness):
        assert harness.relay.discord_to_group.handle(_message(content="   ")) is False

    def test_attachment_only_message_relayed(self, harness):
        # Arrange
        evt = _message(content="", attachment_urls=["http://x/img.png"])

        # Act
        harness.bus.publish("discord", evt)

        # Assert
        message = decode(harness.corrade.events[0].payload)["message"]
        assert message == "Bob#0001 [Discord]: http://x/img.png"

    def test_attachments_follow_text(self, harness):
        harness.bus.publish("discord", _message(content="look", attachment_urls=["http://a/1", "http://a/2"]))
        message = decode(harness.corrade.events[0].payload)["message"]
        assert message == "Bob#0001 [Discord]: look http://a/1 http://a/2"

    def test_other_channel_dropped(self, harness):
        assert harness.relay.discord_to_group.handle(_message(channel_id="999")) is False

    def test_unresolved_channel_drops_everything(self, unresolved_harness):
        assert unresolved_harness.relay.discord_to_group.handle(_message()) is False
        assert unresolved_harness.corrade.events == []

    def test_other_guild_dropped(self, harness):
        assert harness.relay.discord_to_group.handle(_message(guild_name="Elsewhere")) is False

    @pytest.mark.parametrize("channel_type", ["voice", "news", "private", "public_thread"])
    def test_non_text_channel_dropped(self, harness, channel_type):
        assert harness.relay.discord_to_group.handle(_message(channel_type=channel_type)) is False

    def test_accepts_only_discord_message_in(self, harness):
        outbound = harness.relay.discord_to_group
        assert outbound.accept_event("discord", _message()) is True
        assert outbound.accept_event("discord", GroupCommandOut("t", "p")) is False
