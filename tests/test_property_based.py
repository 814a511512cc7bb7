"""Property-based tests using hypothesis."""

from hypothesis import given, strategies as st

from corrade_bridge.events import discord_message_in
from corrade_bridge.formatting import discord_to_group, is_relayed_from_discord
from corrade_bridge.protocol import GroupNotification, decode, encode
from tests.mocks import CHANNEL_ID, GROUP, GUILD, LogCapture, make_harness

# Single-line printable text with at least one visible character
line = st.text(
    alphabet=st.characters(exclude_categories=("Cc", "Cs", "Zl", "Zp")),
    min_size=1,
).filter(lambda s: s.strip())


def _group_payload(**fields: str) -> str:
    base = {"type": "group", "group": GROUP, "firstname": "Jane", "lastname": "Doe", "message": "hello"}
    base.update(fields)
    return encode(base.items())


class TestPropertyBased:
    """Property-based tests for relay invariants."""

    @given(st.binary())
    def test_malformed_payloads_never_dispatch_or_log_errors(self, payload):
        # Arrange
        harness = make_harness()
        logs = LogCapture()
        try:
            # Act
            sent = harness.relay.group_to_discord.handle(payload)
        finally:
            logs.close()

        # Assert: anything that was not a clean group message produced nothing
        if not sent:
            assert harness.discord.events == []
        assert logs.at("ERROR") == []

    @given(st.text().filter(lambda t: t != "group"))
    def test_non_group_type_never_dispatched(self, kind):
        harness = make_harness()
        harness.relay.group_to_discord.handle(_group_payload(type=kind))
        assert harness.discord.events == []

    @given(line, st.integers(min_value=0), line)
    def test_echo_pattern_always_dropped(self, name, number, text):
        # Arrange
        harness = make_harness()
        message = f"{name}#{number} [Discord]: {text}"

        # Act
        harness.relay.group_to_discord.handle(_group_payload(message=message, group=GROUP.upper()))

        # Assert
        assert harness.discord.events == []

    @given(st.sampled_from([GROUP, GROUP.lower(), GROUP.upper(), GROUP.swapcase()]))
    def test_group_case_insensitive(self, group):
        harness = make_harness()
        assert harness.relay.group_to_discord.handle(_group_payload(group=group)) is True

    @given(line, st.from_regex(r"[0-9]{1,4}", fullmatch=True), line)
    def test_outbound_format_always_matches_echo_pattern(self, name, discriminator, content):
        assert is_relayed_from_discord(discord_to_group(name, discriminator, content))

    @given(line, st.from_regex(r"[0-9]{1,4}", fullmatch=True), line)
    def test_round_trip_command_rejected_inbound(self, name, discriminator, content):
        # Arrange
        harness = make_harness()
        _, evt = discord_message_in(name, discriminator, CHANNEL_ID, GUILD, content)
        harness.bus.publish("discord", evt)
        told = decode(harness.corrade.events[0].payload)

        # Act
        harness.relay.group_to_discord.handle(_group_payload(message=told["message"]))

        # Assert
        assert harness.discord.events == []

    @given(st.dictionaries(st.text(min_size=1), st.text(), max_size=8))
    def test_codec_round_trip(self, fields):
        assert decode(encode(fields.items())) == fields

    @given(st.text(), st.text())
    def test_notification_keeps_message(self, first, message):
        payload = encode([("type", "group"), ("firstname", first), ("message", message)])
        notification = GroupNotification.from_payload(payload)
        assert notification.firstname == first
        assert notification.message == message
