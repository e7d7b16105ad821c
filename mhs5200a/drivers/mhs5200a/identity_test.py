import pytest

from . import identity as module
from .exceptions import ShortReply, UnsupportedDevice


class TestParseModelReply:
    @pytest.mark.parametrize(
        "reply, expected",
        [
            (":r0c5225A5040000", module.DeviceIdentity("MHS-25A50", 25000000)),
            (":r0c5206A5040000", module.DeviceIdentity("MHS-06A50", 6000000)),
            (":r0c5220A", module.DeviceIdentity("MHS-20A", 20000000)),
        ],
    )
    def test_parses_model_and_max_frequency(self, reply, expected):
        assert module.parse_model_reply(reply) == expected

    @pytest.mark.parametrize(
        "name, reply",
        [
            ("wrong family", ":r0c4225A5040000"),
            ("too short", ":r0c522"),
            ("non-numeric frequency", ":r0c52XXA5040000"),
        ],
    )
    def test_raises_on_unsupported_model(self, name, reply):
        with pytest.raises(UnsupportedDevice):
            module.parse_model_reply(reply)


class TestIdentify:
    def test_sends_read_model_command(self, fake_connection):
        fake_connection.queue_replies(":r0c5225A5040000")

        identity = module.identify(fake_connection)

        assert fake_connection.commands == [":r0c"]
        assert identity.max_frequency == 25000000

    def test_acknowledgement_instead_of_model_raises(self, fake_connection):
        fake_connection.queue_replies("ok")

        with pytest.raises(ShortReply):
            module.identify(fake_connection)
