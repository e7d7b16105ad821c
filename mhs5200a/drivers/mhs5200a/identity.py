# Model identification for the MHS-5200 family
from collections import namedtuple

import serial

from mhs5200a.drivers.mhs5200a.constants import MODEL_PREFIX, READ_MODEL_COMMAND
from mhs5200a.drivers.mhs5200a.exceptions import UnsupportedDevice
from mhs5200a.drivers.mhs5200a.serial import parse_reply_value, run_data

DeviceIdentity = namedtuple("DeviceIdentity", ["model", "max_frequency"])

_MIN_MODEL_CODE_LENGTH = 5
_ONE_MILLION = 1000000


def parse_model_reply(reply: str) -> DeviceIdentity:
    """ Parse the reply to a ":r0c" (read model) command

    The reply echoes the command, then a model code, e.g. ":r0c5225A5040000":
     * "52" identifies the MHS-5200 family
     * the next two digits are the maximum sine frequency in MHz ("25")

    Args:
        reply: full reply line, echoed command included

    Returns:
        DeviceIdentity, e.g. DeviceIdentity(model="MHS-25A50", max_frequency=25000000)

    Raises:
        UnsupportedDevice if the model code is too short or isn't from the MHS-5200 family
    """
    model_code = parse_reply_value(reply)

    if len(model_code) < _MIN_MODEL_CODE_LENGTH:
        raise UnsupportedDevice(f'Model code "{model_code}" is too short')

    if not model_code.startswith(MODEL_PREFIX):
        raise UnsupportedDevice(
            f'Model code "{model_code}" does not start with "{MODEL_PREFIX}"'
        )

    max_frequency_mhz = model_code[2:4]
    if not max_frequency_mhz.isdigit():
        raise UnsupportedDevice(
            f'Model code "{model_code}" has no maximum frequency digits'
        )

    return DeviceIdentity(
        model=f"MHS-{model_code[2:7]}",
        max_frequency=int(max_frequency_mhz) * _ONE_MILLION,
    )


def identify(connection: serial.Serial) -> DeviceIdentity:
    """ Ask the generator for its model code and parse it """
    return parse_model_reply(run_data(connection, READ_MODEL_COMMAND))
