""" Line framing and request/response transactions for the MHS-5200A

Every exchange is one ASCII command line followed by one reply line. A reply is either:
 * an acknowledgement: an empty line, or the literal "ok" (writes answer this way)
 * a data reply: the echoed read command followed by a decimal value, e.g. ":r1f2500000"

The generator has no transaction IDs, so a reply can only be matched to its command by
never having more than one command outstanding on the link.
"""
import re

import serial

from mhs5200a.drivers.serial_port import read_line_with_timeout, write_with_timeout
from mhs5200a.drivers.mhs5200a.constants import (
    ACKNOWLEDGEMENT_TOKEN,
    LINE_TERMINATOR,
    PROTOCOL_LEN_MAX,
    REPLY_TAG_LENGTH,
    SERIAL_READ_TIMEOUT,
    SERIAL_WRITE_TIMEOUT,
)
from mhs5200a.drivers.mhs5200a.exceptions import (
    ShortReply,
    TransportError,
    UnexpectedReply,
)

_DECIMAL_INTEGER = re.compile(r"-?[0-9]+")


def _frame_command(command: str) -> bytes:
    return bytes(command + LINE_TERMINATOR, encoding="ascii")


def send_command(connection: serial.Serial, command: str) -> None:
    """ Frame a command with the line terminator and write it within the write timeout

    Args:
        connection: open serial connection to the generator
        command: command without terminator, e.g. ":s1f2500000"

    Raises:
        TransportError if the write fails, times out or is short
    """
    command_bytes = _frame_command(command)

    try:
        bytes_written = write_with_timeout(
            connection, command_bytes, SERIAL_WRITE_TIMEOUT
        )
    except serial.SerialException as e:
        raise TransportError(f'Failed to send "{command}": {e}') from e

    if bytes_written != len(command_bytes):
        raise TransportError(
            f'Short write sending "{command}": {bytes_written} of {len(command_bytes)} bytes'
        )


def receive_line(connection: serial.Serial, timeout: float = SERIAL_READ_TIMEOUT) -> str:
    """ Read a single reply line within the timeout

    Returns:
        the reply with all trailing carriage returns and line feeds stripped

    Raises:
        TransportError if nothing arrives in time or the read fails. The two cases look the same
            from here, so they are not distinguished.
    """
    try:
        response_bytes = read_line_with_timeout(connection, timeout)
    except serial.SerialException as e:
        raise TransportError(f"Failed to read reply: {e}") from e

    if not response_bytes:
        raise TransportError(f"No reply within {timeout * 1000:.0f} ms")

    try:
        return response_bytes.decode("ascii").rstrip("\r\n")
    except UnicodeDecodeError:
        raise UnexpectedReply(f"Reply {response_bytes!r} is not ASCII")


def is_acknowledgement(reply: str) -> bool:
    """ An empty line or a bare "ok" acknowledges a command and carries no payload """
    return reply in ("", ACKNOWLEDGEMENT_TOKEN)


def run_ack(connection: serial.Serial, command: str) -> None:
    """ Send a command that the generator answers with a bare acknowledgement

    Raises:
        TransportError if sending or receiving fails
        UnexpectedReply if the generator replied with data
    """
    send_command(connection, command)
    reply = receive_line(connection)

    if not is_acknowledgement(reply):
        raise UnexpectedReply(
            f'Expected acknowledgement to "{command}" but received "{reply}"'
        )


def run_data(connection: serial.Serial, command: str) -> str:
    """ Send a read command and return its data reply

    The reply is returned in full, echoed command tag included, e.g. ":r1f2500000" for ":r1f".

    Raises:
        TransportError if sending or receiving fails
        ShortReply if the reply is an acknowledgement or no longer than the command tag
        UnexpectedReply if the reply is too long or doesn't echo the command
    """
    send_command(connection, command)
    reply = receive_line(connection)

    if is_acknowledgement(reply) or len(reply) <= REPLY_TAG_LENGTH:
        raise ShortReply(f'Reply "{reply}" to "{command}" carries no value')

    if len(reply) > PROTOCOL_LEN_MAX:
        raise UnexpectedReply(
            f'Reply to "{command}" is {len(reply)} characters long, '
            f"more than the maximum of {PROTOCOL_LEN_MAX}"
        )

    expected_tag = command[:REPLY_TAG_LENGTH]
    if not reply.startswith(expected_tag):
        raise UnexpectedReply(
            f'Reply "{reply}" to "{command}" does not echo "{expected_tag}"'
        )

    return reply


def parse_reply_value(reply: str) -> str:
    """ Strip the echoed command tag from a data reply """
    return reply[REPLY_TAG_LENGTH:]


def read_integer(connection: serial.Serial, command: str) -> int:
    """ Run a read command and parse its value as a plain decimal integer

    Raises:
        UnexpectedReply if the value isn't an integer
        (and anything run_data raises)
    """
    reply = run_data(connection, command)
    value = parse_reply_value(reply)

    # int() would also take " 12", "+12" and "1_000", none of which the generator sends
    if not _DECIMAL_INTEGER.fullmatch(value):
        raise UnexpectedReply(
            f'Could not parse "{value}" from reply "{reply}" to "{command}" as an integer'
        )

    return int(value)
