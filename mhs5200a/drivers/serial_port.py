import logging

import serial

logger = logging.getLogger(__name__)


def open_serial_port(
    port: str,
    baud_rate: int = 57600,
    timeout: float = 0.05,
    write_timeout: float = 0.05,
) -> serial.Serial:
    """ Open a serial port that stays open for the life of a device session

    Args:
        port: serial port to use, e.g. "COM11" or "/dev/ttyUSB0"
        baud_rate: baud rate for serial connection
        timeout: default read timeout in seconds
        write_timeout: default write timeout in seconds

    Returns:
        an open serial.Serial connection (8 data bits, no parity, 1 stop bit)

    Raises:
        serial.SerialException if serial port can't be opened
        ValueError if parameters are out of range, e.g. baud rate etc.
    """
    logger.debug(f"Opening serial port {port} at {baud_rate} baud")

    return serial.Serial(
        port,
        baudrate=baud_rate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        timeout=timeout,
        write_timeout=write_timeout,
    )


def write_with_timeout(connection: serial.Serial, data: bytes, timeout: float) -> int:
    """ Write a byte string, giving up after `timeout` seconds

    Returns:
        number of bytes written

    Raises:
        serial.SerialTimeoutException if the write doesn't complete in time
        serial.SerialException on any other I/O failure
    """
    logger.debug(f"Serial command on {connection.port}: {data!r}")

    connection.write_timeout = timeout
    return connection.write(data)


def read_line_with_timeout(connection: serial.Serial, timeout: float) -> bytes:
    """ Read one line (up to and including b"\\n"), giving up after `timeout` seconds

    Returns:
        whatever was read. An empty byte string means nothing arrived in time.

    Raises:
        serial.SerialException on I/O failure
    """
    connection.timeout = timeout
    response = connection.readline()

    logger.debug(f"Serial response on {connection.port}: {response}")

    return response
