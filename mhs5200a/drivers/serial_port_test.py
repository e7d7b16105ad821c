from unittest.mock import sentinel

import pytest

import mhs5200a.drivers.serial_port as module


@pytest.fixture
def mock_serial_class(mocker):
    return mocker.patch.object(module.serial, "Serial")


@pytest.fixture
def mock_connection(mocker):
    mock_connection = mocker.Mock()
    mock_connection.port = sentinel.port
    return mock_connection


class TestOpenSerialPort:
    def test_opens_port_with_device_link_settings(self, mock_serial_class):
        connection = module.open_serial_port(
            sentinel.port,
            baud_rate=sentinel.baud_rate,
            timeout=sentinel.timeout,
            write_timeout=sentinel.write_timeout,
        )

        mock_serial_class.assert_called_with(
            sentinel.port,
            baudrate=sentinel.baud_rate,
            bytesize=module.serial.EIGHTBITS,
            parity=module.serial.PARITY_NONE,
            stopbits=module.serial.STOPBITS_ONE,
            timeout=sentinel.timeout,
            write_timeout=sentinel.write_timeout,
        )
        assert connection == mock_serial_class.return_value

    def test_defaults_to_57600_baud(self, mock_serial_class):
        module.open_serial_port(sentinel.port)

        assert mock_serial_class.call_args[1]["baudrate"] == 57600


class TestWriteWithTimeout:
    def test_sets_write_timeout_and_returns_bytes_written(self, mock_connection):
        mock_connection.write.return_value = 5

        bytes_written = module.write_with_timeout(mock_connection, b":r1f\n", 0.05)

        assert mock_connection.write_timeout == 0.05
        mock_connection.write.assert_called_with(b":r1f\n")
        assert bytes_written == 5

    def test_timeout_exception_propagates(self, mock_connection):
        mock_connection.write.side_effect = module.serial.SerialTimeoutException()

        with pytest.raises(module.serial.SerialTimeoutException):
            module.write_with_timeout(mock_connection, b":r1f\n", 0.05)


class TestReadLineWithTimeout:
    def test_sets_read_timeout_and_returns_line(self, mock_connection):
        mock_connection.readline.return_value = b":r1f2500000\n"

        response = module.read_line_with_timeout(mock_connection, 0.05)

        assert mock_connection.timeout == 0.05
        assert response == b":r1f2500000\n"

    def test_returns_empty_bytes_on_timeout(self, mock_connection):
        mock_connection.readline.return_value = b""

        assert module.read_line_with_timeout(mock_connection, 0.05) == b""

    def test_logs_request_and_response_at_debug_level(self, mocker, mock_connection):
        mock_debug_logger = mocker.patch.object(module.logger, "debug")
        mock_connection.write.return_value = 5
        mock_connection.readline.return_value = b"ok\n"

        module.write_with_timeout(mock_connection, b":s1b1\n", 0.05)
        module.read_line_with_timeout(mock_connection, 0.05)

        mock_debug_logger.assert_has_calls(
            [
                mocker.call("Serial command on sentinel.port: b':s1b1\\n'"),
                mocker.call("Serial response on sentinel.port: b'ok\\n'"),
            ]
        )
