""" A device session for one MHS-5200A on one serial port

The generator can't match replies to commands other than by order, so only one transaction may be
outstanding at a time. FunctionGenerator holds a lock for the whole of each operation, including
the extra reads that amplitude, offset and frequency settings make along the way.
"""
import functools
import logging
import threading

import pandas as pd
import serial

from mhs5200a.drivers.serial_port import open_serial_port
from mhs5200a.drivers.mhs5200a import codec, counter
from mhs5200a.drivers.mhs5200a.constants import (
    CHANNELS,
    DEFAULT_BAUD_RATE,
    SERIAL_READ_TIMEOUT,
    SERIAL_WRITE_TIMEOUT,
    VENDOR,
)
from mhs5200a.drivers.mhs5200a.exceptions import ValidationError
from mhs5200a.drivers.mhs5200a.identity import DeviceIdentity, identify
from mhs5200a.drivers.mhs5200a.waveforms import (
    WaveformKind,
    WaveformOption,
    get_waveform_spec,
)

logger = logging.getLogger(__name__)


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


def _check_channel(channel: int) -> None:
    if channel not in CHANNELS:
        raise ValidationError(f"Channel must be one of {CHANNELS}, not {channel}")


class FunctionGenerator:
    def __init__(self, connection: serial.Serial, identity: DeviceIdentity):
        self.connection = connection
        self.identity = identity
        self._lock = threading.RLock()

    def __repr__(self):
        return f"FunctionGenerator(port={self.connection.port}, model={self.identity.model})"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @classmethod
    def open(cls, port: str, baud_rate: int = DEFAULT_BAUD_RATE) -> "FunctionGenerator":
        """ Open the serial port and identify the generator on it

        Raises:
            serial.SerialException if the port can't be opened
            UnsupportedDevice if something other than an MHS-5200 answers
            (and anything a transaction can raise)
        """
        connection = open_serial_port(
            port,
            baud_rate=baud_rate,
            timeout=SERIAL_READ_TIMEOUT,
            write_timeout=SERIAL_WRITE_TIMEOUT,
        )
        try:
            identity = identify(connection)
        except Exception:
            connection.close()
            raise

        logger.info(
            f"Found {VENDOR} {identity.model} on {port} "
            f"(max. frequency {identity.max_frequency / 1e6:g} MHz)"
        )
        return cls(connection, identity)

    def close(self) -> None:
        with self._lock:
            self.connection.close()

    @property
    def max_frequency(self) -> float:
        return self.identity.max_frequency

    @_locked
    def get_waveform(self, channel: int) -> WaveformKind:
        _check_channel(channel)
        return codec.get_waveform(self.connection, channel)

    @_locked
    def set_waveform(self, channel: int, waveform: WaveformKind) -> None:
        _check_channel(channel)
        codec.set_waveform(self.connection, channel, waveform)

    @_locked
    def get_attenuation(self, channel: int) -> codec.Attenuation:
        _check_channel(channel)
        return codec.get_attenuation(self.connection, channel)

    @_locked
    def get_output_enabled(self) -> bool:
        return codec.get_output_enabled(self.connection)

    @_locked
    def set_output_enabled(self, enabled: bool) -> None:
        codec.set_output_enabled(self.connection, enabled)

    @_locked
    def get_frequency(self, channel: int) -> float:
        _check_channel(channel)
        return codec.get_frequency(self.connection, channel)

    @_locked
    def set_frequency(self, channel: int, frequency_hz: float) -> None:
        """ Set frequency within the limits of the channel's current waveform.

        Frequencies outside what the device can do at all are rejected before anything is sent.
        Otherwise the current waveform is read to check against its own limits.
        """
        _check_channel(channel)
        validation_errors = codec.get_frequency_validation_errors(
            frequency_hz, WaveformKind.unknown, self.max_frequency, channel
        )
        if validation_errors:
            raise ValidationError(
                f"Invalid frequency {frequency_hz} Hz. Errors: {', '.join(validation_errors)}"
            )

        waveform = codec.get_waveform(self.connection, channel)
        codec.set_frequency(
            self.connection, channel, frequency_hz, waveform, self.max_frequency
        )

    @_locked
    def get_amplitude(self, channel: int) -> float:
        _check_channel(channel)
        return codec.get_amplitude(self.connection, channel)

    @_locked
    def set_amplitude(self, channel: int, amplitude_v: float) -> None:
        _check_channel(channel)
        codec.set_amplitude(self.connection, channel, amplitude_v)

    @_locked
    def get_offset(self, channel: int) -> float:
        _check_channel(channel)
        return codec.get_offset(self.connection, channel)

    @_locked
    def set_offset(self, channel: int, offset_v: float) -> None:
        _check_channel(channel)
        codec.set_offset(self.connection, channel, offset_v)

    @_locked
    def get_phase(self, channel: int) -> float:
        _check_channel(channel)
        return codec.get_phase(self.connection, channel)

    @_locked
    def set_phase(self, channel: int, phase_degrees: float) -> None:
        _check_channel(channel)
        codec.set_phase(self.connection, channel, phase_degrees)

    @_locked
    def get_duty_cycle(self, channel: int) -> float:
        _check_channel(channel)
        return codec.get_duty_cycle(self.connection, channel)

    @_locked
    def set_duty_cycle(self, channel: int, duty_cycle_percent: float) -> None:
        _check_channel(channel)
        codec.set_duty_cycle(self.connection, channel, duty_cycle_percent)

    @_locked
    def get_channel_status(self, channel: int) -> pd.Series:
        """ Read back every setting of a channel that its current waveform supports

        Returns:
            pd.Series indexed by setting name, e.g. "frequency (Hz)", "amplitude (V)"
        """
        _check_channel(channel)
        waveform = codec.get_waveform(self.connection, channel)
        waveform_spec = get_waveform_spec(waveform, channel)
        options = (
            waveform_spec.options
            if waveform_spec is not None
            else WaveformOption.frequency | WaveformOption.amplitude
        )

        status = {"waveform": str(waveform)}
        if WaveformOption.frequency in options:
            status["frequency (Hz)"] = codec.get_frequency(self.connection, channel)
        if WaveformOption.amplitude in options:
            status["amplitude (V)"] = codec.get_amplitude(self.connection, channel)
        if WaveformOption.offset in options:
            status["offset (V)"] = codec.get_offset(self.connection, channel)
        if WaveformOption.phase in options:
            status["phase (degrees)"] = codec.get_phase(self.connection, channel)
        if WaveformOption.duty_cycle in options:
            status["duty cycle (%)"] = codec.get_duty_cycle(self.connection, channel)

        return pd.Series(status)

    @_locked
    def set_counter_function(self, function: counter.CounterFunction) -> None:
        counter.set_function(self.connection, function)

    @_locked
    def set_counter_enabled(self, enabled: bool) -> None:
        counter.set_enabled(self.connection, enabled)

    @_locked
    def set_counter_gate_time(self, gate_time: counter.GateTime) -> None:
        counter.set_gate_time(self.connection, gate_time)

    @_locked
    def read_counter_register(self) -> int:
        return counter.read_register(self.connection)

    @_locked
    def measure(self, function: counter.CounterFunction) -> float:
        """ Select a counter function and read it back, with nothing else allowed in between """
        return counter.measure(self.connection, function)
