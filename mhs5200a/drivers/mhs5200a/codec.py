""" Typed get/set for each MHS-5200A channel setting

The generator speaks in scaled integers:
 * frequency: hundredths of a Hz
 * amplitude: hundredths of a volt, or thousandths when the output is attenuated by 20 dB
 * duty cycle: tenths of a percent
 * offset: percent of the current amplitude, shifted up by 120 so it's never negative
 * phase: whole degrees

Reading amplitude needs the attenuation mode, and reading or setting offset needs the amplitude,
so those calls make one extra (uncached) read first. Nothing here is safe to call concurrently on
the same connection; see session.FunctionGenerator for the locked wrapper.
"""
import math
from enum import IntEnum
from typing import List

import serial

from mhs5200a.drivers.mhs5200a.constants import (
    AMPLITUDE_MAX,
    AMPLITUDE_MIN,
    AMPLITUDE_SCALE,
    AMPLITUDE_TAG,
    ATTENUATED_AMPLITUDE_SCALE,
    ATTENUATION_TAG,
    DUTY_CYCLE_MAX,
    DUTY_CYCLE_MIN,
    DUTY_CYCLE_SCALE,
    DUTY_CYCLE_TAG,
    FREQUENCY_SCALE,
    FREQUENCY_TAG,
    OFFSET_PERCENT_MAX,
    OFFSET_PERCENT_MIN,
    OFFSET_TAG,
    OFFSET_WIRE_BIAS,
    PHASE_TAG,
    READ_OUTPUT_ENABLED_COMMAND,
    SET_OUTPUT_ENABLED_COMMAND,
    WAVEFORM_TAG,
)
from mhs5200a.drivers.mhs5200a.exceptions import UnexpectedReply, ValidationError
from mhs5200a.drivers.mhs5200a.serial import read_integer, run_ack
from mhs5200a.drivers.mhs5200a.waveforms import (
    PHASE_MIN_MAX_STEP,
    WaveformKind,
    get_frequency_range,
)


class Attenuation(IntEnum):
    """ Output attenuation as reported by the generator. Values are fixed by the firmware """

    minus_20db = 0
    zero_db = 1

    @property
    def description(self):
        return {0: "-20 dB", 1: "0 dB"}[self]

    def __str__(self):
        return self.description


def _read_command(channel: int, tag: str) -> str:
    return f":r{channel}{tag}"


def _set_command(channel: int, tag: str, value: int) -> str:
    return f":s{channel}{tag}{value}"


def _raise_if_invalid(description: str, validation_errors: List[str]) -> None:
    if validation_errors:
        errors_string = ", ".join(validation_errors)
        raise ValidationError(f"Invalid {description}. Errors: {errors_string}")


def _round_half_away_from_zero(value: float) -> int:
    # The firmware rounds halves away from zero (2.5 -> 3), unlike round() which rounds them to even
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


# Waveform


def get_waveform(connection: serial.Serial, channel: int) -> WaveformKind:
    waveform_id = read_integer(connection, _read_command(channel, WAVEFORM_TAG))
    return WaveformKind.from_wire(waveform_id)


def set_waveform(connection: serial.Serial, channel: int, waveform: WaveformKind) -> None:
    if waveform == WaveformKind.unknown:
        raise ValidationError("Can't set a channel to the unknown waveform")

    run_ack(connection, _set_command(channel, WAVEFORM_TAG, int(waveform)))


# Attenuation (read-only: the generator switches it itself depending on amplitude range)


def get_attenuation(connection: serial.Serial, channel: int) -> Attenuation:
    attenuation_id = read_integer(connection, _read_command(channel, ATTENUATION_TAG))

    try:
        return Attenuation(attenuation_id)
    except ValueError:
        raise UnexpectedReply(f"Unknown attenuation id {attenuation_id}")


# Output enable


def get_output_enabled(connection: serial.Serial) -> bool:
    return read_integer(connection, READ_OUTPUT_ENABLED_COMMAND) != 0


def set_output_enabled(connection: serial.Serial, enabled: bool) -> None:
    run_ack(connection, SET_OUTPUT_ENABLED_COMMAND.format(enabled=int(bool(enabled))))


# Frequency


def decode_frequency(raw: int) -> float:
    return raw / FREQUENCY_SCALE


def encode_frequency(frequency_hz: float) -> int:
    return _round_half_away_from_zero(frequency_hz * FREQUENCY_SCALE)


def get_frequency_validation_errors(
    frequency_hz: float, waveform: WaveformKind, max_frequency: float, channel: int = 1
) -> List[str]:
    """ Validate that a frequency is attainable for a waveform on this device.

        Args:
            frequency_hz: The desired frequency in Hz
            waveform: The waveform the channel is (or will be) producing
            max_frequency: The device's maximum frequency in Hz
            channel: The channel whose capability table to use
        Returns:
            List containing validation errors for this frequency.
    """
    freq_min, freq_max, _ = get_frequency_range(waveform, max_frequency, channel)

    validation_errors = {
        "frequency is not a finite number": not math.isfinite(frequency_hz),
        f"frequency < {freq_min} Hz": frequency_hz < freq_min,
        f"frequency > {freq_max} Hz for {waveform!s}": frequency_hz > freq_max,
    }

    return [error for error, has_error in validation_errors.items() if has_error]


def get_frequency(connection: serial.Serial, channel: int) -> float:
    raw = read_integer(connection, _read_command(channel, FREQUENCY_TAG))
    return decode_frequency(raw)


def set_frequency(
    connection: serial.Serial,
    channel: int,
    frequency_hz: float,
    waveform: WaveformKind,
    max_frequency: float,
) -> None:
    """ Set a channel's frequency, rejecting it before anything is sent if it's out of range

    Args:
        connection: open serial connection to the generator
        channel: 1 or 2
        frequency_hz: frequency in Hz
        waveform: the waveform currently on the channel, which bounds the frequency
        max_frequency: device maximum frequency in Hz

    Raises:
        ValidationError if the frequency is out of range
    """
    _raise_if_invalid(
        f"frequency {frequency_hz} Hz",
        get_frequency_validation_errors(frequency_hz, waveform, max_frequency, channel),
    )

    run_ack(
        connection,
        _set_command(channel, FREQUENCY_TAG, encode_frequency(frequency_hz)),
    )


# Amplitude


def decode_amplitude(raw: int, attenuation: Attenuation) -> float:
    amplitude = raw / AMPLITUDE_SCALE
    if attenuation == Attenuation.minus_20db:
        amplitude /= 10
    return amplitude


def encode_amplitude(amplitude_v: float, attenuation: Attenuation) -> int:
    if attenuation == Attenuation.minus_20db:
        return _round_half_away_from_zero(amplitude_v * ATTENUATED_AMPLITUDE_SCALE)
    return _round_half_away_from_zero(amplitude_v * AMPLITUDE_SCALE)


def get_amplitude_validation_errors(amplitude_v: float) -> List[str]:
    validation_errors = {
        "amplitude is not a finite number": not math.isfinite(amplitude_v),
        f"amplitude < {AMPLITUDE_MIN} V": amplitude_v < AMPLITUDE_MIN,
        f"amplitude > {AMPLITUDE_MAX} V": amplitude_v > AMPLITUDE_MAX,
    }

    return [error for error, has_error in validation_errors.items() if has_error]


def get_amplitude(connection: serial.Serial, channel: int) -> float:
    attenuation = get_attenuation(connection, channel)
    raw = read_integer(connection, _read_command(channel, AMPLITUDE_TAG))
    return decode_amplitude(raw, attenuation)


def set_amplitude(connection: serial.Serial, channel: int, amplitude_v: float) -> None:
    """ Set a channel's amplitude in volts. The encoding depends on the live attenuation mode """
    _raise_if_invalid(
        f"amplitude {amplitude_v} V", get_amplitude_validation_errors(amplitude_v)
    )

    attenuation = get_attenuation(connection, channel)
    run_ack(
        connection,
        _set_command(channel, AMPLITUDE_TAG, encode_amplitude(amplitude_v, attenuation)),
    )


# Duty cycle


def decode_duty_cycle(raw: int) -> float:
    return raw / DUTY_CYCLE_SCALE


def encode_duty_cycle(duty_cycle_percent: float) -> int:
    return _round_half_away_from_zero(duty_cycle_percent * DUTY_CYCLE_SCALE)


def get_duty_cycle_validation_errors(duty_cycle_percent: float) -> List[str]:
    validation_errors = {
        "duty cycle is not a finite number": not math.isfinite(duty_cycle_percent),
        f"duty cycle < {DUTY_CYCLE_MIN}%": duty_cycle_percent < DUTY_CYCLE_MIN,
        f"duty cycle > {DUTY_CYCLE_MAX}%": duty_cycle_percent > DUTY_CYCLE_MAX,
    }

    return [error for error, has_error in validation_errors.items() if has_error]


def get_duty_cycle(connection: serial.Serial, channel: int) -> float:
    raw = read_integer(connection, _read_command(channel, DUTY_CYCLE_TAG))
    return decode_duty_cycle(raw)


def set_duty_cycle(
    connection: serial.Serial, channel: int, duty_cycle_percent: float
) -> None:
    _raise_if_invalid(
        f"duty cycle {duty_cycle_percent}%",
        get_duty_cycle_validation_errors(duty_cycle_percent),
    )

    run_ack(
        connection,
        _set_command(channel, DUTY_CYCLE_TAG, encode_duty_cycle(duty_cycle_percent)),
    )


# Offset


def decode_offset(raw: int, amplitude_v: float) -> float:
    """ Convert a wire offset (percent of amplitude + 120) to volts """
    offset_percent = raw - OFFSET_WIRE_BIAS
    return amplitude_v * offset_percent / 100


def offset_to_percent(offset_v: float, amplitude_v: float) -> float:
    """ Express an offset in volts as a percentage of amplitude

    Raises:
        ValidationError if the amplitude is zero and the offset isn't, since no percentage would do
    """
    if amplitude_v == 0:
        if offset_v == 0:
            return 0.0
        raise ValidationError(
            f"Invalid offset {offset_v} V: can't offset a zero-amplitude output"
        )
    return offset_v / amplitude_v * 100


def encode_offset_percent(offset_percent: float) -> int:
    return _round_half_away_from_zero(offset_percent + OFFSET_WIRE_BIAS)


def get_offset_percent_validation_errors(offset_percent: float) -> List[str]:
    validation_errors = {
        "offset is not a finite number": not math.isfinite(offset_percent),
        f"offset < {OFFSET_PERCENT_MIN}% of amplitude": offset_percent
        < OFFSET_PERCENT_MIN,
        f"offset > {OFFSET_PERCENT_MAX}% of amplitude": offset_percent
        > OFFSET_PERCENT_MAX,
    }

    return [error for error, has_error in validation_errors.items() if has_error]


def get_offset(connection: serial.Serial, channel: int) -> float:
    amplitude_v = get_amplitude(connection, channel)
    raw = read_integer(connection, _read_command(channel, OFFSET_TAG))
    return decode_offset(raw, amplitude_v)


def set_offset(connection: serial.Serial, channel: int, offset_v: float) -> None:
    """ Set a channel's DC offset in volts.

    The generator only knows offset as a percentage of amplitude, so this reads the live amplitude
    first and rejects offsets beyond +/-120% of it.
    """
    # Rejected before any I/O, like every other out-of-range value
    if not math.isfinite(offset_v):
        raise ValidationError(f"Invalid offset {offset_v} V: not a finite number")

    amplitude_v = get_amplitude(connection, channel)
    offset_percent = offset_to_percent(offset_v, amplitude_v)

    _raise_if_invalid(
        f"offset {offset_v} V at amplitude {amplitude_v} V",
        get_offset_percent_validation_errors(offset_percent),
    )

    run_ack(
        connection,
        _set_command(channel, OFFSET_TAG, encode_offset_percent(offset_percent)),
    )


# Phase


def normalize_phase(phase_degrees: float) -> float:
    """ Wrap any phase into [0, 360) degrees

    Raises:
        ValidationError if the phase is infinite or NaN, which has no place on the circle
    """
    if not math.isfinite(phase_degrees):
        raise ValidationError(f"Invalid phase {phase_degrees} degrees: not a finite number")

    phase_min, phase_max, _ = PHASE_MIN_MAX_STEP
    span = phase_max - phase_min

    phase_degrees = phase_min + math.fmod(phase_degrees - phase_min, span)
    while phase_degrees < phase_min:
        phase_degrees += span
    while phase_degrees >= phase_max:
        phase_degrees -= span
    return phase_degrees


def encode_phase(phase_degrees: float) -> int:
    # Rounding can land exactly on 360 (e.g. 359.7), which is 0 again
    return _round_half_away_from_zero(normalize_phase(phase_degrees)) % 360


def get_phase(connection: serial.Serial, channel: int) -> float:
    return float(read_integer(connection, _read_command(channel, PHASE_TAG)))


def set_phase(connection: serial.Serial, channel: int, phase_degrees: float) -> None:
    """ Set a channel's phase. Out-of-range phases wrap around rather than being rejected """
    run_ack(connection, _set_command(channel, PHASE_TAG, encode_phase(phase_degrees)))
