""" Controls for the MHS-5200A's built-in frequency counter

The counter has a single result register (read with ":r0e"). What that register holds depends on
the measurement function selected last, so a reading is only meaningful right after selecting the
function it should be interpreted as. Switching function discards the previous measurement.
"""
from enum import IntEnum

import serial

from mhs5200a.drivers.mhs5200a.constants import (
    READ_COUNTER_COMMAND,
    SET_COUNTER_ENABLED_COMMAND,
    SET_COUNTER_FUNCTION_COMMAND,
    SET_COUNTER_GATE_TIME_COMMAND,
)
from mhs5200a.drivers.mhs5200a.serial import read_integer, run_ack


class CounterFunction(IntEnum):
    """ Counter measurement functions as used on the wire (":s{function}m") """

    frequency = 0
    period = 2
    pulse_width = 3
    duty_cycle = 4

    @property
    def quantity(self) -> str:
        return {
            0: "frequency",
            2: "period",
            3: "pulse width",
            4: "duty cycle",
        }[self]

    @property
    def unit(self) -> str:
        return {0: "Hz", 2: "s", 3: "s", 4: "%"}[self]

    def __str__(self):
        return f"CounterFunction #{self.value}: {self.quantity} ({self.unit})"


class GateTime(IntEnum):
    """ Counter gate times as used on the wire (":s1g{gate_time}") """

    one_second = 0
    ten_seconds = 1
    ten_milliseconds = 2
    hundred_milliseconds = 3


# Order in which a polling tick walks through the counter functions
POLLING_ORDER = (
    CounterFunction.frequency,
    CounterFunction.period,
    CounterFunction.duty_cycle,
    CounterFunction.pulse_width,
)


def decode_counter_value(raw: int, function: CounterFunction) -> float:
    """ Convert a raw counter register value to engineering units for the given function

    frequency: tenths of a Hz; period and pulse width: nanoseconds; duty cycle: tenths of a percent
    """
    if function in (CounterFunction.period, CounterFunction.pulse_width):
        return raw * 1e-9
    return raw / 10


def set_function(connection: serial.Serial, function: CounterFunction) -> None:
    """ Select what the counter measures. Does not enable the counter """
    run_ack(connection, SET_COUNTER_FUNCTION_COMMAND.format(function=int(function)))


def set_gate_time(connection: serial.Serial, gate_time: GateTime) -> None:
    run_ack(connection, SET_COUNTER_GATE_TIME_COMMAND.format(gate_time=int(gate_time)))


def set_enabled(connection: serial.Serial, enabled: bool) -> None:
    """ Turn the counter on or off, independent of which function is selected """
    run_ack(connection, SET_COUNTER_ENABLED_COMMAND.format(enabled=int(bool(enabled))))


def read_register(connection: serial.Serial) -> int:
    """ Read the raw counter register, whatever it currently holds """
    return read_integer(connection, READ_COUNTER_COMMAND)


def measure(connection: serial.Serial, function: CounterFunction) -> float:
    """ Select a function, then read and decode the register for it """
    set_function(connection, function)
    return decode_counter_value(read_register(connection), function)
