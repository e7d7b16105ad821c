# Waveform kinds and per-channel capability tables for the MHS-5200A
from collections import namedtuple
from enum import IntEnum, IntFlag
from typing import List, Optional, Tuple


class WaveformKind(IntEnum):
    """ Waveform ids as used on the wire. These are fixed by the firmware, don't renumber them """

    sine = 0
    square = 1
    triangle = 2
    rising_sawtooth = 3
    falling_sawtooth = 4
    arbitrary_0 = 100

    unknown = 1000

    @classmethod
    def from_wire(cls, waveform_id: int) -> "WaveformKind":
        """ Any id we don't know about reads back as `unknown` rather than failing """
        try:
            return cls(waveform_id)
        except ValueError:
            return cls.unknown

    @property
    def display_name(self) -> str:
        return {
            0: "Sine",
            1: "Square",
            2: "Triangle",
            3: "Rising Sawtooth",
            4: "Falling Sawtooth",
            100: "Arbitrary 0",
            1000: "Unknown",
        }[self]

    def __str__(self):
        return self.display_name


class WaveformOption(IntFlag):
    """ Settings that can be adjusted for a given waveform """

    frequency = 1
    amplitude = 2
    offset = 4
    phase = 8
    duty_cycle = 16


_DEFAULT_OPTIONS = (
    WaveformOption.frequency
    | WaveformOption.amplitude
    | WaveformOption.offset
    | WaveformOption.phase
)

WaveformSpec = namedtuple(
    "WaveformSpec", ["waveform", "freq_min", "freq_max", "freq_step", "options"]
)

ChannelSpec = namedtuple("ChannelSpec", ["name", "waveforms"])

# Sine can go up to the model's maximum frequency (checked separately); everything else tops out lower
_WAVEFORM_SPECS = (
    WaveformSpec(WaveformKind.sine, 1.0e-6, 25.0e6, 1.0e-6, _DEFAULT_OPTIONS),
    WaveformSpec(
        WaveformKind.square,
        1.0e-6,
        10.0e6,
        1.0e-6,
        _DEFAULT_OPTIONS | WaveformOption.duty_cycle,
    ),
    WaveformSpec(WaveformKind.triangle, 1.0e-6, 10.0e6, 1.0e-6, _DEFAULT_OPTIONS),
    WaveformSpec(
        WaveformKind.rising_sawtooth, 1.0e-6, 10.0e6, 1.0e-6, _DEFAULT_OPTIONS
    ),
    WaveformSpec(
        WaveformKind.falling_sawtooth, 1.0e-6, 10.0e6, 1.0e-6, _DEFAULT_OPTIONS
    ),
)

CHANNEL_SPECS = {
    1: ChannelSpec("CH1", _WAVEFORM_SPECS),
    2: ChannelSpec("CH2", _WAVEFORM_SPECS),
}

# Phase can be set anywhere in [0, 360) degrees: (min, max, step)
PHASE_MIN_MAX_STEP = (0.0, 360.0, 0.001)


def get_channel_spec(channel: int) -> ChannelSpec:
    try:
        return CHANNEL_SPECS[channel]
    except KeyError:
        raise ValueError(
            f"Channel {channel} does not exist. Valid channels: {list(CHANNEL_SPECS)}"
        )


def get_waveform_spec(waveform: WaveformKind, channel: int = 1) -> Optional[WaveformSpec]:
    """ Look up the capability spec for a waveform. None if the waveform isn't in the channel's table """
    for waveform_spec in get_channel_spec(channel).waveforms:
        if waveform_spec.waveform == waveform:
            return waveform_spec
    return None


def list_waveforms(channel: int) -> List[str]:
    return [
        waveform_spec.waveform.display_name
        for waveform_spec in get_channel_spec(channel).waveforms
    ]


def waveform_from_string(name: str) -> WaveformKind:
    """ Inverse of WaveformKind.display_name, ignoring case, spaces, dashes and underscores """

    def _normalize(s):
        return "".join(c for c in s.lower() if c not in " -_")

    for waveform in WaveformKind:
        if _normalize(waveform.display_name) == _normalize(name):
            return waveform

    raise ValueError(
        f"Unknown waveform '{name}'. Valid: {[str(waveform) for waveform in WaveformKind]}"
    )


def get_frequency_range(
    waveform: WaveformKind, max_frequency: float, channel: int = 1
) -> Tuple[float, float, float]:
    """ Frequency bounds for a waveform on this particular device

    Args:
        waveform: the waveform in question
        max_frequency: device maximum frequency in Hz (depends on the model)
        channel: channel whose table to use

    Returns:
        (minimum, maximum, step) in Hz. Waveforms without a table entry get [0, max_frequency].
    """
    waveform_spec = get_waveform_spec(waveform, channel)
    if waveform_spec is None:
        return 0.0, max_frequency, 1.0e-6

    return (
        max(waveform_spec.freq_min, 0.0),
        min(waveform_spec.freq_max, max_frequency),
        waveform_spec.freq_step,
    )
