import argparse
from collections import namedtuple
from datetime import datetime
from typing import Dict, List

from .drivers.mhs5200a import GateTime, waveform_from_string
from .drivers.mhs5200a.constants import CHANNELS, DEFAULT_BAUD_RATE

DEFAULT_SERIAL_PORT = "/dev/ttyUSB0"
DEFAULT_POLL_INTERVAL = 1

AcquisitionConfiguration = namedtuple(
    "AcquisitionConfiguration",
    [
        "port",
        "baud_rate",
        "channel",
        # Channel settings: None means "leave it as it is"
        "waveform",
        "frequency",
        "amplitude",
        "offset",
        "phase",
        "duty_cycle",
        "enable_output",
        "gate_time",
        "limit_samples",
        "limit_msec",
        "poll_interval",
        "output_csv_filepath",
        "status_csv_filepath",
        "verbose",
    ],
)

_GATE_TIMES = {
    "0.01": GateTime.ten_milliseconds,
    "0.1": GateTime.hundred_milliseconds,
    "1": GateTime.one_second,
    "10": GateTime.ten_seconds,
}


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return parsed


def _waveform(value: str):
    try:
        return waveform_from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _on_off(value: str) -> bool:
    if value.lower() not in ("on", "off"):
        raise argparse.ArgumentTypeError(f"{value} is not 'on' or 'off'")
    return value.lower() == "on"


def _parse_args(args: List[str]) -> Dict:
    arg_parser = argparse.ArgumentParser(
        description=(
            "Configure an MHS-5200A function generator and log its frequency counter to csv"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )

    arg_parser.add_argument(
        "-p",
        "--port",
        default=DEFAULT_SERIAL_PORT,
        help=f"serial port the generator is attached to. Default: {DEFAULT_SERIAL_PORT}",
    )

    arg_parser.add_argument(
        "--baud-rate",
        type=int,
        default=DEFAULT_BAUD_RATE,
        help=f"serial baud rate. Default: {DEFAULT_BAUD_RATE}",
    )

    arg_parser.add_argument(
        "-c",
        "--channel",
        type=int,
        choices=CHANNELS,
        default=1,
        help="channel that the settings below apply to. Default: 1",
    )

    arg_parser.add_argument(
        "-w",
        "--waveform",
        type=_waveform,
        help="waveform, e.g. sine, square, triangle, rising-sawtooth, falling-sawtooth",
    )

    arg_parser.add_argument("-f", "--frequency", type=float, help="frequency in Hz")

    arg_parser.add_argument(
        "-a", "--amplitude", type=float, help="amplitude in volts (0 to 20)"
    )

    arg_parser.add_argument(
        "--offset",
        type=float,
        help="DC offset in volts (within +/-120%% of the amplitude)",
    )

    arg_parser.add_argument(
        "--phase", type=float, help="phase in degrees. Wraps around past 360"
    )

    arg_parser.add_argument(
        "--duty-cycle", type=float, help="duty cycle in percent (square wave only)"
    )

    arg_parser.add_argument(
        "--output",
        dest="enable_output",
        type=_on_off,
        help="turn the generator output 'on' or 'off'",
    )

    arg_parser.add_argument(
        "--gate-time",
        choices=_GATE_TIMES,
        help="frequency counter gate time in seconds",
    )

    arg_parser.add_argument(
        "--limit-samples",
        type=_positive_int,
        help="stop after this many counter polls. Default: run until interrupted",
    )

    arg_parser.add_argument(
        "--limit-msec",
        type=_positive_int,
        help="stop after this many milliseconds. Default: run until interrupted",
    )

    arg_parser.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        help=f"time in seconds to wait between counter polls. Default: {DEFAULT_POLL_INTERVAL}",
    )

    arg_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="log serial traffic",
    )

    acquisition_arg_namespace = arg_parser.parse_args(args)

    if acquisition_arg_namespace.poll_interval <= 0:
        arg_parser.error("--poll-interval must be positive")

    return vars(acquisition_arg_namespace)


def iso_datetime_for_filename(datetime_):
    """ Returns datetime as a ISO-ish format string that can be used in filenames (which can't inclue ":")
        datetime(2018, 1, 1, 12, 1, 1) --> '2018-01-01--12-01-01'
    """
    return datetime_.strftime("%Y-%m-%d--%H-%M-%S")


def get_acquisition_configuration(
    cli_args: List[str], start_date: datetime
) -> AcquisitionConfiguration:
    args = _parse_args(cli_args)

    gate_time = args["gate_time"]
    timestamp = iso_datetime_for_filename(start_date)

    return AcquisitionConfiguration(
        port=args["port"],
        baud_rate=args["baud_rate"],
        channel=args["channel"],
        waveform=args["waveform"],
        frequency=args["frequency"],
        amplitude=args["amplitude"],
        offset=args["offset"],
        phase=args["phase"],
        duty_cycle=args["duty_cycle"],
        enable_output=args["enable_output"],
        gate_time=_GATE_TIMES[gate_time] if gate_time is not None else None,
        limit_samples=args["limit_samples"],
        limit_msec=args["limit_msec"],
        poll_interval=args["poll_interval"],
        output_csv_filepath=f"{timestamp}_counter.csv",
        status_csv_filepath=f"{timestamp}_channel_status.csv",
        verbose=args["verbose"],
    )
