import logging
import sys
import time
from datetime import datetime, timedelta
from functools import partial

from .configure import AcquisitionConfiguration, get_acquisition_configuration
from .data_logging import log_channel_status_to_csv, log_sample_to_csv
from .drivers.mhs5200a import FunctionGenerator
from .retry import retry_on_exception
from .sampler import AcquisitionLimits, CounterSampler

open_generator_with_retry = retry_on_exception()(FunctionGenerator.open)


def _apply_channel_settings(
    generator: FunctionGenerator, configuration: AcquisitionConfiguration
) -> None:
    """ Write whichever channel settings were configured. Order matters:
     * waveform before frequency, since the waveform bounds the frequency
     * amplitude before offset, since offset is relative to amplitude
    """
    channel = configuration.channel

    if configuration.waveform is not None:
        logging.info(f"Setting channel {channel} waveform: {configuration.waveform!s}")
        generator.set_waveform(channel, configuration.waveform)

    if configuration.frequency is not None:
        logging.info(f"Setting channel {channel} frequency: {configuration.frequency} Hz")
        generator.set_frequency(channel, configuration.frequency)

    if configuration.amplitude is not None:
        logging.info(f"Setting channel {channel} amplitude: {configuration.amplitude} V")
        generator.set_amplitude(channel, configuration.amplitude)

    if configuration.offset is not None:
        logging.info(f"Setting channel {channel} offset: {configuration.offset} V")
        generator.set_offset(channel, configuration.offset)

    if configuration.phase is not None:
        logging.info(f"Setting channel {channel} phase: {configuration.phase} degrees")
        generator.set_phase(channel, configuration.phase)

    if configuration.duty_cycle is not None:
        logging.info(f"Setting channel {channel} duty cycle: {configuration.duty_cycle}%")
        generator.set_duty_cycle(channel, configuration.duty_cycle)

    if configuration.enable_output is not None:
        logging.info(f"Turning output {'on' if configuration.enable_output else 'off'}")
        generator.set_output_enabled(configuration.enable_output)


def _poll_until_complete(sampler: CounterSampler, poll_interval: float) -> None:
    next_poll_time = datetime.now()

    while not sampler.completed.is_set():
        # Wait before the next poll
        if datetime.now() < next_poll_time:
            time.sleep(0.01)  # No need to totally peg the CPU
            continue

        next_poll_time = next_poll_time + timedelta(seconds=poll_interval)

        sampler.poll()


def _shut_down(generator: FunctionGenerator, sampler: CounterSampler) -> None:
    """ Turn off the counter (if we got as far as creating a sampler) and close the port """
    try:
        if sampler is not None:
            logging.info("Stopping frequency counter...")
            sampler.stop()
    finally:
        # Ensure the port gets closed even if the counter didn't answer
        generator.close()
        logging.info("Serial port closed.")


def run(cli_args=None):
    logging_format = "%(asctime)s [%(levelname)s]--- %(message)s"
    logging.basicConfig(
        level=logging.INFO, format=logging_format, handlers=[logging.StreamHandler()]
    )

    start_date = datetime.now()

    if cli_args is None:
        # First argument is the name of the command itself, not an "argument" we want to parse
        cli_args = sys.argv[1:]
    configuration = get_acquisition_configuration(cli_args, start_date)

    if configuration.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    logging.info(f"Logging counter samples to {configuration.output_csv_filepath}")

    generator = open_generator_with_retry(configuration.port, configuration.baud_rate)
    sampler = None

    try:
        _apply_channel_settings(generator, configuration)

        status = generator.get_channel_status(configuration.channel)
        logging.info(f"Channel {configuration.channel} status: {status.to_dict()}")
        log_channel_status_to_csv(
            configuration.status_csv_filepath, configuration.channel, status
        )

        if configuration.gate_time is not None:
            generator.set_counter_gate_time(configuration.gate_time)

        sampler = CounterSampler(
            generator,
            sink=partial(log_sample_to_csv, configuration.output_csv_filepath),
            limits=AcquisitionLimits(
                limit_samples=configuration.limit_samples,
                limit_msec=configuration.limit_msec,
            ),
        )
        sampler.start()

        _poll_until_complete(sampler, configuration.poll_interval)

    # Log interrupts and counter failures, then re-raise so that we still get the stack traces.
    # A failed poll ends the acquisition.
    except KeyboardInterrupt as e:
        logging.warning("Keyboard interrupt! Shutting down... (please wait)")
        raise e

    except Exception as e:
        logging.warning(f"Acquisition ended with error! {e} Shutting down... (please wait)")
        raise e

    else:
        logging.info("Acquisition ended successfully!")

    finally:
        _shut_down(generator, sampler)
