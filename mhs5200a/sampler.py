""" Polls the generator's frequency counter during an acquisition

Each tick walks the counter through frequency, period, duty cycle and pulse width, and pushes one
Sample per function to a sink. The acquisition controller drives the ticks and watches `completed`
to find out when the configured sample or time limit has been reached.
"""
import logging
import threading
import time
from collections import namedtuple
from typing import Callable, List

from mhs5200a.drivers.mhs5200a import POLLING_ORDER, CounterFunction, FunctionGenerator

logger = logging.getLogger(__name__)

Sample = namedtuple("Sample", ["quantity", "value", "unit"])

# Either limit may be None, meaning "no limit". limit_samples counts ticks, not individual samples
AcquisitionLimits = namedtuple("AcquisitionLimits", ["limit_samples", "limit_msec"])

NO_LIMITS = AcquisitionLimits(limit_samples=None, limit_msec=None)


class CounterSampler:
    def __init__(
        self,
        generator: FunctionGenerator,
        sink: Callable[[Sample], None],
        limits: AcquisitionLimits = NO_LIMITS,
    ):
        self.generator = generator
        self.sink = sink
        self.limits = limits
        self.completed = threading.Event()
        self.tick_count = 0
        self.running = False
        self._start_time = None

    def start(self) -> None:
        """ Enable the counter with frequency measurement as a baseline and reset the limits """
        self.generator.set_counter_enabled(True)
        self.generator.set_counter_function(CounterFunction.frequency)

        self.tick_count = 0
        self.completed.clear()
        self._start_time = time.monotonic()
        self.running = True
        logger.info(f"Counter acquisition started with limits {self.limits}")

    def stop(self) -> None:
        """ Disable the counter. Safe to call even if start() failed part way """
        self.running = False
        self.generator.set_counter_enabled(False)
        logger.info(f"Counter acquisition stopped after {self.tick_count} ticks")

    def _read_all_functions(self) -> List[Sample]:
        return [
            Sample(
                quantity=function.quantity,
                value=self.generator.measure(function),
                unit=function.unit,
            )
            for function in POLLING_ORDER
        ]

    def _limit_reached(self) -> bool:
        limit_samples, limit_msec = self.limits

        if limit_samples is not None and self.tick_count >= limit_samples:
            return True

        elapsed_msec = (time.monotonic() - self._start_time) * 1000
        return limit_msec is not None and elapsed_msec >= limit_msec

    def poll(self) -> List[Sample]:
        """ Run one polling tick

        All four functions are read before anything is sent to the sink, so a failure part way
        through emits nothing.

        Returns:
            the samples sent to the sink

        Raises:
            RuntimeError if the sampler isn't running
            TransportError or ProtocolError if any counter transaction fails
        """
        if not self.running:
            raise RuntimeError("poll() called on a sampler that isn't running")

        samples = self._read_all_functions()
        for sample in samples:
            self.sink(sample)

        self.tick_count += 1
        if self._limit_reached():
            logger.info(f"Acquisition limit reached after {self.tick_count} ticks")
            self.completed.set()

        return samples
