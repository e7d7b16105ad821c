import logging
import traceback

import backoff

from mhs5200a.drivers.mhs5200a import ProtocolError, TransportError

logger = logging.getLogger(__name__)

# What a single failed transaction can raise. A retry is only worthwhile for these:
# validation errors and unsupported devices won't go away by asking again.
TRANSACTION_FAILURES = (TransportError, ProtocolError)


def _retry_handler(details):
    logger.info(
        f"Retrying after error. Call details: {details}. Traceback: {traceback.format_exc()}"
    )


def retry_on_exception(expected_exception=TRANSACTION_FAILURES, **backoff_kwargs):
    """ When used as a decorator, when the wrapped function raises expected_exception, we'll retry
    Transactions themselves never retry, so this is how callers opt in to resilience. We retry up to 5
    times at a short, jittered interval: long enough for stray bytes from an aborted exchange to drain
    from the link, short enough not to stall a polling loop. Tracebacks of each failure are logged.

    After 5 tries, the 5th error will be raised.

    Example usage:
    >>> @retry_on_exception()
    >>> def read_that_might_time_out(generator): ...

    Args:
        expected_exception: exception or tuple of exceptions to handle via retry.
            Defaults to TRANSACTION_FAILURES
        **backoff_kwargs: Additional keyword arguments will be passed to `backoff.on_exception`.

    Returns:
        decorator which can be used to wrap a function
    """
    return backoff.on_exception(
        backoff.constant,
        expected_exception,
        **{
            "jitter": backoff.full_jitter,
            "interval": 0.1,
            "max_tries": 5,
            "on_backoff": _retry_handler,
            **backoff_kwargs,
        },
    )
