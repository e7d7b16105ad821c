from unittest.mock import sentinel

import pytest

import mhs5200a.retry as module
from mhs5200a.drivers.mhs5200a import TransportError, UnexpectedReply, ValidationError


class CustomException(Exception):
    pass


class TestRetryOnException:
    def test_passes_through_return_value_if_it_works_the_first_time(self):
        def reliable_function(to_return):
            return to_return

        wrapped_fn = module.retry_on_exception(CustomException)(reliable_function)
        assert wrapped_fn(sentinel.happiness) == sentinel.happiness

    def test_can_retry_5_times_then_pass(self):
        tries = 0

        def unreliable_function(pass_through):
            """ Raise an exception the first 4 times this is called and then pass """
            nonlocal tries
            tries += 1
            if tries < 5:
                raise CustomException
            else:
                return pass_through

        decorator = module.retry_on_exception(CustomException, interval=0.01)
        wrapped_fn = decorator(unreliable_function)
        assert wrapped_fn(sentinel.happiness) == sentinel.happiness
        assert tries == 5

    def test_passes_through_exception_on_repeated_failure(self):
        def always_broken():
            raise CustomException

        decorator = module.retry_on_exception(CustomException, interval=0.01)
        wrapped_fn = decorator(always_broken)

        with pytest.raises(CustomException):
            wrapped_fn()

    @pytest.mark.parametrize(
        "exception", [TransportError("timeout"), UnexpectedReply(":r1f")]
    )
    def test_retries_transaction_failures_by_default(self, exception):
        side_effects = [exception, sentinel.happiness]

        def flaky_read():
            side_effect = side_effects.pop(0)
            if isinstance(side_effect, Exception):
                raise side_effect
            return side_effect

        wrapped_fn = module.retry_on_exception(interval=0.01)(flaky_read)
        assert wrapped_fn() == sentinel.happiness

    def test_does_not_retry_validation_errors(self):
        tries = 0

        def out_of_range():
            nonlocal tries
            tries += 1
            raise ValidationError("amplitude > 20 V")

        wrapped_fn = module.retry_on_exception(interval=0.01)(out_of_range)

        with pytest.raises(ValidationError):
            wrapped_fn()
        assert tries == 1
