from unittest.mock import call

import pandas as pd
import pytest

from .configure import AcquisitionConfiguration
from .drivers.mhs5200a import (
    POLLING_ORDER,
    CounterFunction,
    GateTime,
    TransportError,
    WaveformKind,
)
from . import run as module


@pytest.fixture
def mock_generator(mocker):
    generator = mocker.Mock()
    generator.get_channel_status.return_value = pd.Series(
        {"waveform": "Sine", "frequency (Hz)": 1000.0}
    )
    generator.measure.return_value = 1.5
    mocker.patch.object(module, "open_generator_with_retry", return_value=generator)
    return generator


def _configuration(tmp_path, **overrides):
    configuration = AcquisitionConfiguration(
        port="COM7",
        baud_rate=57600,
        channel=1,
        waveform=None,
        frequency=None,
        amplitude=None,
        offset=None,
        phase=None,
        duty_cycle=None,
        enable_output=None,
        gate_time=None,
        limit_samples=2,
        limit_msec=None,
        poll_interval=0.01,
        output_csv_filepath=str(tmp_path / "counter.csv"),
        status_csv_filepath=str(tmp_path / "status.csv"),
        verbose=False,
    )
    return configuration._replace(**overrides)


@pytest.fixture
def mock_configuration(mocker, tmp_path):
    return mocker.patch.object(
        module, "get_acquisition_configuration", return_value=_configuration(tmp_path)
    )


class TestApplyChannelSettings:
    def test_no_settings_writes_nothing(self, mocker, tmp_path):
        generator = mocker.Mock()

        module._apply_channel_settings(generator, _configuration(tmp_path))

        assert generator.mock_calls == []

    def test_writes_settings_in_dependency_order(self, mocker, tmp_path):
        generator = mocker.Mock()
        configuration = _configuration(
            tmp_path,
            channel=2,
            waveform=WaveformKind.square,
            frequency=1000,
            amplitude=5,
            offset=-1,
            phase=90,
            duty_cycle=25,
            enable_output=True,
        )

        module._apply_channel_settings(generator, configuration)

        assert generator.mock_calls == [
            call.set_waveform(2, WaveformKind.square),
            call.set_frequency(2, 1000),
            call.set_amplitude(2, 5),
            call.set_offset(2, -1),
            call.set_phase(2, 90),
            call.set_duty_cycle(2, 25),
            call.set_output_enabled(True),
        ]

    def test_output_disable_is_written(self, mocker, tmp_path):
        generator = mocker.Mock()

        module._apply_channel_settings(
            generator, _configuration(tmp_path, enable_output=False)
        )

        assert generator.mock_calls == [call.set_output_enabled(False)]


class TestRun:
    def test_polls_until_sample_limit_then_shuts_down(
        self, mock_generator, mock_configuration, tmp_path
    ):
        module.run([])

        counter_log = pd.read_csv(tmp_path / "counter.csv")
        # Two ticks of four counter functions each
        assert len(counter_log) == 8
        expected_quantities = [function.quantity for function in POLLING_ORDER]
        assert list(counter_log["quantity"][:4]) == expected_quantities

        mock_generator.set_counter_enabled.assert_has_calls([call(True), call(False)])
        mock_generator.close.assert_called_once()

    def test_logs_channel_status(self, mock_generator, mock_configuration, tmp_path):
        module.run([])

        status_log = pd.read_csv(tmp_path / "status.csv")
        assert status_log["waveform"][0] == "Sine"
        assert status_log["channel"][0] == 1

    def test_applies_gate_time(self, mock_generator, mocker, tmp_path):
        mocker.patch.object(
            module,
            "get_acquisition_configuration",
            return_value=_configuration(tmp_path, gate_time=GateTime.ten_seconds),
        )

        module.run([])

        mock_generator.set_counter_gate_time.assert_called_once_with(
            GateTime.ten_seconds
        )

    def test_poll_failure_is_fatal_and_still_shuts_down(
        self, mock_generator, mock_configuration
    ):
        mock_generator.measure.side_effect = TransportError("No reply")

        with pytest.raises(TransportError):
            module.run([])

        mock_generator.set_counter_enabled.assert_has_calls([call(True), call(False)])
        mock_generator.close.assert_called_once()

    def test_setting_failure_closes_port_without_touching_counter(
        self, mock_generator, mocker, tmp_path
    ):
        mocker.patch.object(
            module,
            "get_acquisition_configuration",
            return_value=_configuration(tmp_path, frequency=1000),
        )
        mock_generator.set_frequency.side_effect = ValueError("out of range")

        with pytest.raises(ValueError):
            module.run([])

        mock_generator.set_counter_enabled.assert_not_called()
        mock_generator.close.assert_called_once()

    def test_counter_starts_with_frequency_function(
        self, mock_generator, mock_configuration
    ):
        module.run([])

        assert mock_generator.set_counter_function.call_args_list[0] == call(
            CounterFunction.frequency
        )
