import pytest

from . import waveforms as module


class TestWaveformKind:
    @pytest.mark.parametrize(
        "waveform_id, expected",
        [
            (0, module.WaveformKind.sine),
            (4, module.WaveformKind.falling_sawtooth),
            (100, module.WaveformKind.arbitrary_0),
            (5, module.WaveformKind.unknown),
            (1000, module.WaveformKind.unknown),
        ],
    )
    def test_from_wire(self, waveform_id, expected):
        assert module.WaveformKind.from_wire(waveform_id) == expected

    def test_str_representation(self):
        assert str(module.WaveformKind.rising_sawtooth) == "Rising Sawtooth"


class TestWaveformFromString:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Sine", module.WaveformKind.sine),
            ("square", module.WaveformKind.square),
            ("falling-sawtooth", module.WaveformKind.falling_sawtooth),
            ("RISING_SAWTOOTH", module.WaveformKind.rising_sawtooth),
            ("arbitrary 0", module.WaveformKind.arbitrary_0),
        ],
    )
    def test_parses_names(self, name, expected):
        assert module.waveform_from_string(name) == expected

    def test_raises_on_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown waveform 'cardiac'"):
            module.waveform_from_string("cardiac")


class TestCapabilityTable:
    def test_both_channels_list_the_same_waveforms(self):
        expected = [
            "Sine",
            "Square",
            "Triangle",
            "Rising Sawtooth",
            "Falling Sawtooth",
        ]
        assert module.list_waveforms(1) == expected
        assert module.list_waveforms(2) == expected

    def test_only_square_supports_duty_cycle(self):
        duty_cycle_waveforms = [
            spec.waveform
            for spec in module.get_channel_spec(1).waveforms
            if module.WaveformOption.duty_cycle in spec.options
        ]
        assert duty_cycle_waveforms == [module.WaveformKind.square]

    def test_waveform_without_entry_has_no_spec(self):
        assert module.get_waveform_spec(module.WaveformKind.arbitrary_0) is None

    def test_invalid_channel_raises(self):
        with pytest.raises(ValueError):
            module.get_channel_spec(3)


class TestGetFrequencyRange:
    @pytest.mark.parametrize(
        "waveform, max_frequency, expected",
        [
            (module.WaveformKind.sine, 25e6, (1e-6, 25e6, 1e-6)),
            (module.WaveformKind.sine, 6e6, (1e-6, 6e6, 1e-6)),
            (module.WaveformKind.square, 25e6, (1e-6, 10e6, 1e-6)),
            (module.WaveformKind.unknown, 25e6, (0.0, 25e6, 1e-6)),
        ],
    )
    def test_range_is_clamped_to_device(self, waveform, max_frequency, expected):
        assert module.get_frequency_range(waveform, max_frequency) == expected
