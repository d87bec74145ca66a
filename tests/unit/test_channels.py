"""
Unit-тесты для comtrade_tools.core.channels и Configuration.

Это чистые unit-тесты без файловых зависимостей.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, os.pardir)))

from comtrade_tools.core.cfg import Configuration
from comtrade_tools.core.cfg_decoder import decode_cfg
from comtrade_tools.core.channels import (
    AnalogChannel,
    AnalogChannelTable,
    DigitalChannelTable,
    SampleRate,
    StatusChannel,
)
from tests.test_data.fixtures import create_cfg_text


class TestChannelTables:
    """Тесты таблиц каналов."""

    def test_from_channels_builds_parallel_tuples(self):
        table = AnalogChannelTable.from_channels([
            AnalogChannel(index=1, name="IA", multiplier=2.0, primary=100.0, ps=True),
            AnalogChannel(index=2, name="IB"),
        ])
        assert table.count == 2
        assert table.names == ("IA", "IB")
        assert table.factor_a == (2.0, 1.0)
        assert table.primary == (100.0, None)
        assert table.is_secondary(0)
        assert not table.is_secondary(1)

    def test_is_secondary_out_of_range(self):
        assert not AnalogChannelTable().is_secondary(0)

    def test_channel_returns_row(self):
        table = DigitalChannelTable.from_channels([StatusChannel(index=7, name="Trip", y=1)])
        assert table.channel(0) == StatusChannel(index=7, name="Trip", y=1)

    def test_empty_tables(self):
        assert AnalogChannelTable().count == 0
        assert DigitalChannelTable().count == 0

    def test_channel_str(self):
        channel = AnalogChannel(index=1, name="IA", phase="A", unit="A",
                                multiplier=2.0, offset=1.0, min_value=-10, max_value=10)
        assert str(channel) == "1,IA,A,,A,2.0,1.0,0.0,-10,10"
        assert str(StatusChannel(index=2, name="Trip")) == "2,Trip,,,2"

    def test_channel_str_without_ps_flag(self):
        """Без признака P/S строка заканчивается коэффициентами трансформации."""
        channel = AnalogChannel(index=1, name="IA", primary=1000.0, secondary=1.0)
        assert str(channel).endswith(",1000.0,1.0")

    @pytest.mark.parametrize("ps", [None, True, False])
    def test_channel_str_decodes_back(self, ps):
        channel = AnalogChannel(index=1, name="IA", phase="A", unit="A", multiplier=2.0,
                                primary=1000.0, secondary=1.0, ps=ps)
        cfg = decode_cfg(create_cfg_text(analog_rows=[str(channel)], status_rows=[]))
        assert cfg.analog.channel(0) == channel


class TestConfigurationAccessors:
    """Методы доступа возвращают нулевые значения при отсутствии данных."""

    def test_empty_configuration(self):
        cfg = Configuration()
        assert cfg.analog_count == 0
        assert cfg.status_count == 0
        assert cfg.sampling_rate == 0.0
        assert cfg.sampling_number == 0
        assert cfg.analog_channel_names == ()
        assert cfg.time_code_offset == 0
        assert cfg.record_size == 8

    def test_sampling_uses_first_rate(self):
        cfg = Configuration(sample_rates=(SampleRate(4000.0, 10), SampleRate(1000.0, 20)))
        assert cfg.sampling_rate == 4000.0
        assert cfg.sampling_number == 10

    def test_cfg_summary(self, cfg_text):
        summary = decode_cfg(cfg_text).cfg_summary()
        assert "2A + 2D = 4" in summary
        assert "Частота сети: 50 Гц" in summary
        assert "BINARY формат" in summary

    def test_to_cfg_string_decodes_back(self, cfg_text):
        cfg = decode_cfg(cfg_text)
        assert decode_cfg(cfg.to_cfg_string()) == cfg

    @pytest.mark.parametrize("time_code, expected", [("+1h", 3600 * 10**9), ("", 0)])
    def test_time_code_offset(self, time_code, expected):
        assert Configuration(time_code=time_code).time_code_offset == expected
