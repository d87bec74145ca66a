import datetime as dt
from dataclasses import dataclass, field
from typing import Tuple

from comtrade_tools.core.channels import AnalogChannelTable, DigitalChannelTable, SampleRate
from comtrade_tools.core.constants import (
    REV_1991, TYPE_DAT, TIME_BASE_MICROSEC, TIME_BASE_NANOSEC
)
from comtrade_tools.core.dat_reader import record_size
from comtrade_tools.core.time_code import time_code_to_ns


@dataclass(frozen=True)
class Configuration:
    """
    Разобранное содержимое файла CFG.

    Создается один раз декодером (decode_cfg) и далее не изменяется, поэтому
    один экземпляр можно безопасно передавать в несколько потоков извлечения.
    """
    station_name: str = ""
    rec_dev_id: str = ""
    rev_year: int = REV_1991
    channels_count: int = 0
    analog: AnalogChannelTable = field(default_factory=AnalogChannelTable)
    status: DigitalChannelTable = field(default_factory=DigitalChannelTable)
    frequency: int = 0
    nrates: int = 1
    sample_rates: Tuple[SampleRate, ...] = ()
    start_timestamp: dt.datetime = dt.datetime(1900, 1, 1)
    trigger_timestamp: dt.datetime = dt.datetime(1900, 1, 1)
    ft: str = TYPE_DAT.ASCII.value
    time_multiplier: float = 1.0
    # информация ревизии 2013 года; пустые строки - строка отсутствует в CFG
    time_code: str = ""
    local_code: str = ""
    tmq_code: str = ""
    leap_second: str = ""
    nanosecond_timestamps: bool = False

    @property
    def analog_count(self) -> int:
        """Возвращает количество аналоговых каналов."""
        return self.analog.count

    @property
    def status_count(self) -> int:
        """Возвращает количество дискретных каналов."""
        return self.status.count

    @property
    def analog_channel_names(self) -> Tuple[str, ...]:
        return self.analog.names

    @property
    def status_channel_names(self) -> Tuple[str, ...]:
        return self.status.names

    @property
    def sampling_rate(self) -> float:
        """Частота дискретизации (учитывается только первая частота)."""
        if not self.sample_rates:
            return 0.0
        return self.sample_rates[0].rate

    @property
    def sampling_number(self) -> int:
        """Количество выборок (учитывается только первая частота)."""
        if not self.sample_rates:
            return 0
        return self.sample_rates[0].samples

    @property
    def record_size(self) -> int:
        """Размер одной записи двоичного DAT в байтах."""
        return record_size(self.analog_count, self.status_count)

    @property
    def time_base(self) -> float:
        if self.nanosecond_timestamps:
            return TIME_BASE_NANOSEC
        return TIME_BASE_MICROSEC

    @property
    def time_code_offset(self) -> int:
        """Смещение местного времени относительно UTC в наносекундах."""
        return time_code_to_ns(self.time_code)

    @property
    def trigger_time(self) -> float:
        """Возвращает относительное время срабатывания в секундах."""
        return (self.trigger_timestamp - self.start_timestamp).total_seconds()

    def cfg_summary(self) -> str:
        """Возвращает строку с краткой информацией об атрибутах CFG."""
        lines = ["{}, {} (ревизия {})".format(self.station_name, self.rec_dev_id, self.rev_year),
                 "Каналы (всего,А,Д): {}A + {}D = {}".format(
                     self.analog_count, self.status_count, self.channels_count),
                 "Частота сети: {} Гц".format(self.frequency)]
        for rate, points in self.sample_rates:
            lines.append("Частота дискретизации {} Гц до выборки #{}".format(rate, points))
        lines.append("От {} до {} с множителем времени = {}".format(
            self.start_timestamp, self.trigger_timestamp, self.time_multiplier))
        lines.append("{} формат".format(self.ft))
        return "\n".join(lines)

    def to_cfg_string(self) -> str:
        """Сериализует конфигурацию обратно в текст CFG."""
        lines = [f"{self.station_name},{self.rec_dev_id},{self.rev_year}",
                 f"{self.channels_count},{self.analog_count}A,{self.status_count}D"]
        for i in range(self.analog_count):
            lines.append(str(self.analog.channel(i)))
        for i in range(self.status_count):
            lines.append(str(self.status.channel(i)))

        lines.append(f"{self.frequency}")
        lines.append(f"{self.nrates}")
        for rate, samples in self.sample_rates:
            lines.append(f"{rate},{samples}")

        lines.append(self.start_timestamp.strftime('%d/%m/%Y,%H:%M:%S.%f'))
        lines.append(self.trigger_timestamp.strftime('%d/%m/%Y,%H:%M:%S.%f'))
        lines.append(f"{self.ft}")
        lines.append(f"{self.time_multiplier}")
        if self.time_code or self.local_code:
            lines.append(f"{self.time_code},{self.local_code}")
            if self.tmq_code or self.leap_second:
                lines.append(f"{self.tmq_code},{self.leap_second}")
        return "\n".join(lines) + "\n"
