from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from comtrade_tools.core.constants import STATUS_UNKNOWN


class SampleRate(NamedTuple):
    """Частота дискретизации и номер последней выборки на этой частоте."""
    rate: float
    samples: int


@dataclass(frozen=True)
class AnalogChannel:
    """Описание одного аналогового канала (строка CFG)."""
    index: int
    name: str = ''
    phase: str = ''
    circuit: str = ''
    unit: str = ''
    multiplier: float = 1.0
    offset: float = 0.0
    skew: float = 0.0
    min_value: int = -32767
    max_value: int = 32767
    primary: Optional[float] = None
    secondary: Optional[float] = None
    # True - вторичные величины, False - первичные, None - столбец отсутствует
    ps: Optional[bool] = None

    def __str__(self):
        fields = [str(self.index), self.name, self.phase, self.circuit, self.unit,
                  repr(self.multiplier), repr(self.offset), repr(self.skew),
                  str(self.min_value), str(self.max_value)]
        if self.primary is not None or self.secondary is not None or self.ps is not None:
            fields += [_optional_str(self.primary), _optional_str(self.secondary)]
            if self.ps is not None:
                fields.append('S' if self.ps else 'P')
        return ','.join(fields)


@dataclass(frozen=True)
class StatusChannel:
    """Описание одного дискретного канала (строка CFG)."""
    index: int
    name: str = ''
    phase: str = ''
    circuit: str = ''
    y: int = STATUS_UNKNOWN

    def __str__(self):
        return ','.join([str(self.index), self.name, self.phase, self.circuit, str(self.y)])


def _optional_str(value) -> str:
    return '' if value is None else repr(value)


@dataclass(frozen=True)
class AnalogChannelTable:
    """
    Таблица аналоговых каналов: параллельные кортежи, по одному элементу на канал.

    primary, secondary и ps_flags имеют ту же длину, что и остальные кортежи;
    None в них означает, что столбец в CFG отсутствует (а не нулевое значение).
    """
    numbers: Tuple[int, ...] = ()
    names: Tuple[str, ...] = ()
    phases: Tuple[str, ...] = ()
    elements: Tuple[str, ...] = ()
    units: Tuple[str, ...] = ()
    factor_a: Tuple[float, ...] = ()
    factor_b: Tuple[float, ...] = ()
    skews: Tuple[float, ...] = ()
    min_values: Tuple[int, ...] = ()
    max_values: Tuple[int, ...] = ()
    primary: Tuple[Optional[float], ...] = ()
    secondary: Tuple[Optional[float], ...] = ()
    ps_flags: Tuple[Optional[bool], ...] = ()

    @property
    def count(self) -> int:
        """Возвращает количество аналоговых каналов."""
        return len(self.numbers)

    def is_secondary(self, i: int) -> bool:
        """Отсутствующий флаг P/S трактуется как первичные величины."""
        if i < len(self.ps_flags):
            return bool(self.ps_flags[i])
        return False

    def channel(self, i: int) -> AnalogChannel:
        """Возвращает описание канала с индексом i (с нуля)."""
        return AnalogChannel(
            index=self.numbers[i], name=self.names[i], phase=self.phases[i],
            circuit=self.elements[i], unit=self.units[i],
            multiplier=self.factor_a[i], offset=self.factor_b[i], skew=self.skews[i],
            min_value=self.min_values[i], max_value=self.max_values[i],
            primary=_slot(self.primary, i), secondary=_slot(self.secondary, i),
            ps=_slot(self.ps_flags, i))

    @classmethod
    def from_channels(cls, channels) -> 'AnalogChannelTable':
        channels = list(channels)
        return cls(
            numbers=tuple(ch.index for ch in channels),
            names=tuple(ch.name for ch in channels),
            phases=tuple(ch.phase for ch in channels),
            elements=tuple(ch.circuit for ch in channels),
            units=tuple(ch.unit for ch in channels),
            factor_a=tuple(ch.multiplier for ch in channels),
            factor_b=tuple(ch.offset for ch in channels),
            skews=tuple(ch.skew for ch in channels),
            min_values=tuple(ch.min_value for ch in channels),
            max_values=tuple(ch.max_value for ch in channels),
            primary=tuple(ch.primary for ch in channels),
            secondary=tuple(ch.secondary for ch in channels),
            ps_flags=tuple(ch.ps for ch in channels))


@dataclass(frozen=True)
class DigitalChannelTable:
    """Таблица дискретных каналов (параллельные кортежи)."""
    numbers: Tuple[int, ...] = ()
    names: Tuple[str, ...] = ()
    phases: Tuple[str, ...] = ()
    elements: Tuple[str, ...] = ()
    initial_states: Tuple[int, ...] = ()

    @property
    def count(self) -> int:
        """Возвращает количество дискретных каналов."""
        return len(self.numbers)

    def channel(self, i: int) -> StatusChannel:
        """Возвращает описание канала с индексом i (с нуля)."""
        return StatusChannel(index=self.numbers[i], name=self.names[i],
                             phase=self.phases[i], circuit=self.elements[i],
                             y=self.initial_states[i])

    @classmethod
    def from_channels(cls, channels) -> 'DigitalChannelTable':
        channels = list(channels)
        return cls(
            numbers=tuple(ch.index for ch in channels),
            names=tuple(ch.name for ch in channels),
            phases=tuple(ch.phase for ch in channels),
            elements=tuple(ch.circuit for ch in channels),
            initial_states=tuple(ch.y for ch in channels))


def _slot(values, i):
    return values[i] if i < len(values) else None
