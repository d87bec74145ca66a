"""
Извлечение значений из двоичного файла DAT (16-битный формат BINARY).

Запись DAT имеет фиксированный размер:
    int32 номер выборки, int32 временная метка,
    int16 на каждый аналоговый канал,
    uint16 на каждые 16 дискретных каналов (упакованы побитно),
все значения в порядке little-endian.
"""
import logging
import math
import struct
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from comtrade_tools.core.constants import (
    ANALOG_BYTES, SAMPLE_NUMBER_BYTES, STATUS_BITS_PER_WORD, STATUS_BYTES, TIME_BYTES, TYPE_DAT
)
from comtrade_tools.core.exceptions import (
    EmptyDataBufferError, InvalidChannelError, MissingConfigurationError,
    MissingSampleRateError, TruncatedSampleDataError
)

if TYPE_CHECKING:
    from comtrade_tools.core.cfg import Configuration

logger = logging.getLogger(__name__)

# номер выборки и временная метка перед значениями каналов
HEADER_FIELDS = 2


def status_words(status_count: int) -> int:
    """Количество 16-битных слов, занимаемых дискретными каналами."""
    return math.ceil(status_count / STATUS_BITS_PER_WORD)


def record_size(analog_count: int, status_count: int) -> int:
    """Размер записи: 8 + 2*A + 2*ceil(D/16) байт."""
    return (SAMPLE_NUMBER_BYTES + TIME_BYTES + ANALOG_BYTES * analog_count
            + STATUS_BYTES * status_words(status_count))


def get_reader_format(analog_count: int, status_count: int) -> str:
    return "<ii{acount:d}h{dcount:d}H".format(acount=analog_count,
                                              dcount=status_words(status_count))


def _check_common(cfg: Optional['Configuration'], data) -> None:
    if cfg is None:
        raise MissingConfigurationError("Конфигурация не прочитана, сначала прочитайте CFG")
    if data is None or len(data) == 0:
        raise EmptyDataBufferError("Нет данных DAT, сначала прочитайте DAT")


def _check_channel(channel_number: int, count: int, kind: str) -> None:
    if channel_number < 1 or channel_number > count:
        raise InvalidChannelError(
            f"Номер {kind} канала {channel_number} вне диапазона [1, {count}]")


def _check_samples(cfg: 'Configuration', data) -> int:
    """Проверяет таблицу частот и длину буфера, возвращает количество выборок."""
    if not cfg.sample_rates:
        raise MissingSampleRateError("В конфигурации не указана частота дискретизации")
    samples = cfg.sample_rates[0].samples
    if samples < 0:
        raise MissingSampleRateError(f"Отрицательное количество выборок: {samples}")
    required = samples * cfg.record_size
    if len(data) < required:
        raise TruncatedSampleDataError(
            f"Буфер DAT содержит {len(data)} байт, требуется {required} "
            f"({samples} выборок по {cfg.record_size} байт)")
    if TYPE_DAT.from_tag(cfg.ft) is not TYPE_DAT.BINARY:
        logger.warning("Тип файла данных '%s', значения читаются как 16-битный BINARY", cfg.ft)
    return samples


def _iter_records(cfg: 'Configuration', data, samples: int):
    """Итератор по распакованным записям (номер, метка, аналоговые..., слова дискрет...)."""
    row_reader = struct.Struct(get_reader_format(cfg.analog_count, cfg.status_count))
    return row_reader.iter_unpack(memoryview(data)[:samples * row_reader.size])


def extract_analog_channel(cfg: Optional['Configuration'], data,
                           channel_number: int) -> np.ndarray:
    """
    Возвращает откалиброванные значения аналогового канала: raw * a + b.

    Args:
        cfg: разобранная конфигурация (None - конфигурация не прочитана).
        data: содержимое двоичного DAT (bytes, bytearray, memoryview).
        channel_number: номер канала с единицы, как в CFG.

    Returns:
        np.ndarray float64 длиной в количество выборок первой частоты дискретизации.
    """
    _check_common(cfg, data)
    _check_channel(channel_number, cfg.analog_count, "аналогового")
    samples = _check_samples(cfg, data)

    column = HEADER_FIELDS + channel_number - 1
    raw = np.fromiter((values[column] for values in _iter_records(cfg, data, samples)),
                      dtype=np.int16, count=samples)
    a = cfg.analog.factor_a[channel_number - 1]
    b = cfg.analog.factor_b[channel_number - 1]
    return raw.astype(np.float64) * a + b


def extract_all_analog(cfg: Optional['Configuration'], data) -> np.ndarray:
    """Возвращает массив (количество аналоговых каналов, количество выборок)."""
    _check_common(cfg, data)
    samples = _check_samples(cfg, data)
    analog_count = cfg.analog_count

    result = np.zeros((analog_count, samples), dtype=np.float64)
    if analog_count == 0:
        return result
    for irow, values in enumerate(_iter_records(cfg, data, samples)):
        result[:, irow] = values[HEADER_FIELDS:HEADER_FIELDS + analog_count]
    a = np.asarray(cfg.analog.factor_a, dtype=np.float64)[:, np.newaxis]
    b = np.asarray(cfg.analog.factor_b, dtype=np.float64)[:, np.newaxis]
    return result * a + b


def extract_status_channel(cfg: Optional['Configuration'], data,
                           channel_number: int) -> np.ndarray:
    """Возвращает значения (0/1) дискретного канала с номером channel_number (с единицы)."""
    _check_common(cfg, data)
    _check_channel(channel_number, cfg.status_count, "дискретного")
    samples = _check_samples(cfg, data)

    ichannel = channel_number - 1
    column = HEADER_FIELDS + cfg.analog_count + ichannel // STATUS_BITS_PER_WORD
    shift = ichannel % STATUS_BITS_PER_WORD
    return np.fromiter(((values[column] >> shift) & 1
                        for values in _iter_records(cfg, data, samples)),
                       dtype=np.int8, count=samples)


def read_sample_headers(cfg: Optional['Configuration'], data) -> Tuple[np.ndarray, np.ndarray]:
    """Возвращает номера выборок и временные метки из заголовков записей."""
    _check_common(cfg, data)
    samples = _check_samples(cfg, data)
    numbers = np.zeros(samples, dtype=np.int32)
    stamps = np.zeros(samples, dtype=np.int32)
    for irow, values in enumerate(_iter_records(cfg, data, samples)):
        numbers[irow] = values[0]
        stamps[irow] = values[1]
    return numbers, stamps


def time_axis(cfg: Optional['Configuration'], data=None,
              use_timestamps: bool = False) -> np.ndarray:
    """
    Возвращает время каждой выборки в секундах.

    По умолчанию время считается по частоте дискретизации: (n - 1) / rate.
    При use_timestamps=True используются метки из DAT,
    умноженные на временную базу и множитель времени из CFG.
    """
    if cfg is None:
        raise MissingConfigurationError("Конфигурация не прочитана, сначала прочитайте CFG")
    if use_timestamps:
        _, stamps = read_sample_headers(cfg, data)
        return stamps.astype(np.float64) * cfg.time_base * cfg.time_multiplier

    if not cfg.sample_rates or cfg.sampling_rate == 0.0:
        raise MissingSampleRateError("Отсутствует временная метка и не указана частота дискретизации")
    if cfg.sampling_number < 0:
        raise MissingSampleRateError(f"Отрицательное количество выборок: {cfg.sampling_number}")
    return np.arange(cfg.sampling_number, dtype=np.float64) / cfg.sampling_rate
