"""
Factory-функции для создания тестовых данных COMTRADE.

Этот модуль содержит функции для синтезирования текста CFG и двоичного
содержимого DAT без привязки к реальным файлам осциллограмм.
"""

import math
import struct
from typing import List, Sequence

import numpy as np


ANALOG_ROWS = [
    "1, IA, A, , A, 2.0, 1.0, 0.0, -32767, 32767, 1000, 1, P",
    "2, U Bus 1, B, , kV, 0.5, 0.0, 0.0, -32767, 32767",
]
STATUS_ROWS = [
    "1, Breaker On, , , 0",
    "2, Trip, ,",
]


def create_cfg_text(
    analog_rows: Sequence[str] = None,
    status_rows: Sequence[str] = None,
    header: str = "Station A, Device 1, 2013",
    counts_line: str = None,
    frequency: str = "50",
    nrates: str = "1",
    rate_rows: Sequence[str] = ("1000, 3",),
    start: str = "24/12/2025,12:00:00.000000",
    trigger: str = "24/12/2025,12:00:00.100000",
    ft: str = "BINARY",
    timemult: str = "1.0",
    trailing: Sequence[str] = ("+3h,0", "B,3"),
) -> str:
    """
    Создаёт текст CFG.

    Args:
        analog_rows: строки описания аналоговых каналов (по умолчанию ANALOG_ROWS)
        status_rows: строки описания дискретных каналов (по умолчанию STATUS_ROWS)
        counts_line: вторая строка; по умолчанию строится по количеству строк каналов
        trailing: необязательные строки после множителя времени

    Returns:
        str: текст CFG с переводами строк
    """
    analog_rows = ANALOG_ROWS if analog_rows is None else list(analog_rows)
    status_rows = STATUS_ROWS if status_rows is None else list(status_rows)
    if counts_line is None:
        counts_line = "{},{}A,{}D".format(
            len(analog_rows) + len(status_rows), len(analog_rows), len(status_rows))
    lines = [header, counts_line, *analog_rows, *status_rows, frequency, nrates,
             *rate_rows, start, trigger, ft, timemult, *trailing]
    return "\n".join(lines) + "\n"


def create_dat_bytes(
    analog: Sequence[Sequence[int]],
    status: Sequence[Sequence[int]] = (),
    status_count: int = None,
    timestamp_step: int = 1000,
) -> bytes:
    """
    Создаёт содержимое двоичного DAT (16-битный формат).

    Args:
        analog: analog[i][k] - сырое значение канала i в выборке k
        status: status[j][k] - состояние (0/1) дискретного канала j в выборке k
        status_count: количество дискретных каналов в CFG (по умолчанию len(status))
        timestamp_step: шаг временной метки между выборками (мкс)

    Returns:
        bytes: последовательность записей
    """
    status_count = len(status) if status_count is None else status_count
    words_count = math.ceil(status_count / 16)
    samples = len(analog[0]) if analog else len(status[0])
    record = struct.Struct("<ii{}h{}H".format(len(analog), words_count))

    chunks = []
    for k in range(samples):
        words: List[int] = [0] * words_count
        for j, channel in enumerate(status):
            words[j // 16] |= (channel[k] & 1) << (j % 16)
        chunks.append(record.pack(k + 1, k * timestamp_step,
                                  *[channel[k] for channel in analog], *words))
    return b"".join(chunks)


def create_sinusoidal_raw(
    amplitude: int = 1000,
    samples: int = 20,
    samples_per_period: int = 20,
) -> List[int]:
    """Создаёт целочисленные отсчёты синусоиды для записи в DAT."""
    t = np.arange(samples)
    signal = amplitude * np.sin(2 * np.pi * t / samples_per_period)
    return [int(round(x)) for x in signal]
