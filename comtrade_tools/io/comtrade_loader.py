import errno
import logging
import os
from typing import Optional

import numpy as np
import pandas as pd

from comtrade_tools.core.cfg import Configuration
from comtrade_tools.core.cfg_decoder import decode_cfg
from comtrade_tools.core.dat_reader import (
    extract_all_analog, extract_analog_channel, extract_status_channel, time_axis
)
from comtrade_tools.core.exceptions import MissingConfigurationError
from comtrade_tools.core.options import DecoderOptions

logger = logging.getLogger(__name__)


def read_text_file(file_path: str, encoding: str = None, fallback_encoding: str = 'cp1251') -> str:
    """
    Читает текстовый файл. Без явной кодировки сначала пробуется UTF-8,
    затем fallback_encoding (файлы отечественных регистраторов часто в cp1251).
    """
    if not os.path.isfile(file_path):
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), file_path)
    with open(file_path, "rb") as file:
        raw = file.read()
    if encoding:
        return raw.decode(encoding)
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("%s не в UTF-8, используется %s", file_path, fallback_encoding)
        return raw.decode(fallback_encoding)


def read_binary_file(file_path: str) -> bytes:
    if not os.path.isfile(file_path):
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), file_path)
    with open(file_path, "rb") as file:
        return file.read()


class Comtrade:
    """
    Пара CFG + DAT одной осциллограммы.

    Конфигурация хранится как Optional[Configuration]: до чтения CFG она None,
    и все методы извлечения в этом случае выбрасывают MissingConfigurationError.
    """
    # расширения
    EXT_CFG = "cfg"
    EXT_DAT = "dat"

    def __init__(self, options: DecoderOptions = None):
        self.options = options or DecoderOptions()
        self.file_path = ""
        self._cfg: Optional[Configuration] = None
        self._dat: bytes = b""

    @property
    def cfg(self) -> Optional[Configuration]:
        """Возвращает разобранную конфигурацию или None."""
        return self._cfg

    @property
    def dat(self) -> bytes:
        """Возвращает содержимое файла DAT."""
        return self._dat

    @property
    def station_name(self) -> str:
        return self._cfg.station_name if self._cfg is not None else ""

    @property
    def rec_dev_id(self) -> str:
        return self._cfg.rec_dev_id if self._cfg is not None else ""

    @property
    def analog_channel_ids(self) -> tuple:
        """Возвращает имена аналоговых каналов."""
        return self._cfg.analog_channel_names if self._cfg is not None else ()

    @property
    def status_channel_ids(self) -> tuple:
        """Возвращает имена дискретных каналов."""
        return self._cfg.status_channel_names if self._cfg is not None else ()

    @property
    def total_samples(self) -> int:
        return self._cfg.sampling_number if self._cfg is not None else 0

    def _require_cfg(self) -> Configuration:
        if self._cfg is None:
            raise MissingConfigurationError("Конфигурация не прочитана, сначала прочитайте CFG")
        return self._cfg

    def read_cfg(self, cfg_text) -> Configuration:
        """Разбирает текст CFG; при ошибке прежняя конфигурация не меняется."""
        self._cfg = decode_cfg(cfg_text, self.options)
        return self._cfg

    def read_dat(self, dat_bytes) -> None:
        self._dat = bytes(dat_bytes)

    def read(self, cfg_text, dat_bytes) -> None:
        """Читает содержимое CFG (текст) и DAT (байты)."""
        self.read_cfg(cfg_text)
        self.read_dat(dat_bytes)

    def load(self, cfg_file: str, dat_file: str = None, encoding: str = None) -> None:
        """
        Загружает файлы CFG и DAT с диска.

        dat_file можно не указывать, если имя файла DAT совпадает с именем CFG.
        """
        self.file_path = cfg_file
        if dat_file is None:
            base, _ = os.path.splitext(cfg_file)
            dat_file = self._find_pair(base, self.EXT_DAT)

        cfg_text = read_text_file(cfg_file, encoding, self.options.fallback_encoding)
        self.read_cfg(cfg_text)
        self.read_dat(read_binary_file(dat_file))
        logger.debug("Загружена осциллограмма %s (%d байт DAT)", cfg_file, len(self._dat))

    @staticmethod
    def _find_pair(base: str, ext: str) -> str:
        # расширение может быть в любом регистре: .dat / .DAT
        for candidate in (f"{base}.{ext}", f"{base}.{ext.upper()}"):
            if os.path.isfile(candidate):
                return candidate
        return f"{base}.{ext}"

    def _as_output(self, values: np.ndarray):
        if self.options.use_numpy_arrays:
            return values
        return values.tolist()

    def analog_channel_data(self, channel_number: int):
        """Откалиброванные значения аналогового канала (номер как в CFG, с единицы)."""
        return self._as_output(
            extract_analog_channel(self._require_cfg(), self._dat, channel_number))

    def status_channel_data(self, channel_number: int):
        return self._as_output(
            extract_status_channel(self._require_cfg(), self._dat, channel_number))

    @property
    def time(self):
        """Возвращает время выборок в секундах (по частоте дискретизации)."""
        return self._as_output(self._time_axis(self._require_cfg()))

    def _time_axis(self, cfg: Configuration) -> np.ndarray:
        # частота 0 - время берется из меток DAT
        return time_axis(cfg, self._dat, use_timestamps=cfg.sampling_rate == 0.0)

    def cfg_summary(self) -> str:
        return self._require_cfg().cfg_summary()

    def to_dataframe(self) -> pd.DataFrame:
        """
        Преобразует осциллограмму в pandas DataFrame.

        Возвращает:
            pandas.DataFrame: колонка 'Time' и по колонке на каждый аналоговый
                              и дискретный канал.
        """
        cfg = self._require_cfg()
        if cfg.sampling_number == 0:
            return pd.DataFrame()  # Нет данных - пустой DataFrame

        data = {'Time': self._time_axis(cfg)}
        analog = extract_all_analog(cfg, self._dat)
        for i, channel_name in enumerate(cfg.analog_channel_names):
            # Проверяем, чтобы не было дубликатов имен столбцов
            if channel_name in data:
                data[f"{channel_name}_{i}"] = analog[i]
            else:
                data[channel_name] = analog[i]

        for i, channel_name in enumerate(cfg.status_channel_names):
            values = extract_status_channel(cfg, self._dat, i + 1)
            if channel_name in data:
                data[f"{channel_name}_status_{i}"] = values
            else:
                data[channel_name] = values

        return pd.DataFrame(data)
