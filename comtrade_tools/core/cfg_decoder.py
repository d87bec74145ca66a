"""
Декодер текстового файла конфигурации COMTRADE (CFG).

Положение каждой строки в CFG зависит от значений, прочитанных ранее в том же
документе (количество аналоговых и дискретных каналов, количество частот
дискретизации). Поэтому строки читаются через курсор LineCursor: каждый раздел
забирает ровно свои строки, а номер следующей строки нигде не вычисляется
арифметикой заново.
"""
import datetime as dt
import logging
import warnings
from typing import Iterable, List, Optional, Tuple, Union

from comtrade_tools.core.cfg import Configuration
from comtrade_tools.core.channels import (
    AnalogChannel, AnalogChannelTable, DigitalChannelTable, SampleRate, StatusChannel
)
from comtrade_tools.core.constants import (
    ANALOG_REQUIRED_FIELDS, ANALOG_TAG, KNOWN_REVISIONS, REV_1991, SEPARATOR,
    STATUS_REQUIRED_FIELDS, STATUS_TAG, STATUS_UNKNOWN, TIMESTAMP_FORMAT, TIMESTAMP_JOINER
)
from comtrade_tools.core.exceptions import (
    ChannelCountMismatchError, FieldParseError, MalformedChannelRowError,
    MalformedHeaderError, MissingChannelTypeTagError, TruncatedDocumentError
)
from comtrade_tools.core.options import DecoderOptions
from comtrade_tools.core.time_code import is_valid_time_code

logger = logging.getLogger(__name__)

# Предупреждение о нестандартной ревизии
WARNING_UNKNOWN_REVISION = "Неизвестная ревизия стандарта \"{}\""
# Предупреждение о дате и времени с наносекундным разрешением
WARNING_DATETIME_NANO = "Неподдерживаемые объекты datetime с наносекундным \
разрешением. Используются усеченные значения."


def read_sep_values(line: str) -> List[str]:
    """Разбивает строку по запятым и удаляет пробелы вокруг каждого поля."""
    return [cell.strip() for cell in line.split(SEPARATOR)]


def normalize_channel_name(name: str) -> str:
    """' Line A ' -> 'Line_A'."""
    return name.strip().replace(" ", "_")


class LineCursor:
    """Последовательный курсор по строкам документа."""

    def __init__(self, lines: List[str]):
        self._lines = lines
        self._position = 0

    @property
    def position(self) -> int:
        """Индекс (с нуля) следующей непрочитанной строки."""
        return self._position

    def __len__(self):
        return len(self._lines)

    def line(self, index: int) -> str:
        """Текст строки с индексом index или пустая строка за концом документа."""
        if 0 <= index < len(self._lines):
            return self._lines[index]
        return ""

    def has_next(self) -> bool:
        return self._position < len(self._lines)

    def take(self, role: str) -> Tuple[int, str]:
        """Забирает обязательную строку; возвращает ее индекс и текст."""
        if not self.has_next():
            raise TruncatedDocumentError(role, self._position)
        index = self._position
        self._position += 1
        return index, self._lines[index]

    def take_fields(self, role: str) -> Tuple[int, List[str]]:
        index, line = self.take(role)
        return index, read_sep_values(line)

    def take_optional(self) -> Optional[Tuple[int, List[str]]]:
        """Забирает необязательную строку, если документ ее содержит."""
        if not self.has_next():
            return None
        index = self._position
        self._position += 1
        return index, read_sep_values(self._lines[index])


def _parse_int(raw: str, role: str, line_index: int) -> int:
    try:
        return int(raw)
    except ValueError:
        raise FieldParseError(role, raw, line_index) from None


def _parse_float(raw: str, role: str, line_index: int) -> float:
    try:
        return float(raw)
    except ValueError:
        raise FieldParseError(role, raw, line_index) from None


def _parse_integral(raw: str, role: str, line_index: int) -> int:
    """Целое число, допускающее дробную запись ('1000.0')."""
    return int(_parse_float(raw, role, line_index))


def _parse_optional_float(raw: str) -> Optional[float]:
    try:
        return float(raw)
    except ValueError:
        return None


def _split_count_tag(raw: str, tag: str, line_index: int) -> int:
    """'12A' -> 12; отсутствие метки - MissingChannelTypeTagError."""
    token = raw.strip()
    if not token.upper().endswith(tag):
        raise MissingChannelTypeTagError(
            f"ожидалось количество каналов с меткой '{tag}', получено {raw!r}", line_index)
    return _parse_int(token[:-1].strip(), f"{tag}_channel_count", line_index)


def _parse_timestamp(fields: List[str], role: str, line_index: int,
                     ignore_warnings: bool) -> Tuple[dt.datetime, bool]:
    """
    Объединяет поля строки через 'T' и разбирает их как дд/мм/гггг,чч:мм:сс.ffffff.
    Дробная часть длиннее 6 знаков (наносекунды) усекается до микросекунд.
    """
    joined = TIMESTAMP_JOINER.join(fields)
    nanosec = False
    head, dot, fraction = joined.rpartition(".")
    if dot and len(fraction) > 6 and fraction.isdigit():
        nanosec = True
        joined = f"{head}.{fraction[:6]}"
        if not ignore_warnings:
            warnings.warn(Warning(WARNING_DATETIME_NANO))
    try:
        return dt.datetime.strptime(joined, TIMESTAMP_FORMAT), nanosec
    except ValueError:
        raise FieldParseError(role, SEPARATOR.join(fields), line_index) from None


def _read_header(cursor: LineCursor, options: DecoderOptions) -> Tuple[str, str, int]:
    index, packed = cursor.take_fields("header")
    if len(packed) < 2:
        raise MalformedHeaderError(
            f"в первой строке {len(packed)} поле(й), ожидалось не меньше 2", index)

    if len(packed) > 3:
        # защита от запятых в идентификаторе устройства
        station_name, rec_dev_id, rev_raw = packed[0], ",".join(packed[1:-1]), packed[-1]
    elif len(packed) == 3:
        station_name, rec_dev_id, rev_raw = packed
    else:
        station_name, rec_dev_id, rev_raw = packed[0], packed[1], ""

    if rev_raw:
        rev_year = _parse_int(rev_raw, "rev_year", index)
        if rev_year not in KNOWN_REVISIONS and not options.ignore_warnings:
            warnings.warn(Warning(WARNING_UNKNOWN_REVISION.format(rev_year)))
    else:
        # только ревизия 1999 года и выше имеет год ревизии стандарта
        rev_year = REV_1991
    return station_name, rec_dev_id, rev_year


def _read_channel_counts(cursor: LineCursor, options: DecoderOptions) -> Tuple[int, int, int]:
    index, packed = cursor.take_fields("channel_counts")
    total = _parse_int(packed[0], "channels_count", index)
    if len(packed) < 3:
        raise MissingChannelTypeTagError(
            "во второй строке нет количества аналоговых или дискретных каналов", index)
    analog_count = _split_count_tag(packed[1], ANALOG_TAG, index)
    status_count = _split_count_tag(packed[2], STATUS_TAG, index)

    if options.check_channel_total and total != analog_count + status_count:
        raise ChannelCountMismatchError(
            f"всего каналов {total}, а {analog_count}A + {status_count}D = "
            f"{analog_count + status_count}", index)
    return total, analog_count, status_count


def _read_analog_channel(cursor: LineCursor) -> AnalogChannel:
    index, packed = cursor.take_fields("analog_channel")
    if len(packed) < ANALOG_REQUIRED_FIELDS:
        raise MalformedChannelRowError(
            f"в описании аналогового канала {len(packed)} поле(й), "
            f"ожидалось не меньше {ANALOG_REQUIRED_FIELDS}", index)
    n, name, ph, ccbm, uu, a, b, skew, cmin, cmax = packed[:ANALOG_REQUIRED_FIELDS]

    # необязательные столбцы: коэффициенты трансформации и признак P/S
    primary = _parse_optional_float(packed[10]) if len(packed) > 10 else None
    secondary = _parse_optional_float(packed[11]) if len(packed) > 11 else None
    ps = packed[12].lower() == "s" if len(packed) > 12 else None

    return AnalogChannel(
        index=_parse_int(n, "analog_number", index),
        name=normalize_channel_name(name), phase=ph, circuit=ccbm, unit=uu,
        multiplier=_parse_float(a, "analog_factor_a", index),
        offset=_parse_float(b, "analog_factor_b", index),
        skew=_parse_float(skew, "analog_skew", index),
        min_value=_parse_integral(cmin, "analog_min", index),
        max_value=_parse_integral(cmax, "analog_max", index),
        primary=primary, secondary=secondary, ps=ps)


def _read_status_channel(cursor: LineCursor) -> StatusChannel:
    index, packed = cursor.take_fields("status_channel")
    if len(packed) < STATUS_REQUIRED_FIELDS:
        raise MalformedChannelRowError(
            f"в описании дискретного канала {len(packed)} поле(й), "
            f"ожидалось не меньше {STATUS_REQUIRED_FIELDS}", index)
    ccbm = packed[3] if len(packed) > 3 else ""
    if len(packed) > 4:
        y = _parse_int(packed[4], "status_initial_state", index)
    else:
        y = STATUS_UNKNOWN
    return StatusChannel(index=_parse_int(packed[0], "status_number", index),
                         name=normalize_channel_name(packed[1]), phase=packed[2],
                         circuit=ccbm, y=y)


def _read_sample_rates(cursor: LineCursor) -> Tuple[int, Tuple[SampleRate, ...]]:
    index, packed = cursor.take_fields("nrates")
    nrates = _parse_int(packed[0], "nrates", index)
    if nrates < 0:
        raise FieldParseError("nrates", packed[0], index)
    if nrates == 0:
        # В части файлов указано 0, но блок с одной частотой все равно присутствует.
        nrates = 1

    sample_rates = []
    for _ in range(nrates):
        index, packed = cursor.take_fields("sample_rate")
        if len(packed) < 2:
            raise FieldParseError("sample_rate", SEPARATOR.join(packed), index)
        samp = _parse_float(packed[0], "sample_rate", index)
        endsamp = _parse_integral(packed[1], "sample_count", index)
        if endsamp < 0:
            raise FieldParseError("sample_count", packed[1], index)
        sample_rates.append(SampleRate(samp, endsamp))
    return nrates, tuple(sample_rates)


def _read_optional_pair(cursor: LineCursor) -> Optional[Tuple[int, List[str]]]:
    taken = cursor.take_optional()
    if taken is None:
        return None
    index, packed = taken
    if len(packed) != 2:
        return None
    return index, packed


def _decode_bytes(document: bytes, fallback_encoding: str) -> str:
    """UTF-8 (с BOM или без), затем fallback_encoding."""
    try:
        return document.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("CFG не в UTF-8, используется %s", fallback_encoding)
    try:
        return document.decode(fallback_encoding)
    except UnicodeDecodeError as ex:
        raise FieldParseError("document", f"{fallback_encoding}: {ex.reason}") from None


def _as_lines(document: Union[str, bytes, Iterable[str]],
              options: DecoderOptions) -> List[str]:
    if isinstance(document, (bytes, bytearray)):
        document = _decode_bytes(bytes(document), options.fallback_encoding)
    if isinstance(document, str):
        # только '\n': управляющие символы внутри полей не разрывают строку
        lines = [line.rstrip("\r") for line in document.split("\n")]
        if lines and not lines[-1]:
            lines.pop()
        return lines
    return [line.rstrip("\r\n") for line in document]


def decode_cfg(document: Union[str, bytes, Iterable[str]],
               options: DecoderOptions = None) -> Configuration:
    """
    Разбирает документ CFG и возвращает неизменяемую Configuration.

    Args:
        document: текст CFG, байты (UTF-8, иначе options.fallback_encoding)
            или последовательность строк.
        options: параметры разбора (DecoderOptions).

    Raises:
        DecodeError: любой из подклассов; частично разобранная конфигурация
            не возвращается.
    """
    options = options or DecoderOptions()
    cursor = LineCursor(_as_lines(document, options))

    station_name, rec_dev_id, rev_year = _read_header(cursor, options)
    channels_count, analog_count, status_count = _read_channel_counts(cursor, options)
    logger.debug("CFG '%s': %d аналоговых, %d дискретных каналов",
                 station_name, analog_count, status_count)

    analog = AnalogChannelTable.from_channels(
        _read_analog_channel(cursor) for _ in range(analog_count))
    status = DigitalChannelTable.from_channels(
        _read_status_channel(cursor) for _ in range(status_count))

    # Строка частоты сети
    index, packed = cursor.take_fields("frequency")
    frequency = int(_parse_float(packed[0], "frequency", index))

    nrates, sample_rates = _read_sample_rates(cursor)

    # Время первой точки данных и время срабатывания
    index, packed = cursor.take_fields("start_timestamp")
    start_timestamp, start_nano = _parse_timestamp(
        packed, "start_timestamp", index, options.ignore_warnings)
    index, packed = cursor.take_fields("trigger_timestamp")
    trigger_timestamp, trigger_nano = _parse_timestamp(
        packed, "trigger_timestamp", index, options.ignore_warnings)

    # Тип файла DAT
    _, packed = cursor.take_fields("data_file_type")
    ft = packed[0]

    # Множитель временной метки
    index, packed = cursor.take_fields("time_multiplier")
    time_multiplier = _parse_float(packed[0], "time_multiplier", index) if packed[0] else 1.0

    # time_code и local_code, затем tmq_code и leapsec (ревизия 2013 года)
    time_code = local_code = tmq_code = leap_second = ""
    position = cursor.position
    pair = _read_optional_pair(cursor)
    if pair is not None:
        index, (time_code, local_code) = pair
        if options.strict_time_code and not is_valid_time_code(time_code):
            raise FieldParseError("time_code", time_code, index)
        pair = _read_optional_pair(cursor)
        if pair is not None:
            _, (tmq_code, leap_second) = pair
    elif options.strict_time_code and cursor.line(position).strip():
        raise FieldParseError("time_code", cursor.line(position).strip(), position)

    logger.debug("CFG разобран: %d строк(и), %d выборок на %s Гц",
                 cursor.position, sample_rates[0].samples, sample_rates[0].rate)

    return Configuration(
        station_name=station_name,
        rec_dev_id=rec_dev_id,
        rev_year=rev_year,
        channels_count=channels_count,
        analog=analog,
        status=status,
        frequency=frequency,
        nrates=nrates,
        sample_rates=sample_rates,
        start_timestamp=start_timestamp,
        trigger_timestamp=trigger_timestamp,
        ft=ft,
        time_multiplier=time_multiplier,
        time_code=time_code,
        local_code=local_code,
        tmq_code=tmq_code,
        leap_second=leap_second,
        nanosecond_timestamps=start_nano or trigger_nano,
    )
