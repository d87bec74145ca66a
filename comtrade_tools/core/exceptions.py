"""
Иерархия исключений декодера COMTRADE.

Ошибки разбора CFG наследуются от DecodeError (и ValueError), ошибки
извлечения выборок из DAT - от ExtractError. Ни одна из них не
перехватывается внутри библиотеки.
"""


class ComtradeError(Exception):
    """Базовое исключение пакета."""


class DecodeError(ComtradeError, ValueError):
    """Ошибка разбора файла конфигурации (CFG)."""

    def __init__(self, message: str, line_index: int = None):
        self.line_index = line_index
        if line_index is not None:
            message = f"строка {line_index + 1}: {message}"
        super().__init__(message)


class MalformedHeaderError(DecodeError):
    """В первой строке CFG меньше двух полей."""


class ChannelCountMismatchError(MalformedHeaderError):
    """Общее количество каналов не равно сумме аналоговых и дискретных."""


class MissingChannelTypeTagError(DecodeError):
    """Во второй строке CFG нет меток 'A' или 'D'."""


class MalformedChannelRowError(DecodeError):
    """В строке описания канала недостаточно полей."""


class TruncatedDocumentError(DecodeError):
    """Документ закончился раньше обязательного раздела."""

    def __init__(self, role: str, line_index: int):
        self.role = role
        super().__init__(f"документ обрывается, ожидалась строка '{role}'", line_index)


class FieldParseError(DecodeError):
    """Поле не удалось преобразовать в число (или дату)."""

    def __init__(self, role: str, raw: str, line_index: int = None):
        self.role = role
        self.raw = raw
        super().__init__(f"некорректное значение поля '{role}': {raw!r}", line_index)


class ExtractError(ComtradeError):
    """Ошибка извлечения значений из двоичного DAT."""


class MissingConfigurationError(ExtractError):
    """Конфигурация не была прочитана."""


class EmptyDataBufferError(ExtractError):
    """Буфер DAT пуст."""


class InvalidChannelError(ExtractError, IndexError):
    """Номер канала вне диапазона [1, количество каналов]."""


class MissingSampleRateError(ExtractError):
    """В конфигурации нет ни одной частоты дискретизации."""


class TruncatedSampleDataError(ExtractError):
    """Буфер DAT короче, чем требуется для объявленного числа выборок."""
