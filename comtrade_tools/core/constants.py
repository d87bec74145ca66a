from enum import Enum

# Общие константы формата COMTRADE.

# Ревизии стандарта COMTRADE
REV_1991 = 1991
REV_1999 = 1999
REV_2013 = 2013
KNOWN_REVISIONS = (REV_1991, REV_1999, REV_2013)

# общий символ-разделитель полей файла CFG
SEPARATOR = ","

# Метки типов каналов во второй строке CFG ("3,2A,1D")
ANALOG_TAG = "A"
STATUS_TAG = "D"

# Обязательное количество полей в строках описания каналов
ANALOG_REQUIRED_FIELDS = 10
STATUS_REQUIRED_FIELDS = 3

# Начальное состояние дискретного канала, если столбец отсутствует
STATUS_UNKNOWN = 2

# Временные метки: поля строки объединяются через "T" и разбираются по шаблону
TIMESTAMP_JOINER = "T"
TIMESTAMP_FORMAT = "%d/%m/%YT%H:%M:%S.%f"

# единицы временной базы
TIME_BASE_MICROSEC = 1E-6
TIME_BASE_NANOSEC = 1E-9

# Размеры полей двоичной записи DAT (в байтах)
SAMPLE_NUMBER_BYTES = 4
TIME_BYTES = 4
ANALOG_BYTES = 2
STATUS_BYTES = 2
STATUS_BITS_PER_WORD = 16


class TYPE_DAT(Enum):
    """Типы файлов данных, объявляемые в CFG."""
    ASCII = "ASCII"
    BINARY = "BINARY"
    BINARY32 = "BINARY32"
    FLOAT32 = "FLOAT32"

    @classmethod
    def from_tag(cls, tag: str):
        """Возвращает член перечисления по тегу без учета регистра или None."""
        for member in cls:
            if member.value == tag.strip().upper():
                return member
        return None
