from dataclasses import dataclass


@dataclass
class DecoderOptions:
    # не выводить предупреждения (неизвестная ревизия, усечение наносекунд и т.п.)
    ignore_warnings: bool = False
    # проверять, что общее число каналов равно сумме аналоговых и дискретных
    check_channel_total: bool = True
    # строгий режим для необязательной строки time_code,local_code
    strict_time_code: bool = False
    # кодировка, которая пробуется после UTF-8 при чтении файлов с диска
    fallback_encoding: str = 'cp1251'
    # возвращать numpy.ndarray, а не list
    use_numpy_arrays: bool = True
