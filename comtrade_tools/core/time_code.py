import re

from comtrade_tools.core.exceptions import FieldParseError

NS_PER_MINUTE = 60 * 10**9
NS_PER_HOUR = 60 * NS_PER_MINUTE

# "+10h30", "-4t", "-7h15", "0", "5"
re_time_code = re.compile(r"^([+-])?(\d+)(?:[ht]([+-])?(\d+)?)?$", re.IGNORECASE)


def time_code_to_ns(code: str, strict: bool = False) -> int:
    """
    Возвращает смещение местного времени относительно UTC в наносекундах.

    Формат (IEEE C37.111-2013): необязательный знак, часы, затем 'h' или 't'
    и необязательные минуты. Минуты без собственного знака наследуют знак часов,
    т.е. "-7h15" означает -7 ч 15 мин, а не -6 ч 45 мин (минуты не прибавляются
    к отрицательным часам со знаком плюс). Пустая строка - нулевое смещение.
    Нераспознанная строка дает 0, а при strict=True - FieldParseError.
    """
    code = (code or "").strip()
    if not code:
        return 0
    m = re_time_code.match(code)
    if m is None:
        if strict:
            raise FieldParseError("time_code", code)
        return 0
    hour_sign, hours, minute_sign, minutes = m.groups()
    sign = -1 if hour_sign == "-" else 1
    ns = sign * int(hours) * NS_PER_HOUR
    if minutes:
        if minute_sign:
            m_sign = -1 if minute_sign == "-" else 1
        else:
            m_sign = sign
        ns += m_sign * int(minutes) * NS_PER_MINUTE
    return ns


def is_valid_time_code(code: str) -> bool:
    code = (code or "").strip()
    return not code or re_time_code.match(code) is not None
