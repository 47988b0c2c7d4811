# utils/formatting.py

import re
from typing import Any

_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Read a number the forgiving way the order form sends it.
    Strings are read up to the first non-numeric character, so
    "3" -> 3.0, "2.5 mtr" -> 2.5, "abc" -> default.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        # NaN never equals itself
        return float(value) if value == value else default

    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return default
    return float(match.group(1))


def format_amount(n: float) -> str:
    """
    Format an amount with Indian digit grouping.
    Example: 1234567.5 -> "12,34,567.50"
    """
    sign = "-" if n < 0 else ""
    whole, frac = f"{abs(n):.2f}".split(".")

    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)

    grouped = ",".join(groups + [tail]) if groups else tail
    return f"{sign}{grouped}.{frac}"
