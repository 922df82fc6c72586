import math
import re
from typing import Any

_leading_number_re = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_number(value: Any) -> float:
    """
    Lenient form-value parsing.

    Accepts numbers or strings with a leading numeric prefix ("12.5", "12.5abc").
    Anything else (None, "", "abc", NaN, inf) becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _leading_number_re.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(0))

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
