# providers/params.py
#
# Value encoders shared by the per-provider URL builders. Each builder owns
# its own parameter names; only the value formatting lives here.

import math
import re
from urllib.parse import urlencode

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def hex_digits(color: str | None, *, upper: bool = False) -> str | None:
    """
    "#66ccff" -> "66ccff". Short forms are expanded; anything that is not a
    hex colour is dropped.
    """
    if not color:
        return None

    match = _HEX_COLOR.match(color.strip())
    if not match:
        return None

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)

    return digits.upper() if upper else digits.lower()


def bool_param(value: bool | None) -> str | None:
    if value is None:
        return None
    return "true" if value else "false"


def seconds_param(value: float | None) -> str | None:
    if value is None:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return str(math.floor(value))


def with_query(base: str, params: dict) -> str:
    query = {key: value for key, value in params.items() if value is not None}
    if not query:
        return base
    return f"{base}?{urlencode(query)}"
