"""
Argument coercion for values arriving from PAC scripts.

Scripts are loosely typed, so every argument is turned into a string by one
fixed policy before it reaches a matcher or the resolver:

    str                 unchanged
    bool, None          rejected
    int                 decimal digits
    float               integral values without a fraction ("1.0" -> "1"),
                        others via repr; NaN and infinities are rejected
    bytes, bytearray    UTF-8 decoded; undecodable input is rejected
    anything else       str(value)
"""

import math

from ..error_handling.errors import CoercionError


def coerce_string(value) -> str:
    """
    Coerce a script value to a string.

    Raises:
        CoercionError: If the value is rejected by the policy
    """
    if isinstance(value, str):
        return value

    if value is None:
        raise CoercionError("null or undefined is not a valid argument")

    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        raise CoercionError(f"boolean {value} is not a valid argument")

    if isinstance(value, int):
        return str(value)

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise CoercionError(f"{value} is not a valid argument")
        if value.is_integer():
            return str(int(value))
        return repr(value)

    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode('utf-8')
        except UnicodeDecodeError as e:
            raise CoercionError(f"bytes argument is not valid UTF-8: {e}") from e

    try:
        return str(value)
    except Exception as e:
        raise CoercionError(f"{type(value).__name__} argument cannot be converted to a string: {e}") from e
