"""Philippine mobile number helpers."""

import re

_NON_DIGITS = re.compile(r"\D")


def to_international(phone):
    """
    Convert a local mobile number to +63 international format.

    Returns None when the result is not a valid 13 character +63 number.
    """
    if not phone:
        return None
    digits = _NON_DIGITS.sub("", phone)
    if digits.startswith("09"):
        international = "+63" + digits[1:]
    elif digits.startswith("9"):
        international = "+63" + digits
    elif digits.startswith("63"):
        international = "+" + digits
    else:
        international = "+63" + digits

    if international.startswith("+63") and len(international) == 13:
        return international
    return None


def to_local(phone):
    """Store numbers in local 09XXXXXXXXX form."""
    digits = _NON_DIGITS.sub("", phone or "")
    if digits.startswith("09"):
        return digits
    if digits.startswith("63") and len(digits) == 12:
        return "0" + digits[2:]
    if digits.startswith("9"):
        return "0" + digits
    return f"09{digits}"
