"""Phone number normalization for courier dispatch."""

import re

from apps.web.delivery.exceptions import InvalidPhoneNumber

_NON_DIGITS = re.compile(r"\D")


def format_phone_e164(phone: str) -> str:
    """
    Convert a North American phone number to E.164.

    10 digits are treated as a US/Canada number without country code
    ("(206) 555-1234" -> "+12065551234"); 11 or more digits already carry
    a country code ("1-206-555-1234" -> "+12065551234").

    Raises:
        InvalidPhoneNumber: If fewer than 10 digits remain
    """
    digits = _NON_DIGITS.sub("", phone)

    if len(digits) == 10:
        return f"+1{digits}"
    if len(digits) >= 11:
        return f"+{digits}"

    raise InvalidPhoneNumber(f"Invalid phone number: {phone!r}")
