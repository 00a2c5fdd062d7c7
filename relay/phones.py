# relay/phones.py
"""
Helpers puros de telefone (sem Flask), usados por serviços e logs.
"""

from __future__ import annotations

import re

from relay.errors import ValidationError

MIN_DIGITS = 10
MAX_DIGITS = 15

INVALID_PHONE_MESSAGE = "Invalid phone number format. Use E.164 format (e.g., 917834811114)"

_NON_DIGIT = re.compile(r"\D")


def validate_phone_number(phone: str | None) -> str | None:
    """
    Remove tudo que não é dígito e aceita só 10 a 15 dígitos.

    >>> validate_phone_number("+91 783-481-1114")
    '917834811114'
    >>> validate_phone_number("123") is None
    True
    """
    digits = _NON_DIGIT.sub("", str(phone or ""))
    if len(digits) < MIN_DIGITS or len(digits) > MAX_DIGITS:
        return None
    return digits


def format_phone_for_gupshup(phone: str | None) -> str:
    clean = validate_phone_number(phone)
    if not clean:
        raise ValidationError(INVALID_PHONE_MESSAGE)
    return clean


def mask_phone(p: str | None) -> str | None:
    if not p:
        return p
    d = _NON_DIGIT.sub("", str(p))
    n = len(d)
    if n < 7:
        return ("*" * max(0, n - 2)) + d[-2:]
    # mantém 4 primeiros e 2 últimos
    return d[:4] + ("*" * (n - 6)) + d[-2:]
