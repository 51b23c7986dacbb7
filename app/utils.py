import re

PHONE_MASK = "(00) 00000-0000"
PHONE_DIGITS = PHONE_MASK.count("0")

_NON_DIGITS = re.compile(r"\D")


# =========================
# Phone masking
# =========================
def unmask_phone(value: str) -> str:
    """Strip everything but digits from a (possibly masked) phone number."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def mask_phone(value: str) -> str:
    """Format the digits of ``value`` progressively as ``(00) 00000-0000``.

    Partial input keeps only the literals reached so far, so ``"1198"`` becomes
    ``"(11) 98"``. Digits beyond the mask are dropped.
    """
    digits = unmask_phone(value)[:PHONE_DIGITS]
    if not digits:
        return ""
    if len(digits) <= 2:
        return f"({digits}"
    if len(digits) <= 7:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
