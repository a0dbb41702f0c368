"""
Conversion between human decimal strings and the ledger's fixed-point unit.

Display form is what a person types or reads ("0.01"); ledger form is a
non-negative integer of the smallest unit (wei for ether, 18 decimals).
Both directions are exact: no float ever touches an amount.
"""

import re

from .exceptions import MalformedAmount

ETHER_DECIMALS = 18

# ledger amounts are uint256
MAX_LEDGER_AMOUNT = 2 ** 256 - 1
_MAX_WHOLE_DIGITS = len(str(MAX_LEDGER_AMOUNT))

_DECIMAL_RE = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?")


def to_ledger_form(display: str, decimals: int = ETHER_DECIMALS) -> int:
    """Parse a decimal string such as "0.01" into ledger units"""
    if not isinstance(display, str):
        raise MalformedAmount(f"Amount must be a decimal string, got {type(display).__name__}")

    text = display.strip()
    match = _DECIMAL_RE.fullmatch(text)
    # the pattern also accepts "" and "." which carry no digits at all
    if match is None or not (match.group('whole') or match.group('fraction')):
        raise MalformedAmount(f"Invalid amount: {display!r}")

    whole = match.group('whole').lstrip("0") or "0"
    fraction = match.group('fraction') or ""
    if len(fraction) > decimals:
        raise MalformedAmount(
            f"Invalid amount: {display!r} has more than {decimals} decimal places"
        )

    # checked before int() so huge inputs never reach the str-to-int digit limit
    if len(whole) > _MAX_WHOLE_DIGITS:
        raise MalformedAmount("Invalid amount: exceeds the largest ledger value")

    ledger = int(whole) * 10 ** decimals + int(fraction.ljust(decimals, "0") or "0")
    if ledger > MAX_LEDGER_AMOUNT:
        raise MalformedAmount("Invalid amount: exceeds the largest ledger value")
    return ledger


def to_display_form(ledger: int, decimals: int = ETHER_DECIMALS) -> str:
    """Render ledger units as the shortest exact decimal string"""
    if isinstance(ledger, bool) or not isinstance(ledger, int):
        raise MalformedAmount(f"Ledger amount must be an integer, got {type(ledger).__name__}")
    if ledger < 0:
        raise MalformedAmount(f"Ledger amount must not be negative, got {ledger}")

    whole, fraction = divmod(ledger, 10 ** decimals)
    if fraction == 0:
        return str(whole)

    return f"{whole}.{str(fraction).rjust(decimals, '0').rstrip('0')}"
