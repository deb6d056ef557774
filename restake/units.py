import re

from core.exceptions import InvalidAmountException

_AMOUNT_PATTERN = re.compile(r"^(?P<whole>\d*)(?:\.(?P<fraction>\d*))?$")


def to_base_units(amount: str, decimals: int) -> int:
    """
    Convert a decimal amount string to integer base units.

    Precision is never dropped: an amount with more significant fractional
    digits than ``decimals`` is rejected instead of truncated.

    Parameters
    ----------
    amount : str
        Human-entered amount, e.g. ``"0.01"``
    decimals : int
        Token decimal precision

    Returns
    -------
    int
        Amount scaled by ``10 ** decimals``

    Raises
    ------
    InvalidAmountException
        If the amount is not a plain non-negative decimal number or needs
        more precision than the token supports
    """
    if decimals < 0:
        raise InvalidAmountException(f"Invalid token decimals: {decimals}")
    if not isinstance(amount, str):
        raise InvalidAmountException(f"Amount must be a string, got {type(amount).__name__}")

    text = amount.strip()
    if text.startswith("-"):
        raise InvalidAmountException(f"Amount must not be negative: {text}")

    match = _AMOUNT_PATTERN.match(text)
    if not match or not (match["whole"] or match["fraction"]):
        raise InvalidAmountException(f"Amount is not a number: {amount!r}")

    whole = match["whole"] or "0"
    fraction = (match["fraction"] or "").rstrip("0")
    if len(fraction) > decimals:
        raise InvalidAmountException(
            f"Amount {text} has more than {decimals} decimal places"
        )

    return int(whole) * 10 ** decimals + int(fraction.ljust(decimals, "0") or "0")


def to_decimal_string(value: int, decimals: int) -> str:
    """
    Convert integer base units to a canonical decimal string.

    Trailing fractional zeros are dropped, whole values have no fraction
    part (``10**18`` with 18 decimals is ``"1"``).

    Parameters
    ----------
    value : int
        Amount in base units
    decimals : int
        Token decimal precision

    Returns
    -------
    str
        Decimal representation

    Raises
    ------
    InvalidAmountException
        If the value is negative
    """
    if decimals < 0:
        raise InvalidAmountException(f"Invalid token decimals: {decimals}")
    if value < 0:
        raise InvalidAmountException(f"Amount must not be negative: {value}")

    whole, fraction = divmod(int(value), 10 ** decimals)
    if not fraction:
        return str(whole)

    digits = str(fraction).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{digits}"
