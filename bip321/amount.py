from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union
import re

# BIP321 amounts are decimal BTC values using '.' as the separator;
# no thousands separators, signs or exponents.
_AMOUNT_RE = re.compile(r"^([0-9]+(\.[0-9]*)?|\.[0-9]+)$")


def btc_to_sat(btc: Union[int, str, float, Decimal]) -> int:
    return int(Decimal(btc) * Decimal('1e8'))


def sat_to_btc(sat: int) -> Decimal:
    return Decimal(sat) / Decimal('1e8')


def is_amount_str(amount: str) -> bool:
    return _AMOUNT_RE.fullmatch(str(amount)) is not None


def parse_amount(amount_str: str) -> Optional[Decimal]:
    """ Returns the amount in BTC as a Decimal, or None
    if the string is not a valid URI amount (this includes
    any string containing a comma).
    """
    if "," in amount_str or not is_amount_str(amount_str):
        return None
    amount = Decimal(amount_str)
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def to_amount(amount: Any) -> Decimal:
    """ Converts a caller-supplied amount (int, float, Decimal
    or numeric string) into a Decimal, raising ValueError if it
    is not a finite, non-negative number.
    """
    # bool is an int subclass but never a meaningful amount
    if isinstance(amount, bool):
        raise ValueError("Invalid amount format")
    if isinstance(amount, str):
        result = parse_amount(amount)
        if result is None:
            raise ValueError("Invalid amount format")
        return result
    if isinstance(amount, float):
        # str() gives the shortest repr, so 20.3 stays 20.3
        amount = str(amount)
    elif not isinstance(amount, (int, Decimal)):
        raise ValueError("Invalid amount format")
    try:
        result = Decimal(amount)
    except InvalidOperation:
        raise ValueError("Invalid amount format")
    # is_signed also catches negative zero
    if not result.is_finite() or result.is_signed():
        raise ValueError("Invalid amount format")
    return result


def amount_to_uri_str(amount: Decimal) -> str:
    """ Fixed-point rendering, never scientific notation.
    """
    return format(amount, 'f')
