from decimal import Decimal, Inexact, InvalidOperation, localcontext
from typing import Union

from learning_token.onchain.util import DECIMALS

TOKEN_UNIT = 10**DECIMALS


def parse_token(amount: Union[int, str, Decimal]) -> int:
    """
    Convert a human readable LHT amount (e.g. "1000.5") into base units
    """
    value = Decimal(str(amount))
    if not value.is_finite():
        raise ValueError(f"{amount} is not a token amount")
    with localcontext() as ctx:
        # wide enough for every digit of the amount, nothing may be rounded away
        ctx.prec = max(len(value.as_tuple().digits) + DECIMALS, ctx.prec)
        ctx.traps[Inexact] = True
        try:
            value = value.scaleb(DECIMALS)
        except (Inexact, InvalidOperation) as e:
            raise ValueError(f"{amount} can not be represented exactly") from e
    if value != value.to_integral_value():
        raise ValueError(f"{amount} has more than {DECIMALS} decimals")
    return int(value)


def format_token(value: int) -> str:
    """
    Convert base units into a human readable LHT amount, always with a fractional part
    """
    whole, fraction = divmod(abs(value), TOKEN_UNIT)
    fraction_str = str(fraction).rjust(DECIMALS, "0").rstrip("0") or "0"
    sign = "-" if value < 0 else ""
    return f"{sign}{whole}.{fraction_str}"
