import math
from typing import Any

CURRENCY_SYMBOLS = {"KRW": "₩", "USD": "$", "EUR": "€", "JPY": "¥", "GBP": "£"}
# Currencies displayed without minor units
ZERO_DECIMAL_CURRENCIES = {"KRW", "JPY"}


def _finite(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (math.isnan(value) or math.isinf(value))


def format_number(value: Any, decimals: int = 2) -> str:
    """Fixed-decimal rendering for rates; NaN and non-numbers render as "0"."""
    if not _finite(value):
        return "0"
    return f"{value:.{max(0, decimals)}f}"


def format_currency(value: Any, currency: str = "KRW") -> str:
    """Grouped currency rendering, e.g. ``₩1,234,000`` or ``$1,234.50``."""
    if not _finite(value):
        return "0"
    code = currency.upper()
    decimals = 0 if code in ZERO_DECIMAL_CURRENCIES else 2
    rounded = round(value, decimals)
    sign = "-" if rounded < 0 else ""
    amount = f"{abs(rounded):,.{decimals}f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{amount} {code}"
    return f"{sign}{symbol}{amount}"
