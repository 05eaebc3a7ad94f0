"""Display formatting for money, numbers and percentages."""

from __future__ import annotations

from enum import Enum
from typing import Any

from manpower_quoter.domain_models.values import to_float


class Currency(str, Enum):
    USD = "USD"
    QAR = "QAR"
    EUR = "EUR"

    @classmethod
    def parse(cls, value: "str | Currency | None", default: "Currency | None" = None) -> "Currency":
        """Return the currency named by ``value`` (case-insensitive)."""

        if isinstance(value, Currency):
            return value
        text = (value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            if default is not None:
                return default
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown currency {value!r}; expected one of {choices}") from None


def _grouped(amount: float, decimals: int) -> str:
    return f"{amount:,.{decimals}f}"


def _european(text: str) -> str:
    return text.replace(",", "\0").replace(".", ",").replace("\0", ".")


def format_money(amount: Any, currency: Currency | str = Currency.USD) -> str:
    """Format ``amount`` with two decimals in the currency's usual layout.

    >>> format_money(1234.5, Currency.USD)
    '$1,234.50'
    >>> format_money(1234.5, Currency.EUR)
    '1.234,50 €'
    """

    code = Currency.parse(currency)
    number = to_float(amount) or 0.0
    body = _grouped(abs(number), 2)
    if code is Currency.USD:
        formatted = f"${body}"
    elif code is Currency.QAR:
        formatted = f"QAR {body}"
    else:
        formatted = f"{_european(body)} €"
    return f"-{formatted}" if number < 0 and body.strip("0.,") else formatted


def format_number(value: Any) -> str:
    """Thousands separators and at most three decimals, trailing zeros dropped."""

    number = to_float(value) or 0.0
    text = _grouped(number, 3)
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def format_percent(value: Any, *, decimals: int = 1) -> str:
    """Format a percentage expressed in points (``12.5`` -> ``'12.5%'``)."""

    number = to_float(value) or 0.0
    return f"{number:,.{decimals}f}%"


__all__ = ["Currency", "format_money", "format_number", "format_percent"]
