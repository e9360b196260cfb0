"""Fixed-point money with four fractional digits.

Amounts are ``Decimal`` values quantized to ``0.0001``. Balance arithmetic
goes through ``MONEY_CONTEXT``, which traps any inexact result, so a balance
either changes by exactly the requested amount or not at all.
"""
import decimal
import re
from decimal import Decimal, ROUND_DOWN

PLACES = 4
QUANTUM = Decimal(1).scaleb(-PLACES)
ZERO = Decimal(0).quantize(QUANTUM)

AMOUNT_PATTERN = re.compile(r'[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?')

PARSE_CONTEXT = decimal.Context(
    prec=38,
    rounding=ROUND_DOWN,
    traps=[decimal.InvalidOperation],
)

MONEY_CONTEXT = decimal.Context(
    prec=38,
    rounding=ROUND_DOWN,
    traps=[decimal.Inexact, decimal.Overflow, decimal.InvalidOperation],
)


class MoneyOverflow(ArithmeticError):

    """Result does not fit in the money representation."""


def parse_money(text):
    """Parse decimal text into money, truncating extra fractional digits.

    Raises ``ValueError`` for text that is not a finite decimal number.
    """
    text = text.strip()
    if not AMOUNT_PATTERN.fullmatch(text):
        raise ValueError(f'invalid amount {text!r}')
    try:
        value = Decimal(text)
    except decimal.InvalidOperation:
        raise ValueError(f'invalid amount {text!r}') from None
    if not value.is_finite():
        raise ValueError(f'invalid amount {text!r}')
    try:
        return value.quantize(QUANTUM, context=PARSE_CONTEXT)
    except decimal.DecimalException:
        raise ValueError(f'amount out of range {text!r}') from None


def add(left, right):
    """Add two money values exactly."""
    try:
        return MONEY_CONTEXT.add(left, right).quantize(QUANTUM, context=MONEY_CONTEXT)
    except decimal.DecimalException as err:
        raise MoneyOverflow(f'{left} + {right}') from err


def subtract(left, right):
    """Subtract two money values exactly."""
    try:
        return MONEY_CONTEXT.subtract(left, right).quantize(QUANTUM, context=MONEY_CONTEXT)
    except decimal.DecimalException as err:
        raise MoneyOverflow(f'{left} - {right}') from err


def format_money(value):
    """Render money with exactly four decimal places."""
    return f'{value.quantize(QUANTUM):f}'
