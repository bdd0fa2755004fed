"""
Helper para cálculo de totales de factura

Política de redondeo: punto fijo con Decimal. Cada línea se redondea a
centavos (ROUND_HALF_UP) y el subtotal es la suma de esas líneas, de modo que
los totales por línea mostrados siempre suman el subtotal.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Protocol, Union

CENT = Decimal("0.01")
# Mayor monto representable en Numeric(15, 2)
MAX_AMOUNT = Decimal("9999999999999.99")

Number = Union[Decimal, int, float, str]


class PricedItem(Protocol):
    quantity: Decimal
    price: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() evita arrastrar el error binario de los float
    return Decimal(str(value))


def to_cents(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: Number, price: Number) -> Decimal:
    """Total de una línea, a centavos."""
    return to_cents(to_decimal(quantity) * to_decimal(price))


def calculate_totals(items: Iterable[PricedItem], tax: Number = 0) -> InvoiceTotals:
    """
    Calcular subtotal, impuesto y total de una factura.

    Args:
        items: Líneas con quantity y price
        tax: Monto de impuesto (>= 0)

    Returns:
        InvoiceTotals con subtotal = suma de line_total y total = subtotal + tax
    """
    tax_amount = to_cents(tax)
    if tax_amount < 0:
        raise ValueError("Tax must be greater than or equal to 0")

    subtotal = sum(
        (line_total(item.quantity, item.price) for item in items),
        Decimal("0.00")
    )
    return InvoiceTotals(subtotal=subtotal, tax=tax_amount, total=subtotal + tax_amount)
