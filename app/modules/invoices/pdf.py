"""
Renderizado de facturas en PDF con reportlab.

Dos modos de salida:
- render_invoice_pdf(sink, ...): escribe el documento en cualquier objeto binario con write()
- build_invoice_pdf(...): devuelve los bytes completos (para adjuntos de email)

El layout es fijo: título, datos de la factura, bloque "Bill To", tabla de
items con columnas fijas y bloque de totales. Si la tabla no cabe en la
página se continúa en una nueva con el encabezado repetido.
"""

import io
from decimal import Decimal
from typing import BinaryIO, List

from reportlab.lib.pagesizes import LETTER
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from app.modules.clients.models import Client
from app.modules.invoices.models import Invoice
from app.modules.invoices.totals import line_total

# Layout (puntos)
PAGE_WIDTH, PAGE_HEIGHT = LETTER
MARGIN = 50
TABLE_LEFT = 50
DESCRIPTION_WIDTH = 300
QUANTITY_WIDTH = 80
PRICE_WIDTH = 100
TOTAL_WIDTH = 100
ROW_HEIGHT = 30
HEADER_GAP = 20
LINE_HEIGHT = 16
DESCRIPTION_LEADING = 12

QUANTITY_X = TABLE_LEFT + DESCRIPTION_WIDTH
PRICE_X = QUANTITY_X + QUANTITY_WIDTH
TOTAL_X = PRICE_X + PRICE_WIDTH
TABLE_RIGHT = TOTAL_X + TOTAL_WIDTH
BILL_TO_WIDTH = TABLE_RIGHT - MARGIN

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "Rs. ",
}


def format_money(amount, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{symbol}{Decimal(amount):,.2f}"


def format_quantity(quantity) -> str:
    """2.000 -> '2', 1.500 -> '1.5'"""
    return format(Decimal(quantity).normalize(), "f")


def wrap_text(value: str, font: str, size: int, width: float) -> List[str]:
    """Partir texto en líneas que caben en width, respetando los saltos de línea."""
    lines = []
    for paragraph in (value or "").splitlines() or [""]:
        lines.extend(simpleSplit(paragraph, font, size, width) or [""])
    return lines


def invoice_filename(invoice: Invoice) -> str:
    return f"invoice-{invoice.invoice_number}.pdf"


class _InvoiceCanvas:
    """Cursor vertical medido desde el borde superior de la página."""

    def __init__(self, sink: BinaryIO, invoice: Invoice):
        self.pdf = canvas.Canvas(sink, pagesize=LETTER)
        self.pdf.setTitle(f"Invoice {invoice.invoice_number}")
        self.y = MARGIN

    def text(self, x: float, value: str, font: str = "Helvetica", size: int = 12):
        self.pdf.setFont(font, size)
        self.pdf.drawString(x, PAGE_HEIGHT - self.y, value)

    def centered(self, value: str, font: str = "Helvetica-Bold", size: int = 20):
        self.pdf.setFont(font, size)
        self.pdf.drawCentredString(PAGE_WIDTH / 2, PAGE_HEIGHT - self.y, value)

    def rule(self):
        self.pdf.line(TABLE_LEFT, PAGE_HEIGHT - self.y, TABLE_RIGHT, PAGE_HEIGHT - self.y)

    def fits(self, height: float) -> bool:
        return self.y + height <= PAGE_HEIGHT - MARGIN

    def new_page(self):
        self.pdf.showPage()
        self.y = MARGIN

    def save(self):
        self.pdf.save()


def _draw_header(doc: _InvoiceCanvas, invoice: Invoice, client: Client):
    doc.y += 20
    doc.centered("INVOICE")
    doc.y += 30

    for line in (
        f"Invoice Number: {invoice.invoice_number}",
        f"Date: {invoice.date.isoformat()}",
        f"Due Date: {invoice.due_date.isoformat()}",
        f"Status: {invoice.status.value.upper()}",
    ):
        doc.text(MARGIN, line)
        doc.y += LINE_HEIGHT

    doc.y += LINE_HEIGHT
    doc.text(MARGIN, "Bill To:", font="Helvetica-Bold")
    doc.y += LINE_HEIGHT
    for value in (client.name, client.email, client.phone, client.address):
        for line in wrap_text(value, "Helvetica", 12, BILL_TO_WIDTH):
            if not doc.fits(LINE_HEIGHT):
                doc.new_page()
            doc.text(MARGIN, line)
            doc.y += LINE_HEIGHT
    doc.y += 2 * LINE_HEIGHT


def _draw_table_header(doc: _InvoiceCanvas):
    for x, label in (
        (TABLE_LEFT, "Description"),
        (QUANTITY_X, "Qty"),
        (PRICE_X, "Price"),
        (TOTAL_X, "Total"),
    ):
        doc.text(x, label, font="Helvetica-Bold", size=10)
    doc.y += HEADER_GAP


def _draw_items(doc: _InvoiceCanvas, invoice: Invoice, currency: str):
    _draw_table_header(doc)

    for item in invoice.items:
        lines = wrap_text(item.description, "Helvetica", 10, DESCRIPTION_WIDTH - 10)
        height = max(ROW_HEIGHT, len(lines) * DESCRIPTION_LEADING + 10)
        if not doc.fits(height):
            doc.new_page()
            _draw_table_header(doc)

        row_top = doc.y
        doc.text(QUANTITY_X, format_quantity(item.quantity), size=10)
        doc.text(PRICE_X, format_money(item.price, currency), size=10)
        doc.text(TOTAL_X, format_money(line_total(item.quantity, item.price), currency), size=10)
        for line in lines:
            doc.text(TABLE_LEFT, line, size=10)
            doc.y += DESCRIPTION_LEADING
        doc.y = row_top + height


def _draw_totals(doc: _InvoiceCanvas, invoice: Invoice, currency: str):
    if not doc.fits(100):
        doc.new_page()

    doc.y += 10
    doc.rule()
    doc.y += 20
    doc.text(QUANTITY_X, f"Subtotal: {format_money(invoice.subtotal, currency)}")
    doc.y += 20
    doc.text(QUANTITY_X, f"Tax: {format_money(invoice.tax, currency)}")
    doc.y += 20
    doc.text(QUANTITY_X, f"Total: {format_money(invoice.total, currency)}", font="Helvetica-Bold", size=14)


def render_invoice_pdf(sink: BinaryIO, invoice: Invoice, client: Client, currency: str = "USD") -> None:
    """Escribir el PDF de la factura en sink."""
    doc = _InvoiceCanvas(sink, invoice)
    _draw_header(doc, invoice, client)
    _draw_items(doc, invoice, currency)
    _draw_totals(doc, invoice, currency)
    doc.save()


def build_invoice_pdf(invoice: Invoice, client: Client, currency: str = "USD") -> bytes:
    """Generar el PDF completo en memoria."""
    buffer = io.BytesIO()
    render_invoice_pdf(buffer, invoice, client, currency)
    return buffer.getvalue()
