from app.database.database import Base
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Date, Text, Uuid
from sqlalchemy.orm import relationship
from datetime import date
from uuid import uuid4
from app.common.mixins import TimestampMixin
from app.modules.invoices.totals import line_total
import enum


def today() -> date:
    return date.today()


class InvoiceStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class Invoice(Base, TimestampMixin):
    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid4)

    # Referencia simple al cliente: sin FK para que borrar el cliente no afecte la factura
    client_id = Column(Uuid, nullable=False, index=True)

    invoice_number = Column(String(50), nullable=False, unique=True, index=True)
    status = Column(
        Enum(InvoiceStatus, values_callable=lambda e: [m.value for m in e], name="invoice_status"),
        nullable=False,
        default=InvoiceStatus.PENDING
    )

    # Dates
    date = Column(Date, nullable=False, default=today)
    due_date = Column(Date, nullable=False, default=today)

    # Totals (calculated)
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    tax = Column(Numeric(15, 2), nullable=False, default=0)
    total = Column(Numeric(15, 2), nullable=False, default=0)

    # Email delivery tracking
    last_sent_at = Column(DateTime(timezone=True), nullable=True)
    email_sent_count = Column(Integer, nullable=False, default=0)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position"
    )


class InvoiceItem(Base):
    """Línea de factura embebida: no se expone por separado."""
    __tablename__ = "invoice_items"

    id = Column(Uuid, primary_key=True, default=uuid4)
    invoice_id = Column(Uuid, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    description = Column(Text, nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)
    price = Column(Numeric(15, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="items")

    @property
    def line_total(self):
        """quantity * price, siempre recalculado"""
        return line_total(self.quantity, self.price)
