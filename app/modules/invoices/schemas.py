from pydantic import Field, field_validator, model_validator
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union
from uuid import UUID
import datetime as dt
from enum import Enum

from app.common.schemas import CamelModel, Money, Quantity, RequiredStr
from app.modules.clients.schemas import ClientOut
from app.modules.invoices.models import InvoiceStatus


class SortField(str, Enum):
    DATE = "date"
    AMOUNT = "amount"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# Invoice Item Schemas
class InvoiceItemCreate(CamelModel):
    description: RequiredStr
    # Misma precisión que las columnas Numeric(10, 3) y Numeric(15, 2)
    quantity: Decimal = Field(..., gt=0, max_digits=10, decimal_places=3, description="Cantidad debe ser mayor a 0")
    price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2, description="Precio unitario")


class InvoiceItemOut(CamelModel):
    description: str
    quantity: Quantity
    price: Money
    line_total: Money


# Client link: referencia simple o cliente resuelto
class ClientReference(CamelModel):
    kind: Literal["reference"] = "reference"
    id: UUID


class ResolvedClient(CamelModel):
    kind: Literal["resolved"] = "resolved"
    client: ClientOut


ClientLink = Annotated[Union[ClientReference, ResolvedClient], Field(discriminator="kind")]


# Invoice Schemas
class InvoiceCreate(CamelModel):
    client_id: UUID
    items: List[InvoiceItemCreate] = Field(..., min_length=1, description="Debe incluir al menos un item")
    tax: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    date: Optional[dt.date] = None
    due_date: Optional[dt.date] = None
    status: InvoiceStatus = InvoiceStatus.PENDING

    @field_validator('tax', mode='before')
    @classmethod
    def default_tax(cls, v):
        return Decimal("0") if v is None else v

    @model_validator(mode='after')
    def validate_due_date(self):
        if self.date and self.due_date and self.due_date < self.date:
            raise ValueError('Due date cannot be earlier than the invoice date')
        return self


class InvoiceOut(CamelModel):
    id: UUID
    client_id: UUID
    client: ClientLink
    items: List[InvoiceItemOut]
    subtotal: Money
    tax: Money
    total: Money
    invoice_number: str
    date: dt.date
    due_date: dt.date
    status: InvoiceStatus
    created_at: dt.datetime
    last_sent_at: Optional[dt.datetime] = None
    email_sent_count: int = 0


class InvoiceDeleted(CamelModel):
    message: str
    id: UUID


class InvoiceEmailResponse(CamelModel):
    message: str
    invoice: InvoiceOut
