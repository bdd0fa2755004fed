"""
Router para el módulo de Facturas

Todos los endpoints requieren autenticación (Bearer token).
"""

from fastapi import APIRouter, Depends, status, Path, Query
from fastapi.responses import StreamingResponse
from typing import List, Optional
from uuid import UUID

from app.dependencies.dbDependecies import db_dependency
from app.dependencies.userDependencies import user_dependency
from app.modules.email.service import EmailService, get_email_service
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.schemas import (
    InvoiceCreate, InvoiceOut, InvoiceDeleted, InvoiceEmailResponse,
    SortField, SortOrder
)

router = APIRouter(
    prefix="/invoices",
    tags=["Invoices"],
    responses={404: {"description": "Not found"}}
)


@router.get("", response_model=List[InvoiceOut])
def list_invoices(
    db: db_dependency,
    current_user: user_dependency,
    client_id: Optional[UUID] = Query(None, alias="clientId", description="Filtrar por cliente"),
    sort_by: Optional[SortField] = Query(None, alias="sortBy", description="date | amount"),
    sort_order: SortOrder = Query(SortOrder.DESC, alias="sortOrder", description="asc | desc")
):
    """
    Listar facturas

    Sin sortBy se ordenan por fecha de creación, las más recientes primero.
    """
    return InvoiceService(db).list_invoices(client_id=client_id, sort_by=sort_by, sort_order=sort_order)


@router.post("", response_model=InvoiceOut, status_code=status.HTTP_201_CREATED)
def create_invoice(invoice_data: InvoiceCreate, db: db_dependency, current_user: user_dependency):
    """
    Crear una factura

    - **clientId**: debe existir
    - **items**: al menos uno (quantity > 0, price >= 0)
    - **tax**: monto absoluto, por defecto 0
    - **date** / **dueDate**: por defecto hoy
    - El número INV-XXXXXXXX-XXX y los totales se calculan en el servidor
    """
    return InvoiceService(db).create_invoice(invoice_data)


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(
    db: db_dependency,
    current_user: user_dependency,
    invoice_id: UUID = Path(..., description="ID de la factura")
):
    return InvoiceService(db).get_invoice_detail(invoice_id)


@router.delete("/{invoice_id}", response_model=InvoiceDeleted)
def delete_invoice(
    db: db_dependency,
    current_user: user_dependency,
    invoice_id: UUID = Path(..., description="ID de la factura")
):
    InvoiceService(db).delete_invoice(invoice_id)
    return InvoiceDeleted(message="Invoice deleted successfully", id=invoice_id)


@router.get("/{invoice_id}/pdf")
def download_invoice_pdf(
    db: db_dependency,
    current_user: user_dependency,
    invoice_id: UUID = Path(..., description="ID de la factura")
):
    """Descargar la factura en PDF (moneda del usuario autenticado)"""
    filename, content = InvoiceService(db).stream_invoice_pdf(invoice_id, currency=current_user.currency)
    return StreamingResponse(
        content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post("/{invoice_id}/send-email", response_model=InvoiceEmailResponse)
def send_invoice_email(
    db: db_dependency,
    current_user: user_dependency,
    invoice_id: UUID = Path(..., description="ID de la factura"),
    email_service: EmailService = Depends(get_email_service)
):
    """
    Enviar la factura por email al cliente con el PDF adjunto

    Un único intento; si el envío falla responde 500 y los contadores no cambian.
    """
    invoice = InvoiceService(db).send_invoice_email(invoice_id, email_service, currency=current_user.currency)
    return InvoiceEmailResponse(message="Invoice sent successfully", invoice=invoice)
