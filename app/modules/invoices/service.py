"""
Servicios de negocio para el módulo de Facturas

- Creación con totales calculados y número único INV-XXXXXXXX-XXX
- Listado con filtro por cliente y ordenamiento por fecha o monto
- Generación de PDF (stream o buffer) y envío por email
"""

import logging
import tempfile
from datetime import date
from typing import Callable, Dict, Iterator, List, Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.common.mixins import utcnow
from app.modules.clients.models import Client
from app.modules.clients.schemas import ClientOut
from app.modules.email.service import EmailService, EmailServiceError
from app.modules.invoices.models import Invoice, InvoiceItem
from app.modules.invoices.numbering import generate_invoice_number
from app.modules.invoices.pdf import build_invoice_pdf, render_invoice_pdf, invoice_filename, format_money
from app.modules.invoices.schemas import (
    InvoiceCreate, InvoiceOut, InvoiceItemOut, ClientReference, ResolvedClient,
    SortField, SortOrder
)
from app.modules.invoices.totals import calculate_totals, MAX_AMOUNT

logger = logging.getLogger(__name__)

INVOICE_EMAIL_TEMPLATE = "invoice_email.html"
PDF_SPOOL_SIZE = 1024 * 1024
PDF_CHUNK_SIZE = 64 * 1024


class InvoiceService:
    def __init__(self, db: Session, number_generator: Callable[[], str] = generate_invoice_number):
        self.db = db
        self.number_generator = number_generator

    # ----------- serialización -----------

    def _to_out(self, invoice: Invoice, client: Optional[Client]) -> InvoiceOut:
        """El cliente se resuelve solo si aún existe; si no, queda como referencia."""
        if client is not None:
            link = ResolvedClient(client=ClientOut.model_validate(client))
        else:
            link = ClientReference(id=invoice.client_id)

        return InvoiceOut(
            id=invoice.id,
            client_id=invoice.client_id,
            client=link,
            items=[InvoiceItemOut.model_validate(item) for item in invoice.items],
            subtotal=invoice.subtotal,
            tax=invoice.tax,
            total=invoice.total,
            invoice_number=invoice.invoice_number,
            date=invoice.date,
            due_date=invoice.due_date,
            status=invoice.status,
            created_at=invoice.created_at,
            last_sent_at=invoice.last_sent_at,
            email_sent_count=invoice.email_sent_count or 0
        )

    def _clients_by_id(self, client_ids) -> Dict[UUID, Client]:
        ids = set(client_ids)
        if not ids:
            return {}
        clients = self.db.query(Client).filter(Client.id.in_(ids)).all()
        return {client.id: client for client in clients}

    # ----------- consultas -----------

    def get_invoice(self, invoice_id: UUID) -> Invoice:
        invoice = self.db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if not invoice:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Invoice not found"
            )
        return invoice

    def resolve_client(self, invoice: Invoice) -> Client:
        """Cliente completo de la factura; 404 si fue eliminado."""
        client = self.db.query(Client).filter(Client.id == invoice.client_id).first()
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )
        return client

    def get_invoice_detail(self, invoice_id: UUID) -> InvoiceOut:
        invoice = self.get_invoice(invoice_id)
        client = self._clients_by_id([invoice.client_id]).get(invoice.client_id)
        return self._to_out(invoice, client)

    def list_invoices(
        self,
        client_id: Optional[UUID] = None,
        sort_by: Optional[SortField] = None,
        sort_order: SortOrder = SortOrder.DESC
    ) -> List[InvoiceOut]:
        """Listar facturas; por defecto las más recientes primero."""
        query = self.db.query(Invoice)
        if client_id:
            query = query.filter(Invoice.client_id == client_id)

        if sort_by is not None:
            column = Invoice.date if sort_by == SortField.DATE else Invoice.total
            ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()
            query = query.order_by(ordering, Invoice.created_at.desc())
        else:
            query = query.order_by(Invoice.created_at.desc())

        invoices = query.all()
        clients = self._clients_by_id(inv.client_id for inv in invoices)
        return [self._to_out(inv, clients.get(inv.client_id)) for inv in invoices]

    # ----------- numeración -----------

    def _number_exists(self, number: str) -> bool:
        return self.db.query(Invoice.id).filter(Invoice.invoice_number == number).first() is not None

    def next_invoice_number(self) -> str:
        """Regenerar hasta encontrar un número no usado."""
        number = self.number_generator()
        while self._number_exists(number):
            logger.debug(f"Invoice number collision: {number}")
            number = self.number_generator()
        return number

    # ----------- CRUD -----------

    def create_invoice(self, invoice_data: InvoiceCreate) -> InvoiceOut:
        client = self.db.query(Client).filter(Client.id == invoice_data.client_id).first()
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )

        totals = calculate_totals(invoice_data.items, invoice_data.tax)
        if totals.total > MAX_AMOUNT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invoice total exceeds the maximum allowed amount"
            )
        today = date.today()

        invoice = Invoice(
            client_id=client.id,
            invoice_number=self.next_invoice_number(),
            date=invoice_data.date or today,
            due_date=invoice_data.due_date or today,
            status=invoice_data.status,
            subtotal=totals.subtotal,
            tax=totals.tax,
            total=totals.total,
            email_sent_count=0
        )
        invoice.items = [
            InvoiceItem(
                position=position,
                description=item.description,
                quantity=item.quantity,
                price=item.price
            )
            for position, item in enumerate(invoice_data.items)
        ]

        try:
            self.db.add(invoice)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invoice number already exists"
            )

        self.db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} created for client {client.id}")
        return self._to_out(invoice, client)

    def delete_invoice(self, invoice_id: UUID) -> None:
        invoice = self.get_invoice(invoice_id)
        self.db.delete(invoice)
        self.db.commit()
        logger.info(f"Invoice deleted: {invoice_id}")

    # ----------- PDF -----------

    def stream_invoice_pdf(self, invoice_id: UUID, currency: str = "USD") -> Tuple[str, Iterator[bytes]]:
        """
        Renderizar el PDF en un archivo temporal y devolver (filename, iterador de bytes).
        """
        invoice = self.get_invoice(invoice_id)
        client = self.resolve_client(invoice)

        spool = tempfile.SpooledTemporaryFile(max_size=PDF_SPOOL_SIZE)
        try:
            render_invoice_pdf(spool, invoice, client, currency)
            spool.seek(0)
        except Exception:
            spool.close()
            raise

        def iterate() -> Iterator[bytes]:
            with spool:
                while chunk := spool.read(PDF_CHUNK_SIZE):
                    yield chunk

        return invoice_filename(invoice), iterate()

    # ----------- email -----------

    def send_invoice_email(
        self,
        invoice_id: UUID,
        email_service: EmailService,
        currency: str = "USD"
    ) -> InvoiceOut:
        """
        Enviar la factura en PDF al email del cliente.

        Solo si el envío tiene éxito se incrementa email_sent_count y se
        actualiza last_sent_at. No hay reintentos.
        """
        invoice = self.get_invoice(invoice_id)
        client = self.resolve_client(invoice)

        pdf_content = build_invoice_pdf(invoice, client, currency)
        context = {
            "client_name": client.name,
            "invoice_number": invoice.invoice_number,
            "invoice_date": invoice.date.isoformat(),
            "due_date": invoice.due_date.isoformat(),
            "amount_due": format_money(invoice.total, currency),
            "status": invoice.status.value.upper(),
            "sender_name": email_service.config.MAIL_FROM_NAME,
        }

        try:
            email_service.send_template_email(
                to_emails=[client.email],
                subject=f"Invoice {invoice.invoice_number} for {client.name}",
                template_name=INVOICE_EMAIL_TEMPLATE,
                context=context,
                attachments=[(invoice_filename(invoice), pdf_content)]
            )
        except EmailServiceError as e:
            logger.error(f"Invoice {invoice.invoice_number} could not be emailed: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e)
            )

        invoice.email_sent_count = Invoice.email_sent_count + 1
        invoice.last_sent_at = utcnow()
        self.db.commit()
        self.db.refresh(invoice)

        logger.info(f"Invoice {invoice.invoice_number} emailed to {client.email} ({invoice.email_sent_count} sends)")
        return self._to_out(invoice, client)
