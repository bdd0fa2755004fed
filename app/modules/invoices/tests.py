"""
Tests para el módulo de Facturas

Cubren:
- Cálculo de totales con Decimal (identidades y redondeo)
- Numeración INV-XXXXXXXX-XXX única, con reintento ante colisiones
- CRUD vía API, filtros y ordenamiento
- Generación de PDF (re-parseado con PyMuPDF)
- Envío por email con transporte SMTP falso
"""

from collections import defaultdict
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import fitz
import pytest
from fastapi import HTTPException

from app.main import app
from app.core.config import MailSettings
from app.modules.clients.models import Client
from app.modules.email.service import EmailService, get_email_service
from app.modules.invoices.models import Invoice
from app.modules.invoices.numbering import INVOICE_NUMBER_PATTERN, generate_invoice_number
from app.modules.invoices.pdf import (
    DESCRIPTION_WIDTH, MARGIN, QUANTITY_X, format_money, format_quantity, invoice_filename, wrap_text
)
from app.modules.invoices.schemas import InvoiceCreate
from app.modules.invoices.service import InvoiceService
from app.modules.invoices.totals import calculate_totals, line_total, to_cents


def item(quantity, price):
    return SimpleNamespace(quantity=quantity, price=price)


@pytest.fixture
def invoice_payload(sample_client):
    return {
        "clientId": sample_client["id"],
        "items": [{"description": "Web design", "quantity": 2, "price": 50}],
        "tax": 10
    }


@pytest.fixture
def sample_invoice(client, auth_headers, invoice_payload):
    response = client.post("/invoices", json=invoice_payload, headers=auth_headers)
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def db_client(db_session):
    record = Client(name="Acme Corp", email="billing@acme.com", phone="555", address="1 Market St")
    db_session.add(record)
    db_session.commit()
    return record


# ===== TOTALES =====

class TestTotals:

    def test_subtotal_is_sum_of_lines(self):
        totals = calculate_totals([item(2, 50), item(1, "19.99")], tax=0)
        assert totals.subtotal == Decimal("119.99")
        assert totals.total == totals.subtotal + totals.tax

    def test_total_includes_tax(self):
        totals = calculate_totals([item(2, 50)], tax=10)
        assert totals.subtotal == Decimal("100.00")
        assert totals.tax == Decimal("10.00")
        assert totals.total == Decimal("110.00")

    def test_float_inputs_do_not_drift(self):
        totals = calculate_totals([item(3, 0.1)], tax=0.2)
        assert totals.subtotal == Decimal("0.30")
        assert totals.total == Decimal("0.50")

    def test_subtotal_is_sum_of_rounded_lines(self):
        # 0.5 x 0.01 = 0.005 -> 0.01 por línea
        items = [item("0.5", "0.01"), item("0.5", "0.01")]
        totals = calculate_totals(items)
        assert totals.subtotal == Decimal("0.02")
        assert totals.subtotal == sum(line_total(i.quantity, i.price) for i in items)

    def test_half_up_rounding(self):
        assert line_total("1.5", "19.99") == Decimal("29.99")
        assert to_cents("0.005") == Decimal("0.01")

    def test_negative_tax_rejected(self):
        with pytest.raises(ValueError):
            calculate_totals([item(1, 10)], tax=-1)

    def test_zero_price_is_allowed(self):
        totals = calculate_totals([item(5, 0)])
        assert totals.total == Decimal("0.00")


# ===== NUMERACIÓN =====

class TestInvoiceNumbering:

    def test_number_format(self):
        for _ in range(20):
            assert INVOICE_NUMBER_PATTERN.match(generate_invoice_number())

    def test_collision_is_regenerated(self, db_session, db_client):
        numbers = iter(["INV-00000001-001", "INV-00000001-001", "INV-00000001-002"])
        service = InvoiceService(db_session, number_generator=lambda: next(numbers))
        data = InvoiceCreate(client_id=db_client.id, items=[{"description": "A", "quantity": 1, "price": 1}])

        first = service.create_invoice(data)
        second = service.create_invoice(data)

        assert first.invoice_number == "INV-00000001-001"
        assert second.invoice_number == "INV-00000001-002"

    def test_duplicate_on_insert_is_rejected(self, db_session, db_client, monkeypatch):
        service = InvoiceService(db_session, number_generator=lambda: "INV-00000002-001")
        data = InvoiceCreate(client_id=db_client.id, items=[{"description": "A", "quantity": 1, "price": 1}])
        service.create_invoice(data)

        # Simula una carrera: la verificación previa no ve el número ya usado
        monkeypatch.setattr(service, "_number_exists", lambda number: False)
        with pytest.raises(HTTPException) as exc_info:
            service.create_invoice(data)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invoice number already exists"
        assert db_session.query(Invoice).count() == 1

    def test_numbers_are_unique(self, client, auth_headers, invoice_payload):
        numbers = {
            client.post("/invoices", json=invoice_payload, headers=auth_headers).json()["invoiceNumber"]
            for _ in range(10)
        }
        assert len(numbers) == 10


# ===== API =====

class TestInvoiceAPI:

    def test_create_invoice(self, sample_invoice, sample_client):
        assert sample_invoice["subtotal"] == 100
        assert sample_invoice["tax"] == 10
        assert sample_invoice["total"] == 110
        assert sample_invoice["status"] == "pending"
        assert INVOICE_NUMBER_PATTERN.match(sample_invoice["invoiceNumber"])
        assert sample_invoice["emailSentCount"] == 0
        assert sample_invoice["lastSentAt"] is None
        assert sample_invoice["client"]["kind"] == "resolved"
        assert sample_invoice["client"]["client"]["id"] == sample_client["id"]
        assert sample_invoice["items"] == [
            {"description": "Web design", "quantity": 2, "price": 50, "lineTotal": 100}
        ]

    def test_dates_default_to_today(self, sample_invoice):
        assert sample_invoice["date"] == sample_invoice["dueDate"]

    def test_create_with_dates_and_status(self, client, auth_headers, invoice_payload):
        response = client.post("/invoices", json={
            **invoice_payload,
            "date": "2024-03-01",
            "dueDate": "2024-03-31",
            "status": "paid"
        }, headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["date"] == "2024-03-01"
        assert body["dueDate"] == "2024-03-31"
        assert body["status"] == "paid"

    def test_tax_defaults_to_zero(self, client, auth_headers, invoice_payload):
        payload = dict(invoice_payload)
        del payload["tax"]
        body = client.post("/invoices", json=payload, headers=auth_headers).json()
        assert body["tax"] == 0
        assert body["total"] == body["subtotal"] == 100

    def test_items_keep_order(self, client, auth_headers, invoice_payload):
        items = [{"description": f"Item {i}", "quantity": 1, "price": i} for i in range(5)]
        body = client.post(
            "/invoices", json={**invoice_payload, "items": items}, headers=auth_headers
        ).json()
        assert [i["description"] for i in body["items"]] == [f"Item {i}" for i in range(5)]

    @pytest.mark.parametrize("changes", [
        {"items": []},
        {"items": [{"description": "A", "quantity": 0, "price": 1}]},
        {"items": [{"description": "A", "quantity": 1, "price": -1}]},
        {"items": [{"description": "  ", "quantity": 1, "price": 1}]},
        {"tax": -5},
        {"status": "overdue"},
        {"date": "2024-03-10", "dueDate": "2024-03-01"},
    ])
    def test_create_validation(self, client, auth_headers, invoice_payload, changes):
        response = client.post("/invoices", json={**invoice_payload, **changes}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"]

    @pytest.mark.parametrize("changes", [
        {"items": [{"description": "A", "quantity": "0.0001", "price": 100}]},
        {"items": [{"description": "A", "quantity": 3, "price": "0.333"}]},
        {"items": [{"description": "A", "quantity": 1, "price": "123456789012345.5"}]},
        {"tax": "1.005"},
    ])
    def test_precision_beyond_storage_rejected(self, client, auth_headers, invoice_payload, changes):
        response = client.post("/invoices", json={**invoice_payload, **changes}, headers=auth_headers)
        assert response.status_code == 400

    def test_total_above_maximum_rejected(self, client, auth_headers, invoice_payload):
        response = client.post("/invoices", json={
            **invoice_payload,
            "items": [{"description": "A", "quantity": 9999999, "price": "9999999999999.99"}]
        }, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invoice total exceeds the maximum allowed amount"

    def test_line_totals_add_up_to_subtotal(self, client, auth_headers, invoice_payload):
        created = client.post("/invoices", json={
            **invoice_payload,
            "tax": 0,
            "items": [
                {"description": "A", "quantity": "0.5", "price": "0.01"},
                {"description": "B", "quantity": "0.5", "price": "0.01"},
            ]
        }, headers=auth_headers).json()

        body = client.get(f"/invoices/{created['id']}", headers=auth_headers).json()
        line_totals = [Decimal(str(i["lineTotal"])) for i in body["items"]]

        assert line_totals == [Decimal("0.01"), Decimal("0.01")]
        assert sum(line_totals) == Decimal(str(body["subtotal"])) == Decimal("0.02")

    def test_fractional_items_are_stored_as_sent(self, client, auth_headers, invoice_payload):
        items = [
            {"description": "Hosting", "quantity": "1.5", "price": "19.99"},
            {"description": "Support", "quantity": "0.25", "price": "120.00"},
            {"description": "Stickers", "quantity": 3, "price": "0.33"},
        ]
        created = client.post("/invoices", json={**invoice_payload, "tax": "1.50", "items": items}, headers=auth_headers).json()
        body = client.get(f"/invoices/{created['id']}", headers=auth_headers).json()

        for sent, stored in zip(items, body["items"]):
            quantity = Decimal(str(stored["quantity"]))
            price = Decimal(str(stored["price"]))
            assert quantity == Decimal(str(sent["quantity"]))
            assert price == Decimal(sent["price"])
            assert Decimal(str(stored["lineTotal"])) == line_total(quantity, price)

        subtotal = sum(Decimal(str(i["lineTotal"])) for i in body["items"])
        assert subtotal == Decimal(str(body["subtotal"])) == Decimal("60.98")
        assert Decimal(str(body["total"])) == subtotal + Decimal("1.50")

    def test_due_date_message(self, client, auth_headers, invoice_payload):
        response = client.post("/invoices", json={
            **invoice_payload, "date": "2024-03-10", "dueDate": "2024-03-01"
        }, headers=auth_headers)
        assert response.json()["detail"] == "Due date cannot be earlier than the invoice date"

    def test_create_for_unknown_client(self, client, auth_headers, invoice_payload):
        response = client.post("/invoices", json={**invoice_payload, "clientId": str(uuid4())}, headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    def test_requires_auth(self, client, invoice_payload):
        assert client.get("/invoices").status_code == 401
        assert client.post("/invoices", json=invoice_payload).status_code == 401

    def test_get_invoice(self, client, auth_headers, sample_invoice):
        response = client.get(f"/invoices/{sample_invoice['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == sample_invoice

    def test_get_unknown_invoice(self, client, auth_headers):
        response = client.get(f"/invoices/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Invoice not found"

    def test_get_malformed_id(self, client, auth_headers):
        assert client.get("/invoices/123", headers=auth_headers).status_code == 400

    def test_list_filter_by_client(self, client, auth_headers, sample_invoice, client_data):
        other = client.post("/clients", json={**client_data, "email": "other@acme.com"}, headers=auth_headers).json()
        client.post("/invoices", json={
            "clientId": other["id"],
            "items": [{"description": "Other", "quantity": 1, "price": 1}]
        }, headers=auth_headers)

        all_invoices = client.get("/invoices", headers=auth_headers).json()
        filtered = client.get(f"/invoices?clientId={other['id']}", headers=auth_headers).json()

        assert len(all_invoices) == 2
        assert [i["clientId"] for i in filtered] == [other["id"]]

    def test_list_default_newest_first(self, client, auth_headers, invoice_payload):
        created = [
            client.post("/invoices", json=invoice_payload, headers=auth_headers).json()["id"]
            for _ in range(3)
        ]
        listed = [i["id"] for i in client.get("/invoices", headers=auth_headers).json()]
        assert listed == list(reversed(created))

    def test_list_sort_by_amount(self, client, auth_headers, invoice_payload):
        for price in (30, 10, 20):
            client.post("/invoices", json={
                **invoice_payload,
                "tax": 0,
                "items": [{"description": "X", "quantity": 1, "price": price}]
            }, headers=auth_headers)

        asc = client.get("/invoices?sortBy=amount&sortOrder=asc", headers=auth_headers).json()
        desc = client.get("/invoices?sortBy=amount&sortOrder=desc", headers=auth_headers).json()

        assert [i["total"] for i in asc] == [10, 20, 30]
        assert [i["total"] for i in desc] == [30, 20, 10]

    def test_list_sort_by_date(self, client, auth_headers, invoice_payload):
        for day in ("2024-01-15", "2024-01-01", "2024-01-31"):
            client.post("/invoices", json={**invoice_payload, "date": day, "dueDate": day}, headers=auth_headers)

        asc = client.get("/invoices?sortBy=date&sortOrder=asc", headers=auth_headers).json()
        assert [i["date"] for i in asc] == ["2024-01-01", "2024-01-15", "2024-01-31"]

    def test_list_invalid_sort(self, client, auth_headers):
        assert client.get("/invoices?sortBy=name", headers=auth_headers).status_code == 400

    def test_delete_invoice(self, client, auth_headers, sample_invoice):
        response = client.delete(f"/invoices/{sample_invoice['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Invoice deleted successfully", "id": sample_invoice["id"]}
        assert client.get(f"/invoices/{sample_invoice['id']}", headers=auth_headers).status_code == 404

    def test_delete_unknown_invoice(self, client, auth_headers):
        assert client.delete(f"/invoices/{uuid4()}", headers=auth_headers).status_code == 404


# ===== PDF =====

def pdf_rows(content: bytes):
    """Palabras del PDF agrupadas por línea base, en orden de lectura."""
    rows = defaultdict(list)
    with fitz.open(stream=content, filetype="pdf") as document:
        for page_number, page in enumerate(document):
            for x0, y0, x1, y1, word, *_ in page.get_text("words"):
                rows[(page_number, round(y1))].append((x0, word))
    return [sorted(words) for _, words in sorted(rows.items())]


def find_row(rows, first_word):
    return next(row for row in rows if row[0][1] == first_word)


def table_items(rows):
    """
    Reconstruir los ítems de la tabla: una fila con valores abre un ítem y las
    filas siguientes sin valores continúan su descripción.
    """
    items = []
    in_table = False
    for row in rows:
        first_word = row[0][1]
        if first_word == "Description":
            in_table = True
            continue
        if first_word == "Subtotal:":
            break
        if not in_table:
            continue
        description = [word for x, word in row if x < QUANTITY_X]
        values = [word for x, word in row if x >= QUANTITY_X]
        if values:
            items.append({"description": description, "values": values})
        else:
            items[-1]["description"].extend(description)
    return [{"description": " ".join(i["description"]), "values": i["values"]} for i in items]


class TestInvoicePDF:

    def test_helpers(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"
        assert format_money(10, "GBP") == "£10.00"
        assert format_quantity(Decimal("2.000")) == "2"
        assert format_quantity(Decimal("1.500")) == "1.5"

    def test_download_pdf(self, client, auth_headers, sample_invoice):
        response = client.get(f"/invoices/{sample_invoice['id']}/pdf", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            f'attachment; filename="invoice-{sample_invoice["invoiceNumber"]}.pdf"'
        )
        assert response.content.startswith(b"%PDF")

    def test_pdf_rows_match_invoice(self, client, auth_headers, sample_invoice, sample_client):
        content = client.get(f"/invoices/{sample_invoice['id']}/pdf", headers=auth_headers).content
        rows = pdf_rows(content)
        text = [" ".join(word for _, word in row) for row in rows]

        assert "INVOICE" in text
        assert f"Invoice Number: {sample_invoice['invoiceNumber']}" in text
        assert "Status: PENDING" in text
        assert sample_client["name"] in text
        assert sample_client["email"] in text

        item_row = find_row(rows, "Web")
        description = " ".join(word for x, word in item_row if x < QUANTITY_X)
        values = [word for x, word in item_row if x >= QUANTITY_X]
        assert description == "Web design"
        assert values == ["2", "$50.00", "$100.00"]

        assert "Subtotal: $100.00" in text
        assert "Tax: $10.00" in text
        assert "Total: $110.00" in text

    def test_pdf_rows_match_every_item(self, client, auth_headers, invoice_payload):
        long_description = (
            "Monthly retainer covering design reviews, accessibility audits, copy editing "
            "and two rounds of revisions for the marketing site"
        )
        items = [
            {"description": "Hosting", "quantity": "1.5", "price": "19.99"},
            {"description": long_description, "quantity": "0.25", "price": "1200.00"},
            {"description": "Stickers", "quantity": "3.125", "price": "0.33"},
        ]
        invoice = client.post("/invoices", json={**invoice_payload, "items": items}, headers=auth_headers).json()

        content = client.get(f"/invoices/{invoice['id']}/pdf", headers=auth_headers).content
        rows = pdf_rows(content)
        parsed = table_items(rows)

        assert len(wrap_text(long_description, "Helvetica", 10, DESCRIPTION_WIDTH - 10)) > 1
        assert len(parsed) == len(items)
        for sent, stored, row in zip(items, invoice["items"], parsed):
            quantity = Decimal(sent["quantity"])
            price = Decimal(sent["price"])
            assert row["description"] == sent["description"]
            assert row["values"] == [
                format_quantity(quantity),
                format_money(price),
                format_money(Decimal(str(stored["lineTotal"]))),
            ]
            assert Decimal(str(stored["lineTotal"])) == line_total(quantity, price)

        text = [" ".join(word for _, word in row) for row in rows]
        assert f"Subtotal: {format_money(Decimal(str(invoice['subtotal'])))}" in text

    def test_bill_to_address_is_wrapped(self, client, auth_headers, client_data):
        address = (
            "Suite 1200, Building C, Innovation Technology Park Northern Campus\n"
            "4500 Commonwealth Industrial Boulevard, Springfield, Massachusetts 01103, "
            "United States of America, Attention Accounts Payable Department"
        )
        customer = client.post("/clients", json={
            **client_data, "email": "far-away@acme.com", "address": address
        }, headers=auth_headers).json()
        invoice = client.post("/invoices", json={
            "clientId": customer["id"],
            "items": [{"description": "Consulting", "quantity": 1, "price": 10}]
        }, headers=auth_headers).json()

        content = client.get(f"/invoices/{invoice['id']}/pdf", headers=auth_headers).content
        with fitz.open(stream=content, filetype="pdf") as document:
            page_width = document[0].rect.width
            words = document[0].get_text("words")

        first = next(w[3] for w in words if w[4] == "Suite")
        last = next(w[3] for w in words if w[4] == "Department")
        address_words = sorted(
            (w for w in words if first - 1 <= w[3] <= last + 1),
            key=lambda w: (round(w[3]), w[0])
        )

        assert [w[4] for w in address_words] == address.split()
        assert max(w[2] for w in address_words) <= page_width - MARGIN
        # el salto de línea abre una nueva fila y el texto largo se parte
        assert len({round(w[3]) for w in address_words}) >= 3

    def test_pdf_uses_user_currency(self, client, invoice_payload):
        signup = client.post("/auth/signup", json={
            "email": "uk@example.com", "password": "supersecret", "name": "UK", "currency": "GBP"
        }).json()
        headers = {"Authorization": f"Bearer {signup['token']}"}
        invoice = client.post("/invoices", json=invoice_payload, headers=headers).json()

        content = client.get(f"/invoices/{invoice['id']}/pdf", headers=headers).content
        text = [" ".join(word for _, word in row) for row in pdf_rows(content)]
        assert "Total: £110.00" in text

    def test_long_invoice_spans_pages(self, client, auth_headers, invoice_payload):
        items = [{"description": f"Line {i}", "quantity": 1, "price": 1} for i in range(60)]
        invoice = client.post("/invoices", json={**invoice_payload, "items": items}, headers=auth_headers).json()

        content = client.get(f"/invoices/{invoice['id']}/pdf", headers=auth_headers).content
        with fitz.open(stream=content, filetype="pdf") as document:
            page_count = document.page_count
        rows = pdf_rows(content)

        assert page_count > 1
        # el encabezado de la tabla se repite al cambiar de página
        assert sum(1 for row in rows if row[0][1] == "Description") > 1
        assert sum(1 for row in rows if row[0][1] == "Line") == 60

    def test_pdf_for_deleted_client(self, client, auth_headers, sample_invoice, sample_client):
        client.delete(f"/clients/{sample_client['id']}", headers=auth_headers)
        response = client.get(f"/invoices/{sample_invoice['id']}/pdf", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    def test_pdf_unknown_invoice(self, client, auth_headers):
        assert client.get(f"/invoices/{uuid4()}/pdf", headers=auth_headers).status_code == 404

    def test_filename(self):
        assert invoice_filename(SimpleNamespace(invoice_number="INV-12345678-001")) == "invoice-INV-12345678-001.pdf"


# ===== EMAIL =====

class TestInvoiceEmail:

    def test_send_twice_updates_counters(self, client, auth_headers, sample_invoice, override_email, fake_smtp):
        url = f"/invoices/{sample_invoice['id']}/send-email"

        first = client.post(url, headers=auth_headers)
        assert first.status_code == 200
        assert first.json()["message"] == "Invoice sent successfully"
        first_invoice = first.json()["invoice"]
        assert first_invoice["emailSentCount"] == 1
        assert first_invoice["lastSentAt"] is not None

        second = client.post(url, headers=auth_headers).json()["invoice"]
        assert second["emailSentCount"] == 2
        assert second["lastSentAt"] >= first_invoice["lastSentAt"]

        assert len(fake_smtp.sent) == 2
        detail = client.get(f"/invoices/{sample_invoice['id']}", headers=auth_headers).json()
        assert detail["emailSentCount"] == 2

    def test_message_contents(self, client, auth_headers, sample_invoice, sample_client, override_email, fake_smtp):
        client.post(f"/invoices/{sample_invoice['id']}/send-email", headers=auth_headers)

        sent = fake_smtp.sent[0]
        assert sent["to"] == [sample_client["email"]]
        assert f"Subject: Invoice {sample_invoice['invoiceNumber']} for {sample_client['name']}" in sent["message"]
        assert f'filename="invoice-{sample_invoice["invoiceNumber"]}.pdf"' in sent["message"]
        assert "application/pdf" in sent["message"]

    def test_not_configured(self, client, auth_headers, sample_invoice):
        unconfigured = EmailService(MailSettings(SMTP_HOST="", SMTP_USER="", SMTP_PASSWORD=""))
        app.dependency_overrides[get_email_service] = lambda: unconfigured

        response = client.post(f"/invoices/{sample_invoice['id']}/send-email", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Email service is not configured")
        detail = client.get(f"/invoices/{sample_invoice['id']}", headers=auth_headers).json()
        assert detail["emailSentCount"] == 0
        assert detail["lastSentAt"] is None

    def test_transport_failure(self, client, auth_headers, sample_invoice, override_email, fake_smtp):
        fake_smtp.fail = True

        response = client.post(f"/invoices/{sample_invoice['id']}/send-email", headers=auth_headers)

        assert response.status_code == 500
        assert client.get(
            f"/invoices/{sample_invoice['id']}", headers=auth_headers
        ).json()["emailSentCount"] == 0

    def test_send_for_deleted_client(self, client, auth_headers, sample_invoice, sample_client, override_email, fake_smtp):
        client.delete(f"/clients/{sample_client['id']}", headers=auth_headers)
        response = client.post(f"/invoices/{sample_invoice['id']}/send-email", headers=auth_headers)
        assert response.status_code == 404
        assert fake_smtp.sent == []

    def test_send_unknown_invoice(self, client, auth_headers, override_email):
        response = client.post(f"/invoices/{uuid4()}/send-email", headers=auth_headers)
        assert response.status_code == 404
