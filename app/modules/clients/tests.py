"""
Tests para el módulo de Clientes

- CRUD completo vía API
- Email único, normalizado a minúsculas
- Validaciones de campos requeridos
- Eliminación sin cascada sobre facturas
"""

from uuid import uuid4

from app.modules.clients.models import Client, is_valid_email, normalize_email
from app.modules.clients.schemas import ClientCreate
from app.modules.clients.service import ClientService, DUPLICATE_EMAIL


class TestEmailHelpers:

    def test_normalize_email(self):
        assert normalize_email("  Billing@ACME.com ") == "billing@acme.com"

    def test_is_valid_email(self):
        assert is_valid_email("billing@acme.com")
        assert not is_valid_email("billing@acme")
        assert not is_valid_email("not-an-email")
        assert not is_valid_email("")


class TestClientService:

    def test_create_and_get(self, db_session, client_data):
        service = ClientService(db_session)
        created = service.create_client(ClientCreate(**client_data))
        assert service.get_client(created.id).email == client_data["email"]

    def test_find_missing_client(self, db_session):
        assert ClientService(db_session).find_client(uuid4()) is None

    def test_list_newest_first(self, db_session, client_data):
        service = ClientService(db_session)
        first = service.create_client(ClientCreate(**client_data))
        second = service.create_client(ClientCreate(**{**client_data, "email": "other@acme.com"}))
        ids = [c.id for c in service.list_clients()]
        assert ids.index(second.id) < ids.index(first.id)


class TestClientAPI:

    def test_create_client(self, client, auth_headers, client_data):
        response = client.post("/clients", json={**client_data, "email": "Billing@ACME.com"}, headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "billing@acme.com"
        assert body["createdAt"]
        assert body["updatedAt"]

    def test_create_requires_auth(self, client, client_data):
        response = client.post("/clients", json=client_data)
        assert response.status_code == 401

    def test_create_missing_field(self, client, auth_headers, client_data):
        data = dict(client_data)
        del data["phone"]
        response = client.post("/clients", json=data, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "phone"

    def test_create_blank_name(self, client, auth_headers, client_data):
        response = client.post("/clients", json={**client_data, "name": "   "}, headers=auth_headers)
        assert response.status_code == 400

    def test_create_invalid_email(self, client, auth_headers, client_data):
        response = client.post("/clients", json={**client_data, "email": "acme"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Email must be a valid address"

    def test_duplicate_email(self, client, auth_headers, sample_client, client_data):
        response = client.post(
            "/clients",
            json={**client_data, "email": client_data["email"].upper()},
            headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == DUPLICATE_EMAIL

    def test_list_clients(self, client, auth_headers, sample_client):
        response = client.get("/clients", headers=auth_headers)
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [sample_client["id"]]

    def test_get_client(self, client, auth_headers, sample_client):
        response = client.get(f"/clients/{sample_client['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == sample_client["name"]

    def test_get_unknown_client(self, client, auth_headers):
        response = client.get(f"/clients/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Client not found"

    def test_get_malformed_id(self, client, auth_headers):
        response = client.get("/clients/not-a-uuid", headers=auth_headers)
        assert response.status_code == 400

    def test_update_client(self, client, auth_headers, sample_client, client_data):
        response = client.put(
            f"/clients/{sample_client['id']}",
            json={**client_data, "name": "Acme Corporation", "phone": "+1 555 0199"},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Acme Corporation"
        assert response.json()["phone"] == "+1 555 0199"

    def test_update_keeps_own_email(self, client, auth_headers, sample_client, client_data):
        response = client.put(f"/clients/{sample_client['id']}", json=client_data, headers=auth_headers)
        assert response.status_code == 200

    def test_update_to_taken_email(self, client, auth_headers, sample_client, client_data):
        other = client.post(
            "/clients", json={**client_data, "email": "other@acme.com"}, headers=auth_headers
        ).json()
        response = client.put(f"/clients/{other['id']}", json=client_data, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == DUPLICATE_EMAIL

    def test_update_unknown_client(self, client, auth_headers, client_data):
        response = client.put(f"/clients/{uuid4()}", json=client_data, headers=auth_headers)
        assert response.status_code == 404

    def test_delete_client(self, client, auth_headers, sample_client, db_session):
        response = client.delete(f"/clients/{sample_client['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Client deleted successfully", "id": sample_client["id"]}
        assert db_session.query(Client).count() == 0

    def test_delete_unknown_client(self, client, auth_headers):
        response = client.delete(f"/clients/{uuid4()}", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_keeps_invoices(self, client, auth_headers, sample_client):
        invoice = client.post("/invoices", json={
            "clientId": sample_client["id"],
            "items": [{"description": "Consulting", "quantity": 1, "price": 50}]
        }, headers=auth_headers).json()

        client.delete(f"/clients/{sample_client['id']}", headers=auth_headers)

        response = client.get(f"/invoices/{invoice['id']}", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["clientId"] == sample_client["id"]
        assert body["client"] == {"kind": "reference", "id": sample_client["id"]}
