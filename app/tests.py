"""
Tests de la aplicación: endpoints públicos, cabeceras y manejo de errores
"""

from app.common.error_handlers import build_validation_error_response


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Invoicing API is running"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_validation_error_response():
    body = build_validation_error_response([
        {"loc": ("body", "items", 0, "quantity"), "msg": "Input should be greater than 0"},
        {"loc": ("body", "email"), "msg": "Value error, Email must be a valid address"},
    ])
    assert body["detail"] == "Input should be greater than 0"
    assert body["errors"] == [
        {"field": "items.0.quantity", "message": "Input should be greater than 0"},
        {"field": "email", "message": "Email must be a valid address"},
    ]


def test_validation_error_without_details():
    assert build_validation_error_response([]) == {"detail": "Invalid request data", "errors": []}
