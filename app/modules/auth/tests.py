"""
Tests para el módulo de Autenticación

- Registro y login con emisión de token
- Mensajes de error idénticos para email desconocido y contraseña incorrecta
- Acceso a /auth/me con y sin token
"""

from datetime import timedelta
from uuid import uuid4

import jwt

from app.modules.auth.service import INVALID_CREDENTIALS
from app.modules.auth.utils import (
    hash_password, verify_password, create_access_token, decode_access_token
)


class TestAuthUtils:

    def test_password_hash_roundtrip(self):
        hashed = hash_password("supersecret")
        assert hashed != "supersecret"
        assert verify_password("supersecret", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_verify_password_without_hash(self):
        assert verify_password("anything", "") is False

    def test_token_carries_user_id(self):
        user_id = str(uuid4())
        token = create_access_token(user_id, "secret")
        payload = decode_access_token(token, "secret")
        assert payload["sub"] == user_id
        assert payload["type"] == "access"

    def test_expired_token_is_rejected(self):
        token = create_access_token(str(uuid4()), "secret", expires_delta=timedelta(seconds=-1))
        try:
            decode_access_token(token, "secret")
        except jwt.ExpiredSignatureError:
            pass
        else:
            raise AssertionError("expired token was accepted")


class TestAuthAPI:

    def test_signup_returns_token_and_user(self, client, user_data):
        response = client.post("/auth/signup", json=user_data)
        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == user_data["email"]
        assert body["user"]["currency"] == "USD"
        assert "password" not in body["user"]

    def test_signup_duplicate_email(self, client, user_data):
        client.post("/auth/signup", json=user_data)
        response = client.post("/auth/signup", json={**user_data, "email": user_data["email"].upper()})
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already registered"

    def test_signup_short_password(self, client, user_data):
        response = client.post("/auth/signup", json={**user_data, "password": "short"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    def test_signup_unknown_currency(self, client, user_data):
        response = client.post("/auth/signup", json={**user_data, "currency": "JPY"})
        assert response.status_code == 400

    def test_login(self, client, user_data):
        client.post("/auth/signup", json=user_data)
        response = client.post("/auth/login", json={
            "email": user_data["email"],
            "password": user_data["password"]
        })
        assert response.status_code == 200
        assert response.json()["user"]["name"] == user_data["name"]

    def test_login_errors_are_identical(self, client, user_data):
        client.post("/auth/signup", json=user_data)

        wrong_password = client.post("/auth/login", json={
            "email": user_data["email"],
            "password": "not-the-password"
        })
        unknown_email = client.post("/auth/login", json={
            "email": "nobody@example.com",
            "password": user_data["password"]
        })

        assert wrong_password.status_code == unknown_email.status_code == 400
        assert wrong_password.json() == unknown_email.json() == {"detail": INVALID_CREDENTIALS}

    def test_me(self, client, auth_headers, user_data):
        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["email"] == user_data["email"]

    def test_me_without_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401

    def test_me_with_invalid_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Could not validate credentials"

    def test_token_signed_with_other_secret(self, client, auth_headers):
        token = create_access_token(str(uuid4()), "another-secret")
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
