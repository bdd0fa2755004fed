"""
Modelos SQLAlchemy para el módulo de Clientes

Un cliente es un contacto facturable identificado por un email único
(normalizado a minúsculas). Eliminar un cliente no afecta sus facturas.
"""

import re
from uuid import uuid4
from sqlalchemy import Column, String, Text, Uuid

from app.database.database import Base
from app.common.mixins import TimestampMixin


class Client(Base, TimestampMixin):
    __tablename__ = "clients"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(50), nullable=False)
    address = Column(Text, nullable=False)


EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_valid_email(email: str) -> bool:
    """
    Validación básica de email
    """
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email))
