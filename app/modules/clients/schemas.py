"""
Esquemas Pydantic para el módulo de Clientes
"""

from pydantic import Field, field_validator
from typing import List
from uuid import UUID
from datetime import datetime

from app.common.schemas import CamelModel, RequiredStr
from app.modules.clients.models import normalize_email, is_valid_email


class ClientBase(CamelModel):
    name: RequiredStr = Field(..., max_length=200, description="Nombre del cliente")
    email: RequiredStr = Field(..., max_length=255, description="Email único del cliente")
    phone: RequiredStr = Field(..., max_length=50, description="Teléfono")
    address: RequiredStr = Field(..., description="Dirección de facturación")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        v = normalize_email(v)
        if not is_valid_email(v):
            raise ValueError('Email must be a valid address')
        return v


class ClientCreate(ClientBase):
    pass


class ClientUpdate(ClientBase):
    """Actualización completa: todos los campos son obligatorios."""


class ClientOut(CamelModel):
    id: UUID
    name: str
    email: str
    phone: str
    address: str
    created_at: datetime
    updated_at: datetime


class ClientDeleted(CamelModel):
    message: str
    id: UUID


ClientList = List[ClientOut]
