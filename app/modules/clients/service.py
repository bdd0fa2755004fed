"""
Servicios de negocio para el módulo de Clientes

- CRUD de clientes con email único (minúsculas)
- Eliminación física sin cascada: las facturas conservan la referencia
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.modules.clients.models import Client
from app.modules.clients.schemas import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Client with this email already exists"


class ClientService:
    """Servicio principal para gestión de clientes"""

    def __init__(self, db: Session):
        self.db = db

    def _email_taken(self, email: str, exclude_id: Optional[UUID] = None) -> bool:
        query = self.db.query(Client).filter(Client.email == email)
        if exclude_id:
            query = query.filter(Client.id != exclude_id)
        return query.first() is not None

    def _commit(self, client: Client) -> Client:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DUPLICATE_EMAIL
            )
        self.db.refresh(client)
        return client

    def list_clients(self) -> List[Client]:
        """Clientes ordenados del más reciente al más antiguo"""
        return self.db.query(Client).order_by(Client.created_at.desc()).all()

    def find_client(self, client_id: UUID) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def get_client(self, client_id: UUID) -> Client:
        client = self.find_client(client_id)
        if not client:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Client not found"
            )
        return client

    def create_client(self, client_data: ClientCreate) -> Client:
        if self._email_taken(client_data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DUPLICATE_EMAIL
            )

        client = Client(**client_data.model_dump())
        self.db.add(client)
        client = self._commit(client)
        logger.info(f"Client created: {client.id}")
        return client

    def update_client(self, client_id: UUID, client_data: ClientUpdate) -> Client:
        client = self.get_client(client_id)

        if self._email_taken(client_data.email, exclude_id=client_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=DUPLICATE_EMAIL
            )

        for field, value in client_data.model_dump().items():
            setattr(client, field, value)

        return self._commit(client)

    def delete_client(self, client_id: UUID) -> None:
        """Eliminar cliente. Las facturas que lo referencian no se modifican."""
        client = self.get_client(client_id)
        self.db.delete(client)
        self.db.commit()
        logger.info(f"Client deleted: {client_id}")
