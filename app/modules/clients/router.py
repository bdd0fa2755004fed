"""
Router para el módulo de Clientes

Todos los endpoints requieren autenticación (Bearer token).
"""

from fastapi import APIRouter, status, Path
from typing import List
from uuid import UUID

from app.dependencies.dbDependecies import db_dependency
from app.dependencies.userDependencies import user_dependency
from app.modules.clients.service import ClientService
from app.modules.clients.schemas import ClientCreate, ClientUpdate, ClientOut, ClientDeleted

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    responses={404: {"description": "Not found"}}
)


@router.get("", response_model=List[ClientOut])
def list_clients(db: db_dependency, current_user: user_dependency):
    """Listar clientes (más recientes primero)"""
    return ClientService(db).list_clients()


@router.post("", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(client_data: ClientCreate, db: db_dependency, current_user: user_dependency):
    """
    Crear un nuevo cliente

    - **name**, **email**, **phone**, **address**: requeridos
    - **email**: único, se guarda en minúsculas
    """
    return ClientService(db).create_client(client_data)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    db: db_dependency,
    current_user: user_dependency,
    client_id: UUID = Path(..., description="ID del cliente")
):
    return ClientService(db).get_client(client_id)


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_data: ClientUpdate,
    db: db_dependency,
    current_user: user_dependency,
    client_id: UUID = Path(..., description="ID del cliente")
):
    """Actualizar un cliente (reemplazo completo de sus datos)"""
    return ClientService(db).update_client(client_id, client_data)


@router.delete("/{client_id}", response_model=ClientDeleted)
def delete_client(
    db: db_dependency,
    current_user: user_dependency,
    client_id: UUID = Path(..., description="ID del cliente")
):
    """
    Eliminar un cliente

    No hay protección en cascada: las facturas del cliente se conservan.
    """
    ClientService(db).delete_client(client_id)
    return ClientDeleted(message="Client deleted successfully", id=client_id)
