"""Client router - FastAPI endpoints for client operations"""

import logging
from typing import Union

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.serializers import serialize_row, serialize_rows
from .schemas import AvailabilityEntry, ClientCreate, ClientUpdate
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])
availability_router = APIRouter(prefix="/availability", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("")
async def get_clients(
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Get all clients ordered by first name"""
    return serialize_rows(service.get_clients())


@router.post("", status_code=201)
async def create_client(
    data: ClientCreate,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return serialize_row(service.create_client(data))


@router.get("/{client_id}")
async def get_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return serialize_row(service.get_client(client_id))


@router.patch("/{client_id}")
async def update_client(
    client_id: str,
    data: ClientUpdate,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return serialize_row(service.update_client(client_id, data))


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return service.delete_client(client_id)


# ============================================================================
# AVAILABILITY
# ============================================================================


@availability_router.get("/{client_id}")
async def get_availability(
    client_id: str,
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    return serialize_rows(service.get_availability(client_id))


@availability_router.put("/{client_id}")
async def replace_availability(
    client_id: str,
    data: Union[list[AvailabilityEntry], AvailabilityEntry],
    current_user: User = Depends(get_current_user),
    service: ClientService = Depends(get_client_service),
):
    """Replace the client's weekly availability with a list of blocks (or a single block)"""
    entries = data if isinstance(data, list) else [data]
    return serialize_rows(service.replace_availability(client_id, entries))
