"""Client service - Business logic for client operations"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Client, ClientAvailability
from ...shared.case_convert import to_snake_case
from ..scheduling.working_hours import sanitize_working_hours_collection
from .repository import ClientRepository
from .schemas import AvailabilityEntry, ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self) -> list[Client]:
        return self.repo.get_clients(self.db)

    def get_client(self, client_id: str) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        logger.info(f"📥 Creating client {data.firstName} {data.lastName or ''}".rstrip())
        try:
            return self.repo.create_client(self.db, **to_snake_case(data.model_dump()))
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating client: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

    def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        client = self.get_client(client_id)
        updates = to_snake_case(data.model_dump(exclude_unset=True))
        try:
            return self.repo.update_client(self.db, client, **updates)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating client {client_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

    def delete_client(self, client_id: str) -> dict:
        client = self.get_client(client_id)
        try:
            self.repo.delete_client(self.db, client)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting client {client_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {"success": True}

    def get_availability(self, client_id: str) -> list[ClientAvailability]:
        self.get_client(client_id)
        return self.repo.get_availability(self.db, client_id)

    def replace_availability(self, client_id: str, entries: list[AvailabilityEntry]) -> list[ClientAvailability]:
        """Bulk replace a client's weekly availability; duplicate blocks are stored once"""
        self.get_client(client_id)
        blocks = sanitize_working_hours_collection(
            [{**entry.model_dump(), "clientId": client_id} for entry in entries],
            owner_field="client_id",
        )
        try:
            availability = self.repo.replace_availability(self.db, client_id, blocks)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error saving availability for client {client_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ Availability for client {client_id}: {len(availability)} blocks")
        return availability
