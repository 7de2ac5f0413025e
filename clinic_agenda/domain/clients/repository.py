"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, ClientAvailability


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session) -> list[Client]:
        return db.query(Client).order_by(Client.first_name.asc()).all()

    @staticmethod
    def get_client_by_id(db: Session, client_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def create_client(db: Session, **client_data) -> Client:
        client = Client(**client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        db.delete(client)
        db.commit()

    # Availability
    @staticmethod
    def get_availability(db: Session, client_id: str) -> list[ClientAvailability]:
        return (
            db.query(ClientAvailability)
            .filter(ClientAvailability.client_id == client_id)
            .order_by(ClientAvailability.day_of_week, ClientAvailability.start_time)
            .all()
        )

    @staticmethod
    def replace_availability(db: Session, client_id: str, blocks: list[dict]) -> list[ClientAvailability]:
        db.query(ClientAvailability).filter(ClientAvailability.client_id == client_id).delete(
            synchronize_session=False
        )
        for block in blocks:
            db.add(ClientAvailability(**block))

        db.commit()
        return ClientRepository.get_availability(db, client_id)
