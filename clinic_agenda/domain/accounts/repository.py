"""Account repository - Database operations for login accounts"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_accounts_for_therapist(db: Session, therapist_id: str) -> list[User]:
        return (
            db.query(User)
            .filter(User.therapist_id == therapist_id)
            .order_by(User.created_at.asc())
            .all()
        )

    @staticmethod
    def admin_exists(db: Session) -> bool:
        return db.query(User.id).filter(User.role == "admin").first() is not None

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user; unlike other repositories, None and False are written as given"""
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def merge_metadata(db: Session, user: User, **entries) -> User:
        # JSON columns only detect reassignment, so build a new dict
        user.user_metadata = {**(user.user_metadata or {}), **entries}
        db.commit()
        db.refresh(user)
        return user
