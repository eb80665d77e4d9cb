"""User repository - Database operations for users"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email (emails are stored lowercase)"""
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    def get_users(db: Session, role: Optional[str] = None) -> list[User]:
        """Get all users, optionally only those with the given role"""
        query = db.query(User)
        if role:
            query = query.filter(User.role == role)
        return query.order_by(User.created_at.desc(), User.id.desc()).all()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        """Create a new user; password must already be hashed"""
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Set every given field on the user; None clears a nullable column"""
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """Delete a user; their bookings are kept as guest bookings"""
        for booking in list(user.bookings):
            booking.client_id = None
        db.delete(user)
        db.commit()
