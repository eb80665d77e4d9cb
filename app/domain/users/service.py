"""User service - Registration, login, profiles and admin client management"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import User
from ...services.notification_service import ConnectionRegistry
from ...security_utils import (
    create_session_token,
    hash_password_bcrypt,
    log_security_event,
    mask_email,
    verify_password_bcrypt,
)
from .repository import UserRepository
from .schemas import AdminUserCreate, AdminUserUpdate, ProfileUpdate, UserLogin, UserRegister

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def _create(self, name: str, email: str, password: str, role: str, phone_number: Optional[str]) -> User:
        if self.repo.get_user_by_email(self.db, email):
            raise HTTPException(status_code=400, detail="User already exists with this email")

        try:
            return self.repo.create_user(
                self.db,
                name=name,
                email=email,
                password=hash_password_bcrypt(password),
                role=role,
                phone_number=phone_number,
            )
        except IntegrityError as e:
            # Email taken between the check and the insert
            self.db.rollback()
            raise HTTPException(status_code=400, detail="User already exists with this email") from e

    def register(self, data: UserRegister, ip_address: Optional[str] = None) -> tuple[User, str]:
        """Register a client account and issue a session token"""
        user = self._create(data.name, data.email, data.password, "client", data.phone_number)
        log_security_event("register", user_id=user.id, ip_address=ip_address)
        logger.info(f"🆕 Registered client {mask_email(user.email)}")
        return user, create_session_token(user)

    def login(self, data: UserLogin, ip_address: Optional[str] = None) -> tuple[User, str]:
        user = self.repo.get_user_by_email(self.db, data.email)
        if not user or not verify_password_bcrypt(data.password, user.password):
            log_security_event(
                "failed_login", ip_address=ip_address, details={"email": mask_email(data.email)}
            )
            raise HTTPException(status_code=401, detail="Invalid credentials")

        log_security_event("login", user_id=user.id, ip_address=ip_address)
        return user, create_session_token(user)

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        updates = data.model_dump(exclude_unset=True, exclude={"password"})
        if data.password:
            updates["password"] = hash_password_bcrypt(data.password)
        return self.repo.update_user(self.db, user, **updates)

    # Admin client management
    def list_users(self, role: Optional[str] = None) -> list[User]:
        return self.repo.get_users(self.db, role)

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def create_user(self, data: AdminUserCreate) -> User:
        user = self._create(data.name, data.email, data.password, data.role, data.phone_number)
        logger.info(f"👤 Admin created {user.role} {mask_email(user.email)}")
        return user

    def update_user(self, user_id: int, data: AdminUserUpdate) -> User:
        user = self.get_user(user_id)

        if data.email and data.email != user.email:
            existing = self.repo.get_user_by_email(self.db, data.email)
            if existing and existing.id != user.id:
                raise HTTPException(status_code=400, detail="User already exists with this email")

        updates = data.model_dump(exclude_unset=True, exclude={"password"})
        if data.password:
            updates["password"] = hash_password_bcrypt(data.password)

        try:
            return self.repo.update_user(self.db, user, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="User already exists with this email") from e

    def delete_user(
        self, user_id: int, acting_user: User, registry: Optional[ConnectionRegistry] = None
    ) -> dict:
        user = self.get_user(user_id)
        if user.id == acting_user.id:
            raise HTTPException(status_code=400, detail="You cannot delete your own account")

        self.repo.delete_user(self.db, user)
        if registry is not None:
            registry.drop_user(user_id)
        logger.info(f"🗑️ User {user_id} deleted by admin {acting_user.id}")
        return {"message": "User deleted successfully"}
