"""
Authentication and authorization guards

Authentication decodes the bearer JWT and loads the user. Authorization is a set
of small predicates returning an AuthDecision; `enforce` turns a denied decision
into the matching HTTP error. Route dependencies compose the two.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import Booking, User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    status_code: int = 200
    reason: Optional[str] = None


ALLOW = AuthDecision(allowed=True)


def deny(reason: str, status_code: int = 403) -> AuthDecision:
    return AuthDecision(allowed=False, status_code=status_code, reason=reason)


def is_admin(user: User) -> AuthDecision:
    if user.role == "admin":
        return ALLOW
    return deny("Admin access required")


def owns_booking(user: User, booking: Booking) -> AuthDecision:
    if booking.client_id is not None and booking.client_id == user.id:
        return ALLOW
    return deny("Not authorized to access this booking")


def any_of(*decisions: AuthDecision) -> AuthDecision:
    """Allowed when at least one decision allows; otherwise the first denial"""
    for decision in decisions:
        if decision.allowed:
            return decision
    return decisions[0] if decisions else deny("Access denied")


def admin_or_owner(user: User, booking: Booking) -> AuthDecision:
    return any_of(is_admin(user), owns_booking(user, booking))


def may_set_booking_status(user: User, booking: Booking, new_status: str) -> AuthDecision:
    """Admins may set any status; the owning client may only cancel"""
    if new_status == "cancelled":
        return admin_or_owner(user, booking)
    return is_admin(user)


def enforce(decision: AuthDecision) -> None:
    if not decision.allowed:
        raise HTTPException(status_code=decision.status_code, detail=decision.reason)


def user_for_token(db: Session, token: str) -> Optional[User]:
    """
    User a session token was issued to, or None.

    The email claim must still match, so a token outlives neither an email
    change nor the account it was issued for.
    """
    payload = verify_jwt_token(token)
    if not payload or payload.get("id") is None:
        return None

    user = db.query(User).filter(User.id == payload["id"]).first()
    if not user or user.email != payload.get("email"):
        logger.warning(f"⚠️ Token for user id {payload['id']} no longer matches an account")
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer session token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = user_for_token(db, credentials.credentials)
    if not user:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """Current user, required to hold the admin role"""
    decision = is_admin(user)
    if not decision.allowed:
        logger.warning(f"🚫 User {user.id} attempted an admin route")
    enforce(decision)
    return user
