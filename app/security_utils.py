"""
Password hashing, session tokens, free-text cleaning and the security audit log
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import bleach
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import JWT_ALGORITHM, JWT_EXPIRATION_HOURS, SECRET_KEY

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ============================================================================
# PASSWORDS
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Unusable password hash: {e}")
        return False


# ============================================================================
# SESSION TOKENS (HS256 JWT)
# ============================================================================


def create_jwt_token(claims: dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign `claims` with an `exp` JWT_EXPIRATION_HOURS (24h) from now unless overridden"""
    lifetime = expires_delta if expires_delta is not None else timedelta(hours=JWT_EXPIRATION_HOURS)
    payload = {**claims, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)


def create_session_token(user) -> str:
    """Bearer token identifying `user` to every guard: id, email and role"""
    return create_jwt_token({"id": user.id, "email": user.email, "role": user.role})


def verify_jwt_token(token: str) -> Optional[dict[str, Any]]:
    """Claims of a valid token; None when the signature is bad or the token expired"""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Rejected session token: {e}")
        return None


# ============================================================================
# FREE TEXT
# ============================================================================


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """Strip all markup from free text (notes, bios, descriptions)"""
    if value is None:
        return None
    return bleach.clean(value, tags=[], attributes={}, strip=True).strip()


# ============================================================================
# AUDIT LOG
# ============================================================================


def log_security_event(
    event_type: str,
    user_id: Optional[int] = None,
    ip_address: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
):
    """Record an authentication event (register, login, failed_login)"""
    event = {
        "at": datetime.utcnow().isoformat(),
        "event": event_type,
        "user_id": user_id,
        "ip": ip_address,
        **(details or {}),
    }
    logger.info(f"SECURITY_EVENT: {event}")


def mask_email(email: str) -> str:
    """Mask email for logs: jo***@example.com"""
    if not email or "@" not in email:
        return "***"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"
