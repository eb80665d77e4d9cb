"""
WebSocket endpoint for real-time booking notifications

Protocol:
    client → {"type": "auth", "token": "<jwt>"}
    server → {"type": "auth_success", "message": ...} or {"type": "auth_error", "message": ...}
    server → {"type": "notification", "data": {...}} whenever one of the user's bookings changes status
"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from ..auth import user_for_token
from ..database import get_db
from ..services.notification_service import get_connection_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


def _user_id_from_token(db: Session, token: Any) -> Optional[int]:
    if not isinstance(token, str) or not token:
        return None
    try:
        user = user_for_token(db, token)
        return user.id if user else None
    finally:
        # Release the connection while the socket idles
        db.close()


@router.websocket("/ws")
async def notifications_socket(websocket: WebSocket, db: Session = Depends(get_db)):
    registry = get_connection_registry(websocket)
    await websocket.accept()
    user_id: Optional[int] = None

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("⚠️ Ignoring malformed WebSocket message")
                continue

            if not isinstance(message, dict) or message.get("type") != "auth":
                logger.debug(f"Ignoring WebSocket message: {raw[:100]}")
                continue

            authenticated_id = _user_id_from_token(db, message.get("token"))
            if authenticated_id is None:
                await websocket.send_json({"type": "auth_error", "message": "Authentication failed"})
                continue

            # Re-authentication as someone else moves the connection
            if user_id is not None and user_id != authenticated_id:
                registry.unregister(user_id, websocket)
            user_id = authenticated_id
            registry.register(user_id, websocket)
            await websocket.send_json(
                {"type": "auth_success", "message": "Authentication successful"}
            )
    except WebSocketDisconnect:
        logger.info(f"🔌 WebSocket disconnected (user {user_id})")
    finally:
        if user_id is not None:
            registry.unregister(user_id, websocket)
