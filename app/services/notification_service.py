"""
Real-time booking notifications

ConnectionRegistry maps authenticated user ids to their open WebSocket
connections (several per user, e.g. one per browser tab) and fans messages out
to them. Delivery is fire-and-forget: closed connections are skipped, nothing
is queued or retried, and a user who is offline never sees the event.

The registry lives on `app.state` for the lifetime of the process and is only
touched from the event loop, so it needs no locking.
"""

import logging
from typing import Any, Optional

from starlette.requests import HTTPConnection
from starlette.websockets import WebSocketState

from ..models import Booking
from .booking_workflow import status_change_message

logger = logging.getLogger(__name__)


def is_connection_open(connection) -> bool:
    """A connection is open while both sides of the socket are connected"""
    return (
        getattr(connection, "client_state", None) == WebSocketState.CONNECTED
        and getattr(connection, "application_state", None) == WebSocketState.CONNECTED
    )


class ConnectionRegistry:
    """User id → set of open connections"""

    def __init__(self):
        self._connections: dict[int, set] = {}

    def register(self, user_id: int, connection) -> None:
        self._connections.setdefault(user_id, set()).add(connection)
        logger.info(
            f"🔌 WebSocket registered for user {user_id} ({len(self._connections[user_id])} open)"
        )

    def unregister(self, user_id: int, connection) -> None:
        connections = self._connections.get(user_id)
        if not connections:
            return
        connections.discard(connection)
        if not connections:
            del self._connections[user_id]
        logger.info(f"🔌 WebSocket unregistered for user {user_id}")

    def drop_user(self, user_id: int) -> int:
        """Forget every connection of a user; returns how many were dropped"""
        dropped = self._connections.pop(user_id, set())
        if dropped:
            logger.info(f"🔌 Dropped {len(dropped)} WebSocket registration(s) of user {user_id}")
        return len(dropped)

    def connections_for(self, user_id: int) -> set:
        """Snapshot of the user's registered connections (empty set if none)"""
        return set(self._connections.get(user_id, ()))

    def is_registered(self, user_id: int) -> bool:
        return user_id in self._connections

    @property
    def user_count(self) -> int:
        return len(self._connections)

    async def send_to_user(self, user_id: int, message: dict[str, Any]) -> int:
        """
        Send a JSON message to every open connection of a user.

        Returns:
            Number of connections the message was handed to
        """
        delivered = 0
        for connection in self.connections_for(user_id):
            if not is_connection_open(connection):
                continue
            try:
                await connection.send_json(message)
                delivered += 1
            except Exception as e:
                logger.warning(f"⚠️ Failed to push message to user {user_id}: {e}")
        return delivered

    def clear(self) -> None:
        self._connections.clear()


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry:
    """Dependency: the application's registry, shared by HTTP routes and /ws"""
    return connection.app.state.connection_registry


def build_status_notification(booking: Booking) -> dict[str, Any]:
    return {
        "type": "notification",
        "data": {
            "type": "booking_status_update",
            "bookingId": booking.id,
            "status": booking.status,
            "message": status_change_message(booking.status),
        },
    }


async def notify_booking_status_change(
    registry: Optional[ConnectionRegistry], booking: Booking
) -> int:
    """
    Push a booking_status_update to the booking's client, if it has one.

    Never raises: notification failures must not affect the HTTP response of
    the status change that triggered them.
    """
    if registry is None or booking.client_id is None:
        return 0

    try:
        delivered = await registry.send_to_user(booking.client_id, build_status_notification(booking))
        logger.info(
            f"📣 Booking {booking.id} status '{booking.status}' pushed to "
            f"{delivered} connection(s) of user {booking.client_id}"
        )
        return delivered
    except Exception as e:
        logger.error(f"❌ Error sending WebSocket notification for booking {booking.id}: {e}")
        return 0
