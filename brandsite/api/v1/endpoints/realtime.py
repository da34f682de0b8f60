"""WebSocket endpoint streaming live listings."""

import asyncio
import json
import logging
from typing import Dict, Optional, Set

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from brandsite.api.deps import get_gateway
from brandsite.services.content import ContentService
from brandsite.services.gateway import DataGateway
from brandsite.services.live_view import VIEWS, LiveView

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks the live view behind each open WebSocket."""

    def __init__(self):
        # Map resource -> set of open WebSocket connections
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        # Map WebSocket -> live view it is watching
        self.websocket_to_view: Dict[WebSocket, LiveView] = {}

    async def connect(self, websocket: WebSocket, resource: str, view: LiveView):
        """Accept a WebSocket and remember its view."""
        await websocket.accept()
        self.active_connections.setdefault(resource, set()).add(websocket)
        self.websocket_to_view[websocket] = view

    def disconnect(self, websocket: WebSocket):
        """Forget a WebSocket and unmount its view."""
        view = self.websocket_to_view.pop(websocket, None)
        if view is not None:
            view.unmount()
        for resource in list(self.active_connections):
            self.active_connections[resource].discard(websocket)
            if not self.active_connections[resource]:
                del self.active_connections[resource]

    def count(self) -> int:
        return len(self.websocket_to_view)

    def close_all(self):
        """Unmount every view; used at shutdown."""
        for websocket in list(self.websocket_to_view):
            self.disconnect(websocket)


# Global connection manager instance
manager = ConnectionManager()

router = APIRouter(
    prefix="/ws",
    tags=["Realtime"],
)


async def _pump(websocket: WebSocket, outbox: asyncio.Queue):
    """Forward queued snapshots to the client until the socket goes away."""
    while True:
        snapshot = await outbox.get()
        await websocket.send_json(snapshot)


@router.websocket("/live/{resource}")
async def live_endpoint(
    websocket: WebSocket,
    resource: str,
    category_id: Optional[int] = None,
    gateway: DataGateway = Depends(get_gateway),
):
    """
    Live listing over WebSocket.

    The server mounts a live view for `resource` (posts, products, services)
    and sends ``{"state", "items", "error"}`` after every settled change.
    For posts the client may send ``{"category_id": <id or null>}`` to change
    the filter and ``{"action": "refresh"}`` to force a reload. Malformed
    frames get ``{"type": "error", "message"}`` back and the loop goes on.
    """
    view_class = VIEWS.get(resource)
    if view_class is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    view = view_class(ContentService(gateway))
    if category_id is not None:
        view.filters["category_id"] = category_id

    outbox: asyncio.Queue = asyncio.Queue()
    view.add_listener(lambda v: outbox.put_nowait(v.snapshot()))

    await manager.connect(websocket, resource, view)
    sender = asyncio.create_task(_pump(websocket, outbox))
    pending: Set[asyncio.Task] = set()

    try:
        await view.mount()
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Live {resource} client sent invalid JSON")
                outbox.put_nowait({"type": "error", "message": "Invalid JSON format"})
                continue

            if not isinstance(message, dict):
                continue
            if "category_id" in message:
                value = message["category_id"]
                if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                    outbox.put_nowait({"type": "error", "message": "Invalid category_id"})
                    continue
                # Not awaited: a newer filter may overtake this one
                task = asyncio.create_task(view.set_filter(category_id=value))
            elif message.get("action") == "refresh":
                task = asyncio.create_task(view.refresh())
            else:
                continue
            pending.add(task)
            task.add_done_callback(pending.discard)
    except WebSocketDisconnect:
        logger.info(f"Live {resource} client disconnected")
    finally:
        manager.disconnect(websocket)
        tasks = [sender, *pending]
        for task in tasks:
            task.cancel()
        # Collect results so a failed send after disconnect is not reported as unretrieved
        await asyncio.gather(*tasks, return_exceptions=True)
