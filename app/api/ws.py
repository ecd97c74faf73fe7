"""
WebSocket endpoint for real-time notification delivery
"""

import json
import logging
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import InvalidCredentialsError
from app.services.auth_service import AuthService
from app.services.notification_service import NotificationService
from app.services.websocket_manager import websocket_manager

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/notifications")
async def notifications_socket(
    websocket: WebSocket,
    token: str = Query(...),
    db: Session = Depends(get_db)
):
    """Live notification feed for the signed-in user"""
    try:
        session = AuthService.resolve_session(db, token)
    except InvalidCredentialsError:
        await websocket.close(code=4401, reason="Invalid session")
        return

    user_id = session.user.id
    await websocket_manager.connect(websocket, user_id)

    try:
        await websocket_manager.send_personal_message({
            "type": "connection",
            "message": f"Connected as {session.user.name}",
            "unread_count": NotificationService.get_unread_notification_count(db, user_id)
        }, websocket)

        while True:
            try:
                data = await websocket.receive_text()

                try:
                    client_message = json.loads(data)
                    if client_message.get("type") == "ping":
                        await websocket_manager.send_personal_message({
                            "type": "pong",
                            "timestamp": client_message.get("timestamp")
                        }, websocket)
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON received from WebSocket: {data}")

            except WebSocketDisconnect:
                break
            except Exception as e:
                logger.error(f"Error in WebSocket loop: {e}")
                break

    finally:
        websocket_manager.disconnect(websocket, user_id)

@router.get("/stats")
async def websocket_stats():
    """Get WebSocket connection statistics (for debugging)"""
    counts = websocket_manager.get_all_connection_counts()
    return {
        "users_with_connections": len(counts),
        "total_connections": sum(counts.values())
    }
