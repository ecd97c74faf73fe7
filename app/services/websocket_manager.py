"""
WebSocket connection registry for real-time notification delivery
"""

import json
import logging
from typing import Dict, List
from fastapi import WebSocket

logger = logging.getLogger(__name__)

class WebSocketManager:
    """Manages WebSocket connections, grouped by the signed-in user"""

    def __init__(self):
        # user_id -> list of websockets (one per open tab/device)
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        """Accept WebSocket connection and register it for the user"""
        await websocket.accept()
        self.active_connections.setdefault(user_id, []).append(websocket)
        logger.info(f"WebSocket connected for user {user_id}. Total connections: {len(self.active_connections[user_id])}")

    def disconnect(self, websocket: WebSocket, user_id: str):
        """Remove WebSocket connection for the user"""
        if user_id in self.active_connections:
            try:
                self.active_connections[user_id].remove(websocket)
                logger.info(f"WebSocket disconnected for user {user_id}. Remaining connections: {len(self.active_connections[user_id])}")

                if not self.active_connections[user_id]:
                    del self.active_connections[user_id]
            except ValueError:
                pass

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send message to specific WebSocket"""
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            logger.error(f"Error sending personal message: {e}")

    async def send_to_user(self, user_id: str, message: dict) -> int:
        """Push a message to every open connection of a user; returns deliveries"""
        if user_id not in self.active_connections:
            logger.debug(f"No active connections for user {user_id}")
            return 0

        connections = self.active_connections[user_id].copy()

        delivered = 0
        disconnected = []
        for websocket in connections:
            try:
                await websocket.send_text(json.dumps(message))
                delivered += 1
            except Exception as e:
                logger.error(f"Error pushing to websocket: {e}")
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, user_id)
        return delivered

    def get_connection_count(self, user_id: str) -> int:
        return len(self.active_connections.get(user_id, []))

    def get_all_connection_counts(self) -> Dict[str, int]:
        return {
            user_id: len(connections)
            for user_id, connections in self.active_connections.items()
        }

# Global WebSocket manager instance
websocket_manager = WebSocketManager()
