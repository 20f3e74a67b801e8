from __future__ import annotations

import asyncio
import itertools
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

import websockets
from websockets.asyncio.server import ServerConnection, serve

from destiny.catalog import ActionCatalog, action_payload, starter_catalog
from destiny.engine import ResolutionEngine
from destiny.errors import DestinyError
from destiny.models import ActionResult
from destiny.recorder import result_payload

from .models import ServiceConfig

LOGGER = logging.getLogger("destiny_service")

# ResolutionServer is the calling layer: it looks actions up, asks the engine
# to resolve them and keeps each character's recent results. Memory is bounded
# twice: history_limit results per character and max_characters characters,
# dropping the least recently updated one. Rules stay in the destiny package.


@dataclass
class ClientSession:
    client_id: str
    websocket: ServerConnection
    resolved: int = 0


class ResolutionServer:
    def __init__(
        self,
        config: ServiceConfig,
        catalog: Optional[ActionCatalog] = None,
        engine: Optional[ResolutionEngine] = None,
    ) -> None:
        if config.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        if config.max_characters < 1:
            raise ValueError("max_characters must be at least 1")
        self.config = config
        self.catalog = catalog if catalog is not None else starter_catalog()
        self.engine = engine or ResolutionEngine()
        self.history: Dict[str, List[ActionResult]] = {}
        self.sessions: Dict[str, ClientSession] = {}
        self._client_ids = itertools.count(1)

    async def start(self, host: str = "0.0.0.0", port: int = 8766) -> None:
        async with serve(self._handle_connection, host, port, max_size=self.config.max_message_bytes):
            LOGGER.info("Resolution server listening on %s:%s (%s actions)", host, port, len(self.catalog))
            await asyncio.Future()

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        session = ClientSession(client_id=f"C-{next(self._client_ids):04d}", websocket=websocket)
        self.sessions[session.client_id] = session
        LOGGER.info("Client %s connected", session.client_id)
        await self._send_json(websocket, "welcome", {"client_id": session.client_id, "actions": len(self.catalog)})
        try:
            async for raw in websocket:
                await self._handle_message(session, raw)
        except websockets.ConnectionClosed:
            pass
        finally:
            self.sessions.pop(session.client_id, None)
            LOGGER.info("Client %s disconnected after %s resolutions", session.client_id, session.resolved)

    async def _handle_message(self, session: ClientSession, raw: str) -> None:
        message = self._decode(raw)
        if message is None:
            await self._send_error(session.websocket, code="BAD_JSON", msg="Message must be a JSON object")
            return
        msg_type = message.get("type")
        if msg_type == "resolve":
            await self._handle_resolve(session, message)
        elif msg_type == "actions":
            await self._send_json(
                session.websocket,
                "actions",
                {"actions": [action_payload(action) for action in self.catalog.actions()]},
            )
        elif msg_type == "history":
            await self._handle_history(session, message)
        else:
            await self._send_error(session.websocket, code="UNKNOWN_TYPE", msg="Unsupported message type")

    async def _handle_resolve(self, session: ClientSession, message: Dict[str, object]) -> None:
        character_id = message.get("character_id")
        action_id = message.get("action_id")
        seed = message.get("seed")
        if not isinstance(character_id, str) or not character_id.strip():
            await self._send_error(session.websocket, code="BAD_SCHEMA", msg="character_id required")
            return
        if not isinstance(action_id, str):
            await self._send_error(session.websocket, code="BAD_SCHEMA", msg="action_id required")
            return
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            await self._send_error(session.websocket, code="BAD_SCHEMA", msg="seed must be an integer")
            return

        try:
            action = self.catalog.get(action_id)
            result = self.engine.resolve(character_id.strip(), action, seed=seed)
        except DestinyError as exc:
            LOGGER.warning("Resolution of %s for %s rejected: %s", action_id, character_id, exc.msg)
            await self._send_error(session.websocket, code=exc.code, msg=exc.msg)
            return

        self.record_history(result)
        session.resolved += 1
        await self._send_json(session.websocket, "result", {"result": result_payload(result)})

    async def _handle_history(self, session: ClientSession, message: Dict[str, object]) -> None:
        character_id = message.get("character_id")
        if not isinstance(character_id, str) or not character_id.strip():
            await self._send_error(session.websocket, code="BAD_SCHEMA", msg="character_id required")
            return
        results = [result_payload(result) for result in self.history_for(character_id.strip())]
        await self._send_json(session.websocket, "history", {"character_id": character_id.strip(), "results": results})

    # History ---------------------------------------------------------

    def record_history(self, result: ActionResult) -> None:
        entries = self.history.pop(result.character_id, [])
        self.history[result.character_id] = entries
        while len(self.history) > self.config.max_characters:
            evicted = next(iter(self.history))
            del self.history[evicted]
            LOGGER.debug("Dropped history for %s", evicted)
        entries.append(result)
        # Concurrent resolutions may finish out of order; the server timestamp decides.
        entries.sort(key=lambda item: item.timestamp)
        del entries[: max(0, len(entries) - self.config.history_limit)]

    def history_for(self, character_id: str) -> List[ActionResult]:
        return list(self.history.get(character_id, []))

    # Wire helpers ----------------------------------------------------

    async def _send_json(self, websocket: ServerConnection, msg_type: str, payload: Dict[str, object]) -> None:
        try:
            await websocket.send(self._envelope(msg_type, payload))
        except websockets.ConnectionClosed:
            pass

    async def _send_error(self, websocket: ServerConnection, code: str, msg: str) -> None:
        await self._send_json(websocket, "error", {"code": code, "msg": msg})

    def _envelope(self, msg_type: str, payload: Dict[str, object]) -> str:
        body = {"type": msg_type, "v": 1, "ts": datetime.now(timezone.utc).isoformat()}
        body.update(payload)
        return json.dumps(body)

    def _decode(self, raw: str) -> Optional[Dict[str, object]]:
        try:
            message = json.loads(raw)
        except json.JSONDecodeError:
            return None
        return message if isinstance(message, dict) else None
