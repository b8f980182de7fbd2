"""FastAPI WebSocket gateway in front of the match service."""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from trickrace import __version__
from trickrace.errors import NotFoundError
from trickrace.match import Continuation
from trickrace.service import Dispatch, Envelope, MatchService
from trickrace.snapshot import JsonSnapshotStore

from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Inbound:
    """One unit of work for the command loop."""

    kind: str
    player_id: Optional[str] = None
    raw: Any = None
    continuation: Optional[Continuation] = None


class ConnectionHub:
    """Maps player ids to their open sockets."""

    def __init__(self) -> None:
        self._sockets: Dict[str, WebSocket] = {}

    def __len__(self) -> int:
        return len(self._sockets)

    def register(self, player_id: str, websocket: WebSocket) -> None:
        self._sockets[player_id] = websocket

    def unregister(self, player_id: str) -> None:
        self._sockets.pop(player_id, None)

    async def deliver(self, envelopes: Iterable[Envelope]) -> None:
        for envelope in envelopes:
            websocket = self._sockets.get(envelope.recipient)
            if websocket is None:
                continue
            try:
                await websocket.send_json(envelope.to_message())
            except (WebSocketDisconnect, RuntimeError) as exc:
                # The read side notices the close and queues the disconnect.
                logger.debug("Send to %s failed: %s", envelope.recipient, exc)


class CommandLoop:
    """Single consumer that applies commands, disconnects and timers in arrival order."""

    def __init__(self, service: MatchService, hub: ConnectionHub) -> None:
        self.service = service
        self.hub = hub
        self._queue: Optional[asyncio.Queue] = None
        self._task: Optional[asyncio.Task] = None
        self._timers: Dict[Continuation, asyncio.TimerHandle] = {}

    async def start(self) -> None:
        self._queue = asyncio.Queue()
        self._task = asyncio.create_task(self._run())
        logger.info("Command loop started")

    async def stop(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None
        logger.info("Command loop stopped")

    async def submit(self, item: Inbound) -> None:
        if self._queue is None:
            raise RuntimeError("Command loop is not running.")
        await self._queue.put(item)

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            item = await self._queue.get()
            try:
                dispatch = self._apply(item)
                await self.hub.deliver(dispatch.envelopes)
                self._arm(dispatch.continuations)
                if dispatch.needs_persisting:
                    await asyncio.to_thread(self.service.persist, dispatch)
            except Exception:
                logger.exception("Command loop failed on %s", item.kind)
            finally:
                self._queue.task_done()

    def _apply(self, item: Inbound) -> Dispatch:
        if item.kind == "connect":
            return self.service.connect(item.player_id)
        if item.kind == "command":
            return self.service.handle(item.player_id, item.raw)
        if item.kind == "disconnect":
            return self.service.disconnect(item.player_id)
        if item.kind == "timer":
            return self.service.fire(item.continuation)
        raise ValueError(f"Unknown inbound kind {item.kind!r}")

    def _due(self, continuation: Continuation) -> None:
        self._timers.pop(continuation, None)
        self._queue.put_nowait(Inbound(kind="timer", continuation=continuation))

    def _arm(self, continuations: Iterable[Continuation]) -> None:
        # Superseded timers still fire; the match drops them by generation.
        loop = asyncio.get_running_loop()
        for continuation in continuations:
            self._timers[continuation] = loop.call_later(continuation.delay, self._due, continuation)
            logger.debug(
                "Armed continuation for match %s (generation %d) in %.1fs",
                continuation.match_id,
                continuation.generation,
                continuation.delay,
            )


def _decode(message: Dict[str, Any]) -> Any:
    """Return the JSON body of a text frame; anything else becomes None and is rejected downstream."""
    text = message.get("text")
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def build_service(settings: Settings) -> MatchService:
    store = JsonSnapshotStore(settings.snapshot_dir) if settings.snapshot_dir else None
    return MatchService(store=store)


def create_app(service: Optional[MatchService] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    service = service or build_service(settings)
    hub = ConnectionHub()
    command_loop = CommandLoop(service, hub)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        service.open()
        await command_loop.start()
        try:
            yield
        finally:
            await command_loop.stop()
            service.close()

    app = FastAPI(title="Trickrace Match Server", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = service
    app.state.hub = hub
    app.state.command_loop = command_loop

    @app.get("/health")
    def health() -> Dict[str, object]:
        return {
            "status": "ok",
            "matches": len(service.matches),
            "players": len(service.players),
            "connections": len(hub),
        }

    @app.get("/matches")
    def list_matches() -> Dict[str, object]:
        return {"matches": service.match_summaries()}

    @app.get("/matches/{match_id}")
    def get_match(match_id: str) -> Dict[str, object]:
        try:
            return service.view_payload(match_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        player_id = uuid.uuid4().hex
        hub.register(player_id, websocket)
        logger.info("Player %s connected", player_id)
        await command_loop.submit(Inbound(kind="connect", player_id=player_id))
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                await command_loop.submit(Inbound(kind="command", player_id=player_id, raw=_decode(message)))
        except WebSocketDisconnect:
            logger.info("Player %s disconnected", player_id)
        finally:
            hub.unregister(player_id)
            await command_loop.submit(Inbound(kind="disconnect", player_id=player_id))

    return app
