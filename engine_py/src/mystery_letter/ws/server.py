"""
FastAPI WebSocket server for the Mystery Letter game.
"""

import asyncio
import logging
import uuid
from typing import Dict, Optional

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..bots import BaseBot, HeuristicBot
from ..engine import LetterEngine
from ..errors import GameError, NOT_IN_ROOM
from ..models import Participant, Session
from ..registry import SessionRegistry
from ..rules import load_rules_from_env
from ..serialization import get_public_room_info, project_room, sanitize_state
from .events import (
    parse_inbound_event, create_error_event, create_join_success_event,
    create_state_full_event, create_drawn_event, create_reveal_event, create_round_over_event,
    ErrorCode, JoinEvent, ClaimHostEvent, ConfigureBotsEvent, NewGameEvent, StartRoundEvent,
    DrawEvent, PlayEvent, LeaveEvent, KickEvent, RequestStateEvent
)

logger = logging.getLogger(__name__)


def _encode(event: BaseModel) -> str:
    return orjson.dumps(event.model_dump(mode="json")).decode()


class ConnectionManager:
    """Tracks one WebSocket per participant and which room it sits in."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.player_to_room: Dict[str, str] = {}

    async def connect(self, websocket: WebSocket, player_id: str):
        await websocket.accept()
        self.active_connections[player_id] = websocket
        logger.info(f"Player {player_id} connected")

    def disconnect(self, player_id: str) -> Optional[str]:
        self.active_connections.pop(player_id, None)
        room_id = self.player_to_room.pop(player_id, None)
        logger.info(f"Player {player_id} disconnected")
        return room_id

    def add_to_room(self, player_id: str, room_id: str):
        self.player_to_room[player_id] = room_id

    def remove_from_room(self, player_id: str):
        self.player_to_room.pop(player_id, None)

    def room_of(self, player_id: str) -> Optional[str]:
        return self.player_to_room.get(player_id)

    async def send_personal_message(self, event: BaseModel, player_id: str):
        websocket = self.active_connections.get(player_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(_encode(event))
        except Exception as e:
            logger.error(f"Error sending message to {player_id}: {e}")


class GameServer:
    """Routes inbound events to the engine and pushes per-viewer state back."""

    def __init__(self, engine: LetterEngine):
        self.engine = engine
        self.connections = ConnectionManager()
        self.bots: Dict[str, Dict[str, BaseBot]] = {}
        self.bot_tasks: Dict[str, asyncio.Task] = {}
        self.announced_rounds: Dict[str, int] = {}

    async def handle_websocket(self, websocket: WebSocket):
        player_id = str(uuid.uuid4())[:8]
        await self.connections.connect(websocket, player_id)

        try:
            while True:
                data = await websocket.receive_text()
                await self.handle_message(data, player_id)
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected for player {player_id}")
        except Exception as e:
            logger.error(f"WebSocket error for player {player_id}: {e}")
        finally:
            room_id = self.connections.disconnect(player_id)
            if room_id:
                self.engine.disconnect(room_id, player_id)
                await self.after_change(room_id)

    async def handle_message(self, data: str, player_id: str):
        try:
            event = parse_inbound_event(orjson.loads(data))
            await self.handle_event(event, player_id)
        except ValueError as e:
            await self.send_error(player_id, ErrorCode.INVALID_EVENT, str(e))
        except GameError as e:
            logger.info(f"Rejected action from {player_id}: {e}")
            await self.send_error(player_id, e.code, e.message)
        except Exception as e:
            logger.exception(f"Error handling message from {player_id}: {e}")
            await self.send_error(player_id, ErrorCode.INTERNAL_ERROR, "Internal server error")

    async def handle_event(self, event, player_id: str):
        if isinstance(event, JoinEvent):
            await self.handle_join(event, player_id)
            return
        room_id = self.connections.room_of(player_id)
        if not room_id:
            raise GameError(NOT_IN_ROOM, "Join a room first")

        if isinstance(event, ClaimHostEvent):
            self.engine.claim_host(room_id, player_id)
        elif isinstance(event, ConfigureBotsEvent):
            self.engine.configure_bots(room_id, player_id, event.bot_count, event.skill_level)
            self.bots.pop(room_id, None)
        elif isinstance(event, NewGameEvent):
            self.cancel_bot_task(room_id)
            self.engine.new_game(room_id, player_id)
            self.announced_rounds.pop(room_id, None)
        elif isinstance(event, StartRoundEvent):
            self.engine.start_round(room_id, player_id, seed=event.seed)
        elif isinstance(event, DrawEvent):
            card = self.engine.draw(room_id, player_id)
            await self.connections.send_personal_message(create_drawn_event(card.value), player_id)
        elif isinstance(event, PlayEvent):
            outcome = self.engine.play(room_id, player_id, event.card, event.target_id, event.guess)
            if outcome.reveal:
                await self.connections.send_personal_message(
                    create_reveal_event(outcome.reveal['target_id'], outcome.reveal['card']), player_id
                )
        elif isinstance(event, LeaveEvent):
            self.engine.leave(room_id, player_id)
            self.connections.remove_from_room(player_id)
        elif isinstance(event, KickEvent):
            self.engine.kick(room_id, player_id, event.target_id)
            if self.connections.room_of(event.target_id) == room_id:
                self.connections.remove_from_room(event.target_id)
                await self.send_error(event.target_id, ErrorCode.NOT_IN_ROOM, "You were removed from the room")
        elif isinstance(event, RequestStateEvent):
            await self.send_state(room_id, player_id)
            return
        else:
            raise ValueError(f"Unhandled event type: {type(event)}")

        await self.after_change(room_id)

    async def handle_join(self, event: JoinEvent, player_id: str):
        previous = self.connections.room_of(player_id)
        player_id, state = self.engine.join(event.room_id, event.name, player_id)
        room_id = state["id"]
        if previous and previous != room_id:
            self.engine.leave(previous, player_id)
            await self.after_change(previous)

        self.connections.add_to_room(player_id, room_id)
        await self.connections.send_personal_message(create_join_success_event(player_id, room_id), player_id)
        await self.after_change(room_id)

    async def send_error(self, player_id: str, code, message: str):
        try:
            code = ErrorCode(code)
        except ValueError:
            code = ErrorCode.INTERNAL_ERROR
        await self.connections.send_personal_message(create_error_event(code, message), player_id)

    async def send_state(self, room_id: str, player_id: str):
        room = self.engine.get_room(room_id)
        if room:
            await self.connections.send_personal_message(
                create_state_full_event(sanitize_state(room, player_id)), player_id
            )

    async def after_change(self, room_id: str):
        """Broadcast the new state, announce a finished round and wake the next bot."""
        room = self.engine.get_room(room_id)
        if room is None:
            self.cancel_bot_task(room_id)
            self.bots.pop(room_id, None)
            self.announced_rounds.pop(room_id, None)
            return
        await self.broadcast_game_state(room)
        await self.announce_round_end(room)
        self.schedule_bot_actions(room_id)

    async def broadcast_game_state(self, room: Session):
        for player_id, state in project_room(room).items():
            if self.connections.room_of(player_id) == room.id:
                await self.connections.send_personal_message(create_state_full_event(state), player_id)

    async def announce_round_end(self, room: Session):
        result = room.last_result
        if room.round_active or result is None:
            return
        if self.announced_rounds.get(room.id) == room.round_number:
            return
        self.announced_rounds[room.id] = room.round_number
        hands = {
            p.id: [card.value for card in p.hand]
            for p in room.participants.values() if p.alive
        }
        event = create_round_over_event(result.winner_id, result.reason, result.game_over, hands)
        for player in room.humans():
            if self.connections.room_of(player.id) == room.id:
                await self.connections.send_personal_message(event, player.id)

    def schedule_bot_actions(self, room_id: str):
        """Schedule the bot whose turn it is; any older pending move is cancelled."""
        existing = self.bot_tasks.pop(room_id, None)
        if existing and existing is not asyncio.current_task() and not existing.done():
            existing.cancel()

        room = self.engine.get_room(room_id)
        if not room or not room.round_active or not room.turn:
            return
        player = room.participants.get(room.turn)
        if not player or not player.is_bot:
            return

        logger.debug(f"Scheduling bot {player.name} in room {room_id}")
        self.bot_tasks[room_id] = asyncio.create_task(self.execute_bot_action(room_id, player.id))

    def cancel_bot_task(self, room_id: str):
        task = self.bot_tasks.pop(room_id, None)
        if task and task is not asyncio.current_task() and not task.done():
            task.cancel()

    def get_bot(self, room_id: str, player: Participant) -> BaseBot:
        room_bots = self.bots.setdefault(room_id, {})
        bot = room_bots.get(player.id)
        if bot is None or bot.skill_level != player.skill_level:
            bot = HeuristicBot(player.id, player.skill_level or 1)
            room_bots[player.id] = bot
        return bot

    async def execute_bot_action(self, room_id: str, player_id: str):
        """Execute a bot move after the thinking delay."""
        try:
            await asyncio.sleep(self.engine.rules.bot_think_delay)

            # The turn may have moved on while we were sleeping
            room = self.engine.get_room(room_id)
            if not room or not room.round_active or room.turn != player_id:
                logger.info(f"Bot {player_id} turn in room {room_id} is stale, skipping")
                return
            player = room.participants.get(player_id)
            if not player or not player.is_bot:
                return

            outcome = self.get_bot(room_id, player).take_turn(self.engine, room_id)
            logger.info(f"Bot {player.name} in room {room_id} played {outcome.card.value if outcome else None}")
            await self.after_change(room_id)
        except asyncio.CancelledError:
            logger.info(f"Bot action cancelled for room {room_id}")
            raise
        except GameError as e:
            logger.error(f"Bot {player_id} could not move in room {room_id}: {e}")
        except Exception as e:
            logger.exception(f"Bot automation error for room {room_id}: {e}")


def create_app(engine: Optional[LetterEngine] = None) -> FastAPI:
    """Build the FastAPI app around one engine (and its room registry)."""
    if engine is None:
        rules = load_rules_from_env()
        engine = LetterEngine(SessionRegistry(rules), rules)
    server = GameServer(engine)

    app = FastAPI(title="Mystery Letter Game Engine", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.game_server = server

    @app.get("/")
    async def root():
        return {"message": "Mystery Letter Game API", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "rooms": len(engine.registry),
            "connections": len(server.connections.active_connections)
        }

    @app.get("/rooms")
    async def list_rooms():
        return [get_public_room_info(room) for room in engine.registry]

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await server.handle_websocket(websocket)

    return app
