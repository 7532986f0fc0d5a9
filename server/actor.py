"""The game-state actor: one consumer, one action at a time.

Connection handlers never touch game state. They enqueue Actions; the actor
task pulls them off the queue and runs `process`, which validates, mutates
and pushes outbound messages into client outboxes without ever awaiting.
"""

import asyncio
import random
import traceback
from dataclasses import dataclass
from typing import Optional
from shared.constants import (
    ActionType, ServerMessageType, PLAYER_ROLES, SYSTEM_SENDER,
    MAX_CHAT_LENGTH, MAX_NAME_LENGTH,
)
from shared.errors import ValidationError, CapacityError
from shared.protocol import create_message
from server.config import ServerConfig
from server.game_state import GameState
from server.session import ClientSession, Roster


@dataclass(frozen=True)
class Action:
    type: ActionType
    client: ClientSession
    x: int = 0
    y: int = 0
    text: str = ""


def clean_text(text: str, limit: int) -> str:
    """Truncate to `limit` characters and strip surrounding whitespace."""
    return text[:limit].strip()


class GameActor:
    """Sole owner and mutator of the game state and roster."""

    def __init__(self, config: Optional[ServerConfig] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or ServerConfig()
        self.roster = Roster(self.config.max_clients)
        self.game = GameState(rng=rng, spawn_chance=self.config.spawn_chance)
        self._handlers = {
            ActionType.JOIN: self._handle_join,
            ActionType.LEAVE: self._handle_leave,
            ActionType.MOVE: self._handle_move,
            ActionType.ATTACK: self._handle_attack,
            ActionType.ROLL: self._handle_roll,
            ActionType.RESET: self._handle_reset,
            ActionType.CHAT: self._handle_chat,
            ActionType.SET_NAME: self._handle_set_name,
        }

    async def run(self, queue: asyncio.Queue):
        """Consume actions forever. No single action can stop the loop."""
        while True:
            action = await queue.get()
            try:
                self.process(action)
            except Exception as e:
                print(f"[actor] Error processing {action.type.value} "
                      f"from {action.client.client_id}: {e}")
                traceback.print_exc()
            finally:
                queue.task_done()

    def process(self, action: Action):
        handler = self._handlers[action.type]
        client = action.client
        if action.type not in (ActionType.JOIN, ActionType.LEAVE) and client not in self.roster:
            # Left (or never admitted) before this action reached the actor
            return
        try:
            handler(action)
        except ValidationError as e:
            self._send_error(client, str(e))

    # -- outbound helpers -------------------------------------------------

    def _send(self, client: ClientSession, msg_type: ServerMessageType, payload: dict = None):
        self.roster.send_to(client, create_message(msg_type, payload))

    def _broadcast(self, msg_type: ServerMessageType, payload: dict = None):
        self.roster.broadcast(create_message(msg_type, payload))

    def _send_error(self, client: ClientSession, message: str):
        self._send(client, ServerMessageType.ERROR, {"message": message})

    def _system_notice(self, message: str):
        self._broadcast(ServerMessageType.CHAT, {
            "from": SYSTEM_SENDER,
            "name": None,
            "message": message,
        })

    def _state_payload(self) -> dict:
        return self.game.get_snapshot(spectators=self.roster.spectator_count()).to_dict()

    def _broadcast_state(self):
        self._broadcast(ServerMessageType.STATE, self._state_payload())

    def _announce_turn_events(self, client: ClientSession, result: dict):
        collected = result.get("collected")
        if collected:
            self._system_notice(f"{client.display_name} picked up {collected['power_up']}")
        spawned = result.get("spawned")
        if spawned:
            print(f"[actor] Spawned {spawned.type.value} at ({spawned.x}, {spawned.y})")

    # -- handlers ---------------------------------------------------------

    def _handle_join(self, action: Action):
        client = action.client
        try:
            self.roster.register(client)
        except CapacityError as e:
            print(f"[actor] Rejected {client.client_id}: {e}")
            self._send_error(client, str(e))
            client.close()
            return
        client.role = self.game.assign_slot(client)
        print(f"[actor] {client.client_id} joined as {client.role.value}")
        self._send(client, ServerMessageType.ASSIGNED, {"role": client.role.value})
        self._send(client, ServerMessageType.STATE, self._state_payload())
        self._system_notice(f"{client.display_name} joined")

    def _handle_leave(self, action: Action):
        client = action.client
        if not self.roster.unregister(client):
            return
        self.game.vacate_slot(client)
        print(f"[actor] {client.client_id} ({client.role.value}) left")
        self._system_notice(f"{client.display_name} left")

    def _handle_move(self, action: Action):
        client = action.client
        result = self.game.move(client.role, action.x, action.y)
        self._announce_turn_events(client, result)
        self._broadcast_state()

    def _handle_attack(self, action: Action):
        client = action.client
        outcome = self.game.attack(client.role, action.x, action.y)
        if outcome["boosted"]:
            result = outcome["result"]
            self._announce_turn_events(client, result)
            payload = {k: v for k, v in result.items() if k != "spawned"}
            payload["state"] = self._state_payload()
            self._broadcast(ServerMessageType.COMBAT_BOOSTED, payload)
            return
        combat = outcome["combat"]
        self._broadcast(ServerMessageType.COMBAT_START, combat.reveal_payload())

    def _handle_roll(self, action: Action):
        client = action.client
        outcome = self.game.roll(client.role)
        if outcome is None:
            return
        self._broadcast(ServerMessageType.COMBAT_ROLLED, outcome["reveal"])
        result = outcome["result"]
        if result is None:
            return
        self._announce_turn_events(client, result)
        payload = {k: v for k, v in result.items() if k != "spawned"}
        payload["state"] = self._state_payload()
        self._broadcast(ServerMessageType.COMBAT, payload)

    def _handle_reset(self, action: Action):
        self.game.reset_board()
        self.game.swap_slots()
        for client in self.roster:
            if client.role in PLAYER_ROLES:
                client.role = client.role.opponent()
        for client in self.roster:
            self._send(client, ServerMessageType.ASSIGNED, {"role": client.role.value})
        print(f"[actor] Board reset by {action.client.client_id}")
        self._broadcast_state()

    def _handle_chat(self, action: Action):
        client = action.client
        text = clean_text(action.text, MAX_CHAT_LENGTH)
        if not text:
            return
        self._broadcast(ServerMessageType.CHAT, {
            "from": client.role.value,
            "name": client.name,
            "message": text,
        })

    def _handle_set_name(self, action: Action):
        client = action.client
        name = clean_text(action.text, MAX_NAME_LENGTH)
        if not name:
            return
        old = client.display_name
        client.name = name
        self._system_notice(f"{old} is now known as {name}")
