"""WebSocket server: connection gateway feeding the game actor."""

import asyncio
from typing import Optional
import websockets
from websockets.asyncio.server import serve, ServerConnection

from shared.constants import ActionType, ClientMessageType
from shared.errors import MalformedInputError
from shared.protocol import parse_message
from server.actor import Action, GameActor
from server.config import ServerConfig
from server.session import ClientSession


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def translate_message(client: ClientSession, raw) -> Action:
    """Turn one inbound frame into an Action, or raise MalformedInputError."""
    msg_type, payload = parse_message(raw, ClientMessageType)

    if msg_type in (ClientMessageType.MOVE, ClientMessageType.ATTACK):
        x, y = payload.get("x"), payload.get("y")
        if not (_is_int(x) and _is_int(y)):
            raise MalformedInputError(f"{msg_type.value} needs integer x and y")
        return Action(ActionType(msg_type.value), client, x=x, y=y)

    if msg_type == ClientMessageType.CHAT:
        text = payload.get("text")
        if not isinstance(text, str):
            raise MalformedInputError("chat needs a text string")
        return Action(ActionType.CHAT, client, text=text)

    if msg_type == ClientMessageType.SET_NAME:
        name = payload.get("name")
        if not isinstance(name, str):
            raise MalformedInputError("setName needs a name string")
        return Action(ActionType.SET_NAME, client, text=name)

    return Action(ActionType(msg_type.value), client)


class GameServer:
    def __init__(self, config: Optional[ServerConfig] = None,
                 actor: Optional[GameActor] = None):
        self.config = config or ServerConfig()
        self.actor = actor or GameActor(self.config)
        self.actions: asyncio.Queue = asyncio.Queue()
        self._actor_task: Optional[asyncio.Task] = None

    def start_actor(self) -> asyncio.Task:
        if self._actor_task is None or self._actor_task.done():
            self._actor_task = asyncio.create_task(self.actor.run(self.actions))
        return self._actor_task

    async def handle_connection(self, ws: ServerConnection):
        client = ClientSession(outbox_size=self.config.outbox_size)
        print(f"[server] New connection from {ws.remote_address} as {client.client_id}")
        writer = asyncio.create_task(self._write_loop(ws, client))
        await self.actions.put(Action(ActionType.JOIN, client))
        try:
            async for raw_message in ws:
                try:
                    action = translate_message(client, raw_message)
                except MalformedInputError as e:
                    print(f"[server] Ignoring message from {client.client_id}: {e}")
                    continue
                print(f"[server] Received {action.type.value} from {client.client_id}")
                await self.actions.put(action)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            print(f"[server] {client.client_id} disconnected")
            await self.actions.put(Action(ActionType.LEAVE, client))
            client.close()
            writer.cancel()

    async def _write_loop(self, ws: ServerConnection, client: ClientSession):
        """Drain one client's outbox onto its socket until told to hang up."""
        try:
            while True:
                message = await client.outbox.get()
                if message is None:
                    break
                await ws.send(message)
                if not client.connected and client.outbox.empty():
                    break
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            await ws.close()

    async def run(self):
        self.start_actor()
        async with serve(self.handle_connection, self.config.host, self.config.port):
            print(f"Server running on ws://{self.config.host}:{self.config.port}")
            await asyncio.Future()  # run forever


async def main(config: Optional[ServerConfig] = None):
    server = GameServer(config)
    await server.run()
