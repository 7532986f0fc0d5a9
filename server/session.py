"""Connected clients and the broadcast sink.

Sending never blocks: each client owns a bounded outbox drained by its own
writer task. A client whose outbox overflows is dropped and disconnected.
"""

import asyncio
import uuid
from typing import Optional
from shared.constants import Role, MAX_CLIENTS, OUTBOX_SIZE
from shared.errors import CapacityError


class ClientSession:
    def __init__(self, client_id: Optional[str] = None, outbox_size: int = OUTBOX_SIZE):
        self.client_id = client_id or str(uuid.uuid4())[:8]
        self.role: Role = Role.SPECTATOR
        self.name: Optional[str] = None
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=outbox_size)
        self.connected = True

    @property
    def display_name(self) -> str:
        return self.name or self.role.value

    def send(self, message: str) -> bool:
        """Queue a message for delivery. Returns False if the client was dropped."""
        if not self.connected:
            return False
        try:
            self.outbox.put_nowait(message)
        except asyncio.QueueFull:
            print(f"[server] Outbox full for {self.client_id}, dropping client")
            self.close()
            return False
        return True

    def close(self):
        """Stop accepting messages and tell the writer to hang up."""
        if not self.connected:
            return
        self.connected = False
        try:
            self.outbox.put_nowait(None)  # None sentinel = disconnect
        except asyncio.QueueFull:
            # Writer checks `connected` after each send, so it still stops
            pass

    def drain(self) -> list[str]:
        """Non-blocking: pull every queued message (sentinels skipped)."""
        messages = []
        while not self.outbox.empty():
            msg = self.outbox.get_nowait()
            if msg is not None:
                messages.append(msg)
        return messages


class Roster:
    """All registered clients, capacity bounded."""

    def __init__(self, max_clients: int = MAX_CLIENTS):
        self.max_clients = max_clients
        self.clients: dict[str, ClientSession] = {}

    def __len__(self) -> int:
        return len(self.clients)

    def __contains__(self, client: ClientSession) -> bool:
        return self.clients.get(client.client_id) is client

    def __iter__(self):
        return iter(list(self.clients.values()))

    def register(self, client: ClientSession):
        if len(self.clients) >= self.max_clients:
            raise CapacityError(f"Server is full ({self.max_clients} clients)")
        self.clients[client.client_id] = client

    def unregister(self, client: ClientSession) -> bool:
        if client in self:
            del self.clients[client.client_id]
            return True
        return False

    def spectator_count(self) -> int:
        return sum(1 for c in self.clients.values() if c.role == Role.SPECTATOR)

    def broadcast(self, message: str, exclude: Optional[ClientSession] = None):
        for client in self:
            if client is not exclude:
                client.send(message)

    def send_to(self, client: ClientSession, message: str):
        client.send(message)
