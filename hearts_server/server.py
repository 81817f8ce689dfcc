"""WebSocket server: connections, message routing, outbound delivery."""

import asyncio
import traceback
import uuid
import websockets
from websockets.asyncio.server import serve, ServerConnection

from hearts_shared.constants import MessageType, DEFAULT_HOST, DEFAULT_PORT
from hearts_shared.protocol import create_message, parse_message
from hearts_server.session import Session


class Connection:
    def __init__(self, ws: ServerConnection, player_id: str):
        self.ws = ws
        self.player_id = player_id
        self.connected = True


class GameServer:
    """Hosts the single shared session and acts as its notifier."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 clock=None):
        self.host = host
        self.port = port
        self.connections: dict[str, Connection] = {}  # player_id -> connection
        # Outbound messages, delivered in order by deliver()
        self.outbox: asyncio.Queue = asyncio.Queue()
        self.session = Session(self, clock=clock)

    # Notifier surface used by the session

    def broadcast(self, msg_type: MessageType, payload: dict = None, exclude: str = None):
        message = create_message(msg_type, payload)
        for conn in self.connected():
            if conn.player_id != exclude:
                self.outbox.put_nowait((conn, message))

    def unicast(self, player_id: str, msg_type: MessageType, payload: dict = None):
        conn = self.connections.get(player_id)
        if conn and conn.connected:
            self.outbox.put_nowait((conn, create_message(msg_type, payload)))

    def connected(self) -> list[Connection]:
        return [c for c in self.connections.values() if c.connected]

    async def deliver(self):
        while True:
            conn, message = await self.outbox.get()
            if conn.connected:
                try:
                    await conn.ws.send(message)
                except Exception as e:
                    print(f"[server] Send to {conn.player_id} failed: {e}")
                    conn.connected = False
            self.outbox.task_done()

    # Inbound

    async def handle_connection(self, ws: ServerConnection):
        player_id = str(uuid.uuid4())[:8]
        conn = Connection(ws, player_id)
        self.connections[player_id] = conn
        print(f"[server] Player connected: {player_id} from {ws.remote_address}")
        self.unicast(player_id, MessageType.WELCOME, {"player_id": player_id})
        self.session.join(player_id)
        try:
            async for raw_message in ws:
                try:
                    msg_type, payload = parse_message(raw_message)
                except Exception as e:
                    print(f"[server] Parse error: {e}")
                    self.unicast(player_id, MessageType.ERROR,
                                 {"message": "Invalid message format"})
                    continue

                try:
                    self.handle_message(player_id, msg_type, payload)
                except Exception as e:
                    print(f"[server] Error handling {msg_type.value} from {player_id}: {e}")
                    traceback.print_exc()
                    self.unicast(player_id, MessageType.ERROR,
                                 {"message": "Server error processing action"})
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            conn.connected = False
            self.connections.pop(player_id, None)
            print(f"[server] Player disconnected: {player_id}")
            self.session.leave(player_id)

    def handle_message(self, player_id: str, msg_type: MessageType, payload: dict):
        if msg_type == MessageType.SUBMIT_GUESS:
            error = self.session.submit_guess(player_id, payload.get("guess"))
            if error:
                self.unicast(player_id, MessageType.ERROR, {"message": error})

        elif msg_type == MessageType.PLAYER_READY:
            self.session.mark_ready(player_id)

        elif msg_type == MessageType.CHAT_MESSAGE:
            text = str(payload.get("message", "")).strip()
            if text and player_id in self.session.registry:
                self.broadcast(MessageType.CHAT_MESSAGE, {
                    "sender": player_id,
                    "message": text,
                })

        elif msg_type == MessageType.PLAYER_MOVEMENT:
            try:
                x = float(payload["x"])
                y = float(payload["y"])
            except (KeyError, TypeError, ValueError):
                self.unicast(player_id, MessageType.ERROR, {"message": "Invalid position"})
                return
            self.session.move(player_id, x, y)

        else:
            self.unicast(player_id, MessageType.ERROR,
                         {"message": f"Unexpected message: {msg_type.value}"})

    async def run(self):
        delivery = asyncio.create_task(self.deliver())
        try:
            async with serve(self.handle_connection, self.host, self.port):
                print(f"Server running on ws://{self.host}:{self.port}")
                await asyncio.Future()  # run forever
        finally:
            delivery.cancel()


async def main(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
    server = GameServer(host, port)
    await server.run()
