import argparse
import asyncio
import logging
import os
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import FastAPI
import socketio

from game_store import JsonFileStore
from go_board import EMPTY
from go_game import GoGame
from go_scoring import DEFAULT_KOMI


@dataclass
class ServerSettings:
    board_size: int = 19
    komi: float = DEFAULT_KOMI
    state_dir: Optional[str] = None
    host: str = "127.0.0.1"
    port: int = 3000

    @classmethod
    def from_env(cls) -> 'ServerSettings':
        return cls(
            board_size=int(os.environ.get("GO_BOARD_SIZE", 19)),
            komi=float(os.environ.get("GO_KOMI", DEFAULT_KOMI)),
            state_dir=os.environ.get("GO_STATE_DIR") or None,
            host=os.environ.get("HOST", "127.0.0.1"),
            port=int(os.environ.get("PORT", 3000)),
        )


def dispatch_click(game: GoGame, x: int, y: int) -> Dict:
    """Classify a click: occupied cells are annotated, empty cells are played"""
    position = {'x': x, 'y': y}
    if game.board.in_bounds(x, y) and game.board.get(x, y) != EMPTY:
        return {'type': 'comment', 'position': position}
    return {'type': 'move', 'position': position}


# FastAPI and Socket.IO setup
app = FastAPI()
sio = socketio.AsyncServer(cors_allowed_origins="*", async_mode='asgi')
socket_app = socketio.ASGIApp(sio, app)

settings = ServerSettings.from_env()

# The single local game; created on first use so settings can be changed first
_game: Dict[str, Optional[GoGame]] = {'game': None}
# Engine calls run in worker threads; this keeps them from interleaving
_engine_lock = threading.Lock()


def get_game() -> GoGame:
    if _game['game'] is None:
        _game['game'] = new_game(settings.board_size)
    return _game['game']


def new_game(board_size: int) -> GoGame:
    store = JsonFileStore(settings.state_dir) if settings.state_dir else None
    return GoGame(board_size, komi=settings.komi, store=store)


async def call_engine(func, *args):
    """Run a game operation (and its snapshot write) off the event loop"""
    def locked():
        with _engine_lock:
            return func(*args)
    return await asyncio.to_thread(locked)


@app.get("/state")
async def read_state():
    return get_game().get_state()


@app.get("/score")
async def read_score():
    return get_game().score()


async def emit_state(sid, game: GoGame):
    state = await call_engine(game.get_state)
    if game.persistence_error:
        state['warning'] = f"Game could not be saved: {game.persistence_error}"
    await sio.emit('gameState', state, room=sid)


@sio.event
async def connect(sid, environ):
    print(f'New client connected: {sid}')
    await emit_state(sid, get_game())


@sio.event
async def disconnect(sid):
    print(f'Client disconnected: {sid}')


@sio.event
async def newGame(sid, board_size=None):
    size = board_size or settings.board_size
    try:
        game = await call_engine(new_game, size)
    except ValueError as e:
        await sio.emit('error', str(e), room=sid)
        return
    await call_engine(game.reset)
    _game['game'] = game
    await emit_state(sid, game)


@sio.event
async def boardClick(sid, data):
    game = get_game()
    intent = dispatch_click(game, int(data['x']), int(data['y']))
    if intent['type'] == 'comment':
        await sio.emit('commentRequest', intent['position'], room=sid)
    else:
        await makeMove(sid, intent['position'])


@sio.event
async def makeMove(sid, data):
    game = get_game()
    x, y = int(data['x']), int(data['y'])
    if await call_engine(game.play, x, y):
        await emit_state(sid, game)
    else:
        await sio.emit('invalidMove', {'x': x, 'y': y}, room=sid)


@sio.event
async def passMove(sid):
    game = get_game()
    if await call_engine(game.pass_turn):
        await emit_state(sid, game)
    else:
        await sio.emit('error', 'Game is over', room=sid)


@sio.event
async def undo(sid):
    game = get_game()
    if await call_engine(game.undo):
        await emit_state(sid, game)
    else:
        await sio.emit('error', 'Nothing to undo', room=sid)


@sio.event
async def redo(sid):
    game = get_game()
    if await call_engine(game.redo):
        await emit_state(sid, game)
    else:
        await sio.emit('error', 'Nothing to redo', room=sid)


@sio.event
async def addComment(sid, data):
    game = get_game()
    if await call_engine(game.add_comment, int(data['x']), int(data['y']), data.get('comment', '')):
        await emit_state(sid, game)
    else:
        await sio.emit('error', 'Comment position is off the board', room=sid)


@sio.event
async def clearComments(sid):
    game = get_game()
    await call_engine(game.clear_comments)
    await emit_state(sid, game)


@sio.event
async def endGame(sid):
    game = get_game()
    await call_engine(game.end_game)
    await emit_state(sid, game)


@sio.event
async def reset(sid):
    game = get_game()
    await call_engine(game.reset)
    await emit_state(sid, game)


@sio.event
async def getScore(sid):
    await sio.emit('score', get_game().score(), room=sid)


if __name__ == "__main__":
    import uvicorn
    parser = argparse.ArgumentParser(description='Serve a local Go board with undo, redo and comments.')
    parser.add_argument('--board-size', type=int, default=settings.board_size, help='Size of the Go board (e.g., 9, 13, 19).')
    parser.add_argument('--komi', type=float, default=settings.komi, help='Compensation added to white\'s score.')
    parser.add_argument('--state-dir', type=str, default=settings.state_dir, help='Directory for the saved game; no saving if omitted.')
    parser.add_argument('--host', type=str, default=settings.host, help='Interface to bind.')
    parser.add_argument('--port', type=int, default=settings.port, help='Port to listen on.')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    settings.board_size = args.board_size
    settings.komi = args.komi
    settings.state_dir = args.state_dir
    settings.host = args.host
    settings.port = args.port
    uvicorn.run(socket_app, host=settings.host, port=settings.port)
