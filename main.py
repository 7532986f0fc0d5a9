"""Entry point - launches the game server.

Usage:
    python main.py                 # Serve on localhost:8765
    python main.py 0.0.0.0         # Serve on a custom host
    python main.py 0.0.0.0 9000    # Serve on a custom host/port

Other settings come from GRIDCLASH_* environment variables
(MAX_CLIENTS, SPAWN_CHANCE, OUTBOX_SIZE, and HOST/PORT when no args are given).
"""

import sys
import asyncio

from server.config import ServerConfig
from server.server import main as server_main


def parse_args(args: list[str]) -> ServerConfig:
    config = ServerConfig.from_env()
    if len(args) > 2 or any(a in ("-h", "--help") for a in args):
        print(__doc__)
        sys.exit(1)
    if args:
        config.host = args[0]
    if len(args) > 1:
        try:
            config.port = int(args[1])
        except ValueError:
            print(f"Invalid port: {args[1]}")
            sys.exit(1)
    return config


def run():
    config = parse_args(sys.argv[1:])
    print(f"Starting Grid Clash server on {config.host}:{config.port}")
    try:
        asyncio.run(server_main(config))
    except KeyboardInterrupt:
        print("Server stopped")


if __name__ == "__main__":
    run()
