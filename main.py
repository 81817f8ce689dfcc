"""Entry point - launches the session server via CLI args.

Usage:
    python main.py                  # Serve on localhost:3000 (or $PORT)
    python main.py 0.0.0.0 9000     # Serve on custom host/port
"""

import os
import sys
import asyncio

from hearts_shared.constants import DEFAULT_HOST, DEFAULT_PORT


async def main():
    args = sys.argv[1:]

    if args and args[0] in ("-h", "--help"):
        print(__doc__)
        sys.exit(0)

    from hearts_server.server import main as server_main
    host = args[0] if args else DEFAULT_HOST
    port = int(args[1]) if len(args) > 1 else int(os.environ.get("PORT", DEFAULT_PORT))
    print(f"Starting Jack of Hearts server on {host}:{port}")
    await server_main(host, port)


if __name__ == "__main__":
    asyncio.run(main())
