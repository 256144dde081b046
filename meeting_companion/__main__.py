"""Package entry point for ``python -m meeting_companion``.

WHY: Operators start the HTTP service with a single command, without
remembering the ASGI app path.

HOW: Configures root logging and hands off to the server's run_api().

RULES:
- This is the only place logging.basicConfig is called
- ``--host`` and ``--port`` override the bind address
"""

import argparse
import logging

if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        prog="meeting_companion",
        description="Run the Meeting Companion HTTP service.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind address.")
    parser.add_argument("--port", type=int, default=8000, help="Bind port.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from meeting_companion.server.app import run_api
    run_api(host=args.host, port=args.port)
