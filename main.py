"""Run the chat arena battle API.

``--seed-npcs`` creates the schema and fills in any missing system
combatants before the server starts, so a fresh database has opponents for
the first players.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from chatarena.config import get_settings
from chatarena.database import build_session_factory, create_db_engine, init_db
from chatarena.models import seed_npc_combatants

logger = logging.getLogger("chatarena")


def seed_database() -> int:
    engine = create_db_engine(get_settings())
    try:
        init_db(engine)
        with build_session_factory(engine)() as session:
            return seed_npc_combatants(session)
    finally:
        engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the chat arena battle API")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--seed-npcs",
        action="store_true",
        help="Create tables and add the system combatant roster before serving",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change",
    )
    args = parser.parse_args()

    if args.seed_npcs:
        logging.basicConfig(level=get_settings().log_level.upper())
        logger.info("seeded %d system combatants", seed_database())

    uvicorn.run(
        "chatarena.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
