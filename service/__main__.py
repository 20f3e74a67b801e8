import argparse
import asyncio
import logging

from destiny.catalog import load_catalog, starter_catalog

from .models import ServiceConfig
from .server import ResolutionServer

logging.basicConfig(level=logging.INFO)


def main() -> None:
    parser = argparse.ArgumentParser(description="Destiny Deck resolution server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8766)
    parser.add_argument("--catalog", help="JSON action catalog (defaults to the built-in starter actions)")
    parser.add_argument("--history-limit", type=int, default=50, help="Results kept per character")
    parser.add_argument("--max-characters", type=int, default=10_000, help="Characters whose history is kept")
    parser.add_argument("--max-message-bytes", type=int, default=65_536)
    args = parser.parse_args()

    config = ServiceConfig(
        history_limit=args.history_limit,
        max_characters=args.max_characters,
        max_message_bytes=args.max_message_bytes,
        catalog_path=args.catalog,
    )
    catalog = load_catalog(config.catalog_path) if config.catalog_path else starter_catalog()

    server = ResolutionServer(config, catalog)
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
