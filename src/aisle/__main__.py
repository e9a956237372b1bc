"""Entry point: python -m aisle [chat|serve]

- No args / "chat": Interactive CLI REPL (development/testing)
- "serve":          Telegram bot daemon (production)
"""

from __future__ import annotations

import asyncio
import logging
import sys

from aisle.config import load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _run_cli() -> None:
    """Interactive CLI REPL mode."""
    config = load_config()
    _setup_logging(config.log_level)

    from aisle.connectors.cli import CLIConnector
    from aisle.daemon import build_aisle

    aisle = build_aisle(config)
    aisle.add_connector(CLIConnector())

    try:
        asyncio.run(aisle.start())
    except KeyboardInterrupt:
        pass


def _run_serve() -> None:
    """Daemon mode with the Telegram connector."""
    config = load_config()
    _setup_logging(config.log_level)

    if not config.telegram.token:
        print("TELEGRAM_BOT_TOKEN is not set (environment, .env or aisle.toml).", file=sys.stderr)
        sys.exit(1)

    from aisle.daemon import AisleDaemon

    daemon = AisleDaemon(config)
    asyncio.run(daemon.run())


def main() -> None:
    cmd = sys.argv[1] if len(sys.argv) > 1 else "chat"

    if cmd in ("chat", "repl"):
        _run_cli()
    elif cmd == "serve":
        _run_serve()
    else:
        print("Usage: python -m aisle [chat|serve]")
        print("  chat   Interactive CLI REPL (default)")
        print("  serve  Telegram bot daemon")
        sys.exit(1)


if __name__ == "__main__":
    main()
