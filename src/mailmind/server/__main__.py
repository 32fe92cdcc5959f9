"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Run the mailmind API with uvicorn: `python -m mailmind.server`.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..llms.errors import ConfigurationError
from ..llms.settings import GovernorSettings
from .app import create_app

logger = logging.getLogger("mailmind.server")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Governed AI email assistant API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default="info")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = GovernorSettings.from_env()
    except ConfigurationError as exc:
        logger.error("Refusing to start: %s", exc)
        return 2

    try:
        import uvicorn
    except ImportError:
        raise ImportError(
            "uvicorn is required to run the mailmind server. "
            "Install it with: pip install uvicorn"
        )

    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
