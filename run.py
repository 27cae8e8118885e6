import argparse
import logging
import os
import sys

import uvicorn

from invitecrawl.api.server import create_app
from invitecrawl.container import Container
from invitecrawl.domain.crawl_session import STATUS_COMPLETED


def _configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Find dead community invite links on a listing site.")
    parser.add_argument("--once", action="store_true", help="run a single session in the foreground and exit")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")))
    return parser.parse_args(argv)


def main(container=None, argv=None) -> int:
    _configure_logging()
    args = _parse_args(argv)
    container = container or Container()

    if args.once:
        result = container.session_controller().run_blocking()
        if result is None:
            return 1
        print(result.report.render() or "No invalid links found")
        return 0 if result.status == STATUS_COMPLETED else 1

    app = create_app(container)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


if __name__ == '__main__':
    sys.exit(main())
