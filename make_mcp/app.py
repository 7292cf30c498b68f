import argparse
import logging
import sys
from dataclasses import replace

import anyio
from dotenv import load_dotenv

from .config import AppConfig
from .server import serve
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Run the Make.com automation MCP server over stdio.")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    config = AppConfig.from_env()
    if args.log_level:
        config = replace(config, log_level=args.log_level.upper())
    setup_logging(config.log_level, config.log_format)

    try:
        anyio.run(serve, config)
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("MCP server failed to start")
        sys.exit(1)


if __name__ == "__main__":
    main()
