"""Run the upload API under uvicorn.

Usage:
    python -m scripts.serve [--host 0.0.0.0] [--port 4000] [--db-url sqlite:///inventory.db] [--variant sku]

Flags override DATABASE_URL, IMPORT_VARIANT, HOST and PORT from the environment.
"""

import argparse
import logging

import uvicorn

from stockload.api import create_app
from stockload.config import Settings
from stockload.ingestion import VARIANTS


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the CSV upload API")
    parser.add_argument("--host", help="Bind address")
    parser.add_argument("--port", type=int, help="Bind port")
    parser.add_argument("--db-url", help="Database URL (sqlite:/// or postgresql://)")
    parser.add_argument("--variant", choices=VARIANTS, help="Table layout")
    args = parser.parse_args()

    settings = Settings.from_env().override(
        host=args.host,
        port=args.port,
        database_url=args.db_url,
        variant=args.variant,
    )

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
