"""CLI entry point for CSV ingestion.

Usage:
    python -m scripts.ingest_csv --db-url sqlite:///inventory.db --file products.csv [--variant sku]
"""

import argparse
import logging
import sys

from stockload import create_service
from stockload.errors import ImportFailure
from stockload.ingestion import SIMPLE, VARIANTS, ingest_file

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Import a products CSV into the database")
    parser.add_argument(
        "--db-url", required=True, help="Database URL (sqlite:/// or postgresql://)"
    )
    parser.add_argument("--file", required=True, help="Path to CSV file")
    parser.add_argument("--variant", choices=VARIANTS, default=SIMPLE, help="Table layout")
    args = parser.parse_args()

    service = create_service(args.db_url, pool_size=1)
    service.connect()
    try:
        result = ingest_file(service, args.file, args.variant)
        logger.info(
            "Done. %d rows parsed, %d inserted, %d skipped.",
            result.total,
            result.inserted,
            result.skipped,
        )
    except ImportFailure as e:
        logger.error("%s", e.message)
        sys.exit(1)
    finally:
        service.close()


if __name__ == "__main__":
    main()
