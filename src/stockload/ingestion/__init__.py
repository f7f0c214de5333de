"""CSV ingestion: normalization and transactional insert."""

from stockload.ingestion.csv_ingest import (
    ImportResult,
    import_csv,
    ingest_file,
    insert_all,
    parse_csv,
)
from stockload.ingestion.schema import SIMPLE, SKU, VARIANTS, ensure_schema, get_table

__all__ = [
    "ImportResult",
    "SIMPLE",
    "SKU",
    "VARIANTS",
    "ensure_schema",
    "get_table",
    "import_csv",
    "ingest_file",
    "insert_all",
    "parse_csv",
]
