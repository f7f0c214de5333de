"""CSV upload ingestion into the products table."""

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from stockload.database import DatabaseError, DatabaseService
from stockload.errors import EmptyInputError, ParseError, PersistenceError
from stockload.ingestion.normalize import (
    CandidateRow,
    filter_eligible,
    normalize_header,
    normalize_simple,
    normalize_sku,
)
from stockload.ingestion.schema import SIMPLE, SKU, TableSpec, ensure_schema, get_table

logger = logging.getLogger(__name__)

_NORMALIZERS = {SIMPLE: normalize_simple, SKU: normalize_sku}


@dataclass(frozen=True)
class ImportResult:
    total: int
    valid: int
    inserted: int

    @property
    def skipped(self) -> int:
        return self.total - self.inserted


def parse_csv(content: bytes) -> list[dict[str, str]]:
    """Parse CSV bytes into records keyed by normalized header name.

    The first line is the header. Blank lines are skipped and cells
    beyond the header width are dropped.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"File is not valid UTF-8: {e.reason}.") from e

    reader = csv.DictReader(io.StringIO(text, newline=""), strict=True)
    records: list[dict[str, str]] = []
    try:
        if reader.fieldnames is None:
            return records
        reader.fieldnames = [normalize_header(h) for h in reader.fieldnames]
        for row in reader:
            record = {k: v for k, v in row.items() if k is not None}
            if all(not (v or "").strip() for v in record.values()):
                continue
            records.append(record)
    except csv.Error as e:
        raise ParseError(f"Line {reader.line_num}: {e}.") from e
    return records


def insert_all(service: DatabaseService, rows: Sequence[CandidateRow], table: TableSpec) -> int:
    """Insert rows in order inside one transaction.

    Keyed tables skip rows whose key already exists; those don't count.
    Any database error rolls the whole batch back.

    Returns the number of rows written.
    """
    inserted = 0
    try:
        with service.transaction() as tx:
            for row in rows:
                if table.conflict_columns:
                    inserted += tx.insert_ignore(
                        table.name, table.columns, row.as_params(), table.conflict_columns
                    )
                else:
                    inserted += tx.insert(table.name, table.columns, row.as_params())
    except DatabaseError as e:
        logger.exception("Import into %s rolled back after %d rows", table.name, inserted)
        raise PersistenceError() from e
    return inserted


def import_csv(service: DatabaseService, content: bytes, variant: str) -> ImportResult:
    """Parse, normalize and persist one uploaded CSV.

    Raises EmptyInputError before touching the database when there is
    nothing to insert.
    """
    table = get_table(variant)
    records = parse_csv(content)
    if not records:
        raise EmptyInputError()

    normalize = _NORMALIZERS[variant]
    rows = filter_eligible(normalize(record) for record in records)
    if len(rows) < len(records):
        logger.info("Dropped %d rows missing required fields", len(records) - len(rows))
    if not rows:
        raise EmptyInputError("No valid rows found in CSV file.")

    inserted = insert_all(service, rows, table)
    result = ImportResult(total=len(records), valid=len(rows), inserted=inserted)
    logger.info(
        "Import complete: %d parsed, %d valid, %d inserted",
        result.total,
        result.valid,
        result.inserted,
    )
    return result


def ingest_file(service: DatabaseService, file_path: str | Path, variant: str) -> ImportResult:
    """Import a CSV file from disk, creating the table first if needed."""
    ensure_schema(service, variant)
    return import_csv(service, Path(file_path).read_bytes(), variant)
