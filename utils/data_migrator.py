import csv
import logging
from typing import Dict, List, Optional

from domain.mappers import LEGACY_COLUMNS, CustomerColumns
from services.customer_service import bulk_upsert_customers
from services.item_service import bulk_upsert_items
from supabase_client import Database

logger = logging.getLogger(__name__)


def read_csv(file_name: str) -> tuple[List[Dict], List[str]]:
    """
    Reads a headered CSV and returns (rows, columns_from_header).
    Strips whitespace from headers and values.
    """
    with open(file_name, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise ValueError("CSV has no header row. Add headers that match DB column names.")

        columns = [c.strip() for c in reader.fieldnames if c and c.strip()]
        rows: List[Dict] = []

        for r in reader:
            obj = {}
            for k, v in r.items():
                if not k:
                    continue
                val = v.strip() if isinstance(v, str) else v
                # empty cells go to the DB as NULL
                if val == "":
                    val = None
                obj[k.strip()] = val

            rows.append({c: obj.get(c) for c in columns})

    return rows, columns


def dedupe_rows(rows: List[Dict], key_cols: List[str]) -> List[Dict]:
    """
    Deduplicate rows in-memory using key_cols.
    Keeps the last occurrence, matching the last-write-wins upsert.
    Rows missing any key value are dropped.
    """
    by_key: Dict[tuple, Dict] = {}

    for r in rows:
        key = tuple(str(r.get(c) or "").strip() for c in key_cols)
        if any(k == "" for k in key):
            continue
        by_key[key] = r

    return list(by_key.values())


def _require_columns(header_cols: List[str], required: List[str]) -> None:
    missing = [c for c in required if c not in header_cols]
    if missing:
        raise ValueError(f"CSV missing columns: {missing}. Found: {header_cols}")


def import_customers_csv(
        db: Database,
        file_name: str,
        columns: CustomerColumns = LEGACY_COLUMNS,
) -> Optional[int]:
    """Returns the number of unique rows upserted, or None if the upload failed."""
    rows, header_cols = read_csv(file_name)
    key_cols = columns.conflict_key.split(",")
    _require_columns(header_cols, key_cols)

    deduped = dedupe_rows(rows, key_cols)
    if not deduped:
        logger.warning("No valid customer rows in %s (after dedupe / missing key filtering)", file_name)
        return 0

    if not bulk_upsert_customers(db, deduped, columns):
        return None

    logger.info("Done: customers <- %s (%d unique rows)", file_name, len(deduped))
    return len(deduped)


def import_items_csv(db: Database, file_name: str) -> Optional[int]:
    rows, header_cols = read_csv(file_name)
    _require_columns(header_cols, ["item_name"])

    deduped = dedupe_rows(rows, ["item_name"])
    if not deduped:
        logger.warning("No valid item rows in %s (after dedupe / missing key filtering)", file_name)
        return 0

    if not bulk_upsert_items(db, deduped):
        return None

    logger.info("Done: items_new <- %s (%d unique rows)", file_name, len(deduped))
    return len(deduped)
