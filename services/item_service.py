# services/item_service.py

import logging
from collections import Counter
from typing import Any, Dict, List, Sequence

from domain.catalog import flatten_item_row
from domain.models import Item
from supabase_client import BackendError, Database, run_query
from utils.batching import BATCH_SIZE, upsert_in_batches

logger = logging.getLogger(__name__)

ITEMS_TABLE = "items_new"


def fetch_master_items(db: Database) -> List[Item]:
    """
    Read the wide items_new table and flatten it into one Item per
    (row, category) whose item-name cell is filled.
    """
    logger.info("Fetching items from %s table...", ITEMS_TABLE)

    try:
        rows = run_query(db.table(ITEMS_TABLE).select("*"))
    except BackendError as e:
        logger.error("Error fetching items: %s (code=%s)", e.message, e.code)
        if e.is_permission_denied:
            logger.error("RLS permission issue on %s", ITEMS_TABLE)
        return []

    logger.info("Fetched %d item rows from database", len(rows))
    if rows:
        logger.debug("Item columns: %s", list(rows[0].keys()))

    items: List[Item] = []
    for row in rows:
        items.extend(flatten_item_row(row))

    per_category = Counter(i.category for i in items)
    logger.info("Processed %d total items across all categories", len(items))
    logger.info("Items per category: %s", dict(per_category))

    return items


def bulk_upsert_items(
        db: Database,
        rows: Sequence[Dict[str, Any]],
        batch_size: int = BATCH_SIZE,
) -> bool:
    """Upsert item rows in batches keyed on item_name; stops at the first failure."""
    if not rows:
        return False

    try:
        upsert_in_batches(db, ITEMS_TABLE, rows, "item_name", batch_size)
    except BackendError as e:
        logger.error("Bulk item upload failed: %s", e.message)
        return False
    return True
