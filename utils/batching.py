import logging
from typing import Any, Dict, Iterable, List, Sequence

from supabase_client import Database, run_query

logger = logging.getLogger(__name__)

BATCH_SIZE = 100


def chunked(items: Sequence[Dict[str, Any]], size: int) -> Iterable[List[Dict[str, Any]]]:
    for i in range(0, len(items), size):
        yield list(items[i:i + size])


def upsert_in_batches(
        db: Database,
        table_name: str,
        rows: Sequence[Dict[str, Any]],
        on_conflict: str,
        batch_size: int = BATCH_SIZE,
) -> int:
    """
    Upsert `rows` one batch at a time, in order.

    Each batch waits for the previous one. The first failing batch raises
    BackendError and the remaining batches are not sent; batches already
    written stay written.
    Returns the number of rows sent.
    """
    total = 0
    for batch_no, batch in enumerate(chunked(rows, batch_size), start=1):
        run_query(
            db.table(table_name).upsert(batch, on_conflict=on_conflict)
        )
        total += len(batch)
        logger.info("Upserted batch %d into %s: %d rows (running total: %d)", batch_no, table_name, len(batch), total)

    return total
