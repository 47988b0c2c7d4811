# services/order_service.py

import logging
from dataclasses import asdict
from typing import List

from domain.models import OrderFormData, OrderLineItem, OrderRecord, SaveResult, order_snapshot
from supabase_client import BackendError, Database, run_query

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"


def build_order_record(sales_person_id: str, form: OrderFormData, items: List[OrderLineItem]) -> OrderRecord:
    return OrderRecord(
        sales_person_id=sales_person_id,
        branch_id=form.branch,
        customer_name=form.customer_name,
        order_date=form.order_date,
        order_data=order_snapshot(form, items),
    )


def save_order_to_db(
        db: Database,
        sales_person_id: str,
        form: OrderFormData,
        items: List[OrderLineItem],
) -> SaveResult:
    """
    Store the order header plus the whole form as an audit snapshot.
    Failures are logged and returned; nothing is raised.
    """
    record = build_order_record(sales_person_id, form, items)

    try:
        inserted = run_query(db.table(ORDERS_TABLE).insert(asdict(record)))
    except BackendError as e:
        logger.error("Error saving order to DB: %s", e.message)
        return SaveResult(False, f"Error saving order: {e.message}")

    saved = inserted[0] if inserted else None
    logger.info("Order saved for customer %s (%d items)", form.customer_name, len(items))
    return SaveResult(True, "Order saved", saved)
