# services/customer_service.py

import logging
from typing import Any, Dict, List, Optional, Sequence

from domain.branches import branch_variations, canonical_branch, matches_branch
from domain.mappers import (
    CURRENT_COLUMNS,
    LEGACY_COLUMNS,
    CustomerColumns,
    customer_from_row,
    customer_to_row,
)
from domain.models import Customer, CustomerResult, OrderFormData
from supabase_client import BackendError, Database, run_query
from utils.batching import BATCH_SIZE, upsert_in_batches

logger = logging.getLogger(__name__)

CUSTOMERS_TABLE = "customers"


def fetch_customers_by_sales_person(db: Database, sales_person_id: str) -> List[Customer]:
    """Customers owned by one salesperson id (legacy layout), by name."""
    if not sales_person_id:
        logger.warning("fetch_customers_by_sales_person called with empty ID")
        return []

    try:
        rows = run_query(
            db.table(CUSTOMERS_TABLE)
            .select("*")
            .eq(LEGACY_COLUMNS.sales_person, sales_person_id)
            .order(LEGACY_COLUMNS.name, desc=False)
        )
    except BackendError as e:
        logger.error("Error fetching customers: %s", e.message)
        return []

    return [customer_from_row(r) for r in rows]


def _probe_customers_table(db: Database) -> bool:
    """Cheap count query so access problems are reported before the full read."""
    try:
        run_query(
            db.table(CUSTOMERS_TABLE)
            .select("id", count="exact")
            .limit(1)
        )
    except BackendError as e:
        logger.error("Cannot access customers table: %s (code=%s)", e.message, e.code)
        if e.is_permission_denied:
            logger.error(
                "Row Level Security might be blocking access. "
                "Fix: Supabase Dashboard -> customers table -> disable Row Level Security"
            )
        return False
    return True


def _log_unmatched(rows: List[Dict[str, Any]], branch_id: str, variations: List[str],
                   sales_person_name: Optional[str]) -> None:
    logger.warning(
        "No customers match branch=%s (tried %s), sales person=%s",
        branch_id, variations, sales_person_name,
    )
    logger.info("Unique branches in table: %s", sorted({str(r.get("branch")) for r in rows}))
    logger.info(
        "Unique sales persons in table: %s",
        sorted({str(r.get(CURRENT_COLUMNS.sales_person)) for r in rows}),
    )
    for r in rows[:10]:
        logger.info(
            "  sample: %s | Branch: %s | Sales Person: %s",
            r.get(CURRENT_COLUMNS.name) or "(no name)",
            r.get("branch"),
            r.get(CURRENT_COLUMNS.sales_person) or "(no sales person)",
        )


def fetch_customers_by_branch_and_sales_person(
        db: Database,
        branch_id: str,
        sales_person_name: Optional[str] = None,
) -> List[Customer]:
    """
    Customers of a branch, optionally narrowed to one salesperson by name.

    The branch column holds several spellings per branch, so the whole table
    is read and filtered here against every known spelling. This is a full
    table scan on every call and will not scale past a few thousand rows.
    """
    logger.info("Fetching customers: branch=%s, sales person=%s", branch_id, sales_person_name)

    if not _probe_customers_table(db):
        return []

    variations = branch_variations(branch_id)
    logger.debug("Branch variations to search: %s", variations)

    try:
        rows = run_query(db.table(CUSTOMERS_TABLE).select("*"))
    except BackendError as e:
        logger.error("Error fetching customers: %s (code=%s)", e.message, e.code)
        return []

    logger.info("Fetched %d total customers from database", len(rows))
    if not rows:
        logger.error("Customers table is EMPTY, no data to load")
        return []

    logger.debug("Customer columns: %s", list(rows[0].keys()))

    filtered = [r for r in rows if matches_branch(r.get("branch"), variations)]
    logger.info("After branch filter: %d customers", len(filtered))

    if sales_person_name:
        wanted = sales_person_name.lower()
        filtered = [
            r for r in filtered
            if r.get(CURRENT_COLUMNS.sales_person)
            and str(r[CURRENT_COLUMNS.sales_person]).lower() == wanted
        ]
        logger.info("After sales person filter: %d customers for %r", len(filtered), sales_person_name)

    if not filtered:
        _log_unmatched(rows, branch_id, variations, sales_person_name)

    customers = [customer_from_row(r) for r in filtered]
    return [c for c in customers if c.name]


def validate_new_customer(sales_person_name: str, form: OrderFormData) -> Optional[str]:
    """Returns an error message, or None when the customer can be saved."""
    if not form.customer_name or not form.customer_name.strip():
        return "Customer name is required"
    if not sales_person_name:
        return "Sales person must be selected"
    if not form.branch:
        return "Branch must be selected"
    return None


def create_new_customer(db: Database, sales_person_name: str, form: OrderFormData) -> CustomerResult:
    error = validate_new_customer(sales_person_name, form)
    if error:
        return CustomerResult(False, error)

    new_customer = customer_to_row(
        name=form.customer_name,
        sales_person=sales_person_name,
        branch=canonical_branch(form.branch),
        email=form.customer_email,
        contact_no=form.customer_contact_no,
        billing_address=form.billing_address,
        delivery_address=form.delivery_address,
    )
    logger.info("Creating new customer: %s", new_customer)

    try:
        inserted = run_query(db.table(CUSTOMERS_TABLE).insert(new_customer))
    except BackendError as e:
        logger.error("Error creating customer: %s", e.message)
        return CustomerResult(False, f"Database error: {e.message}")

    if not inserted:
        return CustomerResult(False, "Database error: no data returned")

    customer = customer_from_row(inserted[0])
    logger.info("Customer created successfully: id=%s", customer.id)
    return CustomerResult(True, "Customer added to database!", customer)


def bulk_upsert_customers(
        db: Database,
        rows: Sequence[Dict[str, Any]],
        columns: CustomerColumns = LEGACY_COLUMNS,
        batch_size: int = BATCH_SIZE,
) -> bool:
    """
    Upsert customer rows in batches, keyed on (name, salesperson).
    Stops at the first failing batch; earlier batches are not rolled back.
    """
    if not rows:
        return False

    try:
        upsert_in_batches(db, CUSTOMERS_TABLE, rows, columns.conflict_key, batch_size)
    except BackendError as e:
        logger.error("Bulk customer upload failed: %s", e.message)
        return False
    return True
