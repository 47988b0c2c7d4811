# services/seed_service.py
"""Sample customers for a fresh development database."""

import logging

from domain.mappers import LEGACY_COLUMNS, customer_to_row
from services.customer_service import CUSTOMERS_TABLE
from supabase_client import BackendError, Database, run_query

logger = logging.getLogger(__name__)

TEST_CUSTOMERS = [
    ("Amit Kumar", "amit@email.com", "9876543210"),
    ("Rajesh Singh", "rajesh@email.com", "9876543211"),
    ("Vikram Patel", "vikram@email.com", "9876543212"),
    ("Ankit Sharma", "ankit@email.com", "9876543213"),
    ("Pradeep Kumar", "pradeep@email.com", "9876543214"),
]

TEST_ADDRESS = "Mumbai, Maharashtra"


def seed_test_customers(db: Database, branch_id: str, sales_person_id: str) -> bool:
    logger.info("Seeding test customers...")

    rows = [
        customer_to_row(
            name=name,
            sales_person=sales_person_id,
            branch=branch_id,
            email=email,
            contact_no=contact_no,
            billing_address=TEST_ADDRESS,
            delivery_address=TEST_ADDRESS,
            columns=LEGACY_COLUMNS,
        )
        for name, email, contact_no in TEST_CUSTOMERS
    ]

    try:
        inserted = run_query(db.table(CUSTOMERS_TABLE).insert(rows))
    except BackendError as e:
        logger.error("Failed to seed customers: %s", e.message)
        return False

    logger.info("Seeded %d test customers", len(inserted))
    return True
