"""
Operator commands for the order database.
Bulk-import customers/items from CSV, or seed sample customers.
"""

import argparse
import sys

from domain.mappers import CURRENT_COLUMNS, LEGACY_COLUMNS
from supabase_client import connect
from utils.logging_setup import setup_logging


def cmd_import_customers(args) -> int:
    from utils.data_migrator import import_customers_csv

    columns = CURRENT_COLUMNS if args.layout == "current" else LEGACY_COLUMNS
    count = import_customers_csv(connect(), args.file, columns)
    if count is None:
        print("[ERROR] Customer import failed, see log")
        return 1
    print(f"[OK] Upserted {count} customers")
    return 0


def cmd_import_items(args) -> int:
    from utils.data_migrator import import_items_csv

    count = import_items_csv(connect(), args.file)
    if count is None:
        print("[ERROR] Item import failed, see log")
        return 1
    print(f"[OK] Upserted {count} items")
    return 0


def cmd_seed(args) -> int:
    from services.seed_service import seed_test_customers

    if not seed_test_customers(connect(), args.branch, args.sales_person):
        print("[ERROR] Seeding failed, see log")
        return 1
    print("[OK] Seeded test customers")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ginza order database tools")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import-customers", help="Upsert customers from a CSV file")
    p.add_argument("file")
    p.add_argument("--layout", choices=["legacy", "current"], default="legacy",
                   help="Column layout of the CSV (default: legacy)")
    p.set_defaults(func=cmd_import_customers)

    p = sub.add_parser("import-items", help="Upsert items_new rows from a CSV file")
    p.add_argument("file")
    p.set_defaults(func=cmd_import_items)

    p = sub.add_parser("seed", help="Insert sample customers")
    p.add_argument("--branch", required=True)
    p.add_argument("--sales-person", required=True, help="Sales person user id")
    p.set_defaults(func=cmd_seed)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
