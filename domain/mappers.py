# domain/mappers.py
"""
Conversions between backend rows and domain objects.

Rows arrive as loosely-typed dicts. Every mapper reads through `_text` so a
missing or NULL column becomes an explicit default instead of leaking None
into the UI.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from domain.models import Customer, NewUser, RegisteredUser


def _text(row: Mapping[str, Any], *columns: str, default: str = "") -> str:
    """First non-empty value among `columns`, as a string."""
    for col in columns:
        val = row.get(col)
        if val is not None and val != "":
            return str(val)
    return default


@dataclass(frozen=True)
class CustomerColumns:
    """
    Column layout of the customers table.

    Two layouts are live: the legacy one keyed on the salesperson's user id
    and the current one keyed on the salesperson's display name.
    """
    name: str
    email: str
    contact_no: str
    sales_person: str

    @property
    def conflict_key(self) -> str:
        return f"{self.name},{self.sales_person}"


LEGACY_COLUMNS = CustomerColumns(
    name="name",
    email="email",
    contact_no="contact_no",
    sales_person="sales_person_id",
)

CURRENT_COLUMNS = CustomerColumns(
    name="customer_name",
    email="email_id",
    contact_no="mob_no",
    sales_person="sales_person_name",
)


def user_from_row(row: Mapping[str, Any], include_password: bool = True) -> RegisteredUser:
    return RegisteredUser(
        id=row.get("id"),
        first_name=_text(row, "first_name"),
        last_name=_text(row, "last_name"),
        email=_text(row, "email"),
        password=_text(row, "password") if include_password else "",
        branch_id=_text(row, "branch_id"),
    )


def user_to_row(user: NewUser) -> Dict[str, Any]:
    return {
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "password": user.password,
        "branch_id": user.branch_id,
    }


def customer_from_row(row: Mapping[str, Any]) -> Customer:
    """Read a customer from either column layout; current columns win."""
    return Customer(
        id=row.get("id"),
        name=_text(row, CURRENT_COLUMNS.name, LEGACY_COLUMNS.name).strip(),
        email=_text(row, CURRENT_COLUMNS.email, LEGACY_COLUMNS.email),
        contact_no=_text(row, CURRENT_COLUMNS.contact_no, LEGACY_COLUMNS.contact_no),
        billing_address=_text(row, "billing_address"),
        delivery_address=_text(row, "delivery_address"),
        sales_person_id=_text(row, CURRENT_COLUMNS.sales_person, LEGACY_COLUMNS.sales_person),
        branch=_text(row, "branch"),
    )


def customer_to_row(
        *,
        name: str,
        sales_person: str,
        branch: str,
        email: Optional[str] = None,
        contact_no: Optional[str] = None,
        billing_address: Optional[str] = None,
        delivery_address: Optional[str] = None,
        columns: CustomerColumns = CURRENT_COLUMNS,
) -> Dict[str, Any]:
    return {
        columns.name: name,
        columns.sales_person: sales_person,
        columns.email: email or "",
        columns.contact_no: contact_no or "",
        "billing_address": billing_address or "",
        "delivery_address": delivery_address or "",
        "branch": branch,
    }
