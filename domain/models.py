# domain/models.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from utils.formatting import parse_number


@dataclass(frozen=True)
class OrderFormData:
    """
    Header of one order as captured by the order form.
    """
    branch: str
    sales_person: str
    sales_contact_no: str = ""
    customer_name: str = ""
    customer_email: str = ""
    customer_contact_no: str = ""
    billing_address: str = ""
    delivery_address: str = ""
    order_date: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "branch": self.branch,
            "salesPerson": self.sales_person,
            "salesContactNo": self.sales_contact_no,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerContactNo": self.customer_contact_no,
            "billingAddress": self.billing_address,
            "deliveryAddress": self.delivery_address,
            "orderDate": self.order_date,
        }


@dataclass
class OrderLineItem:
    """
    Represents one line of an order.
    `item_name` comes from the catalog, `manual_item_name` is free text typed
    when the item is not in the catalog.
    """
    category: str
    item_name: str = ""
    manual_item_name: str = ""
    color: str = ""
    width: str = ""
    quantity: str = ""  # numeric string as typed
    uom: str = ""
    rate: Optional[float] = None
    discount: str = ""
    delivery_date: str = ""
    remark: str = ""
    id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.item_name or self.manual_item_name

    @property
    def total_amount(self) -> float:
        return parse_number(self.quantity) * (self.rate or 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category,
            "itemName": self.item_name,
            "manualItemName": self.manual_item_name,
            "color": self.color,
            "width": self.width,
            "quantity": self.quantity,
            "uom": self.uom,
            "rate": self.rate,
            "discount": self.discount,
            "deliveryDate": self.delivery_date,
            "remark": self.remark,
        }


@dataclass
class NewUser:
    first_name: str
    last_name: str
    email: str
    password: str
    branch_id: str


@dataclass
class RegisteredUser:
    id: Any
    first_name: str
    last_name: str
    email: str
    password: str  # stored hash; blanked when listing users
    branch_id: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class Customer:
    id: Any
    name: str
    email: str
    contact_no: str
    billing_address: str
    delivery_address: str
    sales_person_id: str  # user id on the legacy layout, salesperson name on the current one
    branch: str


@dataclass
class Item:
    """
    One catalog entry, flattened out of a wide items_new row.
    """
    id: str  # "{row_id}_{CATEGORY}"
    category: str
    item_name: str
    default_rate: float
    default_width: str


@dataclass
class OrderRecord:
    sales_person_id: str
    branch_id: str
    customer_name: str
    order_date: str
    order_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthResult:
    success: bool
    message: str
    user: Optional[RegisteredUser] = None


@dataclass
class CustomerResult:
    success: bool
    message: str
    customer: Optional[Customer] = None


@dataclass
class SaveResult:
    success: bool
    message: str
    record: Optional[Dict[str, Any]] = None


def order_snapshot(form: OrderFormData, items: List[OrderLineItem]) -> Dict[str, Any]:
    """Opaque copy of the submitted form, stored with the order for audit."""
    return {
        "formData": form.to_dict(),
        "items": [item.to_dict() for item in items],
    }
