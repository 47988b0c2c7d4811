from domain.mappers import (
    CURRENT_COLUMNS,
    LEGACY_COLUMNS,
    customer_from_row,
    customer_to_row,
    user_from_row,
)


def test_user_from_row_defaults_missing_names():
    user = user_from_row({"id": 5, "email": "a@b.com", "branch_id": "mum", "first_name": None})

    assert user.first_name == ""
    assert user.last_name == ""
    assert user.email == "a@b.com"


def test_user_from_row_can_blank_password():
    user = user_from_row({"id": 5, "password": "hash"}, include_password=False)
    assert user.password == ""


def test_customer_from_current_layout():
    customer = customer_from_row({
        "id": 1,
        "customer_name": "Amit Kumar",
        "email_id": "amit@email.com",
        "mob_no": "98765",
        "sales_person_name": "Ravi Shah",
        "branch": "Mumbai HO",
    })

    assert customer.name == "Amit Kumar"
    assert customer.email == "amit@email.com"
    assert customer.contact_no == "98765"
    assert customer.sales_person_id == "Ravi Shah"
    assert customer.billing_address == ""


def test_customer_from_legacy_layout():
    customer = customer_from_row({
        "id": 2,
        "name": "Rajesh Singh",
        "email": "rajesh@email.com",
        "contact_no": "12345",
        "sales_person_id": "uuid-1",
        "branch": "mumbai",
    })

    assert customer.name == "Rajesh Singh"
    assert customer.contact_no == "12345"
    assert customer.sales_person_id == "uuid-1"


def test_customer_to_row_layouts():
    current = customer_to_row(name="A", sales_person="Ravi", branch="Mumbai HO")
    legacy = customer_to_row(name="A", sales_person="uuid", branch="mumbai", columns=LEGACY_COLUMNS)

    assert current["customer_name"] == "A"
    assert current["email_id"] == ""
    assert legacy["name"] == "A"
    assert legacy["sales_person_id"] == "uuid"


def test_conflict_keys():
    assert LEGACY_COLUMNS.conflict_key == "name,sales_person_id"
    assert CURRENT_COLUMNS.conflict_key == "customer_name,sales_person_name"
