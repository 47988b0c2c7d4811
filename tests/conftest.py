from collections import defaultdict, deque
from typing import Any, Dict, List, Optional

import pytest
import requests

from domain.models import OrderFormData, OrderLineItem
from settings_store import MemorySettingsStore


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Records the PostgREST builder chain and answers execute() from the db's queue."""

    def __init__(self, db: "FakeDatabase", table_name: str):
        self.db = db
        self.table_name = table_name
        self.calls: List[tuple] = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def call(self, name: str) -> Optional[tuple]:
        for call_name, args, kwargs in self.calls:
            if call_name == name:
                return args, kwargs
        return None

    def execute(self):
        self.db.executed.append(self)
        outcome = self.db.next_outcome(self.table_name)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeResponse(outcome)


class FakeDatabase:
    def __init__(self):
        self.outcomes: Dict[str, deque] = defaultdict(deque)
        self.executed: List[FakeQuery] = []

    def queue(self, table_name: str, *outcomes: Any) -> None:
        self.outcomes[table_name].extend(outcomes)

    def next_outcome(self, table_name: str) -> Any:
        queue = self.outcomes[table_name]
        return queue.popleft() if queue else []

    def table(self, table_name: str) -> FakeQuery:
        return FakeQuery(self, table_name)

    def executed_with(self, name: str) -> List[FakeQuery]:
        return [q for q in self.executed if q.call(name) is not None]


class FakeHttpResponse:
    def __init__(self, status_code: int = 200, json_body: Any = None, text: str = ""):
        self.status_code = status_code
        self._json_body = json_body
        self.text = text
        self.closed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._json_body is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_body

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; outcomes are consumed one per post()."""

    def __init__(self, *outcomes):
        self.outcomes = deque(outcomes)
        self.posts: List[Dict[str, Any]] = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers or {}, "timeout": timeout})
        outcome = self.outcomes.popleft() if self.outcomes else FakeHttpResponse(200, {})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def settings():
    return MemorySettingsStore()


@pytest.fixture
def form():
    return OrderFormData(
        branch="mumbai",
        sales_person="Ravi Shah",
        sales_contact_no="9000000001",
        customer_name="Amit Kumar",
        customer_email="amit@email.com",
        customer_contact_no="9876543210",
        billing_address="Andheri, Mumbai",
        delivery_address="Andheri, Mumbai",
        order_date="2024-05-01",
    )


@pytest.fixture
def items():
    return [
        OrderLineItem(category="WARP", item_name="W-101", color="Black", width="2 inch",
                      quantity="3", uom="MTR", rate=10),
        OrderLineItem(category="CKU", manual_item_name="Custom lace", quantity="abc", uom="PCS"),
    ]


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
