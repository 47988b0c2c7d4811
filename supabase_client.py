import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv
from postgrest.exceptions import APIError
from supabase import create_client, Client

# Postgres insufficient_privilege, raised when row level security blocks a query
PERMISSION_DENIED = "42501"


class BackendError(Exception):
    """A Supabase query came back with an error object."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def is_permission_denied(self) -> bool:
        return self.code == PERMISSION_DENIED or "permission" in (self.message or "").lower()


@dataclass
class Database:
    """
    Supabase client bound to one schema.
    Build it once at startup with `connect()` and pass it to the services.
    """
    client: Client
    schema: str = "public"

    def table(self, table_name: str):
        return self.client.schema(self.schema).table(table_name)


def connect(
        url: Optional[str] = None,
        key: Optional[str] = None,
        schema: Optional[str] = None,
) -> Database:
    load_dotenv()
    url = url or os.getenv("SUPABASE_URL")
    key = key or os.getenv("SUPABASE_KEY")
    schema = schema or os.getenv("SCHEMA") or "public"

    if not url or not key:
        raise RuntimeError("Set SUPABASE_URL and SUPABASE_KEY in .env or environment variables")

    return Database(client=create_client(url, key), schema=schema)


def run_query(query) -> List[Dict[str, Any]]:
    """
    Execute a PostgREST builder and return its rows.
    Raises BackendError for raised API errors, transport failures and error
    objects on the response.
    """
    try:
        resp = query.execute()
    except APIError as e:
        raise BackendError(e.message or str(e), e.code) from e
    except httpx.HTTPError as e:
        raise BackendError(f"Backend request failed: {e}") from e

    error = getattr(resp, "error", None)
    if error:
        raise BackendError(getattr(error, "message", None) or str(error), getattr(error, "code", None))

    data = resp.data
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)
