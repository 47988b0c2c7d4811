# services/user_service.py

import hmac
import logging
import re
import time
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from domain.mappers import user_from_row, user_to_row
from domain.models import AuthResult, NewUser, RegisteredUser
from supabase_client import BackendError, Database, run_query

logger = logging.getLogger(__name__)

USERS_TABLE = "app_users"
GHOST_EMAIL_DOMAIN = "ginza.temp"
GHOST_PASSWORD = "123"

# werkzeug hashes look like "<method>$<salt>$<hash>"
_HASH_PREFIXES = ("scrypt:", "pbkdf2:")


def _is_hashed(stored: str) -> bool:
    return stored.startswith(_HASH_PREFIXES) and stored.count("$") == 2


def verify_password(stored: str, candidate: str) -> bool:
    """
    Check `candidate` against a stored password.
    Rows created before hashing was introduced still hold plaintext.
    """
    if not stored:
        return False
    if _is_hashed(stored):
        return check_password_hash(stored, candidate)

    logger.warning("User row still stores a plaintext password; re-register or reset it to hash it")
    return hmac.compare_digest(stored.encode("utf-8"), candidate.encode("utf-8"))


def _permission_denied_message() -> str:
    return (
        "Permission Denied. Run 'ALTER TABLE app_users DISABLE ROW LEVEL SECURITY;' "
        "in the Supabase SQL Editor."
    )


def register_user(db: Database, new_user: NewUser) -> AuthResult:
    """
    Register a user after checking the email is free.

    The email check is only for a friendlier message: two concurrent
    registrations can both pass it, and the unique constraint on
    app_users.email is what actually rejects the second one.
    """
    try:
        existing = run_query(
            db.table(USERS_TABLE)
            .select("email")
            .eq("email", new_user.email)
        )
    except BackendError as e:
        logger.error("DB check error: %s", e.message)
        return AuthResult(False, f"DB Error (Check SQL Permissions): {e.message}")

    if existing:
        return AuthResult(False, "Email is already registered. Please Login.")

    row = user_to_row(new_user)
    row["password"] = generate_password_hash(new_user.password)

    try:
        inserted = run_query(db.table(USERS_TABLE).insert(row))
    except BackendError as e:
        logger.error("Registration insert error: %s (code=%s)", e.message, e.code)
        if e.is_permission_denied:
            return AuthResult(False, _permission_denied_message())
        return AuthResult(False, f"Save Error: {e.message}")

    if not inserted:
        return AuthResult(False, "Save Error: no data returned")

    return AuthResult(True, "Registration successful!", user_from_row(inserted[0]))


def create_ghost_user(db: Database, full_name: str, branch_id: str = "mum") -> Optional[RegisteredUser]:
    """
    Create a placeholder user for a salesperson who never registered.
    Returns None when the insert fails.
    """
    name_parts = full_name.strip().split(" ")
    first_name = name_parts[0]
    last_name = " ".join(name_parts[1:]) if len(name_parts) > 1 else "Sales"

    clean_name = re.sub(r"[^a-z0-9]", "", full_name.lower())
    suffix = str(int(time.time() * 1000))[-4:]
    email = f"{clean_name}.{suffix}@{GHOST_EMAIL_DOMAIN}"

    ghost = NewUser(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=generate_password_hash(GHOST_PASSWORD),
        branch_id=branch_id,
    )

    try:
        inserted = run_query(db.table(USERS_TABLE).insert(user_to_row(ghost)))
    except BackendError as e:
        logger.error("Ghost user creation failed: %s", e.message)
        return None
    except Exception as e:
        logger.error("Ghost user error: %s", e)
        return None

    if not inserted:
        logger.error("Ghost user creation failed: no data returned")
        return None

    return user_from_row(inserted[0])


def login_user(db: Database, email: str, password: str) -> AuthResult:
    try:
        rows = run_query(
            db.table(USERS_TABLE)
            .select("*")
            .eq("email", email)
            .limit(1)
        )
    except BackendError as e:
        logger.error("Login DB error: %s", e.message)
        return AuthResult(False, f"DB Connection Error: {e.message}")

    if not rows or not verify_password(str(rows[0].get("password") or ""), password):
        return AuthResult(False, "Invalid Email or Password.")

    return AuthResult(True, "Login successful!", user_from_row(rows[0]))


def fetch_all_app_users(db: Database) -> List[RegisteredUser]:
    try:
        rows = run_query(db.table(USERS_TABLE).select("*"))
    except BackendError as e:
        logger.error("Error fetching users: %s", e.message)
        return []

    return [user_from_row(r, include_password=False) for r in rows]
