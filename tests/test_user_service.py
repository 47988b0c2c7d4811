import re

from postgrest.exceptions import APIError
from werkzeug.security import generate_password_hash

from domain.models import NewUser
from services.user_service import (
    create_ghost_user,
    fetch_all_app_users,
    login_user,
    register_user,
    verify_password,
)


def _new_user(**overrides):
    values = dict(first_name="Ravi", last_name="Shah", email="ravi@ginza.in", password="s3cret", branch_id="mum")
    values.update(overrides)
    return NewUser(**values)


def test_register_existing_email_does_not_insert(db):
    db.queue("app_users", [{"email": "ravi@ginza.in"}])

    result = register_user(db, _new_user())

    assert result.success is False
    assert "already registered" in result.message
    assert db.executed_with("insert") == []


def test_register_inserts_hashed_password(db):
    db.queue("app_users", [], [{"id": 11, "first_name": "Ravi", "last_name": "Shah",
                                "email": "ravi@ginza.in", "password": "hash", "branch_id": "mum"}])

    result = register_user(db, _new_user())

    assert result.success is True
    assert result.user.id == 11
    (row,), _ = db.executed_with("insert")[0].call("insert")
    assert row["email"] == "ravi@ginza.in"
    assert row["password"] != "s3cret"
    assert verify_password(row["password"], "s3cret")


def test_register_permission_denied_message(db):
    db.queue("app_users", [], APIError({"message": "new row violates row-level security policy", "code": "42501"}))

    result = register_user(db, _new_user())

    assert result.success is False
    assert "DISABLE ROW LEVEL SECURITY" in result.message


def test_register_other_insert_error(db):
    db.queue("app_users", [], APIError({"message": "duplicate key value", "code": "23505"}))

    result = register_user(db, _new_user())

    assert result.success is False
    assert result.message == "Save Error: duplicate key value"


def test_register_check_error(db):
    db.queue("app_users", APIError({"message": "relation does not exist", "code": "42P01"}))

    result = register_user(db, _new_user())

    assert result.success is False
    assert "Check SQL Permissions" in result.message


def test_ghost_user_fields(db):
    db.queue("app_users", [{"id": 99, "first_name": "Sunil", "last_name": "Kumar Rao",
                            "email": "x", "password": "h", "branch_id": "del"}])

    user = create_ghost_user(db, "  Sunil Kumar Rao ", "del")

    assert user.id == 99
    (row,), _ = db.executed_with("insert")[0].call("insert")
    assert row["first_name"] == "Sunil"
    assert row["last_name"] == "Kumar Rao"
    assert row["branch_id"] == "del"
    assert re.fullmatch(r"sunilkumarrao\.\d{4}@ginza\.temp", row["email"])
    assert verify_password(row["password"], "123")


def test_ghost_user_single_name_gets_sales_surname(db):
    db.queue("app_users", [{"id": 1}])

    create_ghost_user(db, "Mahesh")

    (row,), _ = db.executed_with("insert")[0].call("insert")
    assert row["last_name"] == "Sales"
    assert row["branch_id"] == "mum"


def test_ghost_user_failure_returns_none(db):
    db.queue("app_users", APIError({"message": "boom", "code": "500"}))

    assert create_ghost_user(db, "Mahesh") is None


def test_login_with_hashed_password(db):
    db.queue("app_users", [{"id": 3, "email": "ravi@ginza.in",
                            "password": generate_password_hash("s3cret"), "branch_id": "mum"}])

    result = login_user(db, "ravi@ginza.in", "s3cret")

    assert result.success is True
    assert result.user.id == 3


def test_login_wrong_password(db):
    db.queue("app_users", [{"id": 3, "email": "ravi@ginza.in", "password": generate_password_hash("s3cret")}])

    result = login_user(db, "ravi@ginza.in", "nope")

    assert result.success is False
    assert result.message == "Invalid Email or Password."


def test_login_unknown_email(db):
    result = login_user(db, "nobody@ginza.in", "x")
    assert result.success is False


def test_login_legacy_plaintext_row(db):
    db.queue("app_users", [{"id": 4, "email": "old@ginza.in", "password": "123"}])

    assert login_user(db, "old@ginza.in", "123").success is True


def test_fetch_all_users_blanks_passwords(db):
    db.queue("app_users", [
        {"id": 1, "first_name": "Ravi", "last_name": None, "email": "r@x", "password": "h", "branch_id": "mum"},
        {"id": 2, "email": "s@x", "password": "h", "branch_id": "del"},
    ])

    users = fetch_all_app_users(db)

    assert [u.id for u in users] == [1, 2]
    assert users[0].last_name == ""
    assert users[1].first_name == ""
    assert all(u.password == "" for u in users)


def test_fetch_all_users_error(db):
    db.queue("app_users", APIError({"message": "denied", "code": "42501"}))
    assert fetch_all_app_users(db) == []
