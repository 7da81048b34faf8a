from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from prestamistas.models.customer_model import Customer
from prestamistas.utils.access_scope import (
    can_access,
    filter_rows,
    get_scoped_or_404,
    is_admin,
    scoped,
)

ADMIN = SimpleNamespace(id=1, role="admin")
LENDER = SimpleNamespace(id=2, role="lender")
OPERATOR = SimpleNamespace(id=3, role="operator")

ROWS = [
    {"id": 10, "created_by": 2},
    {"id": 11, "created_by": 3},
    {"id": 12, "created_by": 2},
    {"id": 13, "created_by": None},
]


def test_is_admin():
    assert is_admin(ADMIN)
    assert not is_admin(LENDER)
    assert not is_admin(None)


def test_admin_sees_every_row():
    assert filter_rows(ROWS, ADMIN) == ROWS


def test_lender_sees_only_own_rows():
    visible = filter_rows(ROWS, LENDER)
    assert [r["id"] for r in visible] == [10, 12]
    assert len(visible) < len(ROWS)


def test_operator_is_scoped_like_a_lender():
    assert [r["id"] for r in filter_rows(ROWS, OPERATOR)] == [11]


def test_unowned_rows_are_admin_only():
    row = {"id": 13, "created_by": None}
    assert can_access(row, ADMIN)
    assert not can_access(row, LENDER)


def test_can_access_on_objects():
    row = SimpleNamespace(created_by=2)
    assert can_access(row, LENDER)
    assert not can_access(row, OPERATOR)


def _customers(db, lender, other_lender):
    for doc, owner in (("A1", lender), ("A2", lender), ("B1", other_lender)):
        db.add(Customer(identity_document=doc, first_name="N", last_name="L", created_by=owner.user_id))
    db.commit()


def test_scoped_query_matches_in_memory_filter(db, admin, lender, other_lender):
    _customers(db, lender, other_lender)

    all_rows = db.query(Customer).all()
    for user in (admin, lender, other_lender):
        from_db = {c.customer_id for c in scoped(db, Customer, user).all()}
        in_memory = {c.customer_id for c in filter_rows(all_rows, user)}
        assert from_db == in_memory

    assert scoped(db, Customer, admin).count() == 3
    assert scoped(db, Customer, lender).count() == 2
    assert scoped(db, Customer, other_lender).count() == 1


def test_get_scoped_or_404_hides_foreign_rows(db, lender, other_lender):
    _customers(db, lender, other_lender)
    foreign = db.query(Customer).filter(Customer.identity_document == "B1").one()

    with pytest.raises(HTTPException) as exc:
        get_scoped_or_404(db, Customer, foreign.customer_id, lender, "Customer")
    assert exc.value.status_code == 404

    assert get_scoped_or_404(db, Customer, foreign.customer_id, other_lender, "Customer") is foreign
