"""
Row visibility for owned records (customers, loans, payments).

Admins see every row. Every other role only sees the rows it created
(``created_by``). Routers must go through these helpers for every read,
count and mutation instead of adding the owner filter themselves.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Query, Session

ROLE_ADMIN = "admin"
ROLE_LENDER = "lender"
ROLE_OPERATOR = "operator"
ROLES = (ROLE_ADMIN, ROLE_LENDER, ROLE_OPERATOR)

logger = logging.getLogger(__name__)


def is_admin(user) -> bool:
    return user is not None and user.role == ROLE_ADMIN


def owner_id(row):
    if isinstance(row, dict):
        return row.get("created_by")
    return getattr(row, "created_by", None)


def scope_query(query: Query, model, user) -> Query:
    if is_admin(user):
        return query
    return query.filter(model.created_by == user.id)


def scoped(db: Session, model, user) -> Query:
    return scope_query(db.query(model), model, user)


def can_access(row, user) -> bool:
    if is_admin(user):
        return True
    return user is not None and owner_id(row) == user.id


def filter_rows(rows, user) -> list:
    return [r for r in rows if can_access(r, user)]


def get_scoped_or_404(db: Session, model, pk: int, user, label: str):
    """
    Fetch one owned row by primary key through the scoped query.

    A row owned by someone else is reported exactly like a missing one.
    """
    pk_col = model.__mapper__.primary_key[0]
    row = scoped(db, model, user).filter(pk_col == pk).first()
    if not row:
        if not is_admin(user) and db.query(pk_col).filter(pk_col == pk).first():
            logger.warning("User %s denied access to %s %s", user.id, label, pk)
        raise HTTPException(404, f"{label} not found")
    return row
