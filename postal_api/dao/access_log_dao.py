# postal_api/dao/access_log_dao.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import DateTime

from postal_api.extensions import db
from postal_api.types import AccessLogSummary

_INSERT_SQL = text(
    "INSERT INTO access_logs (postal_code, created_at) VALUES (:postal_code, :created_at)"
).bindparams(bindparam("created_at", type_=DateTime()))


def record_access(postal_code: str, created_at: Optional[datetime] = None) -> None:
    """Append one access-log row and commit it. Errors are re-raised, never retried."""
    try:
        db.session.execute(
            _INSERT_SQL,
            {"postal_code": postal_code, "created_at": created_at or datetime.now()},
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def summarize_access() -> List[AccessLogSummary]:
    """
    Request counts per postal code, busiest first.
    Equal counts are ordered by postal code so the output is stable.
    """
    res = db.session.execute(
        text("""
            SELECT postal_code, COUNT(*) AS request_count
            FROM access_logs
            GROUP BY postal_code
            ORDER BY request_count DESC, postal_code ASC
        """)
    )
    return [
        {"postal_code": row.postal_code, "request_count": int(row.request_count)}
        for row in res
    ]


def ping() -> None:
    db.session.execute(text("SELECT 1")).scalar_one()
