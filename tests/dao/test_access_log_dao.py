from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from postal_api.dao import access_log_dao
from postal_api.extensions import db
from postal_api.models import AccessLog


def test_record_access_persists_row(app):
    ts = datetime(2024, 4, 1, 12, 30, 0)
    access_log_dao.record_access("1000001", ts)

    rows = db.session.execute(select(AccessLog.postal_code, AccessLog.created_at)).all()
    assert [(r.postal_code, r.created_at) for r in rows] == [("1000001", ts)]


def test_record_access_defaults_timestamp(app):
    before = datetime.now()
    access_log_dao.record_access("1000001")
    created_at = db.session.execute(select(AccessLog.created_at)).scalar_one()
    assert created_at >= before.replace(microsecond=0)


def test_summarize_orders_by_count_desc(app):
    for code in ["1500001", "1000001", "1000001", "1000001"]:
        access_log_dao.record_access(code)

    assert access_log_dao.summarize_access() == [
        {"postal_code": "1000001", "request_count": 3},
        {"postal_code": "1500001", "request_count": 1},
    ]


def test_summarize_breaks_ties_by_postal_code(app):
    for code in ["2000002", "1000001", "3000003", "2000002", "1000001"]:
        access_log_dao.record_access(code)

    assert access_log_dao.summarize_access() == [
        {"postal_code": "1000001", "request_count": 2},
        {"postal_code": "2000002", "request_count": 2},
        {"postal_code": "3000003", "request_count": 1},
    ]


def test_summarize_empty_table(app):
    assert access_log_dao.summarize_access() == []


def test_record_access_surfaces_database_errors(app):
    db.drop_all()
    with pytest.raises(SQLAlchemyError):
        access_log_dao.record_access("1000001")
    # session is usable again after the rollback
    access_log_dao.ping()


def test_ping(app):
    access_log_dao.ping()
