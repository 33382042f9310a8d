# postal_api/blueprints/address.py
from __future__ import annotations

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from postal_api.dao import access_log_dao
from postal_api.errors import StorageError
from postal_api.services.address import summarize
from postal_api.services.geocode import fetch_locations

address_bp = Blueprint("address", __name__, url_prefix="/address")


@address_bp.get("")
def get_address():
    postal_code = request.args.get("postal_code", "")

    # logged before the lookup and kept even if the lookup fails
    try:
        access_log_dao.record_access(postal_code)
    except SQLAlchemyError as e:
        raise StorageError(str(e)) from e

    locations = fetch_locations(postal_code)
    return jsonify(summarize(postal_code, locations)), 200


@address_bp.get("/access_logs")
def get_access_logs():
    try:
        logs = access_log_dao.summarize_access()
    except SQLAlchemyError as e:
        raise StorageError(str(e)) from e
    return jsonify({"access_logs": logs}), 200
