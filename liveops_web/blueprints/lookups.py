"""Store and personnel lookups used to populate pickers."""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, Response, jsonify
from sqlalchemy.exc import SQLAlchemyError

from liveops_common import selectable_stores

from .. import get_record_store
from . import LOAD_FAILED, store_failure

lookups_bp = Blueprint("lookups", __name__)


@lookups_bp.get("/stores")
def list_stores() -> Response:
    """Return selectable stores; the ``all`` sentinel is omitted."""

    try:
        stores = get_record_store().list_stores()
    except SQLAlchemyError:
        return store_failure(LOAD_FAILED)
    return jsonify([asdict(store) for store in selectable_stores(stores)])


@lookups_bp.get("/personnel")
def list_personnel() -> Response:
    try:
        people = get_record_store().list_personnel()
    except SQLAlchemyError:
        return store_failure(LOAD_FAILED)
    return jsonify([asdict(person) for person in people])
