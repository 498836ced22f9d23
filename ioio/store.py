"""Record Store access.

Two backends implement the same three calls (``insert``, ``list``,
``delete``): a SQL database through Flask-SQLAlchemy, and a Supabase
project through supabase-py. Both translate driver failures into
``StoreError`` so the API layer never sees backend specific exceptions.
"""

from typing import Any, Dict, List

import httpx
from postgrest.exceptions import APIError
from sqlalchemy.exc import SQLAlchemyError
from supabase import Client, create_client

from ioio.config import StoreConfig
from ioio.db import db
from ioio.errors import StoreError
from ioio.kinds import RecordKind
from ioio.models import MODELS


class SqlRecordStore:
    """Store backed by the Flask-SQLAlchemy session of the current app."""

    def insert(self, kind: RecordKind, record: Dict[str, Any]) -> Dict[str, Any]:
        model = MODELS[kind.collection](**record)
        try:
            db.session.add(model)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
        return model.to_dict()

    def list(self, kind: RecordKind) -> List[Dict[str, Any]]:
        model = MODELS[kind.collection]
        try:
            rows = model.query.order_by(model.created_at.desc(), model.id.desc()).all()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
        return [row.to_dict() for row in rows]

    def delete(self, kind: RecordKind, record_id: int) -> bool:
        model = MODELS[kind.collection]
        try:
            row = db.session.get(model, record_id)
            if row is None:
                return False
            db.session.delete(row)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StoreError(str(getattr(e, "orig", None) or e)) from e
        return True


class SupabaseRecordStore:
    """Store backed by a Supabase project's PostgREST tables."""

    def __init__(self, client: Client):
        self.client = client

    def insert(self, kind: RecordKind, record: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(record)
        row["created_at"] = row["created_at"].isoformat()
        try:
            response = self.client.table(kind.collection).insert(row).execute()
        except APIError as e:
            raise StoreError(e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise StoreError(str(e) or type(e).__name__) from e

        if not response.data:
            raise StoreError(f"Insert into {kind.collection} returned no data")
        return response.data[0]

    def list(self, kind: RecordKind) -> List[Dict[str, Any]]:
        try:
            response = (
                self.client.table(kind.collection)
                .select("*")
                .order("created_at", desc=True)
                .order("id", desc=True)
                .execute()
            )
        except APIError as e:
            raise StoreError(e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise StoreError(str(e) or type(e).__name__) from e
        return response.data or []

    def delete(self, kind: RecordKind, record_id: int) -> bool:
        try:
            response = self.client.table(kind.collection).delete().eq("id", record_id).execute()
        except APIError as e:
            raise StoreError(e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise StoreError(str(e) or type(e).__name__) from e
        return bool(response.data)


def build_store(app, config: StoreConfig):
    """Create the single store instance used by ``app`` for its lifetime."""
    if config.uses_supabase:
        app.logger.info("Using Supabase record store at %s", config.supabase_url)
        return SupabaseRecordStore(create_client(config.supabase_url, config.supabase_key))

    app.config['SQLALCHEMY_DATABASE_URI'] = config.database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    db.init_app(app)
    with app.app_context():
        db.create_all()
    app.logger.info("Using SQL record store")
    return SqlRecordStore()
