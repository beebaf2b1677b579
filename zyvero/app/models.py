from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint

from zyvero.app.extensions import db


class StorageSlot(db.Model):
    """One named key-value slot (cart, recently viewed, ...) for one browser."""

    __tablename__ = "storage_slots"

    id = db.Column(db.Integer, primary_key=True)
    owner = db.Column(db.String(64), nullable=False, index=True)
    key = db.Column(db.String(100), nullable=False)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("owner", "key", name="uq_storage_slot_owner_key"),
    )
