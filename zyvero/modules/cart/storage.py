"""Key-value slot backends.

Each backend mirrors the browser storage API (`get_item`, `set_item`,
`remove_item`) so a store can be pointed at memory, a JSON file, the Flask
session, or the database without knowing which.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from flask import current_app, session
from sqlalchemy.exc import SQLAlchemyError

from zyvero.app.common.request_context import client_id
from zyvero.app.extensions import db
from zyvero.app.models import StorageSlot


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage:
    """All slots live in one JSON object on disk; writes replace the file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".slot-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


class SlotFullError(ValueError):
    """The write would not fit in the backing store."""


class SessionStorage:
    """Slots kept in the signed Flask session cookie (one per browser).

    Browsers drop cookies over `MAX_COOKIE_SIZE` bytes, so a write that would
    push the encoded session past it raises `SlotFullError` instead.
    """

    def get_item(self, key: str) -> Optional[str]:
        return session.get(key)

    def _cookie_size(self, data: dict) -> int:
        serializer = current_app.session_interface.get_signing_serializer(current_app)
        if serializer is None:
            return 0
        name = current_app.config["SESSION_COOKIE_NAME"]
        return len(name) + 1 + len(serializer.dumps(data))

    def set_item(self, key: str, value: str) -> None:
        limit = current_app.config.get("MAX_COOKIE_SIZE", 4093)
        size = self._cookie_size({**session, key: value})
        if limit and size > limit:
            raise SlotFullError(f"session cookie would be {size} bytes, limit is {limit}")
        session[key] = value

    def remove_item(self, key: str) -> None:
        session.pop(key, None)


class DatabaseStorage:
    """Slots kept in the `storage_slots` table, scoped to one owner."""

    def __init__(self, owner: str):
        self.owner = owner

    def _slot(self, key: str) -> Optional[StorageSlot]:
        return StorageSlot.query.filter_by(owner=self.owner, key=key).first()

    def get_item(self, key: str) -> Optional[str]:
        slot = self._slot(key)
        return slot.value if slot else None

    def set_item(self, key: str, value: str) -> None:
        try:
            slot = self._slot(key)
            if slot:
                slot.value = value
            else:
                db.session.add(StorageSlot(owner=self.owner, key=key, value=value))
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    def remove_item(self, key: str) -> None:
        try:
            StorageSlot.query.filter_by(owner=self.owner, key=key).delete()
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise


STORAGE_FACTORY_EXT = "zyvero.storage_factory"


def request_storage() -> Storage:
    """Slot backend for the browser making the current request.

    An app can override the choice by putting a zero-argument factory into
    `app.extensions["zyvero.storage_factory"]`.
    """
    factory = current_app.extensions.get(STORAGE_FACTORY_EXT)
    if factory is not None:
        return factory()
    if current_app.config.get("CART_STORAGE") == "database":
        return DatabaseStorage(owner=client_id())
    return SessionStorage()
