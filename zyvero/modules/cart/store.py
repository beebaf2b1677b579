"""Cart state container.

A `CartStore` owns an ordered list of `LineItem`s and mirrors it into a
key-value slot (see `zyvero.modules.cart.storage`). Every mutation computes a
new list from the current one, writes it to the slot, then notifies listeners
before returning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, replace
from typing import Any, Callable, Dict, List, Optional, Union

from zyvero.modules.cart.storage import Storage

logger = logging.getLogger(__name__)

STORAGE_KEY = "zyvero_cart_v1"

ItemId = Union[int, str]
Listener = Callable[[List["LineItem"]], None]


@dataclass(frozen=True)
class LineItem:
    id: ItemId
    title: str
    price: float
    thumbnail: Optional[str] = None
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineItem":
        quantity = data["quantity"]
        # bool is an int subclass; reject it along with anything < 1
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"invalid quantity: {quantity!r}")
        return cls(
            id=data["id"],
            title=data["title"],
            price=data["price"],
            thumbnail=data.get("thumbnail"),
            quantity=quantity,
        )


def cart_total(items: List[LineItem]) -> float:
    return sum(i.price * i.quantity for i in items)


def encode_items(items: List[LineItem]) -> str:
    return json.dumps([i.to_dict() for i in items])


def decode_items(raw: Optional[str]) -> List[LineItem]:
    """Parse slot content. Anything unreadable is treated as an empty cart."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
        if not isinstance(data, list):
            return []
        return [LineItem.from_dict(row) for row in data]
    except (ValueError, TypeError, KeyError, AttributeError):
        return []


class CartStore:
    def __init__(self, storage: Storage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self.last_error: Optional[Exception] = None
        self._listeners: List[Listener] = []
        self._items: List[LineItem] = []
        self.hydrate()

    # --- reads ---

    @property
    def items(self) -> List[LineItem]:
        return list(self._items)

    def get_all(self) -> List[LineItem]:
        return self.items

    def get(self, item_id: ItemId) -> Optional[LineItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    @property
    def count(self) -> int:
        return sum(i.quantity for i in self._items)

    @property
    def total(self) -> float:
        return cart_total(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # --- observation ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- mutations ---

    def hydrate(self) -> List[LineItem]:
        """Replace in-memory state with whatever the slot holds."""
        try:
            raw = self.storage.get_item(self.key)
        except Exception as exc:
            logger.warning("cart slot %s unreadable: %s", self.key, exc)
            raw = None
        self._items = decode_items(raw)
        return self.items

    def add_item(self, candidate: Dict[str, Any]) -> List[LineItem]:
        item_id = candidate["id"]
        if self.get(item_id) is not None:
            nxt = [replace(x, quantity=x.quantity + 1) if x.id == item_id else x for x in self._items]
        else:
            new = LineItem(
                id=item_id,
                title=candidate.get("title"),
                price=candidate.get("price"),
                thumbnail=candidate.get("thumbnail"),
                quantity=1,
            )
            nxt = self._items + [new]
        return self._commit(nxt)

    def remove_item(self, item_id: ItemId) -> List[LineItem]:
        return self._commit([x for x in self._items if x.id != item_id])

    def increment(self, item_id: ItemId) -> List[LineItem]:
        return self._commit(
            [replace(x, quantity=x.quantity + 1) if x.id == item_id else x for x in self._items]
        )

    def decrement(self, item_id: ItemId) -> List[LineItem]:
        nxt = [replace(x, quantity=max(1, x.quantity - 1)) if x.id == item_id else x for x in self._items]
        return self._commit([x for x in nxt if x.quantity >= 1])

    def clear(self) -> List[LineItem]:
        return self._commit([])

    def _commit(self, nxt: List[LineItem]) -> List[LineItem]:
        self._persist(nxt)
        self._items = nxt
        snapshot = self.items
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    def _persist(self, items: List[LineItem]) -> None:
        # Write failures leave the cart working in memory only.
        try:
            self.storage.set_item(self.key, encode_items(items))
        except Exception as exc:
            logger.warning("cart slot %s not saved: %s", self.key, exc)
            self.last_error = exc
        else:
            self.last_error = None
