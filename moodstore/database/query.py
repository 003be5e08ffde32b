"""
In-memory tables with a generic query interface.

Stands in for the hosted relational store: rows are plain dicts keyed by
``id``. Besides select/insert/update/delete, every table exposes a change
feed that subscribers filter by column values.
"""

import copy
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class ChangeEvent:
    """A single row change delivered to subscribers"""
    table: str
    kind: ChangeKind
    row: dict
    # Opaque token of the writer, lets a client skip its own echoes
    origin: Optional[str] = None


ChangeCallback = Callable[[ChangeEvent], None]


@dataclass
class _Subscription:
    callback: ChangeCallback
    filters: dict

    def matches(self, row: dict) -> bool:
        return _matches(row, self.filters)


def _matches(row: dict, filters: dict) -> bool:
    return all(row.get(k) == v for k, v in filters.items())


class Table:
    """In-memory table"""

    def __init__(self, name: str):
        self.name = name
        self.rows: dict[str, dict] = {}
        self._subscriptions: list[_Subscription] = []

    # ==================== Queries ====================

    def get(self, row_id: str) -> Optional[dict]:
        """Fetch a row by id"""
        row = self.rows.get(row_id)
        return copy.deepcopy(row) if row is not None else None

    def select(self, **filters: Any) -> list[dict]:
        """Fetch rows whose columns equal the given values, in insertion order"""
        return [copy.deepcopy(r) for r in self.rows.values() if _matches(r, filters)]

    def first(self, **filters: Any) -> Optional[dict]:
        rows = self.select(**filters)
        return rows[0] if rows else None

    # ==================== Mutations ====================

    def insert(self, row: dict, origin: Optional[str] = None) -> dict:
        """Insert a row, assigning ``id`` and ``created_at`` when absent"""
        row = copy.deepcopy(row)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.utcnow())
        if row["id"] in self.rows:
            raise KeyError(f"Duplicate id in {self.name}: {row['id']}")
        self.rows[row["id"]] = row
        self._emit(ChangeKind.INSERT, row, origin)
        return copy.deepcopy(row)

    def update(self, row_id: str, values: dict, origin: Optional[str] = None) -> Optional[dict]:
        """Update a row by id; returns None if it does not exist"""
        row = self.rows.get(row_id)
        if row is None:
            return None
        row.update(copy.deepcopy(values))
        self._emit(ChangeKind.UPDATE, row, origin)
        return copy.deepcopy(row)

    def delete(self, row_id: str, origin: Optional[str] = None) -> bool:
        """Delete a row by id"""
        row = self.rows.pop(row_id, None)
        if row is None:
            return False
        self._emit(ChangeKind.DELETE, row, origin)
        return True

    def delete_where(self, origin: Optional[str] = None, **filters: Any) -> int:
        """Delete every row matching the filters"""
        ids = [r["id"] for r in self.rows.values() if _matches(r, filters)]
        for row_id in ids:
            self.delete(row_id, origin=origin)
        return len(ids)

    def clear(self) -> None:
        """Drop all rows without notifying subscribers"""
        self.rows.clear()

    # ==================== Change feed ====================

    def subscribe(self, callback: ChangeCallback, **filters: Any) -> Callable[[], None]:
        """
        Subscribe to changes on rows matching the filters.

        Returns:
            A callable that removes the subscription
        """
        subscription = _Subscription(callback=callback, filters=filters)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def _emit(self, kind: ChangeKind, row: dict, origin: Optional[str]) -> None:
        for subscription in list(self._subscriptions):
            if not subscription.matches(row):
                continue
            event = ChangeEvent(table=self.name, kind=kind, row=copy.deepcopy(row), origin=origin)
            try:
                subscription.callback(event)
            except Exception:
                # A broken subscriber must not fail the write that triggered it
                logger.exception(f"Change subscriber on {self.name} failed")
