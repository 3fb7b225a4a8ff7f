"""
Sibling ordering within a parent scope.

A scope is one model, the foreign key column that groups siblings and the
parent id, e.g. the stops of trip 7 or the activities of stop 12. Each member
carries an integer ``order``. Gaps are allowed and are never compacted; only
relative order is meaningful.

None of these methods commit. The caller owns the transaction, so a
multi-entity change either applies as a whole or is rolled back as a whole.
"""
from typing import List, Optional, Sequence
from sqlalchemy import func
from sqlalchemy.orm import Session
from globetrotter.core.exceptions import NotFound, ScopeMismatch, InvalidRange
from globetrotter.models.activity import Activity
from globetrotter.models.trip import Trip, TripStop


class OrderedCollection:
    """Ordered siblings of one parent."""

    def __init__(self, db: Session, model, scope_column: str, scope_value: int, parent_model=None):
        self.db = db
        self.model = model
        self.scope_column = scope_column
        self.scope_value = scope_value
        self.parent_model = parent_model

    @classmethod
    def stops_of(cls, db: Session, trip_id: int) -> "OrderedCollection":
        return cls(db, TripStop, "trip_id", trip_id, parent_model=Trip)

    @classmethod
    def activities_of(cls, db: Session, stop_id: int) -> "OrderedCollection":
        return cls(db, Activity, "stop_id", stop_id, parent_model=TripStop)

    @property
    def _scope_filter(self):
        return getattr(self.model, self.scope_column) == self.scope_value

    def _lock_scope(self):
        """
        Lock the parent row for the rest of the transaction.
        Concurrent writers to the same scope queue up here instead of
        reading the same max order. SQLite ignores FOR UPDATE; there the
        engine opens every transaction with BEGIN IMMEDIATE
        (see db.session.use_immediate_transactions) so the first read
        already holds the write lock.
        """
        if self.parent_model is None:
            return
        self.db.query(self.parent_model.id).filter(
            self.parent_model.id == self.scope_value
        ).with_for_update().first()

    def items(self) -> List:
        """Members sorted by order, ties broken by id."""
        return self.db.query(self.model).filter(
            self._scope_filter
        ).order_by(self.model.order, self.model.id).all()

    def max_order(self) -> Optional[int]:
        return self.db.query(func.max(self.model.order)).filter(self._scope_filter).scalar()

    def next_order(self) -> int:
        """Order value that sorts after every current member (0 for an empty scope)."""
        self._lock_scope()
        current = self.max_order()
        return 0 if current is None else current + 1

    def get(self, item_id: int):
        """Fetch a member, distinguishing a missing item from one in another scope."""
        item = self.db.get(self.model, item_id)
        if item is None:
            raise NotFound(f"{self.model.__name__} {item_id} not found")
        if getattr(item, self.scope_column) != self.scope_value:
            raise ScopeMismatch(
                f"{self.model.__name__} {item_id} does not belong to "
                f"{self.scope_column}={self.scope_value}"
            )
        return item

    def append(self, item):
        """Place item last in the scope."""
        return self.insert_at(item, None)

    def insert_at(self, item, position: Optional[int] = None):
        """
        Place item at an explicit order value, or last when position is None.
        An explicit position is taken as-is; siblings are not renumbered.
        """
        order = self.next_order() if position is None else position
        setattr(item, self.scope_column, self.scope_value)
        item.order = order
        self.db.add(item)
        self.db.flush()
        return item

    def remove(self, item_id: int) -> None:
        """Delete a member. Remaining siblings keep their order values."""
        self.get(item_id)
        self.db.query(self.model).filter(
            self.model.id == item_id
        ).delete(synchronize_session="fetch")

    def detach(self, item_id: int):
        """Take a member out of the scope without deleting it."""
        item = self.get(item_id)
        setattr(item, self.scope_column, None)
        item.order = 0
        self.db.flush()
        return item

    def move(self, item_id: int, new_position: int):
        """
        Contiguous move: every other member at or after new_position gets
        its order raised by one, then the item takes new_position.
        """
        if new_position < 0:
            raise InvalidRange("Order must be zero or greater")
        self._lock_scope()
        item = self.get(item_id)
        self.db.query(self.model).filter(
            self._scope_filter,
            self.model.id != item.id,
            self.model.order >= new_position
        ).update({self.model.order: self.model.order + 1}, synchronize_session="fetch")
        item.order = new_position
        self.db.flush()
        return item

    def resequence(self, item_ids: Sequence[int]) -> List:
        """Renumber 0..n-1 following item_ids, which must list every member once."""
        self._lock_scope()
        members = {item.id: item for item in self.items()}
        if len(item_ids) != len(set(item_ids)) or set(item_ids) != set(members):
            raise ScopeMismatch(
                f"Expected each of {sorted(members)} exactly once, got {list(item_ids)}"
            )
        for idx, item_id in enumerate(item_ids):
            members[item_id].order = idx
        self.db.flush()
        return [members[item_id] for item_id in item_ids]
