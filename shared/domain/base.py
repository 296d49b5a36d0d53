"""
Base Domain Classes

- Entity: identity-compared object (UUID primary key)
- ValueObject: immutable, compared by value (cart and booking lines, Money)
- Aggregate: Booking; buffers events until the unit of work collects them
- DomainEvent: fact published to the message bus after commit
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


@dataclass(kw_only=True)
class Entity(ABC):
    """Two entities are the same when their ids are"""
    id: UUID = field(default_factory=uuid4)

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    pass


@dataclass(kw_only=True, eq=False)
class Aggregate(Entity):
    """
    Aggregate root

    State changes record events here; ``DjangoUnitOfWork.collect_events``
    moves them out and publishes them once the transaction has committed.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Copy of the events recorded since the last collection"""
        return self._events.copy()


@dataclass(kw_only=True)
class DomainEvent:
    """Something that happened; ``aggregate_id`` names the booking or payment"""
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    aggregate_id: UUID | None = None

    @property
    def name(self) -> str:
        return self.__class__.__name__
