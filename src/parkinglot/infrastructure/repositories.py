# File: src/parkinglot/infrastructure/repositories.py
"""
Repository Pattern for ticket and receipt history

Tickets are never deleted: a closed ticket stays in the repository as
history. Receipts are immutable records of completed exits. Both live
in memory for the lifetime of the process.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, TypeVar, Generic
from threading import RLock
import logging

from ..domain.models import Ticket, Receipt

T = TypeVar('T')  # Entity type
ID = TypeVar('ID')  # ID type


# ============================================================================
# REPOSITORY INTERFACES
# ============================================================================

class Repository(ABC, Generic[T, ID]):
    """Base repository interface"""

    @abstractmethod
    def add(self, entity: T) -> T:
        """Add new entity"""
        pass

    @abstractmethod
    def get(self, id: ID) -> Optional[T]:
        """Get entity by ID"""
        pass

    @abstractmethod
    def get_all(self, skip: int = 0, limit: int = 100) -> List[T]:
        """Get all entities with pagination"""
        pass

    @abstractmethod
    def count(self) -> int:
        """Count total entities"""
        pass


# ============================================================================
# IN-MEMORY REPOSITORIES
# ============================================================================

class InMemoryRepository(Repository[T, int]):
    """Thread-safe in-memory repository keyed by integer id, in insertion order"""

    def __init__(self):
        self._storage: Dict[int, T] = {}
        self._lock = RLock()
        self._logger = logging.getLogger(self.__class__.__name__)

    def add(self, entity: T) -> T:
        entity_id = getattr(entity, 'id')
        with self._lock:
            if entity_id in self._storage:
                raise ValueError(f"Entity {entity_id} already exists")
            self._storage[entity_id] = entity
        self._logger.debug(f"Added entity {entity_id}")
        return entity

    def get(self, id: int) -> Optional[T]:
        with self._lock:
            return self._storage.get(id)

    def get_all(self, skip: int = 0, limit: int = 100) -> List[T]:
        with self._lock:
            items = list(self._storage.values())
        return items[skip:skip + limit]

    def count(self) -> int:
        with self._lock:
            return len(self._storage)

    def _values(self) -> List[T]:
        with self._lock:
            return list(self._storage.values())


class InMemoryTicketRepository(InMemoryRepository[Ticket]):
    """In-memory history of every ticket issued"""

    def find_active(self) -> List[Ticket]:
        """Tickets that have not been closed yet"""
        return [ticket for ticket in self._values() if ticket.active]

    def find_active_by_slot(self, slot_id: int) -> List[Ticket]:
        """Active tickets referencing the slot (at most one when consistent)"""
        return [
            ticket for ticket in self._values()
            if ticket.active and ticket.slot_id == slot_id
        ]


class InMemoryReceiptRepository(InMemoryRepository[Receipt]):
    """In-memory log of receipts issued at exit"""

    def find_by_ticket(self, ticket_id: int) -> Optional[Receipt]:
        for receipt in self._values():
            if receipt.ticket_id == ticket_id:
                return receipt
        return None
