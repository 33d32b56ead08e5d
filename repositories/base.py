"""
Repository base classes - define the interface.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional

from models import FormDefinition, AuditReport

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """Abstract base for entity repositories."""

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def save(self, entity: T) -> None:
        """Save entity."""
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass

    @abstractmethod
    def list(self) -> list[T]:
        """List all entities."""
        pass

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Check if entity exists."""
        pass


class FormRepository(BaseRepository[FormDefinition]):
    """Repository for audit form definitions."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[FormDefinition]:
        """Reports reference forms by name; look one up that way."""
        pass


class AuditRepository(BaseRepository[AuditReport]):
    """
    Repository for submitted audit reports.

    save() replaces the whole report, so answers and score always land
    together.
    """

    @abstractmethod
    def list_for_auditor(self, auditor: str) -> list[AuditReport]:
        """Reports submitted by one auditor."""
        pass

    @abstractmethod
    def list_pending_ata(self) -> list[AuditReport]:
        """Reports without an ATA review yet."""
        pass


class Repository:
    """
    Aggregate repository - provides access to all entity repositories.

    This is what consumers use. Backend implementations provide
    concrete versions of each sub-repository.
    """

    @property
    @abstractmethod
    def forms(self) -> FormRepository:
        """Access form repository."""
        pass

    @property
    @abstractmethod
    def audits(self) -> AuditRepository:
        """Access audit report repository."""
        pass
