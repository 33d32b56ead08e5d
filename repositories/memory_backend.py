"""
In-memory backend - for tests and throwaway runs.

Stores deep copies so callers can't mutate what's been saved.
"""

from __future__ import annotations

import threading
from typing import Optional

from models import FormDefinition, AuditReport
from .base import Repository, FormRepository, AuditRepository


class MemoryFormRepository(FormRepository):
    """Dict-backed form repository."""

    def __init__(self):
        self._items: dict[str, FormDefinition] = {}

    def get(self, id: str) -> Optional[FormDefinition]:
        return self._items.get(id)

    def save(self, entity: FormDefinition) -> None:
        # Forms are frozen; no copy needed
        self._items[entity.id] = entity

    def delete(self, id: str) -> bool:
        return self._items.pop(id, None) is not None

    def list(self) -> list[FormDefinition]:
        return sorted(self._items.values(), key=lambda f: f.name)

    def exists(self, id: str) -> bool:
        return id in self._items

    def find_by_name(self, name: str) -> Optional[FormDefinition]:
        for form in self._items.values():
            if form.name == name:
                return form
        return None


class MemoryAuditRepository(AuditRepository):
    """Dict-backed audit repository."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[str, AuditReport] = {}

    def get(self, id: str) -> Optional[AuditReport]:
        with self._lock:
            report = self._items.get(id)
            return report.model_copy(deep=True) if report else None

    def save(self, entity: AuditReport) -> None:
        entity.touch()
        with self._lock:
            self._items[entity.audit_id] = entity.model_copy(deep=True)

    def delete(self, id: str) -> bool:
        with self._lock:
            return self._items.pop(id, None) is not None

    def list(self) -> list[AuditReport]:
        with self._lock:
            reports = [r.model_copy(deep=True) for r in self._items.values()]
        return sorted(reports, key=lambda r: r.updated_at, reverse=True)

    def exists(self, id: str) -> bool:
        return id in self._items

    def list_for_auditor(self, auditor: str) -> list[AuditReport]:
        return [r for r in self.list() if r.auditor == auditor]

    def list_pending_ata(self) -> list[AuditReport]:
        return [r for r in self.list() if r.ata_review is None]


class MemoryRepository(Repository):
    """In-memory backend implementation."""

    def __init__(self):
        self._forms = MemoryFormRepository()
        self._audits = MemoryAuditRepository()

    @property
    def forms(self) -> FormRepository:
        return self._forms

    @property
    def audits(self) -> AuditRepository:
        return self._audits
