"""
JSON file backend - one JSON file per entity.

Directory structure:
    {data_dir}/
        forms/{form_id}.json      - Form definitions
        audits/{audit_id}.json    - Submitted reports (camelCase wire shape)
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from config import DATA_DIR
from models import FormDefinition, AuditReport
from engine.adapters import parse_form, normalize_report, report_to_dict
from engine.errors import FormDefinitionError, ReportFormatError
from .base import Repository, FormRepository, AuditRepository


def _file_stem(id: str) -> str:
    """Ids become file names: percent-encoded, one path segment, one file per id."""
    return quote(id, safe="") or "%"


class WriteQueue:
    """Thread-safe write serialization."""

    def __init__(self):
        self._lock = threading.Lock()

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self._lock:
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w") as f:
                json.dump(data, f, indent=2, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


class _JsonDirectory:
    """Shared file handling for one entity directory."""

    def __init__(self, directory: Path):
        self._dir = directory

    def _path(self, id: str) -> Path:
        return self._dir / f"{_file_stem(id)}.json"

    def _read(self, path: Path) -> Optional[dict]:
        try:
            with open(path) as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            print(f"[WARN] Corrupt {path.name} in {self._dir.name}: {e}")
            return None

    def _write(self, id: str, data: dict) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        _write_queue.write_json(self._path(id), data)

    def delete(self, id: str) -> bool:
        path = self._path(id)
        if not path.exists():
            return False
        path.unlink()
        return True

    def exists(self, id: str) -> bool:
        return self._path(id).exists()

    def _paths(self) -> list[Path]:
        if not self._dir.exists():
            return []
        return sorted(self._dir.glob("*.json"))


class JsonFormRepository(_JsonDirectory, FormRepository):
    """JSON file implementation of form repository."""

    def __init__(self, base_path: Path = None):
        super().__init__((base_path or DATA_DIR) / "forms")

    def _load(self, path: Path) -> Optional[FormDefinition]:
        data = self._read(path)
        if data is None:
            return None
        try:
            return parse_form(data)
        except FormDefinitionError as e:
            print(f"[WARN] Invalid form {path.name}: {e}")
            return None

    def get(self, id: str) -> Optional[FormDefinition]:
        path = self._path(id)
        if not path.exists():
            return None
        return self._load(path)

    def save(self, entity: FormDefinition) -> None:
        self._write(entity.id, entity.model_dump(mode="json", by_alias=True))

    def list(self) -> list[FormDefinition]:
        forms = []
        for path in self._paths():
            form = self._load(path)
            if form:
                forms.append(form)
        return sorted(forms, key=lambda f: f.name)

    def find_by_name(self, name: str) -> Optional[FormDefinition]:
        for form in self.list():
            if form.name == name:
                return form
        return None


class JsonAuditRepository(_JsonDirectory, AuditRepository):
    """JSON file implementation of audit report repository."""

    def __init__(self, base_path: Path = None):
        super().__init__((base_path or DATA_DIR) / "audits")

    def _load(self, path: Path) -> Optional[AuditReport]:
        data = self._read(path)
        if data is None:
            return None
        # Legacy exports use answers[].questions[]; normalize either shape
        try:
            return normalize_report(data)
        except ReportFormatError as e:
            print(f"[WARN] Invalid audit {path.name}: {e}")
            return None

    def get(self, id: str) -> Optional[AuditReport]:
        path = self._path(id)
        if not path.exists():
            return None
        return self._load(path)

    def save(self, entity: AuditReport) -> None:
        entity.touch()
        self._write(entity.audit_id, report_to_dict(entity))

    def list(self) -> list[AuditReport]:
        reports = []
        for path in self._paths():
            report = self._load(path)
            if report:
                reports.append(report)
        return sorted(reports, key=lambda r: r.updated_at, reverse=True)

    def list_for_auditor(self, auditor: str) -> list[AuditReport]:
        return [r for r in self.list() if r.auditor == auditor]

    def list_pending_ata(self) -> list[AuditReport]:
        return [r for r in self.list() if r.ata_review is None]


class JsonRepository(Repository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Path = None):
        self._base_path = Path(base_path) if base_path else DATA_DIR
        self._forms = JsonFormRepository(self._base_path)
        self._audits = JsonAuditRepository(self._base_path)

    @property
    def forms(self) -> FormRepository:
        return self._forms

    @property
    def audits(self) -> AuditRepository:
        return self._audits
