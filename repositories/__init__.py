"""
Repository layer - abstracts persistence.

Usage:
    from repositories import get_repository

    repo = get_repository()  # Returns configured backend
    report = repo.audits.get("AUD-20045389")
    repo.audits.save(report)

Backends are swappable via config (THOREYE_BACKEND) or configure_backend().
"""

from typing import Optional

from config import REPOSITORY_BACKEND
from .base import Repository, FormRepository, AuditRepository
from .json_backend import JsonRepository
from .memory_backend import MemoryRepository

# Default backend - can be changed via config
_backend: str = REPOSITORY_BACKEND
_options: dict = {}
_instance: Optional[Repository] = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        if _backend == "json":
            _instance = JsonRepository(**_options)
        elif _backend == "memory":
            _instance = MemoryRepository()
        else:
            raise ValueError(f"Unknown backend: {_backend}")

    return _instance


def configure_backend(backend: str, **kwargs) -> None:
    """
    Configure the repository backend.

    kwargs go to the backend constructor (e.g. base_path for json).
    """
    global _backend, _options, _instance
    _backend = backend
    _options = kwargs
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "Repository",
    "FormRepository",
    "AuditRepository",
    "JsonRepository",
    "MemoryRepository",
]
