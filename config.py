"""
Configuration for the audit engine and its service wrapper.
"""

import os
import yaml
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, fields
from dotenv import load_dotenv

from models.base import round_half_up

load_dotenv()

# Storage
DATA_DIR = Path(os.environ.get("THOREYE_DATA_DIR", "data"))
REPOSITORY_BACKEND = os.environ.get("THOREYE_BACKEND", "json")

# Engine settings file (optional)
SETTINGS_FILE = Path(os.environ.get("THOREYE_SETTINGS", "settings.yaml"))

# Web
WEB_PORT = int(os.environ.get("THOREYE_PORT", "5002"))


@dataclass
class EngineSettings:
    """
    Tunables for the form engine.

    Loaded from the `engine:` mapping of the settings YAML. Anything not set
    there keeps the default below.
    """
    # Text that marks a repetition trigger on forms without triggersRepetition
    repetition_prompt: str = "Was there another interaction?"
    # Reports are always scored out of this
    max_score: int = 100
    # ATA rating n maps to n * (max_score / scale), rounded half-up
    ata_rating_scale: int = 10

    def ata_score(self, rating: int) -> int:
        return round_half_up(rating * self.max_score / self.ata_rating_scale)


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """
    Load engine settings from YAML.

    A missing file means defaults. A file that isn't a mapping is a
    configuration error.
    """
    path = Path(path) if path else SETTINGS_FILE
    if not path.exists():
        return EngineSettings()

    with open(path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")

    engine = data.get("engine") or {}
    if not isinstance(engine, dict):
        raise ValueError(f"'engine' in {path} must be a mapping")

    known = {f.name for f in fields(EngineSettings)}
    unknown = set(engine) - known
    if unknown:
        print(f"[CONFIG] Ignoring unknown engine settings: {', '.join(sorted(unknown))}")

    return EngineSettings(**{k: v for k, v in engine.items() if k in known})


_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """Process-wide settings, loaded once."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings (tests, reloads)."""
    global _settings
    _settings = None
