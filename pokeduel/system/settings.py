from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
from pokeduel.core.logging import logger

SETTINGS_FILENAME = ".pokeduel_settings.json"
LOG_LEVELS = {"DEBUG","INFO","WARN","ERROR"}

@dataclass
class SettingsData:
    log_level: str = "INFO"              # DEBUG / INFO / WARN / ERROR
    debug: bool = False                  # Log every turn at DEBUG regardless of log_level
    seed: Optional[int] = None           # Fixed seed for reproducible battles
    catalog_dir: Optional[str] = None    # Directory holding roster.json / moves.json

    def normalize(self):
        if isinstance(self.log_level, str):
            self.log_level = self.log_level.strip().upper()
        if self.log_level not in LOG_LEVELS:
            self.log_level = "INFO"
        if not isinstance(self.debug, bool):
            self.debug = False
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            self.seed = None
        if not isinstance(self.catalog_dir, str) or not self.catalog_dir.strip():
            self.catalog_dir = None

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls) -> "Settings":
        path = cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                if not isinstance(raw, dict):
                    raise ValueError("settings file must hold a JSON object")
                # Unknown keys are dropped, missing ones take the dataclass default
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def apply(self):
        """Push the configured level into the shared logger."""
        logger.set_level(self.data.effective_log_level)  # type: ignore[arg-type]

    def update(self, **changes):
        for name, value in changes.items():
            if not hasattr(self.data, name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self.data, name, value)
        self.data.normalize()
        self.apply()
        self.save()
        self._notify()

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
