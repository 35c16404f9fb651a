"""Settings loader for keysmith."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from keysmith.core.keystore import ACCOUNT_MAP_MODES
from keysmith.entropy.factory import ENTROPY_MODES

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class GeneratorConfig:
    password_length: int
    account_map_mode: str


@dataclass(frozen=True)
class EntropyConfig:
    mode: str


@dataclass(frozen=True)
class StorageConfig:
    sqlite: str
    events_dir: str


@dataclass(frozen=True)
class LoggingConfig:
    level: str


@dataclass(frozen=True)
class KeysmithSettings:
    version: str
    generator: GeneratorConfig
    entropy: EntropyConfig
    storage: StorageConfig
    logging: LoggingConfig


class SettingsLoadError(RuntimeError):
    """Raised when settings cannot be loaded."""


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise SettingsLoadError(f"missing required settings key: {key}")
    return data[key]


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key, {})
    if not isinstance(value, dict):
        raise SettingsLoadError(f"{key} must be an object")
    return value


def load_settings(path: Path) -> KeysmithSettings:
    if not path.exists():
        raise SettingsLoadError(f"settings file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SettingsLoadError(f"settings file is not valid YAML: {path}") from exc
    if not isinstance(raw, dict):
        raise SettingsLoadError("settings root must be an object")

    generator_raw = _section(raw, "generator")
    entropy_raw = _section(raw, "entropy")
    storage_raw = _section(raw, "storage")
    logging_raw = _section(raw, "logging")

    try:
        password_length = int(generator_raw.get("password_length", 12))
    except (TypeError, ValueError) as exc:
        raise SettingsLoadError("generator.password_length must be an integer") from exc
    if password_length < 1:
        raise SettingsLoadError("generator.password_length must be >= 1")

    account_map_mode = str(generator_raw.get("account_map_mode", "replace")).strip().lower()
    if account_map_mode not in ACCOUNT_MAP_MODES:
        raise SettingsLoadError(f"invalid generator.account_map_mode: {account_map_mode}")

    entropy_mode = str(entropy_raw.get("mode", "seed")).strip().lower()
    if entropy_mode not in ENTROPY_MODES:
        raise SettingsLoadError(f"invalid entropy.mode: {entropy_mode}")

    sqlite_path = str(_require(storage_raw, "sqlite")).strip()
    events_dir = str(_require(storage_raw, "events_dir")).strip()
    if not sqlite_path:
        raise SettingsLoadError("storage.sqlite must not be empty")
    if not events_dir:
        raise SettingsLoadError("storage.events_dir must not be empty")

    level = str(logging_raw.get("level", "INFO")).strip().upper()
    if level not in _LOG_LEVELS:
        raise SettingsLoadError(f"invalid logging.level: {level}")

    return KeysmithSettings(
        version=str(_require(raw, "version")),
        generator=GeneratorConfig(
            password_length=password_length,
            account_map_mode=account_map_mode,
        ),
        entropy=EntropyConfig(mode=entropy_mode),
        storage=StorageConfig(sqlite=sqlite_path, events_dir=events_dir),
        logging=LoggingConfig(level=level),
    )


def ensure_storage_dirs(root: Path, storage: StorageConfig) -> None:
    (root / storage.events_dir).mkdir(parents=True, exist_ok=True)
    (root / Path(storage.sqlite).parent).mkdir(parents=True, exist_ok=True)
