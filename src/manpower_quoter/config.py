"""Configuration helpers for the manpower quoter."""
from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from manpower_quoter.resources import default_app_settings_json

if TYPE_CHECKING:  # pragma: no cover - only used for type checking
    from manpower_quoter.domain_models.params import ParameterSet

DEFAULT_VERSION = 1
APP_SETTINGS_ENV_VAR = "MANPOWER_QUOTER_APP_SETTINGS"
DEBUG_ENV_VAR = "MANPOWER_QUOTER_DEBUG"
_APP_SETTINGS_CACHE: dict[str, Any] | None = None

LOGGER_NAME = "manpower_quoter"


def get_logger(*names: str) -> logging.Logger:
    """Return a logger under the shared manpower quoter namespace."""

    if not names:
        return logging.getLogger(LOGGER_NAME)
    qualified = ".".join((LOGGER_NAME, *names))
    return logging.getLogger(qualified)


logger = get_logger()


def configure_logging(level: int = logging.INFO, *, force: bool = False) -> None:
    """Initialise a basic logging configuration if none is present."""

    root = logging.getLogger()
    if root.handlers and not force:
        root.setLevel(level)
        return
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        force=force,
    )


def _env_flag(name: str, *, default: bool = False) -> bool:
    """Return a boolean from the environment with tolerant parsing."""

    raw = os.getenv(name)
    if raw is None:
        return default

    normalized = raw.strip().lower()
    if not normalized:
        return default

    truthy = {"1", "true", "yes", "on"}
    falsy = {"0", "false", "no", "off"}

    if normalized in truthy:
        return True
    if normalized in falsy:
        return False

    try:
        return bool(int(normalized))
    except ValueError:
        return default


@dataclass(frozen=True)
class AppEnvironment:
    """Runtime configuration extracted from environment variables."""

    debug: bool = False
    settings_override: Path | None = None

    @classmethod
    def from_env(cls) -> "AppEnvironment":
        override_raw = os.getenv(APP_SETTINGS_ENV_VAR)
        override = Path(override_raw).expanduser() if override_raw else None
        return cls(debug=_env_flag(DEBUG_ENV_VAR, default=False), settings_override=override)

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO


class ConfigError(RuntimeError):
    """Raised when configuration data cannot be loaded or validated."""


def _load_json_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Malformed JSON in {path.name}: {exc}") from exc

    if not isinstance(raw, Mapping):
        raise ConfigError(f"Configuration root must be an object in {path.name}")

    return dict(raw)


def _merge_mappings(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in override.items():
        if key in base and isinstance(base[key], Mapping) and isinstance(value, Mapping):
            base[key] = _merge_mappings(dict(base[key]), value)
        else:
            base[key] = value
    return base


def _load_app_settings_raw() -> dict[str, Any]:
    base = _load_json_mapping(default_app_settings_json())

    override_path = AppEnvironment.from_env().settings_override
    if override_path is not None:
        if override_path.exists():
            try:
                override = _load_json_mapping(override_path)
            except ConfigError as exc:
                raise ConfigError(f"Failed to load override settings: {exc}") from exc
            base = _merge_mappings(base, override)
        else:
            logger.warning("Override settings path does not exist: %s", override_path)

    return base


def load_app_settings(*, reload: bool = False) -> dict[str, Any]:
    """Return the merged application settings, applying optional overrides."""

    global _APP_SETTINGS_CACHE
    if reload or _APP_SETTINGS_CACHE is None:
        _APP_SETTINGS_CACHE = _load_app_settings_raw()

    return copy.deepcopy(_APP_SETTINGS_CACHE)


def _settings_section(name: str) -> Any:
    settings = load_app_settings()
    if name not in settings:
        raise ConfigError(f"'{name}' section missing from app settings")
    return settings[name]


def load_default_params() -> "ParameterSet":
    """Return the default commercial parameter snapshot."""

    from manpower_quoter.domain_models.params import ParameterSet

    section = _settings_section("default_params")
    if not isinstance(section, Mapping):
        raise ConfigError("'default_params' must be an object in app settings")
    return ParameterSet.from_mapping(section)


def load_template_params() -> "ParameterSet":
    """Return the parameters written into a blank master-data template."""

    overrides = load_app_settings().get("blank_template_overrides") or {}
    if not isinstance(overrides, Mapping):
        raise ConfigError("'blank_template_overrides' must be an object in app settings")
    return load_default_params().with_overrides(overrides)


def position_sheet_aliases() -> tuple[str, ...]:
    """Return the ordered sheet names searched for position tables."""

    aliases = _settings_section("position_sheet_aliases")
    if not isinstance(aliases, list) or not aliases:
        raise ConfigError("'position_sheet_aliases' must be a non-empty list")
    return tuple(str(name) for name in aliases)


def header_scan_rows() -> int:
    return int(load_app_settings().get("header_scan_rows", 20))


def default_currency() -> str:
    return str(load_app_settings().get("default_currency", "USD"))


def save_params_snapshot(
    params: "ParameterSet",
    path: str | Path,
    *,
    version: int = DEFAULT_VERSION,
    indent: int = 2,
) -> Path:
    """Persist a parameter snapshot with version metadata.

    The output format is inferred from the destination suffix. JSON is used when
    the suffix is unrecognised.
    """

    destination = Path(path)
    payload: dict[str, Any] = {"version": version, "data": params.to_dict()}

    suffix = destination.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise ConfigError("PyYAML is required to save YAML snapshots") from exc
        text = yaml.safe_dump(payload, sort_keys=False)
    else:
        text = json.dumps(payload, indent=indent, sort_keys=True)

    destination.write_text(text, encoding="utf-8")
    return destination


def load_params_snapshot(path: str | Path) -> "ParameterSet":
    """Load a snapshot written by :func:`save_params_snapshot`."""

    from manpower_quoter.domain_models.params import ParameterSet

    source = Path(path)
    if not source.exists():
        raise ConfigError(f"Parameter snapshot not found: {source}")

    suffix = source.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise ConfigError("PyYAML is required to load YAML snapshots") from exc
        raw = yaml.safe_load(source.read_text(encoding="utf-8"))
    else:
        raw = _load_json_mapping(source)

    if not isinstance(raw, Mapping):
        raise ConfigError(f"Snapshot root must be an object in {source.name}")
    version = raw.get("version", DEFAULT_VERSION)
    if version != DEFAULT_VERSION:
        raise ConfigError(
            f"Unsupported snapshot version {version!r}; expected {DEFAULT_VERSION}"
        )
    data = raw.get("data")
    if not isinstance(data, Mapping):
        raise ConfigError(f"Snapshot {source.name} has no 'data' object")
    return ParameterSet.from_mapping(data)


__all__ = [
    "APP_SETTINGS_ENV_VAR",
    "AppEnvironment",
    "ConfigError",
    "DEBUG_ENV_VAR",
    "DEFAULT_VERSION",
    "LOGGER_NAME",
    "configure_logging",
    "default_currency",
    "get_logger",
    "header_scan_rows",
    "load_app_settings",
    "load_default_params",
    "load_params_snapshot",
    "load_template_params",
    "logger",
    "position_sheet_aliases",
    "save_params_snapshot",
]
