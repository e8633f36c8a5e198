"""Application configuration: loading, validation and change watching."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

import yaml
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

DEFAULT_PORT = 8090
DEFAULT_CLIENT_TIMEOUT = 60
DEFAULT_TRANSPORT = "stdio"
VALID_TRANSPORTS = ("stdio", "sse", "http")
ENV_PREFIX = "MCP"

_CONFIG_NAMES = ("config.yaml", "config.yml")
_PARENT_LEVELS = 3
_DEFAULTS: dict[str, Any] = {
    "port": DEFAULT_PORT,
    "logging": {"development": False, "level": "info"},
    "client_timeout": DEFAULT_CLIENT_TIMEOUT,
}
_TRUE_WORDS = {"1", "t", "true"}
_FALSE_WORDS = {"", "0", "f", "false"}


class ConfigError(Exception):
    """Raised when configuration cannot be read, decoded or validated."""


@dataclass
class ServiceConfig:
    """Connection settings for one Atlassian service."""

    url: str = ""
    token: str = ""
    permissions: dict[str, bool] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    """Logging settings."""

    development: bool = False
    level: str = "info"


@dataclass
class Config:
    """Top-level application configuration."""

    port: int = DEFAULT_PORT
    jira: ServiceConfig = field(default_factory=ServiceConfig)
    confluence: ServiceConfig = field(default_factory=ServiceConfig)
    bitbucket: ServiceConfig = field(default_factory=ServiceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    transport: str = ""
    client_timeout: int = DEFAULT_CLIENT_TIMEOUT

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Config":
        """Build a configuration from a (possibly nested) mapping, coercing scalar types."""
        data = _lower_keys(_as_mapping(data, "config"))
        config = cls()
        if "port" in data:
            config.port = _as_int(data["port"], "port")
        if "transport" in data:
            config.transport = _as_str(data["transport"], "transport")
        if "client_timeout" in data:
            config.client_timeout = _as_int(data["client_timeout"], "client_timeout")
        for name in ("jira", "confluence", "bitbucket"):
            if name in data:
                setattr(config, name, _service_from(data[name], name))
        if "logging" in data:
            section = _as_mapping(data["logging"], "logging")
            logging_config = LoggingConfig()
            if "development" in section:
                logging_config.development = _as_bool(section["development"], "logging.development")
            if "level" in section:
                logging_config.level = _as_str(section["level"], "logging.level")
            config.logging = logging_config
        return config

    def validate(self) -> None:
        """Check the configuration, filling in the transport and timeout defaults."""
        if self.port <= 0 or self.port > 65535:
            raise ConfigError(f"invalid port: {self.port}, must be between 1 and 65535")

        if not self.transport:
            self.transport = DEFAULT_TRANSPORT
        if self.transport not in VALID_TRANSPORTS:
            raise ConfigError(
                f"invalid transport mode: {self.transport}, valid options are: stdio, sse, http"
            )

        if self.client_timeout <= 0:
            self.client_timeout = DEFAULT_CLIENT_TIMEOUT

        for name in ("jira", "confluence", "bitbucket"):
            service: ServiceConfig = getattr(self, name)
            if service.url and not service.token:
                raise ConfigError(f"{name} token must be set when {name} url is configured")


def load_config(config_path: str | os.PathLike[str] | None = None) -> Config:
    """Load configuration from a YAML file, defaults and ``MCP_*`` environment variables.

    Without an explicit path, ``config.yaml`` is looked for in the current
    directory, the program's directory and its parents, and the working
    directory and its parents. A missing file there is not an error.
    """
    if config_path:
        path: Path | None = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"failed to read config file: {path}: no such file")
    else:
        path = _find_config_file()

    file_data = _read_yaml(path) if path is not None else {}
    merged = _deep_merge(_DEFAULTS, _lower_keys(file_data))
    _apply_env(merged)

    try:
        config = Config.from_mapping(merged)
    except ConfigError as exc:
        raise ConfigError(f"failed to unmarshal config: {exc}") from exc

    try:
        config.validate()
    except ConfigError as exc:
        raise ConfigError(f"config validation failed: {exc}") from exc

    return config


def watch_config_on_change(
    config_path: str | os.PathLike[str] | None, callback: Callable[[], None]
) -> Any:
    """Call ``callback`` whenever the config file changes and still loads cleanly.

    Returns the started watchdog observer; stop it to end watching.
    """
    path = Path(config_path) if config_path else _find_config_file()
    if path is None:
        raise ConfigError("no config file found to watch")
    path = path.resolve()
    handler = _ConfigChangeHandler(path, callback)
    observer = Observer()
    observer.schedule(handler, str(path.parent), recursive=False)
    observer.start()
    return observer


class _ConfigChangeHandler(FileSystemEventHandler):
    _EVENTS = {"modified", "created", "moved"}

    def __init__(self, path: Path, callback: Callable[[], None]) -> None:
        super().__init__()
        self.path = path
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in self._EVENTS:
            return
        touched = [event.src_path, getattr(event, "dest_path", "")]
        if any(p and Path(os.fsdecode(p)).resolve() == self.path for p in touched):
            self._reload()

    def _reload(self) -> None:
        print("Config file changed:", self.path)
        try:
            load_config(self.path)
        except ConfigError as exc:
            print(f"Error reloading updated config: {exc}")
            return
        self.callback()


def _search_dirs() -> Iterator[Path]:
    yield Path(".")
    if sys.argv and sys.argv[0]:
        exec_dir = Path(sys.argv[0]).resolve().parent
        yield exec_dir
        yield from list(exec_dir.parents)[:_PARENT_LEVELS]
    cwd = Path.cwd()
    yield cwd
    yield from list(cwd.parents)[:_PARENT_LEVELS]


def _find_config_file() -> Path | None:
    for directory in _search_dirs():
        for name in _CONFIG_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"failed to read config file: {path}: top level must be a mapping")
    return dict(data)


def _lower_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        str(key).lower(): _lower_keys(value) if isinstance(value, Mapping) else value
        for key, value in data.items()
    }


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    merged = {k: dict(v) if isinstance(v, Mapping) else v for k, v in base.items()}
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _leaf_keys(data: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> Iterator[tuple[str, ...]]:
    for key, value in data.items():
        if isinstance(value, Mapping) and value:
            yield from _leaf_keys(value, prefix + (key,))
        else:
            yield prefix + (key,)


def _apply_env(data: dict[str, Any]) -> None:
    for key_path in list(_leaf_keys(data)):
        env_name = f"{ENV_PREFIX}_" + "_".join(key_path).upper()
        value = os.environ.get(env_name)
        if not value:
            continue
        target = data
        for part in key_path[:-1]:
            target = target[part]
        target[key_path[-1]] = value


def _as_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{name}' expected a map, got {type(value).__name__}")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text, 0)
        except ValueError:
            pass
    raise ConfigError(f"cannot parse '{name}' as int: {value!r}")


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ConfigError(f"cannot parse '{name}' as bool: {value!r}")


def _as_str(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    raise ConfigError(f"'{name}' expected a string, got {type(value).__name__}")


def _service_from(value: Any, name: str) -> ServiceConfig:
    section = _as_mapping(value, name)
    permissions = _as_mapping(section.get("permissions"), f"{name}.permissions")
    return ServiceConfig(
        url=_as_str(section.get("url"), f"{name}.url"),
        token=_as_str(section.get("token"), f"{name}.token"),
        permissions={
            str(key): _as_bool(flag, f"{name}.permissions.{key}")
            for key, flag in permissions.items()
        },
    )