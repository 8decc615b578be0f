"""Layered configuration: built-in defaults < TOML config file < PESTR_* environment variables."""
import logging
import math
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError

from pestr.errors import InvalidConfig
from pestr.models import Config, FileConfig

_LOG = logging.getLogger(__name__)

CONFIG_ENV = "PESTR_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "pestr" / "config.toml"

ENV_CPUS_PER_NODE = "PESTR_CPUS_PER_NODE"
ENV_SEARCH_CONSERVE_NODES = "PESTR_SEARCH_CONSERVE_NODES"
ENV_SEARCH_PE_RADIUS = "PESTR_SEARCH_PE_RADIUS"
ENV_SEARCH_THREAD_RADIUS = "PESTR_SEARCH_THREAD_RADIUS"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def config_path(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Path:
    """Explicit path, else $PESTR_CONFIG, else ~/.config/pestr/config.toml."""
    env = os.environ if environ is None else environ
    if path:
        return Path(path).expanduser()
    raw = (env.get(CONFIG_ENV) or "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_CONFIG_PATH


def read_config_file(path: Path) -> FileConfig:
    """
    Load the TOML config file. Missing or unparseable files yield an empty FileConfig;
    values of the wrong type raise InvalidConfig.
    """
    if not path.is_file():
        _LOG.debug("No config file at %s", path)
        return FileConfig()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        _LOG.warning("Ignoring config file %s: %s", path, e)
        return FileConfig()
    try:
        return FileConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfig(f"invalid config file {path}: {_first_error(e)}") from e


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid value')}" if loc else err.get("msg", "invalid value")


def _env_int(env: Mapping[str, str], name: str) -> int | None:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise InvalidConfig(f"{name} must be a positive integer, got {raw!r}") from None
    if value <= 0:
        raise InvalidConfig(f"{name} must be > 0, got {value}")
    return value


def _env_float(env: Mapping[str, str], name: str) -> float | None:
    raw = (env.get(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise InvalidConfig(f"{name} must be a real number, got {raw!r}") from None
    if not math.isfinite(value):
        raise InvalidConfig(f"{name} must be a finite number, got {raw!r}")
    if value < 0:
        raise InvalidConfig(f"{name} must be >= 0, got {value}")
    return value


def _env_bool(env: Mapping[str, str], name: str) -> bool | None:
    raw = (env.get(name) or "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise InvalidConfig(f"{name} must be true or false, got {raw!r}")


def _first_set(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def load_config(path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Config:
    """
    Resolve settings once: environment beats config file, config file beats defaults.
    Command-line flags are applied on top by the caller.
    """
    env = os.environ if environ is None else environ
    file_config = read_config_file(config_path(path, env))
    defaults = Config()

    values = {
        "cpus_per_node": _first_set(
            _env_int(env, ENV_CPUS_PER_NODE),
            file_config.cpus_per_node,
            defaults.cpus_per_node,
        ),
        "search": {
            "conserve_nodes": _first_set(
                _env_bool(env, ENV_SEARCH_CONSERVE_NODES),
                file_config.search.conserve_nodes,
                defaults.search.conserve_nodes,
            ),
            "pe_radius": _first_set(
                _env_float(env, ENV_SEARCH_PE_RADIUS),
                file_config.search.pe_radius,
                defaults.search.pe_radius,
            ),
            "thread_radius": _first_set(
                _env_float(env, ENV_SEARCH_THREAD_RADIUS),
                file_config.search.thread_radius,
                defaults.search.thread_radius,
            ),
        },
    }
    config = Config.model_validate(values)
    _LOG.debug("Resolved config: %s", config.model_dump())
    return config
