"""Typed configuration loading.

Config lives in ``config.toml`` under the user config directory:

    [disco]
    url = "https://api.foojay.io/disco/v3.0"
    cache = "~/.cache/jprov/disco"
    offline = false
    timeout = 5.0

    [properties]
    "org.gradle.java.installations.paths" = "/opt/jdk-17,/opt/jdk-21"

Every key is optional. A missing file means defaults.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from jprov.platform.paths import user_cache_dir

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_float, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "DiscoConfig",
    "DEFAULT_DISCO_URL",
    "DEFAULT_TIMEOUT",
    "load_config",
]

DEFAULT_DISCO_URL = "https://api.foojay.io/disco/v3.0"
DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


def _default_cache() -> Path:
    return user_cache_dir() / "disco"


@dataclass(frozen=True, slots=True)
class DiscoConfig:
    """Catalog client settings."""

    url: str = DEFAULT_DISCO_URL
    cache: Path = field(default_factory=_default_cache)
    offline: bool = False
    timeout: float = DEFAULT_TIMEOUT


def _empty_properties() -> dict[str, str]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container.

    ``properties`` holds build-tool properties (the Gradle
    ``org.gradle.java.installations.*`` keys and ``gradle.user.home``).
    """

    disco: DiscoConfig = field(default_factory=DiscoConfig)
    properties: dict[str, str] = field(default_factory=_empty_properties)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        disco: StrDict = get_table(data, "disco") or {}
        props: StrDict = get_table(data, "properties") or {}

        cache = get_str(disco, "cache")
        return cls(
            disco=DiscoConfig(
                url=(get_str(disco, "url") or DEFAULT_DISCO_URL).rstrip("/"),
                cache=Path(cache).expanduser() if cache else _default_cache(),
                offline=get_bool(disco, "offline"),
                timeout=get_float(disco, "timeout") or DEFAULT_TIMEOUT,
            ),
            properties={k: str(v) for k, v in props.items() if v is not None},
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file."""
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))
