import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional, Union

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .cache import DEFAULT_CACHE_SIZE, reset_regex_cache
from .tree import DEFAULT_VCS_DIRECTORIES

PYPROJECT_TOML = "pyproject.toml"
TOOL_NAME = "ignoreglob"


class ConfigValueError(ValueError):
    def __init__(self, path: Optional[Path], *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.path = path


class ConfigTypeError(TypeError):
    def __init__(self, path: Optional[Path], *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.path = path


@dataclass(frozen=True)
class GlobSettings:
    cache_size: Optional[int] = DEFAULT_CACHE_SIZE
    """Maximum number of translated rules kept in memory, `None` for no limit."""

    vcs_directories: List[str] = field(default_factory=lambda: list(DEFAULT_VCS_DIRECTORIES))
    """Names of version control directories that are never searched."""


def _settings_from_dict(data: Dict[str, Any], path: Optional[Path] = None) -> GlobSettings:
    known = {f.name for f in fields(GlobSettings)}

    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = key.replace("-", "_")
        if name not in known:
            raise ConfigValueError(path, f"Unknown option {key!r} in [tool.{TOOL_NAME}]")
        values[name] = value

    cache_size = values.get("cache_size", DEFAULT_CACHE_SIZE)
    if cache_size is not None and (isinstance(cache_size, bool) or not isinstance(cache_size, int)):
        raise ConfigTypeError(path, f"'cache-size' must be an integer, not {type(cache_size).__name__}")
    if cache_size is not None and cache_size < 1:
        raise ConfigValueError(path, f"'cache-size' must be positive, not {cache_size}")

    if "vcs_directories" in values:
        vcs_directories = values["vcs_directories"]
        if not isinstance(vcs_directories, list) or not all(isinstance(v, str) for v in vcs_directories):
            raise ConfigTypeError(path, "'vcs-directories' must be a list of strings")

    return replace(GlobSettings(), **values)


def load_settings_from_toml_str(data: Union[str, Dict[str, Any]], path: Optional[Path] = None) -> GlobSettings:
    try:
        dict_data = tomllib.loads(data) if isinstance(data, str) else data
    except tomllib.TOMLDecodeError as e:
        raise ConfigValueError(path, f"Parsing {str(path) + ' ' if path else ''}failed: {e}") from e

    tool = dict_data.get("tool", {})
    if not isinstance(tool, dict):
        raise ConfigTypeError(path, "[tool] must be a table")

    tool_data = tool.get(TOOL_NAME, {})
    if not isinstance(tool_data, dict):
        raise ConfigTypeError(path, f"[tool.{TOOL_NAME}] must be a table")

    return _settings_from_dict(tool_data, path)


def load_settings_from_path(path: Union[str, Path]) -> GlobSettings:
    path = Path(path)
    if path.is_dir():
        path = path / PYPROJECT_TOML

    if not path.is_file():
        return GlobSettings()

    return load_settings_from_toml_str(path.read_text("utf-8"), path)


_settings: Optional[GlobSettings] = None
_settings_lock = RLock()


def get_settings() -> GlobSettings:
    global _settings

    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = GlobSettings()

    return _settings


def set_settings(settings: GlobSettings) -> None:
    global _settings

    with _settings_lock:
        _settings = settings
        reset_regex_cache(settings.cache_size)
