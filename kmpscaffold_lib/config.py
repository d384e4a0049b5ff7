"""
Project-level settings for kmpscaffold.

Read from .kmpscaffold.yaml at the project root (or an explicit path). CLI flags override
file values, which override the defaults below.

Example:

    layout: kmp-feature
    with_impl: true
    base_package: com.acme
    source_roots: [composeApp/src/commonMain/kotlin]
"""
import dataclasses
import os
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .errors import InvalidInputError
from .planner import DEFAULT_COMPILE_SDK, DEFAULT_LAYOUT, DEFAULT_MIN_SDK
from .resolver import DEFAULT_EXTENSIONS, DEFAULT_SOURCE_ROOTS
from .settings import DEFAULT_SETTINGS_FILE
from .template import load_yaml

CONFIG_FILE = ".kmpscaffold.yaml"


@dataclass(frozen=True)
class ScaffoldConfig:
    layout: str = DEFAULT_LAYOUT
    with_impl: Optional[bool] = None
    base_package: Optional[str] = None
    project_name: Optional[str] = None
    settings_file: str = DEFAULT_SETTINGS_FILE
    source_roots: Tuple[str, ...] = DEFAULT_SOURCE_ROOTS
    source_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    compile_sdk: int = DEFAULT_COMPILE_SDK
    min_sdk: int = DEFAULT_MIN_SDK
    dedupe_includes: bool = True

    def merged(self, **overrides: Any) -> "ScaffoldConfig":
        """Copy with every override that is not None applied."""
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})


_TUPLE_FIELDS = ("source_roots", "source_extensions")
_INT_FIELDS = ("compile_sdk", "min_sdk")
_BOOL_FIELDS = ("with_impl", "dedupe_includes")


def _coerce(key: str, value: Any) -> Any:
    if key in _TUPLE_FIELDS:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise InvalidInputError(f"Config key {key!r} must be a list of strings")
        return tuple(value)
    if key in _INT_FIELDS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(f"Config key {key!r} must be an integer")
        return value
    if key in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise InvalidInputError(f"Config key {key!r} must be true or false")
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"Config key {key!r} must be a string")
    return value


def load_config(project_root: str, path: Optional[str] = None) -> ScaffoldConfig:
    """Load the config file; a missing default file yields the defaults, a missing explicit one fails."""
    if path is None:
        path = os.path.join(project_root, CONFIG_FILE)
        if not os.path.isfile(path):
            return ScaffoldConfig()
    elif not os.path.isfile(path):
        raise InvalidInputError(f"Config file not found: {path}")

    try:
        data = load_yaml(path)
    except Exception as e:
        raise InvalidInputError(f"Could not parse config file {path}: {e}") from e
    if data is None:
        return ScaffoldConfig()
    if not isinstance(data, dict):
        raise InvalidInputError(f"Config file {path} must contain a mapping")

    known = {f.name for f in dataclasses.fields(ScaffoldConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidInputError(f"Unknown config key(s) in {path}: {', '.join(map(str, unknown))}")

    values = {k: _coerce(k, v) for k, v in data.items() if v is not None}
    return ScaffoldConfig(**values)
