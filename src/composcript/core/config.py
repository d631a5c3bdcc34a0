#!/usr/bin/env python3
"""
COMPOSCRIPT CONFIG
------------------
Project configuration. Read from `composcript.yaml` at the project root,
falling back to the `composcript` key of `package.json` for projects that
keep their tool settings there.

    components: ./components
    output: compiled.js
    extension: .jsx
    on_error: abort        # or 'skip'

Author: Composcript Team
Date: 2026-10-19
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.comments import CommentedMap

from composcript.core.errors import ConfigError

logger = logging.getLogger("composcript.config")

CONFIG_FILE = "composcript.yaml"
PACKAGE_FILE = "package.json"
ERROR_POLICIES = ("abort", "skip")

# Config keys as written on disk -> BuildConfig field names
_KEY_MAP = {
    "components": "components_dir",
    "output": "output_name",
    "extension": "extension",
    "self_render_tag": "self_render_tag",
    "debounce": "debounce_seconds",
    "on_error": "on_error",
}


@dataclass
class BuildConfig:
    project_root: Path
    components_dir: str = "components"
    output_name: str = "compiled.js"
    extension: str = ".jsx"
    self_render_tag: str = "This"
    debounce_seconds: float = 0.5
    on_error: str = "abort"

    def __post_init__(self):
        self.project_root = Path(self.project_root)
        if self.on_error not in ERROR_POLICIES:
            raise ConfigError(f"Unknown on_error policy '{self.on_error}' (expected one of {', '.join(ERROR_POLICIES)})")
        if not self.extension.startswith("."):
            self.extension = "." + self.extension
        self.debounce_seconds = float(self.debounce_seconds)

    @property
    def components_path(self) -> Path:
        return (self.project_root / self.components_dir).resolve()

    @property
    def output_path(self) -> Path:
        return self.components_path / self.output_name

    def to_mapping(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for key, attr in _KEY_MAP.items()}


def _from_mapping(project_root: Path, data: Any, source: Path) -> BuildConfig:
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {source}", file_path=str(source))
    unknown = set(data) - set(_KEY_MAP)
    for key in sorted(unknown):
        logger.warning(f"Unknown config key '{key}' in {source.name}")
    kwargs = {_KEY_MAP[k]: v for k, v in data.items() if k in _KEY_MAP}
    return BuildConfig(project_root=project_root, **kwargs)


def load_config(project_root: Union[str, Path]) -> BuildConfig:
    """
    Loads the project configuration.

    Raises:
        ConfigError: when neither config source exists or one is unreadable.
    """
    root = Path(project_root).resolve()

    yaml_path = root / CONFIG_FILE
    if yaml_path.exists():
        try:
            data = YAML(typ="safe").load(yaml_path.read_text(encoding="utf-8"))
        except YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", file_path=str(yaml_path))
        return _from_mapping(root, data or {}, yaml_path)

    package_path = root / PACKAGE_FILE
    if package_path.exists():
        try:
            package = json.loads(package_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}", file_path=str(package_path))
        if "composcript" in package:
            return _from_mapping(root, package["composcript"], package_path)

    raise ConfigError(f"No {CONFIG_FILE} found in {root}, run 'composcript init' first")


def save_config(config: BuildConfig) -> Path:
    """Writes composcript.yaml, keeping comments of an existing file."""
    path = config.project_root / CONFIG_FILE
    yaml = YAML(typ="rt")
    yaml.indent(mapping=2, sequence=4, offset=2)

    data = CommentedMap()
    if path.exists():
        try:
            loaded = yaml.load(path.read_text(encoding="utf-8"))
            if isinstance(loaded, CommentedMap):
                data = loaded
        except YAMLError:
            logger.warning(f"Overwriting unreadable {path.name}")

    for key, value in config.to_mapping().items():
        data[key] = value

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f)
    return path
