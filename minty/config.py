from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import ConfigError

DEFAULT_CFG_FILE = "minty.yaml"

# --------------------------------------------------------------------------- #
# YAML loader
# --------------------------------------------------------------------------- #
_yaml = YAML(typ="safe")


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine settings.

    Attributes:
        max_depth: Maximum nesting of include/extends loads per render
        cache_size: Number of parsed templates kept in memory (0 disables caching)
        template_dir: Directory for a FileSystemLoader built by Template.from_config
        encoding: Encoding of template files
    """
    max_depth: int = 64
    cache_size: int = 256
    template_dir: Optional[str] = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool) or self.max_depth < 1:
            raise ConfigError(f"max_depth must be a positive integer, got {self.max_depth!r}")
        if not isinstance(self.cache_size, int) or isinstance(self.cache_size, bool) or self.cache_size < 0:
            raise ConfigError(f"cache_size must be a non-negative integer, got {self.cache_size!r}")
        if self.template_dir is not None and not isinstance(self.template_dir, str):
            raise ConfigError(f"template_dir must be a string, got {self.template_dir!r}")
        if not isinstance(self.encoding, str) or not self.encoding:
            raise ConfigError(f"encoding must be a non-empty string, got {self.encoding!r}")

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> EngineConfig:
        """Build from a plain mapping; unknown keys are an error."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**raw)


# --------------------------------------------------------------------------- #
# PUBLIC API
# --------------------------------------------------------------------------- #
def load_config(path: Path) -> EngineConfig:
    """
    Load engine settings from YAML.

    • Missing file -> defaults.
    • Empty file -> defaults.
    • Unknown keys, wrong types or a non-mapping document -> ConfigError.
    • A relative template_dir is taken relative to the config file.
    """
    path = Path(path)
    if not path.exists():
        return EngineConfig()

    try:
        with path.open(encoding="utf-8") as f:
            raw = _yaml.load(f) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    raw = dict(raw)
    template_dir = raw.get("template_dir")
    if isinstance(template_dir, str) and not Path(template_dir).is_absolute():
        raw["template_dir"] = str((path.parent / template_dir).resolve())

    return EngineConfig.from_dict(raw)


__all__ = ["EngineConfig", "load_config", "DEFAULT_CFG_FILE"]
