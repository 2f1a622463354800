"""
YAML → typed config loader.

Loads engine thresholds from engine.yaml (bundled with the package) and
optionally merges user overrides from ~/.fitwizard/engine.yaml.

Usage:
    from fitwizard.core.engine.config_loader import load_progression_config
    cfg = load_progression_config()
    cfg.session_window

If a YAML file cannot be read or parsed, a warning is issued and the file is
ignored, so the Python defaults from config.py apply.  Unknown keys are
reported with a warning; values of the wrong type raise ValueError.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import ProgressionConfig, WeeklyConfig

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on any read/parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitwizard: ignoring config file {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Coerce a YAML scalar to the type of the dataclass default."""
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ValueError(f"{name}: expected true/false, got {value!r}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name}: expected an integer, got {value!r}")
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name}: expected a number, got {value!r}")
        return float(value)
    if isinstance(default, dict):
        if not isinstance(value, dict):
            raise ValueError(f"{name}: expected a mapping, got {value!r}")
        return {str(k): int(v) for k, v in value.items()}
    return value


def _build(cls: type, section: dict[str, Any], section_name: str):
    """Instantiate a config dataclass from a YAML section over its defaults."""
    defaults = cls()
    known = {f.name for f in dataclasses.fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            warnings.warn(
                f"fitwizard: unknown key '{section_name}.{key}' in engine config (ignored)",
                stacklevel=3,
            )
            continue
        kwargs[key] = _coerce(f"{section_name}.{key}", value, getattr(defaults, key))
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled engine.yaml, or None if not found."""
    ref = importlib.resources.files("fitwizard").joinpath("engine.yaml")
    if ref.is_file():
        with importlib.resources.as_file(ref) as p:
            return p
    candidate = Path(__file__).parent.parent.parent / "engine.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.fitwizard/engine.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".fitwizard" / "engine.yaml"
    return p if p.exists() else None


def load_model_config(extra_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge engine configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/fitwizard/engine.yaml
    2. User override at ~/.fitwizard/engine.yaml
    3. ``extra_path`` (e.g. a --config CLI option)

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    for path in (get_user_yaml_path(), extra_path):
        if path is not None:
            override = _load_yaml_file(path)
            if override:
                config = _deep_merge(config, override)

    return config


def progression_config_from_dict(config: dict[str, Any]) -> ProgressionConfig:
    """Build ProgressionConfig from the ``progression`` section of a config dict."""
    return _build(ProgressionConfig, config.get("progression") or {}, "progression")


def weekly_config_from_dict(config: dict[str, Any]) -> WeeklyConfig:
    """Build WeeklyConfig from the ``weekly`` section of a config dict."""
    return _build(WeeklyConfig, config.get("weekly") or {}, "weekly")


def load_progression_config(extra_path: Path | None = None) -> ProgressionConfig:
    """ProgressionConfig from the merged YAML sources."""
    return progression_config_from_dict(load_model_config(extra_path))


def load_weekly_config(extra_path: Path | None = None) -> WeeklyConfig:
    """WeeklyConfig from the merged YAML sources."""
    return weekly_config_from_dict(load_model_config(extra_path))
