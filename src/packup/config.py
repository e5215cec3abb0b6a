"""Configuration management for packup."""

import os
from pathlib import Path
from typing import Any

import yaml

from .collect.exclude import normalize_patterns
from .errors import ConfigError
from .export.sinks import normalize_output_name
from .models import Settings

MAX_DEPTH_LIMIT = 10

DEFAULT_CONFIG = {
    "vault_path": ".",
    "max_depth": 3,
    "exclude_paths": ["packup-output.md"],
    "output_file": "packup-output.md",
    "include_backlinks": True,
}

SETTING_KEYS = ("max_depth", "exclude_paths", "output_file", "include_backlinks")


def _find_config_file() -> Path | None:
    """Look for a config file in standard locations."""
    candidates = [
        Path.cwd() / "packup.yaml",
        Path.cwd() / "config" / "packup.yaml",
        Path.home() / ".packup" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = _copy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            try:
                file_cfg = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid config file {path}: {e}") from e
        if not isinstance(file_cfg, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")
        _deep_merge(cfg, file_cfg)
        cfg["config_file"] = str(path)

    # Env overrides
    if vault := os.environ.get("PACKUP_VAULT_PATH"):
        cfg["vault_path"] = vault

    cfg["vault_path"] = str(Path(cfg["vault_path"]).expanduser().resolve())
    return cfg


def save_config(config: dict[str, Any], config_path: str | Path) -> Path:
    """Persist vault path and settings to ``config_path``."""
    path = Path(config_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {"vault_path": config.get("vault_path", DEFAULT_CONFIG["vault_path"])}
    for key in SETTING_KEYS:
        data[key] = config.get(key, DEFAULT_CONFIG[key])
    path.write_text(yaml.dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False))
    return path


def load_settings(config: dict[str, Any]) -> Settings:
    """Validate the settings part of a config dict."""
    max_depth = config.get("max_depth", DEFAULT_CONFIG["max_depth"])
    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        raise ConfigError(f"max_depth must be an integer, got {max_depth!r}")
    if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
        raise ConfigError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {max_depth}")

    exclude_paths = config.get("exclude_paths") or []
    if isinstance(exclude_paths, str):
        exclude_paths = exclude_paths.splitlines()
    if not isinstance(exclude_paths, list):
        raise ConfigError("exclude_paths must be a list of paths")

    output_file = config.get("output_file") or DEFAULT_CONFIG["output_file"]
    include_backlinks = config.get("include_backlinks", DEFAULT_CONFIG["include_backlinks"])
    if not isinstance(include_backlinks, bool):
        raise ConfigError(f"include_backlinks must be true or false, got {include_backlinks!r}")

    return Settings(
        max_depth=max_depth,
        exclude_paths=normalize_patterns(str(p) for p in exclude_paths),
        output_file=normalize_output_name(str(output_file)),
        include_backlinks=include_backlinks,
    )


def parse_setting(key: str, value: str) -> Any:
    """Convert a command-line value to the type a setting expects."""
    if key not in SETTING_KEYS and key != "vault_path":
        raise ConfigError(f"Unknown setting: {key}")
    if key == "max_depth":
        try:
            return int(value)
        except ValueError:
            raise ConfigError(f"max_depth must be an integer, got {value!r}") from None
    if key == "include_backlinks":
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ConfigError(f"include_backlinks must be true or false, got {value!r}")
    if key == "exclude_paths":
        return normalize_patterns(value.replace(",", "\n").splitlines())
    if key == "output_file":
        return normalize_output_name(value)
    return value


def _copy(cfg: dict[str, Any]) -> dict[str, Any]:
    return {k: list(v) if isinstance(v, list) else v for k, v in cfg.items()}


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
