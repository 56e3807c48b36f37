"""
Site settings loader.

Resolution order (later wins):
    1. built-in defaults
    2. blogops.yaml / blogops.json in the site root, or BLOGOPS_CONFIG
    3. BLOGOPS_* environment variables

Config file format (YAML or JSON):
    content_dir: content
    output_dir: public
    hugo_bin: hugo
    remote: origin
    branch: main
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ValidationError

from blogops.core.errors import ConfigError

_log = logging.getLogger("blogops.config")

CONFIG_FILENAMES = ("blogops.yaml", "blogops.yml", "blogops.json")

_ENV_OVERRIDES = {
    "BLOGOPS_SITE_ROOT": "site_root",
    "BLOGOPS_CONTENT_DIR": "content_dir",
    "BLOGOPS_OUTPUT_DIR": "output_dir",
    "BLOGOPS_HUGO_BIN": "hugo_bin",
    "BLOGOPS_REMOTE": "remote",
    "BLOGOPS_BRANCH": "branch",
}


class Settings(BaseModel):
    site_root: Path = Path(".")
    content_dir: Path = Path("content")
    output_dir: Path = Path("public")
    hugo_bin: str = "hugo"
    remote: str = "origin"
    branch: str = "main"
    audit_log: Path = Path(".blogops") / "audit.log"
    serve_port: int = 1313
    serve_bind: str = "127.0.0.1"

    def _under_root(self, p: Path) -> Path:
        return p if p.is_absolute() else self.root / p

    @property
    def root(self) -> Path:
        return self.site_root.resolve()

    @property
    def content_path(self) -> Path:
        return self._under_root(self.content_dir)

    @property
    def output_path(self) -> Path:
        return self._under_root(self.output_dir)

    @property
    def audit_path(self) -> Path:
        return self._under_root(self.audit_log)


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"config file {path} is neither valid JSON nor YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must be a mapping, got {type(data).__name__}")
    return data


def _find_config_file(site_root: Path, env: Mapping[str, str]) -> Optional[Path]:
    explicit = (env.get("BLOGOPS_CONFIG") or "").strip()
    if explicit:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(f"BLOGOPS_CONFIG points to a missing file: {p}")
        return p
    for name in CONFIG_FILENAMES:
        p = site_root / name
        if p.exists():
            return p
    return None


def load_settings(
    site_root: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> Settings:
    env = os.environ if env is None else env

    root = Path(site_root) if site_root is not None else Path(env.get("BLOGOPS_SITE_ROOT") or ".")
    values: Dict[str, Any] = {}

    cfg_path = _find_config_file(root, env)
    if cfg_path is not None:
        values.update(_read_config_file(cfg_path))
        _log.debug("Loaded settings from %s", cfg_path)

    for env_key, field in _ENV_OVERRIDES.items():
        v = (env.get(env_key) or "").strip()
        if v:
            values[field] = v

    values.update({k: v for k, v in overrides.items() if v is not None})
    # an explicit site_root argument beats both the file and the environment
    values["site_root"] = root if site_root is not None else values.get("site_root", root)

    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings: {exc}") from exc
