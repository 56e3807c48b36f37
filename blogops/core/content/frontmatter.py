"""
Front matter split/parse/render.

Follows the site generator's rules: a TOML block fenced by ``+++`` lines or a
YAML block fenced by ``---`` lines, starting on the first line of the file.
"""
from __future__ import annotations

import tomllib
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError

from blogops.core.content.models import FrontMatter, FrontMatterFormat
from blogops.core.errors import FrontMatterError

_DELIMITERS: Dict[str, FrontMatterFormat] = {"+++": "toml", "---": "yaml"}


def split_front_matter(text: str, path: Optional[str] = None) -> Tuple[FrontMatterFormat, str, str]:
    """Return (format, raw front matter block, body)."""
    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines:
        raise FrontMatterError("file is empty", path)

    opener = lines[0].strip()
    fmt = _DELIMITERS.get(opener)
    if fmt is None:
        raise FrontMatterError("missing front matter (expected '+++' or '---' on the first line)", path)

    for i in range(1, len(lines)):
        if lines[i].strip() == opener:
            raw = "".join(lines[1:i])
            body = "".join(lines[i + 1:])
            return fmt, raw, body.lstrip("\n")

    raise FrontMatterError(f"front matter opened with '{opener}' is never closed", path)


def _load_block(fmt: FrontMatterFormat, raw: str, path: Optional[str]) -> Dict[str, Any]:
    if fmt == "toml":
        try:
            data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise FrontMatterError(f"invalid TOML front matter: {exc}", path) from exc
    else:
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise FrontMatterError(f"invalid YAML front matter: {exc}", path) from exc
        if data is None:
            data = {}

    if not isinstance(data, dict):
        raise FrontMatterError(f"front matter must be a mapping, got {type(data).__name__}", path)
    return data


def parse_front_matter(text: str, path: Optional[str] = None) -> Tuple[FrontMatter, str, FrontMatterFormat]:
    fmt, raw, body = split_front_matter(text, path)
    data = _load_block(fmt, raw, path)
    try:
        fm = FrontMatter.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "?" for err in exc.errors())
        raise FrontMatterError(f"invalid front matter fields: {fields}", path) from exc
    return fm, body, fmt


# ---------------------------------------------------------------------
# TOML rendering (flat tables only; that is all `new` writes)
# ---------------------------------------------------------------------

_TOML_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _toml_string(s: str) -> str:
    out = []
    for ch in s:
        if ch in _TOML_ESCAPES:
            out.append(_TOML_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _toml_value(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (int, float)):
        return repr(v)
    if isinstance(v, datetime):
        return v.isoformat()
    if isinstance(v, date):
        return v.isoformat()
    if isinstance(v, str):
        return _toml_string(v)
    if isinstance(v, (list, tuple)):
        return "[" + ", ".join(_toml_value(i) for i in v) + "]"
    raise TypeError(f"unsupported front matter value type: {type(v).__name__}")


def render_toml_front_matter(data: Mapping[str, Any]) -> str:
    lines = ["+++"]
    for key, value in data.items():
        if value is None:
            continue
        lines.append(f"{key} = {_toml_value(value)}")
    lines.append("+++")
    return "\n".join(lines) + "\n"
