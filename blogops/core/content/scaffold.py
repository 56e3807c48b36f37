from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from blogops.core.content.frontmatter import render_toml_front_matter
from blogops.core.errors import ContentExistsError

log = logging.getLogger("blogops.content")

_SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_SECTION_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def _title_from_slug(slug: str) -> str:
    return " ".join(w.capitalize() for w in re.split(r"[-_]+", slug) if w)


def new_page(
    content_dir: Path,
    section: str,
    slug: str,
    title: Optional[str] = None,
    page_type: Optional[str] = None,
    tags: Optional[List[str]] = None,
    weight: Optional[int] = None,
    draft: bool = True,
    now: Optional[datetime] = None,
) -> Path:
    """Create ``<section>/<slug>.md`` with a TOML front matter block, like ``hugo new``."""
    if slug.endswith(".md"):
        slug = slug[:-3]
    if not _SLUG_RE.match(slug) or ".." in slug:
        raise ValueError(f"invalid slug: {slug!r}")
    if not _SECTION_RE.match(section):
        raise ValueError(f"invalid section: {section!r}")

    target = Path(content_dir) / section / f"{slug}.md"
    if target.exists():
        raise ContentExistsError(f"{target} already exists")

    now = now or datetime.now().astimezone().replace(microsecond=0)
    data: Dict[str, Any] = {
        "title": title or _title_from_slug(slug),
        "date": now,
        "draft": draft,
        "type": page_type,
        "tags": list(tags) if tags else None,
        "weight": weight,
    }

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_toml_front_matter(data) + "\n", encoding="utf-8")
    log.info("Created %s", target)
    return target
