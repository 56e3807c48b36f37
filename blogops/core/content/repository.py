from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from blogops.core.content.frontmatter import parse_front_matter
from blogops.core.content.models import Page
from blogops.core.errors import FrontMatterError

log = logging.getLogger("blogops.content")


class ContentRepository:
    """Read-only view over a Hugo ``content/`` directory."""

    def __init__(self, content_dir: Path):
        self.content_dir = Path(content_dir)

    def exists(self) -> bool:
        return self.content_dir.is_dir()

    def markdown_files(self) -> List[Path]:
        if not self.exists():
            return []
        return sorted(p for p in self.content_dir.rglob("*.md") if p.is_file())

    def _rel(self, path: Path) -> str:
        return path.relative_to(self.content_dir).as_posix()

    def load_page(self, rel_path: str) -> Page:
        p = self.content_dir / rel_path
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as exc:
            raise FrontMatterError(f"cannot read file: {exc}", rel_path) from exc
        except UnicodeDecodeError as exc:
            raise FrontMatterError(f"not valid UTF-8: {exc}", rel_path) from exc
        fm, body, fmt = parse_front_matter(text, rel_path)
        return Page(path=self._rel(p), front_matter=fm, body=body, format=fmt)

    def scan(self) -> Tuple[List[Page], List[FrontMatterError]]:
        """Parse every page; return the good ones and the parse errors."""
        pages: List[Page] = []
        errors: List[FrontMatterError] = []
        for p in self.markdown_files():
            try:
                pages.append(self.load_page(self._rel(p)))
            except FrontMatterError as exc:
                errors.append(exc)
        return pages, errors

    def iter_pages(self, include_drafts: bool = True) -> Iterator[Page]:
        pages, errors = self.scan()
        for exc in errors:
            log.warning("Skipping unreadable page %s", exc)
        for page in pages:
            if page.draft and not include_drafts:
                continue
            yield page

    def pages(
        self,
        section: Optional[str] = None,
        tag: Optional[str] = None,
        include_drafts: bool = True,
    ) -> List[Page]:
        out = []
        for page in self.iter_pages(include_drafts=include_drafts):
            if page.is_section_index:
                continue
            if section is not None and page.section != section:
                continue
            if tag is not None and tag not in page.front_matter.tags:
                continue
            out.append(page)
        return sorted(out, key=lambda pg: pg.sort_key())

    def sections(self, include_drafts: bool = True) -> Dict[str, int]:
        counts = Counter(p.section for p in self.pages(include_drafts=include_drafts))
        return dict(sorted(counts.items()))

    def tags(self, include_drafts: bool = True) -> Dict[str, int]:
        counts: Counter = Counter()
        for page in self.pages(include_drafts=include_drafts):
            counts.update(page.front_matter.tags)
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

    def find(self, section: str, slug: str) -> Optional[Page]:
        for page in self.pages(section=section):
            if page.slug == slug:
                return page
        return None
