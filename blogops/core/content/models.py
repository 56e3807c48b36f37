from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from pathlib import PurePosixPath
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

FrontMatterFormat = Literal["toml", "yaml"]


class FrontMatter(BaseModel):
    """
    Page metadata as the site generator reads it.

    Only the keys the blog relies on are typed; anything else (aliases, cover
    images, theme params) is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    title: str
    type: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    series: List[str] = Field(default_factory=list)
    weight: Optional[int] = None
    date: Optional[datetime] = None
    lastmod: Optional[datetime] = None
    draft: bool = False
    description: Optional[str] = None
    slug: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("tags", "categories", "series", mode="before")
    @classmethod
    def _as_unique_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            seen: Dict[str, None] = {}
            for item in v:
                s = str(item).strip()
                if s:
                    seen.setdefault(s, None)
            return list(seen)
        return v

    @field_validator("date", "lastmod", mode="before")
    @classmethod
    def _date_as_datetime(cls, v: Any) -> Any:
        # TOML/YAML local dates come through as datetime.date
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v


@dataclass
class Page:
    path: str  # posix path relative to the content dir
    front_matter: FrontMatter
    body: str
    format: FrontMatterFormat = "toml"

    @property
    def title(self) -> str:
        return self.front_matter.title

    @property
    def section(self) -> str:
        parts = PurePosixPath(self.path).parts
        return parts[0] if len(parts) > 1 else ""

    @property
    def is_section_index(self) -> bool:
        return PurePosixPath(self.path).name == "_index.md"

    @property
    def slug(self) -> str:
        if self.front_matter.slug:
            return self.front_matter.slug
        p = PurePosixPath(self.path)
        if p.name == "index.md" and len(p.parts) > 1:
            return p.parent.name  # leaf bundle
        return p.stem

    @property
    def draft(self) -> bool:
        return self.front_matter.draft

    def sort_key(self):
        """Weight (weighted pages first), then date (newest first), then title."""
        weight = self.front_matter.weight or 0
        d = self.front_matter.date
        if d is None:
            ts = 0.0
        elif d.tzinfo is None:
            ts = d.replace(tzinfo=timezone.utc).timestamp()
        else:
            ts = d.timestamp()
        return (weight == 0, weight, -ts, self.title.lower())

    def summary(self) -> Dict[str, Any]:
        fm = self.front_matter
        return {
            "path": self.path,
            "section": self.section,
            "slug": self.slug,
            "title": fm.title,
            "type": fm.type,
            "tags": list(fm.tags),
            "weight": fm.weight,
            "date": fm.date.isoformat() if fm.date else None,
            "draft": fm.draft,
            "description": fm.description,
        }
