from __future__ import annotations

from blogops.core.config import Settings, load_settings
from blogops.core.content import ContentRepository


def get_settings() -> Settings:
    # re-read per request so config edits apply without a restart;
    # a ConfigError is shaped into a 500 by SafeErrorMiddleware
    return load_settings()


def get_repository() -> ContentRepository:
    return ContentRepository(get_settings().content_path)
