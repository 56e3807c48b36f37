from .models import FrontMatter, Page
from .frontmatter import parse_front_matter, render_toml_front_matter, split_front_matter
from .repository import ContentRepository
from .lint import LintIssue, LintReport, lint_content
from .scaffold import new_page

__all__ = [
    "FrontMatter",
    "Page",
    "parse_front_matter",
    "render_toml_front_matter",
    "split_front_matter",
    "ContentRepository",
    "LintIssue",
    "LintReport",
    "lint_content",
    "new_page",
]
