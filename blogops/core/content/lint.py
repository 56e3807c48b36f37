from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Literal, Tuple

from pydantic import BaseModel, Field

from blogops.core.content.repository import ContentRepository

Severity = Literal["error", "warning", "info"]


class LintIssue(BaseModel):
    path: str
    code: str
    severity: Severity
    message: str


class LintReport(BaseModel):
    pages_checked: int = 0
    issues: List[LintIssue] = Field(default_factory=list)

    @property
    def errors(self) -> List[LintIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def counts(self) -> Dict[str, int]:
        out = {"error": 0, "warning": 0, "info": 0}
        for i in self.issues:
            out[i.severity] += 1
        return out


def lint_content(repo: ContentRepository) -> LintReport:
    pages, parse_errors = repo.scan()
    report = LintReport(pages_checked=len(pages) + len(parse_errors))

    for exc in parse_errors:
        report.issues.append(
            LintIssue(
                path=exc.path or "?",
                code="front_matter_invalid",
                severity="error",
                message=str(exc),
            )
        )

    weights: Dict[Tuple[str, int], List[str]] = defaultdict(list)
    for page in pages:
        fm = page.front_matter
        if page.is_section_index:
            continue
        if not fm.tags:
            report.issues.append(
                LintIssue(path=page.path, code="missing_tags", severity="warning", message="page has no tags")
            )
        if fm.draft:
            report.issues.append(
                LintIssue(path=page.path, code="draft", severity="info", message="draft; not published by deploy")
            )
        if fm.weight:
            weights[(page.section, fm.weight)].append(page.path)

    for (section, weight), paths in sorted(weights.items()):
        if len(paths) < 2:
            continue
        for p in paths:
            others = ", ".join(x for x in paths if x != p)
            report.issues.append(
                LintIssue(
                    path=p,
                    code="duplicate_weight",
                    severity="warning",
                    message=f"weight {weight} also used in section '{section}' by {others}",
                )
            )

    report.issues.sort(key=lambda i: (i.path, i.code))
    return report


def format_issue(issue: LintIssue) -> str:
    return f"{issue.severity.upper():7} {issue.path}: [{issue.code}] {issue.message}"
