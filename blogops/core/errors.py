from __future__ import annotations

from typing import Any, Optional, Sequence


class BlogOpsError(Exception):
    """Base class for every error raised by blogops."""


class ConfigError(BlogOpsError):
    pass


class FrontMatterError(BlogOpsError):
    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ContentExistsError(BlogOpsError):
    pass


class SiteBuildError(BlogOpsError):
    pass


class GitCommandError(BlogOpsError):
    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        self.git_args = list(args)
        self.returncode = returncode
        self.stderr = stderr
        cmd = " ".join(["git", *self.git_args])
        super().__init__(f"{cmd} failed (rc={returncode}): {stderr}".rstrip(": "))


class DeployError(BlogOpsError):
    """Raised after a deploy stopped at a failing step; carries the partial report."""

    def __init__(self, message: str, report: Any = None):
        self.report = report
        super().__init__(message)


class DeployInProgressError(BlogOpsError):
    pass
