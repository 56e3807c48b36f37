# blogops/core/git_ops/repo_manager.py

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from blogops.core.errors import GitCommandError

log = logging.getLogger("blogops.git")


# ---------------------------------------------------------------------
# Core git runner (no pager, captured output, strict semantics)
# ---------------------------------------------------------------------

def _run_git(repo_path: Path, args: List[str]) -> Tuple[int, str, str]:
    try:
        p = subprocess.run(
            ["git", "--no-pager", *args],
            cwd=str(repo_path),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env={**os.environ, "GIT_PAGER": "cat", "PAGER": "cat"},
        )
    except FileNotFoundError as exc:
        raise GitCommandError(args, 127, f"cannot run git in {repo_path}: {exc}") from exc
    return p.returncode, (p.stdout or "").strip(), (p.stderr or "").strip()


def _git_ok(repo_path: Path, args: List[str]) -> str:
    rc, out, err = _run_git(repo_path, args)
    if rc != 0:
        raise GitCommandError(args, rc, err or out)
    return out


@dataclass(frozen=True)
class CommitResult:
    committed: bool
    sha: Optional[str]
    message: str


def is_repo(repo_path: Path) -> bool:
    if not repo_path.is_dir():
        return False
    rc, out, _ = _run_git(repo_path, ["rev-parse", "--show-toplevel"])
    if rc != 0:
        return False
    return Path(out).resolve() == repo_path.resolve()


def ensure_repo(repo_path: Path, branch: str = "main") -> None:
    repo_path.mkdir(parents=True, exist_ok=True)
    if (repo_path / ".git").exists():
        return
    _git_ok(repo_path, ["init"])
    # unborn branch name, independent of init.defaultBranch
    _git_ok(repo_path, ["symbolic-ref", "HEAD", f"refs/heads/{branch}"])


# ---------------------------------------------------------------------
# Basic state
# ---------------------------------------------------------------------

def current_branch(repo_path: Path) -> str:
    rc, out, _ = _run_git(repo_path, ["symbolic-ref", "--short", "HEAD"])
    if rc != 0:
        return "(detached)"
    return out


def has_ref(repo_path: Path, ref: str) -> bool:
    rc, _, _ = _run_git(repo_path, ["rev-parse", "--verify", "--quiet", ref])
    return rc == 0


def has_commits(repo_path: Path) -> bool:
    return has_ref(repo_path, "HEAD")


def git_status(repo_path: Path) -> Dict[str, Any]:
    status = _git_ok(repo_path, ["status", "--porcelain"])
    return {
        "branch": current_branch(repo_path),
        "head": get_ref(repo_path, "HEAD") if has_commits(repo_path) else None,
        "dirty": bool(status),
        "porcelain": status.splitlines() if status else [],
    }


def is_dirty(repo_path: Path) -> bool:
    return git_status(repo_path)["dirty"]


def get_ref(repo_path: Path, ref: str) -> str:
    return _git_ok(repo_path, ["rev-parse", ref])


def commit_all(repo_path: Path, message: str) -> CommitResult:
    """
    git add -A && git commit -m <message>.

    A clean tree is not an error: returns committed=False with the current HEAD
    (None on an unborn branch).
    """
    _git_ok(repo_path, ["add", "-A"])

    rc, _, _ = _run_git(repo_path, ["diff", "--cached", "--quiet"])
    if rc == 0:
        head = get_ref(repo_path, "HEAD") if has_commits(repo_path) else None
        log.info("Nothing to commit in %s", repo_path)
        return CommitResult(committed=False, sha=head, message=message)

    _git_ok(repo_path, ["commit", "-m", message])
    sha = get_ref(repo_path, "HEAD")
    log.info("Committed %s in %s: %s", sha[:12], repo_path, message)
    return CommitResult(committed=True, sha=sha, message=message)


# ---------------------------------------------------------------------
# Remotes
# ---------------------------------------------------------------------

def remote_exists(repo_path: Path, remote_name: str) -> bool:
    out = _git_ok(repo_path, ["remote"])
    return remote_name in (out.splitlines() if out else [])


def push(repo_path: Path, remote_name: str, branch: str) -> str:
    if not remote_exists(repo_path, remote_name):
        raise GitCommandError(["push", remote_name, branch], 128, f"remote '{remote_name}' is not configured")
    rc, out, err = _run_git(repo_path, ["push", remote_name, branch])
    if rc != 0:
        raise GitCommandError(["push", remote_name, branch], rc, err or out)
    log.info("Pushed %s to %s/%s", repo_path, remote_name, branch)
    # git push reports progress on stderr
    return err or out


def ahead_behind(repo_path: Path, left_ref: str, right_ref: str) -> Dict[str, int]:
    out = _git_ok(repo_path, ["rev-list", "--left-right", "--count", f"{left_ref}...{right_ref}"])
    parts = out.replace("\t", " ").split()
    return {
        "ahead": int(parts[0]) if len(parts) > 0 else 0,
        "behind": int(parts[1]) if len(parts) > 1 else 0,
    }

