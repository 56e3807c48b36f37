# blogops/core/deploy/pipeline.py

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from blogops.core.config import Settings
from blogops.core.errors import BlogOpsError, DeployError, DeployInProgressError
from blogops.core.git_ops import repo_manager as git
from blogops.core.observability.audit import audit_event, now_utc_iso
from blogops.core.observability.metrics import inc_named
from blogops.core.site.hugo import HugoRunner

log = logging.getLogger("blogops.deploy")

StepStatus = Literal["ok", "noop", "skipped", "failed"]

STEP_BUILD = "build"
STEP_PUBLISH_OUTPUT = "publish_output"
STEP_PUBLISH_SOURCE = "publish_source"
STEPS = (STEP_BUILD, STEP_PUBLISH_OUTPUT, STEP_PUBLISH_SOURCE)

_deploy_lock = threading.Lock()


class DeployStep(BaseModel):
    name: str
    status: StepStatus = "skipped"
    commit: Optional[str] = None
    pushed: bool = False
    detail: Optional[str] = None


class DeployReport(BaseModel):
    message: str
    started_at: str
    finished_at: Optional[str] = None
    push: bool = True
    steps: List[DeployStep] = Field(default_factory=lambda: [DeployStep(name=n) for n in STEPS])

    @property
    def ok(self) -> bool:
        return all(s.status != "failed" for s in self.steps)

    def step(self, name: str) -> DeployStep:
        for s in self.steps:
            if s.name == name:
                return s
        raise KeyError(name)


# ---------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------

def default_deploy_message(now: Optional[datetime] = None) -> str:
    """``rebuilding site <date>`` with the date rendered like the ``date`` command."""
    now = now or datetime.now().astimezone()
    return f"rebuilding site {now.strftime('%a %b %d %H:%M:%S %Z %Y')}"


def timestamp_message(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------

def commit_source(settings: Settings, message: Optional[str] = None) -> git.CommitResult:
    """Stage everything in the site root and commit it (no push)."""
    msg = message or timestamp_message()
    result = git.commit_all(settings.root, msg)
    audit_event(
        settings.audit_path,
        "commit",
        {"message": msg, "committed": result.committed, "commit": result.sha},
    )
    return result


def _publish(repo_path: Path, settings: Settings, message: str, push: bool, step: DeployStep) -> None:
    result = git.commit_all(repo_path, message)
    step.commit = result.sha
    step.status = "ok" if result.committed else "noop"
    if not result.committed:
        step.detail = "nothing to commit"

    # push even on a clean tree so earlier unpushed commits still go out
    if push and result.sha is not None:
        git.push(repo_path, settings.remote, settings.branch)
        step.pushed = True


def deploy(
    settings: Settings,
    message: Optional[str] = None,
    push: bool = True,
    runner: Optional[HugoRunner] = None,
) -> DeployReport:
    """
    Build the site, then commit and push the output directory, then commit
    and push the source tree. Stops at the first failing step and raises
    DeployError carrying the partial report.
    """
    msg = message or default_deploy_message()
    runner = runner or HugoRunner(settings)
    report = DeployReport(message=msg, started_at=now_utc_iso(), push=push)
    log.info("Deploying site %s: %s", settings.root, msg)

    failure: Optional[BlogOpsError] = None
    current = report.step(STEP_BUILD)
    try:
        build = runner.build()
        current.status = "ok"
        current.detail = f"{build.files} files in {build.output_dir}"

        current = report.step(STEP_PUBLISH_OUTPUT)
        out_dir = settings.output_path
        if not git.is_repo(out_dir):
            raise DeployError(
                f"output directory {out_dir} is not a git repository; "
                f"clone the publishing repo into it (or git init + add remote '{settings.remote}')"
            )
        _publish(out_dir, settings, msg, push, current)

        current = report.step(STEP_PUBLISH_SOURCE)
        _publish(settings.root, settings, msg, push, current)
    except BlogOpsError as exc:
        current.status = "failed"
        current.detail = str(exc)
        failure = exc
        log.error("Deploy step %s failed: %s", current.name, exc)

    report.finished_at = now_utc_iso()
    audit_event(settings.audit_path, "deploy", _audit_payload(report))
    inc_named("deploys_total")

    if failure is not None:
        inc_named("deploys_failed")
        raise DeployError(f"deploy failed at step '{current.name}': {failure}", report=report) from failure

    log.info("Deploy finished: %s", ", ".join(f"{s.name}={s.status}" for s in report.steps))
    return report


def deploy_exclusive(settings: Settings, **kwargs: Any) -> DeployReport:
    """deploy() guarded by a process-wide lock; a concurrent call is rejected, not queued."""
    if not _deploy_lock.acquire(blocking=False):
        raise DeployInProgressError("a deploy is already running")
    try:
        return deploy(settings, **kwargs)
    finally:
        _deploy_lock.release()


def _audit_payload(report: DeployReport) -> Dict[str, Any]:
    return {
        "message": report.message,
        "ok": report.ok,
        "push": report.push,
        "steps": [s.model_dump() for s in report.steps],
    }


# ---------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------

def _repo_status(repo_path: Path, settings: Settings) -> Dict[str, Any]:
    if not git.is_repo(repo_path):
        return {"path": str(repo_path), "is_repo": False}
    st = git.git_status(repo_path)
    st["path"] = str(repo_path)
    st["is_repo"] = True
    st["remote"] = settings.remote if git.remote_exists(repo_path, settings.remote) else None

    tracking = f"refs/remotes/{settings.remote}/{settings.branch}"
    st["ahead_behind"] = None
    if st["head"] and git.has_ref(repo_path, tracking):
        st["ahead_behind"] = git.ahead_behind(repo_path, "HEAD", tracking)
    return st


def site_status(settings: Settings) -> Dict[str, Any]:
    return {
        "source": _repo_status(settings.root, settings),
        "output": _repo_status(settings.output_path, settings),
    }
