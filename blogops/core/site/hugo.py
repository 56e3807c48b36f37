from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from blogops.core.config import Settings
from blogops.core.errors import SiteBuildError

log = logging.getLogger("blogops.hugo")


class BuildResult(BaseModel):
    command: List[str]
    returncode: int
    output_dir: str
    files: int
    duration_seconds: float
    stdout: str = ""


def _count_files(root: Path) -> int:
    if not root.is_dir():
        return 0
    # the output dir is usually its own git checkout
    return sum(1 for p in root.rglob("*") if p.is_file() and ".git" not in p.relative_to(root).parts)


class HugoRunner:
    """Invokes the external ``hugo`` binary for the configured site."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _binary(self) -> str:
        hugo = self.settings.hugo_bin
        resolved = shutil.which(hugo)
        if resolved is None:
            raise SiteBuildError(f"hugo executable not found: {hugo!r} (set hugo_bin or BLOGOPS_HUGO_BIN)")
        return resolved

    def version(self) -> str:
        p = subprocess.run(
            [self._binary(), "version"],
            cwd=str(self.settings.root),
            capture_output=True,
            text=True,
        )
        if p.returncode != 0:
            raise SiteBuildError(f"hugo version failed: {(p.stderr or p.stdout).strip()}")
        return p.stdout.strip()

    def build_command(self, drafts: bool = False, minify: bool = False) -> List[str]:
        cmd = [
            self._binary(),
            "--source",
            str(self.settings.root),
            "--destination",
            str(self.settings.output_path),
        ]
        if drafts:
            cmd.append("--buildDrafts")
        if minify:
            cmd.append("--minify")
        return cmd

    def build(self, drafts: bool = False, minify: bool = False) -> BuildResult:
        cmd = self.build_command(drafts=drafts, minify=minify)
        out_dir = self.settings.output_path
        log.info("Building site: %s", " ".join(cmd))

        start = time.perf_counter()
        p = subprocess.run(
            cmd,
            cwd=str(self.settings.root),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        duration = round(time.perf_counter() - start, 6)

        if p.returncode != 0:
            detail = (p.stderr or p.stdout or "").strip()
            raise SiteBuildError(f"hugo exited with {p.returncode}: {detail}")

        files = _count_files(out_dir)
        if files == 0:
            raise SiteBuildError(f"hugo reported success but {out_dir} is empty")

        log.info("Built %d files into %s in %.2fs", files, out_dir, duration)
        return BuildResult(
            command=cmd,
            returncode=p.returncode,
            output_dir=str(out_dir),
            files=files,
            duration_seconds=duration,
            stdout=(p.stdout or "").strip(),
        )

    def serve_command(self, drafts: bool = True, port: Optional[int] = None, bind: Optional[str] = None) -> List[str]:
        cmd = [self._binary(), "serve"]
        if drafts:
            cmd.append("-D")
        cmd += ["--port", str(port or self.settings.serve_port)]
        cmd += ["--bind", bind or self.settings.serve_bind]
        return cmd

    def serve(self, drafts: bool = True, port: Optional[int] = None, bind: Optional[str] = None) -> int:
        """Run the dev server in the foreground until it exits or is interrupted."""
        cmd = self.serve_command(drafts=drafts, port=port, bind=bind)
        log.info("Starting dev server: %s", " ".join(cmd))
        try:
            return subprocess.run(cmd, cwd=str(self.settings.root)).returncode
        except KeyboardInterrupt:
            return 0
