import os
import stat
import subprocess
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blogops.api.main import app
from blogops.core.config import load_settings

FAKE_HUGO = """#!/bin/sh
if [ "$1" = "version" ]; then
  echo "hugo v0.125.0+extended linux/amd64"
  exit 0
fi
if [ "$1" = "serve" ]; then
  echo "serve $*"
  exit 0
fi
dest=public
while [ $# -gt 0 ]; do
  if [ "$1" = "--destination" ]; then dest="$2"; fi
  shift
done
mkdir -p "$dest"
echo "<html>$(date +%s%N)</html>" > "$dest/index.html"
"""

FAILING_HUGO = """#!/bin/sh
echo "Error: template for page not found" >&2
exit 2
"""

POST_TOML = """+++
title = "Learning Rust lifetimes"
date = 2024-03-01T10:00:00Z
tags = ["rust", "notes"]
weight = 2
+++

Body of the note.
"""

POST_DEVLOG = """+++
title = "Trading engine dev-log #1"
type = "devlog"
date = 2024-04-10
tags = ["devlog", "fastapi"]
+++

First entry.
"""


@pytest.fixture(scope="session", autouse=True)
def _git_identity():
    os.environ.setdefault("GIT_AUTHOR_NAME", "Test Author")
    os.environ.setdefault("GIT_AUTHOR_EMAIL", "author@example.com")
    os.environ.setdefault("GIT_COMMITTER_NAME", "Test Author")
    os.environ.setdefault("GIT_COMMITTER_EMAIL", "author@example.com")


@pytest.fixture(autouse=True)
def _clean_blogops_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("BLOGOPS_"):
            monkeypatch.delenv(key, raising=False)


def git(repo: Path, *args: str) -> str:
    p = subprocess.run(["git", *args], cwd=str(repo), check=True, capture_output=True, text=True)
    return p.stdout.strip()


def _init_repo(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")


def _bare(path: Path) -> Path:
    subprocess.run(["git", "init", "--bare", str(path)], check=True, capture_output=True)
    return path


def _script(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IEXEC | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture()
def fake_hugo(tmp_path: Path) -> Path:
    return _script(tmp_path / "fake-hugo", FAKE_HUGO)


@pytest.fixture()
def failing_hugo(tmp_path: Path) -> Path:
    return _script(tmp_path / "failing-hugo", FAILING_HUGO)


@pytest.fixture()
def content_dir(tmp_path: Path) -> Path:
    content = tmp_path / "site" / "content"
    (content / "notes").mkdir(parents=True)
    (content / "devlog").mkdir(parents=True)
    (content / "notes" / "rust-lifetimes.md").write_text(POST_TOML, encoding="utf-8")
    (content / "devlog" / "entry-1.md").write_text(POST_DEVLOG, encoding="utf-8")
    (content / "notes" / "_index.md").write_text('+++\ntitle = "Notes"\n+++\n', encoding="utf-8")
    return content


@pytest.fixture()
def site(tmp_path: Path, content_dir: Path) -> Path:
    """
    A committed Hugo site repo whose output dir (public/) is its own repo.
    Both push to local bare remotes named 'origin'.
    """
    root = content_dir.parent
    (root / "hugo.toml").write_text('title = "blog"\n', encoding="utf-8")
    (root / ".gitignore").write_text("public/\n.blogops/\n", encoding="utf-8")
    _init_repo(root)
    git(root, "remote", "add", "origin", str(_bare(tmp_path / "source.git")))
    git(root, "add", "-A")
    git(root, "commit", "-m", "init")

    public = root / "public"
    _init_repo(public)
    git(public, "remote", "add", "origin", str(_bare(tmp_path / "pages.git")))
    return root


@pytest.fixture()
def settings(site: Path, fake_hugo: Path):
    return load_settings(site_root=site, hugo_bin=str(fake_hugo))


@pytest.fixture()
def client(site: Path, fake_hugo: Path, monkeypatch):
    monkeypatch.setenv("BLOGOPS_SITE_ROOT", str(site))
    monkeypatch.setenv("BLOGOPS_HUGO_BIN", str(fake_hugo))
    return TestClient(app)
