import json
import os
import subprocess
import sys
from pathlib import Path

from blogops.cli import main


def test_list_json(site, capsys):
    assert main(["--site", str(site), "list", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert {p["slug"] for p in data} == {"rust-lifetimes", "entry-1"}


def test_new_then_lint(site, capsys):
    assert main(["--site", str(site), "new", "devlog", "week-2", "--tag", "devlog"]) == 0
    assert (site / "content" / "devlog" / "week-2.md").exists()
    assert main(["--site", str(site), "lint"]) == 0
    out = capsys.readouterr().out
    assert "[draft]" in out


def test_new_existing_page_fails(site, capsys):
    assert main(["--site", str(site), "new", "notes", "rust-lifetimes"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_lint_exit_code_on_errors(site):
    (site / "content" / "notes" / "bad.md").write_text("oops", encoding="utf-8")
    assert main(["--site", str(site), "lint", "--json"]) == 1


def test_deploy_with_message(site, fake_hugo, monkeypatch, capsys):
    monkeypatch.setenv("BLOGOPS_HUGO_BIN", str(fake_hugo))
    assert main(["--site", str(site), "deploy", "my message"]) == 0
    out = capsys.readouterr().out
    assert "publish_output" in out


def test_deploy_failure_exit_code(site, failing_hugo, monkeypatch, capsys):
    monkeypatch.setenv("BLOGOPS_HUGO_BIN", str(failing_hugo))
    assert main(["--site", str(site), "deploy"]) == 1
    assert "error: deploy failed at step 'build'" in capsys.readouterr().err


def test_commit_and_tags(site, capsys):
    (site / "content" / "notes" / "x.md").write_text('+++\ntitle = "X"\ntags = ["rust"]\n+++\n', encoding="utf-8")
    assert main(["--site", str(site), "commit"]) == 0
    assert main(["--site", str(site), "tags", "--json"]) == 0
    out = capsys.readouterr().out
    tags = json.loads(out[out.index("{"):])
    assert tags["rust"] == 2


def _run_deploy_script(site, fake_hugo, *args):
    root = Path(__file__).resolve().parents[1]
    env = {
        **os.environ,
        "PYTHON": sys.executable,
        "PYTHONPATH": str(root),
        "BLOGOPS_SITE_ROOT": str(site),
        "BLOGOPS_HUGO_BIN": str(fake_hugo),
    }
    return subprocess.run(["sh", str(root / "deploy.sh"), *args], cwd=str(site), env=env, capture_output=True, text=True)


def _last_subject(bare):
    return subprocess.run(
        ["git", "--git-dir", str(bare), "log", "-1", "--format=%s", "main"],
        check=True,
        capture_output=True,
        text=True,
    ).stdout.strip()


def test_deploy_script_uses_message_only_when_single_arg(site, fake_hugo, tmp_path):
    p = _run_deploy_script(site, fake_hugo, "a", "b")
    assert p.returncode == 0, p.stderr
    assert _last_subject(tmp_path / "pages.git").startswith("rebuilding site ")

    p = _run_deploy_script(site, fake_hugo, "fix typo")
    assert p.returncode == 0, p.stderr
    assert _last_subject(tmp_path / "pages.git") == "fix typo"
