import pytest

from blogops.core.config import load_settings
from blogops.core.errors import SiteBuildError
from blogops.core.site.hugo import HugoRunner


def test_build_produces_output(settings):
    result = HugoRunner(settings).build(drafts=True, minify=True)
    assert result.returncode == 0
    assert result.files == 1
    assert (settings.output_path / "index.html").exists()
    assert "--buildDrafts" in result.command
    assert "--minify" in result.command


def test_build_failure_includes_stderr(site, failing_hugo):
    s = load_settings(site_root=site, hugo_bin=str(failing_hugo))
    with pytest.raises(SiteBuildError, match="template for page not found"):
        HugoRunner(s).build()


def test_empty_output_is_a_failure(site, tmp_path):
    noop = tmp_path / "noop-hugo"
    noop.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    noop.chmod(0o755)
    s = load_settings(site_root=site, hugo_bin=str(noop))
    with pytest.raises(SiteBuildError, match="empty"):
        HugoRunner(s).build()


def test_missing_binary(site):
    s = load_settings(site_root=site, hugo_bin="definitely-not-hugo-xyz")
    with pytest.raises(SiteBuildError, match="not found"):
        HugoRunner(s).version()


def test_version_and_serve(settings):
    runner = HugoRunner(settings)
    assert runner.version().startswith("hugo v")
    cmd = runner.serve_command(drafts=True, port=4000)
    assert cmd[1:] == ["serve", "-D", "--port", "4000", "--bind", "127.0.0.1"]
    assert runner.serve() == 0
