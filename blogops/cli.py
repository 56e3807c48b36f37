"""blogops command line: serve, build, commit, deploy and content helpers."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from blogops.core.config import Settings, load_settings
from blogops.core.content import ContentRepository, lint_content, new_page
from blogops.core.content.lint import format_issue
from blogops.core.deploy.pipeline import commit_source, deploy, site_status
from blogops.core.errors import BlogOpsError, DeployError
from blogops.core.logging_config import setup_logging
from blogops.core.site.hugo import HugoRunner


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def cmd_serve(settings: Settings, args: argparse.Namespace) -> int:
    return HugoRunner(settings).serve(drafts=not args.no_drafts, port=args.port, bind=args.bind)


def cmd_build(settings: Settings, args: argparse.Namespace) -> int:
    result = HugoRunner(settings).build(drafts=args.drafts, minify=args.minify)
    print(f"built {result.files} files into {result.output_dir} ({result.duration_seconds:.2f}s)")
    return 0


def cmd_commit(settings: Settings, args: argparse.Namespace) -> int:
    result = commit_source(settings, message=args.message)
    if result.committed:
        print(f"[{result.sha[:12]}] {result.message}")
    else:
        print("nothing to commit")
    return 0


def cmd_deploy(settings: Settings, args: argparse.Namespace) -> int:
    print("Deploying updates to GitHub...")
    try:
        report = deploy(settings, message=args.message, push=not args.no_push)
    except DeployError as exc:
        if exc.report is not None:
            for step in exc.report.steps:
                print(f"  {step.name:15} {step.status:8} {step.detail or ''}".rstrip())
        raise
    for step in report.steps:
        sha = (step.commit or "")[:12]
        print(f"  {step.name:15} {step.status:8} {sha}".rstrip())
    return 0


def cmd_new(settings: Settings, args: argparse.Namespace) -> int:
    path = new_page(
        settings.content_path,
        args.section,
        args.slug,
        title=args.title,
        page_type=args.type,
        tags=args.tag,
        weight=args.weight,
        draft=not args.publish,
    )
    print(path)
    return 0


def cmd_list(settings: Settings, args: argparse.Namespace) -> int:
    repo = ContentRepository(settings.content_path)
    pages = repo.pages(section=args.section, tag=args.tag, include_drafts=not args.no_drafts)
    if args.json:
        _print_json([p.summary() for p in pages])
        return 0
    for p in pages:
        flag = " (draft)" if p.draft else ""
        print(f"{p.section or '-':12} {p.slug:32} {p.title}{flag}")
    return 0


def _print_counts(counts, as_json: bool) -> None:
    if as_json:
        _print_json(counts)
        return
    for name, n in counts.items():
        print(f"{n:4}  {name or '(root)'}")


def cmd_tags(settings: Settings, args: argparse.Namespace) -> int:
    _print_counts(ContentRepository(settings.content_path).tags(), args.json)
    return 0


def cmd_sections(settings: Settings, args: argparse.Namespace) -> int:
    _print_counts(ContentRepository(settings.content_path).sections(), args.json)
    return 0


def cmd_lint(settings: Settings, args: argparse.Namespace) -> int:
    report = lint_content(ContentRepository(settings.content_path))
    if args.json:
        _print_json({"ok": report.ok, "counts": report.counts(), **report.model_dump()})
    else:
        for issue in report.issues:
            print(format_issue(issue))
        c = report.counts()
        print(f"{report.pages_checked} pages: {c['error']} errors, {c['warning']} warnings")
    return 0 if report.ok else 1


def cmd_status(settings: Settings, args: argparse.Namespace) -> int:
    _print_json(site_status(settings))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blogops", description="Build and publish the blog.")
    parser.add_argument("--site", type=Path, default=None, help="site root (default: cwd or BLOGOPS_SITE_ROOT)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="run the hugo dev server (drafts included)")
    p.add_argument("--no-drafts", action="store_true")
    p.add_argument("--port", type=int, default=None)
    p.add_argument("--bind", default=None)
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("build", help="build the site into the output dir")
    p.add_argument("--drafts", action="store_true")
    p.add_argument("--minify", action="store_true")
    p.set_defaults(func=cmd_build)

    p = sub.add_parser("commit", help="git add + commit with a timestamp message")
    p.add_argument("-m", "--message", default=None)
    p.set_defaults(func=cmd_commit)

    p = sub.add_parser("deploy", help="build, then commit and push output and source")
    p.add_argument("message", nargs="?", default=None)
    p.add_argument("--no-push", action="store_true")
    p.set_defaults(func=cmd_deploy)

    p = sub.add_parser("new", help="create a new page with TOML front matter")
    p.add_argument("section")
    p.add_argument("slug")
    p.add_argument("--title", default=None)
    p.add_argument("--type", default=None)
    p.add_argument("--tag", action="append", default=None)
    p.add_argument("--weight", type=int, default=None)
    p.add_argument("--publish", action="store_true", help="create with draft = false")
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("list", help="list pages")
    p.add_argument("--section", default=None)
    p.add_argument("--tag", default=None)
    p.add_argument("--no-drafts", action="store_true")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_list)

    for name, func in (("tags", cmd_tags), ("sections", cmd_sections), ("lint", cmd_lint)):
        p = sub.add_parser(name)
        p.add_argument("--json", action="store_true")
        p.set_defaults(func=func)

    p = sub.add_parser("status", help="git status of source and output repos")
    p.set_defaults(func=cmd_status)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        settings = load_settings(site_root=args.site)
        return args.func(settings, args)
    except (BlogOpsError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
