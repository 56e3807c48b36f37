import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

# 10MB max per file, 5 backups
_MAX_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5

_handler_cache: Dict[str, logging.Handler] = {}

_log = logging.getLogger("blogops.audit")


def now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _ensure_audit_dir(audit_dir: Path) -> None:
    # a dir we create is ignored by the enclosing site repo
    if audit_dir.exists():
        return
    audit_dir.mkdir(parents=True)
    (audit_dir / ".gitignore").write_text("*\n", encoding="utf-8")


def _get_rotating_handler(audit_path: Path) -> logging.Handler:
    key = str(audit_path.resolve())
    if key not in _handler_cache:
        _ensure_audit_dir(audit_path.parent)
        h = logging.handlers.RotatingFileHandler(
            str(audit_path),
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
            encoding="utf-8",
        )
        h.setFormatter(logging.Formatter("%(message)s"))
        _handler_cache[key] = h
    return _handler_cache[key]


def audit_event(audit_path: Path, event: str, payload: Dict[str, Any]) -> None:
    """Append one JSON line ({"ts", "event", **payload}) to the audit log."""
    record: Dict[str, Any] = {"ts": now_utc_iso(), "event": event, **payload}
    line = json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str)

    handler = _get_rotating_handler(audit_path)
    log_record = logging.LogRecord(
        name="blogops.audit",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=line,
        args=(),
        exc_info=None,
    )
    handler.emit(log_record)
    handler.flush()


def read_audit(audit_path: Path, limit: int = 50) -> list[Dict[str, Any]]:
    if not audit_path.exists():
        return []
    rows = []
    for line in audit_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError as exc:
            _log.warning("Skipping unreadable audit line in %s: %s", audit_path, exc)
    return rows[-limit:] if limit else rows
