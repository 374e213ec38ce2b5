from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any, Optional

# Field order in audit lines; unknown fields follow in the order given
AUDIT_FIELDS = ("scenario", "status", "cost", "limit_mode", "shifts", "details")


def _writable_path(log_path: Path) -> Path:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return log_path
    except PermissionError:
        fallback_dir = Path(tempfile.gettempdir()) / "staffing_logs"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        return fallback_dir / log_path.name


def get_audit_logger(log_path: Path, name: str = "staffing.audit") -> logging.Logger:
    """Logger appending the optimisation run trail to *log_path*.

    One file handler per path; repeat calls return the same logger untouched.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    target = _writable_path(Path(log_path)).absolute()
    if any(isinstance(h, logging.FileHandler) and Path(h.baseFilename) == target for h in logger.handlers):
        return logger

    fh = logging.FileHandler(target, encoding="utf-8")
    fh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(fh)
    return logger


def _render(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(getattr(value, "value", value))


def format_audit(action: str, **fields: Any) -> str:
    """``action=solve | scenario=Standard | status=Optimal | cost=4850.00 ...``; None fields are omitted."""
    keys = [k for k in AUDIT_FIELDS if k in fields] + [k for k in fields if k not in AUDIT_FIELDS]
    parts = [f"action={action}"]
    parts += [f"{k}={_render(fields[k])}" for k in keys if fields[k] is not None]
    return " | ".join(parts)


def audit(logger: logging.Logger, action: str, *, level: int = logging.INFO, **fields: Any) -> None:
    logger.log(level, format_audit(action, **fields))


def audit_failure(logger: logging.Logger, action: str, error: Exception, **fields: Optional[Any]) -> None:
    fields.setdefault("status", getattr(error, "status", type(error).__name__))
    audit(logger, action, level=logging.WARNING, **fields)
