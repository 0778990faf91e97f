"""
signed_ops.logging
------------------

Structured logging for the signing paths.

Library modules only ever call `get_logger(__name__)` and log at DEBUG
(digests computed, signer dispatch) or WARNING (rejections, network
mismatches). Handlers are installed by applications, or by the CLI when
`--log-level` is given, through `configure()`.

Context fields live in a `contextvars.ContextVar`, so concurrent signing
coroutines each see their own `signer` / `method`:

    from signed_ops import logging as slog

    slog.configure(json=True, level="DEBUG")
    with slog.signing_scope(signer="0xabc...", method="eth_sign"):
        ...  # every record carries signer= and method=

Environment
-----------
SIGNED_OPS_LOG_FORMAT = json | text   (default: text on a TTY, json otherwise)
SIGNED_OPS_LOG_LEVEL  = DEBUG | INFO | WARNING | ...   (default: INFO)
"""

from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterator, Optional, TextIO, Union

PACKAGE_LOGGER = "signed_ops"

_FIELDS: ContextVar[Dict[str, Any]] = ContextVar("signed_ops_log_fields", default={})

# Shown first, in this order, by the text formatter.
CONTEXT_ORDER = ("trace_id", "chain_id", "signer", "method", "component")

# Attributes every LogRecord has; anything else came in through `extra=`.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}


# ----------------------------
# Context
# ----------------------------


def _plain(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray, memoryview)):
        return "0x" + bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_plain(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _plain(x) for k, x in v.items()}
    if is_dataclass(v) and not isinstance(v, type):
        return _plain(asdict(v))
    return str(v)


def context() -> Dict[str, Any]:
    """A copy of the fields bound in the current context."""
    return dict(_FIELDS.get())


def bind(**fields: Any) -> None:
    merged = dict(_FIELDS.get())
    merged.update((k, _plain(v)) for k, v in fields.items())
    _FIELDS.set(merged)


def unbind(*keys: str) -> None:
    remaining = {k: v for k, v in _FIELDS.get().items() if k not in keys}
    _FIELDS.set(remaining)


def clear_context() -> None:
    _FIELDS.set({})


@contextmanager
def _scoped(**fields: Any) -> Iterator[None]:
    token = _FIELDS.set(dict(_FIELDS.get()))
    try:
        bind(**fields)
        yield
    finally:
        _FIELDS.reset(token)


def new_trace_id() -> str:
    return uuid.uuid4().hex[:12]


def trace_scope(trace_id: Optional[str] = None):
    """Bind a trace id (fresh if not given) until the scope exits."""
    return _scoped(trace_id=trace_id or new_trace_id())


def signing_scope(*, signer: str, method: str, **fields: Any):
    """Bind the signer address and signing method for one signer request."""
    return _scoped(signer=signer, method=method, **fields)


# ----------------------------
# Formatters
# ----------------------------


def _timestamp(record: logging.LogRecord) -> str:
    ts = _dt.datetime.fromtimestamp(record.created, tz=_dt.timezone.utc)
    return ts.isoformat(timespec="milliseconds")


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _plain(v)
        for k, v in vars(record).items()
        if k not in _STANDARD_ATTRS and not k.startswith("_")
    }


def _abbrev(value: Any) -> str:
    # 0x-hex digests and signatures are shortened to 0x1234…abcd in text output
    s = str(value)
    if s.startswith("0x") and len(s) > 26:
        return f"{s[:6]}…{s[-4:]}"
    return s


class JSONFormatter(logging.Formatter):
    """One JSON object per line; bound context first, then `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        out: Dict[str, Any] = {
            "ts": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        out.update(context())
        for k, v in _extra_fields(record).items():
            out.setdefault(k, v)
        if record.exc_info:
            out["err"] = self.formatException(record.exc_info)
        return json.dumps(out, default=str, separators=(",", ":"))


class TextFormatter(logging.Formatter):
    """
    Human-friendly one-liner:
      2025-01-05T12:34:56.789+00:00 | DEBUG | signed_ops.operations | signer=0x3cb7…0f50 method=eth_sign | requesting signature
    """

    _LEVEL_COLORS = {
        logging.DEBUG: "\x1b[90m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[1;35m",
    }

    def __init__(self, color: bool = False) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        fields = context()
        ordered = [k for k in CONTEXT_ORDER if k in fields]
        ordered += sorted(k for k in fields if k not in CONTEXT_ORDER)
        kv = [f"{k}={_abbrev(fields[k])}" for k in ordered]
        kv += [f"{k}={_abbrev(v)}" for k, v in _extra_fields(record).items() if k not in fields]

        level = f"{record.levelname:<5}"
        if self.color:
            level = f"{self._LEVEL_COLORS.get(record.levelno, '')}{level}\x1b[0m"

        parts = [_timestamp(record), level, record.name]
        if kv:
            parts.append(" ".join(kv))
        parts.append(record.getMessage())
        line = " | ".join(parts)
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Setup
# ----------------------------


def _is_tty(stream: Any) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _level(value: Union[str, int]) -> int:
    if isinstance(value, int):
        return value
    resolved = logging.getLevelName(value.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure(
    *,
    json: Optional[bool] = None,
    level: Union[str, int, None] = None,
    stream: Optional[TextIO] = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Install a single stream handler on the package logger and return it.

    json   : None picks from SIGNED_OPS_LOG_FORMAT, falling back to text on a TTY.
    level  : None reads SIGNED_OPS_LOG_LEVEL (default INFO).
    stream : defaults to the current sys.stderr.

    Calling again replaces the previous handler. Records do not propagate to
    the root logger.
    """
    stream = stream if stream is not None else sys.stderr
    lvl = _level(level if level is not None else os.environ.get("SIGNED_OPS_LOG_LEVEL", "INFO"))

    if json is None:
        fmt = os.environ.get("SIGNED_OPS_LOG_FORMAT", "").strip().lower()
        json = fmt == "json" if fmt in ("json", "text") else not _is_tty(stream)

    handler = logging.StreamHandler(stream)
    handler.setLevel(lvl)
    if json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(color=_is_tty(stream) and "NO_COLOR" not in os.environ))

    logger = logging.getLogger(logger_name)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(lvl)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or PACKAGE_LOGGER)


__all__ = [
    "PACKAGE_LOGGER",
    "context",
    "bind",
    "unbind",
    "clear_context",
    "new_trace_id",
    "trace_scope",
    "signing_scope",
    "JSONFormatter",
    "TextFormatter",
    "configure",
    "get_logger",
]
