"""
elfscope Structured Logger
===========================

Provides :class:`ScopeLogger`, a small facade over :mod:`logging` that
emits human-friendly Rich console output and, optionally, plain or
JSON-lines records to a rotating log file.

Only the engine and the CLI log.  The decoders in :mod:`elfscope.parsers`
never do: their sole outcome is a result or a raised
:class:`~elfscope.core.errors.MalformedInput`.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import threading
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
        "log.level.critical": "bold white on red",
    }
)


class _JSONFormatter(logging.Formatter):
    """Emit each log record as a single-line JSON object.

    Output fields::

        {
          "timestamp": "...",
          "level": "INFO",
          "logger": "elfscope.engine",
          "message": "...",
          "component": "engine",
          "operation": "inspect",
          "extra": { ... },
          "exc_info": "..."
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for attr in ("component", "operation"):
            val = getattr(record, attr, None)
            if val is not None:
                entry[attr] = val

        extra = getattr(record, "scope_extra", None)
        if extra is not None:
            entry["extra"] = extra

        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class _ConsoleHandler(RichHandler):
    """:class:`rich.logging.RichHandler` writing to stderr with the log theme."""

    def __init__(self, **kwargs: Any) -> None:
        console = Console(theme=_LOG_THEME, stderr=True)
        super().__init__(
            console=console,
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            markup=False,
            **kwargs,
        )


class ScopeLogger:
    """Context-aware logger bound to one elfscope component.

    Records carry ``component`` (e.g. ``"engine"``) and, inside an
    :meth:`operation` block, ``operation``.  Keyword arguments other than
    the standard ``exc_info``/``stack_info``/``stacklevel`` are collected
    into the record's ``extra`` payload.

    Usage::

        log = ScopeLogger("engine", log_file="elfscope.log", json_logs=True)
        with log.operation("inspect"):
            log.info("Decoded %s", path, sections=12)

    Args:
        component:       Name appended to the ``elfscope.`` logger namespace.
        log_level:       Minimum severity (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file:        Rotating log file path. ``None`` disables file logging.
        json_logs:       If ``True`` the file handler writes JSON lines.
        max_bytes:       Log-file size before rotation (default 10 MiB).
        backup_count:    Number of rotated files kept.
        console_output:  If ``True`` attach the Rich stderr handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._component = component
        # batch workers share one logger, so the active operation is per thread
        self._local = threading.local()

        level = getattr(logging, log_level.upper(), logging.INFO)
        self._logger = logging.getLogger(f"elfscope.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False

        # re-instantiation must not stack handlers
        self._logger.handlers.clear()

        if console_output:
            self._logger.addHandler(_ConsoleHandler(level=level))

        if log_file is not None:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(
                filename=str(file_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            fh.setLevel(level)
            if json_logs:
                fh.setFormatter(_JSONFormatter())
            else:
                fh.setFormatter(
                    logging.Formatter(
                        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                        datefmt="%Y-%m-%dT%H:%M:%S%z",
                    )
                )
            self._logger.addHandler(fh)

    # ------------------------------------------------------------------ #
    #  Operation scope
    # ------------------------------------------------------------------ #

    @property
    def _operation(self) -> str | None:
        return getattr(self._local, "operation", None)

    @_operation.setter
    def _operation(self, name: str | None) -> None:
        self._local.operation = name

    class _OperationContext:
        """Temporarily binds an operation name to every record."""

        def __init__(self, parent: ScopeLogger, operation: str) -> None:
            self._parent = parent
            self._operation = operation
            self._prev: str | None = None

        def __enter__(self) -> ScopeLogger:
            self._prev = self._parent._operation
            self._parent._operation = self._operation
            return self._parent

        def __exit__(self, *exc: Any) -> None:
            self._parent._operation = self._prev

    def operation(self, name: str) -> _OperationContext:
        return self._OperationContext(self, name)

    # ------------------------------------------------------------------ #
    #  Log methods
    # ------------------------------------------------------------------ #

    def _enrich(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        extra = kwargs.pop("extra", {}) or {}

        payload: dict[str, Any] = {}
        standard_keys = {"exc_info", "stack_info", "stacklevel"}
        for key in list(kwargs):
            if key not in standard_keys:
                payload[key] = kwargs.pop(key)

        extra["component"] = self._component
        extra["operation"] = self._operation
        if payload:
            extra["scope_extra"] = payload

        kwargs["extra"] = extra
        return kwargs

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.debug(msg, *args, **self._enrich(kwargs))

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.info(msg, *args, **self._enrich(kwargs))

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.warning(msg, *args, **self._enrich(kwargs))

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.error(msg, *args, **self._enrich(kwargs))

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log at ERROR level with the active exception's traceback."""
        kwargs["exc_info"] = kwargs.get("exc_info", True)
        self._logger.error(msg, *args, **self._enrich(kwargs))

    # ------------------------------------------------------------------ #
    #  Timing helper
    # ------------------------------------------------------------------ #

    class _TimingContext:
        """Logs the start at DEBUG and the elapsed time at INFO."""

        def __init__(self, logger_inst: ScopeLogger, label: str) -> None:
            self._logger = logger_inst
            self._label = label
            self._start: float = 0.0

        def __enter__(self) -> ScopeLogger._TimingContext:
            self._start = time.perf_counter()
            self._logger.debug("Started: %s", self._label)
            return self

        def __exit__(self, *exc: Any) -> None:
            self._logger.info("Completed: %s (%.3f sec)", self._label, self.elapsed)

        @property
        def elapsed(self) -> float:
            return time.perf_counter() - self._start

    def timed(self, label: str) -> _TimingContext:
        """Context manager that logs start/finish and elapsed time.

        Usage::

            with log.timed("decode /bin/ls"):
                elf = decode(data)
        """
        return self._TimingContext(self, label)

    @property
    def component(self) -> str:
        return self._component

    @property
    def underlying(self) -> logging.Logger:
        """Direct access to the stdlib :class:`logging.Logger`."""
        return self._logger
