"""Structured logging configuration with JSON formatting and run IDs."""

import contextvars
import logging
import sys
import traceback
import uuid
from pathlib import Path
from typing import Any

from pythonjsonlogger.json import JsonFormatter

# Hey future me, the run id tags every log line of one enrichment run (or one API
# request) so you can grep a whole run out of interleaved background logs.
# contextvars is asyncio-safe: each task sees its own value. Default "" covers
# startup logs and anything outside a run.
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="")


def get_run_id() -> str:
    """Get the current run ID from context ("" if not set)."""
    return run_id_var.get()


def set_run_id(run_id: str | None = None) -> str:
    """Set run ID in context.

    Args:
        run_id: Run ID to set. If None, generates a short random one

    Returns:
        The run ID that was set
    """
    if run_id is None:
        run_id = uuid.uuid4().hex[:8]
    run_id_var.set(run_id)
    return run_id


class RunIdFilter(logging.Filter):
    """Add run_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id()
        return True


class CompactExceptionFormatter(logging.Formatter):
    """Formatter that shows exception chains compactly, root cause first.

    Only frames from our own package are listed, e.g.:

    WARNING │ sonora.application.workers.enrichment_worker:212 │ Enrichment failed for track 42
    ╰─► ConnectError: All connection attempts failed
        File "http_fetcher.py", line 88, in fetch
          response = await client.get(url, headers=headers, params=params)
    """

    def formatException(self, ei: Any) -> str:
        _, exc_value, _ = ei
        if exc_value is None:
            return ""

        exceptions: list[BaseException] = []
        current: BaseException | None = exc_value
        while current is not None:
            exceptions.append(current)
            current = current.__cause__ or current.__context__
        exceptions.reverse()

        lines: list[str] = []
        for exc in exceptions:
            lines.append(f"╰─► {exc.__class__.__name__}: {exc}")
            if exc.__traceback__ is None:
                continue
            for frame in traceback.extract_tb(exc.__traceback__):
                if "/site-packages/" in frame.filename or "sonora" not in frame.filename:
                    continue
                lines.append(
                    f'    File "{Path(frame.filename).name}", line {frame.lineno}, in {frame.name}'
                )
                if frame.line:
                    lines.append(f"      {frame.line.strip()}")

        return "\n".join(lines)


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter with a fixed set of extra fields."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["line"] = record.lineno

        run_id = getattr(record, "run_id", "")
        if run_id:
            log_record["run_id"] = run_id

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)


# Listen future me, call this ONCE at startup. It replaces all root handlers (safe for
# tests and reloads). httpx/httpcore get quieted or the rate-limited fetcher's
# chatter drowns everything else.
def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    app_name: str = "sonora",
) -> None:
    """Configure root logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format for logs
        app_name: Application name to include in the startup log
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RunIdFilter())

    if json_format:
        formatter: logging.Formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = CompactExceptionFormatter(
            fmt="%(asctime)s │ %(levelname)-7s │ %(name)s:%(lineno)d │ %(message)s",
            datefmt="%H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"app_name": app_name, "log_level": log_level, "json_format": json_format},
    )
