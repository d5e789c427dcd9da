"""
Structured logging system for the run.
Emits one JSON object per line so workflow runners can ingest the records.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class StructuredLogger:
    """
    Logger handle that writes machine-parseable records to a stream.

    The handle is constructed once by the entry point and passed to the
    components that need it.

    Usage:
        logger = StructuredLogger("pennsieve_fetch")
        logger.info("download_completed", target_name="042", duration_s=3.2)
    """

    def __init__(
        self,
        name: str,
        stream: TextIO | None = None,
        level: str = "INFO",
        enable_json: bool = True,
        enable_console: bool = False,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name, included in every record.
            stream: Destination for JSON lines (defaults to stderr).
            level: Minimum level written.
            enable_json: Enable JSON line output.
            enable_console: Also forward records to the standard logging tree.
        """
        level = level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Use one of {LEVELS}.")

        self.name = name
        self.stream = stream if stream is not None else sys.stderr
        self.level = level
        self.enable_json = enable_json
        self.enable_console = enable_console

        self._threshold = logging.getLevelName(level)
        self._logger = logging.getLogger(name)

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {}

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def is_enabled_for(self, level: str) -> bool:
        return logging.getLevelName(level) >= self._threshold

    def _format_message(self, event: str, **context) -> str:
        """Format message for console output."""
        parts = [f"[{event}]"]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        """Write structured log entry to the stream."""
        entry = {
            "time": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "logger": self.name,
            "msg": event,
            **self._session_context,
            **context,
        }

        try:
            self.stream.write(json.dumps(entry, default=str) + "\n")
            self.stream.flush()
        except (OSError, ValueError) as e:
            # Stream closed or broken pipe: fall back to the interpreter's stderr
            print(f"JSON logging failed: {e}", file=sys.__stderr__)

    def _log(self, level: str, event: str, **context) -> None:
        if not self.is_enabled_for(level):
            return
        if self.enable_console:
            self._logger.log(
                logging.getLevelName(level), self._format_message(event, **context)
            )
        if self.enable_json:
            self._write_json(level, event, **context)

    def debug(self, event: str, **context) -> None:
        """Log debug event."""
        self._log("DEBUG", event, **context)

    def info(self, event: str, **context) -> None:
        """Log info event."""
        self._log("INFO", event, **context)

    def warning(self, event: str, **context) -> None:
        """Log warning event."""
        self._log("WARNING", event, **context)

    def error(self, event: str, **context) -> None:
        """Log error event."""
        self._log("ERROR", event, **context)


# Pre-configured loggers for common events
class DownloadLogger:
    """Specialized logger for per-file download events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def file_started(self, node_id: str, file_name: str, target_name: str):
        """Log download started."""
        self.logger.debug(
            "download_started",
            node_id=node_id,
            file_name=file_name,
            target_name=target_name,
        )

    def file_output(self, target_name: str, stdout: str, stderr: str):
        """Log the captured output of the download utility."""
        self.logger.debug(
            "download_output",
            target_name=target_name,
            stdout=stdout,
            stderr=stderr,
        )

    def file_completed(self, target_name: str, duration_s: float):
        """Log download completed."""
        self.logger.debug(
            "download_completed",
            target_name=target_name,
            duration_s=round(duration_s, 2),
        )

    def file_failed(
        self,
        target_name: str,
        error: str,
        stderr: str,
        returncode: int | None = None,
    ):
        """Log download failed, with the utility's error output."""
        self.logger.error(
            "download_failed",
            target_name=target_name,
            error=error,
            returncode=returncode,
            stderr=stderr,
        )


class APILogger:
    """Specialized logger for API events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def request_started(self, method: str, endpoint: str):
        """Log API request started."""
        self.logger.debug("api_request_started", method=method, endpoint=endpoint)

    def request_completed(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        duration_ms: float,
        size_bytes: int,
    ):
        """Log API request completed."""
        self.logger.debug(
            "api_request_completed",
            method=method,
            endpoint=endpoint,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            size_bytes=size_bytes,
        )

    def request_failed(
        self, method: str, endpoint: str, error: str, duration_ms: float
    ):
        """Log API request failed at the transport level."""
        self.logger.error(
            "api_request_failed",
            method=method,
            endpoint=endpoint,
            error=error,
            duration_ms=round(duration_ms, 2),
        )

    def response_body(self, endpoint: str, body: bytes):
        """Log a raw response body."""
        self.logger.debug(
            "api_response_body",
            endpoint=endpoint,
            body=body.decode("utf-8", errors="replace"),
        )

    def decode_failed(self, document: str, error: str):
        """Log a response body that did not decode into the expected shape."""
        self.logger.error("decode_failed", document=document, error=error)


class SessionLogger:
    """Specialized logger for run-level events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def run_started(self, integration_id: str):
        """Log run started."""
        self.logger.info("run_started", integration_id=integration_id)

    def integration_loaded(
        self, uuid: str, dataset_id: str, application_id: int, package_count: int
    ):
        """Log decoded integration."""
        self.logger.debug(
            "integration_loaded",
            uuid=uuid,
            dataset_id=dataset_id,
            application_id=application_id,
            package_count=package_count,
        )

    def manifest_loaded(self, entry_count: int):
        """Log decoded manifest."""
        self.logger.debug("manifest_loaded", entry_count=entry_count)

    def run_completed(
        self,
        duration_s: float,
        files_total: int,
        files_downloaded: int,
        files_failed: int,
    ):
        """Log run completed."""
        self.logger.info(
            "run_completed",
            duration_s=round(duration_s, 2),
            files_total=files_total,
            files_downloaded=files_downloaded,
            files_failed=files_failed,
        )

    def run_aborted(self, reason: str, error: str):
        """Log a fatal condition that ends the run."""
        self.logger.error("run_aborted", reason=reason, error=error)


def create_structured_logger(
    level: str = "INFO",
    stream: TextIO | None = None,
) -> tuple[StructuredLogger, DownloadLogger, APILogger, SessionLogger]:
    """
    Create all structured loggers.

    Returns:
        Tuple of (base_logger, download_logger, api_logger, session_logger)
    """
    base = StructuredLogger("pennsieve_fetch", stream=stream, level=level)
    download = DownloadLogger(base)
    api = APILogger(base)
    session = SessionLogger(base)

    return base, download, api, session
