"""Logging handlers that split output into per-module files.

ModuleDispatchHandler routes first-party records to a file chosen by
MODULE_TO_LOG; ThirdPartyHandler collects library records (httpx, httpcore)
in a single run-3p.log. Both rotate <name>.log -> <name>.previous.log the
first time they write within a run.

File I/O here is synchronous and runs on the event loop thread.
"""

import logging
from pathlib import Path
from typing import TextIO


def _rotate_log_file(log_dir: Path, log_name: str, stream: TextIO | None) -> TextIO:
    """Move <log_name>.log to <log_name>.previous.log and reopen.

    Args:
        log_dir: Directory containing log files
        log_name: Base name of the log file (without .log extension)
        stream: Currently open stream for this log, closed before renaming

    Returns:
        Freshly opened stream for <log_name>.log
    """
    current = log_dir / f"{log_name}.log"
    previous = log_dir / f"{log_name}.previous.log"

    if stream:
        stream.close()

    if previous.exists():
        previous.unlink()
    if current.exists():
        current.rename(previous)

    return current.open("a", encoding="utf-8")


class ModuleDispatchHandler(logging.Handler):
    """Route records to logs/<module-log>.log based on the logger name.

    One handler keeps a small cache of open files instead of one
    FileHandler per module. Files are opened lazily on first write.

    Usage:
        handler = ModuleDispatchHandler(Path("logs"))
        handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
        logging.getLogger().addHandler(handler)
    """

    def __init__(self, log_dir: Path):
        super().__init__()
        self.log_dir = log_dir
        self._file_cache: dict[str, TextIO] = {}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            # Import here to avoid circular imports
            from core.logging.run_manager import module_to_log_name, should_rotate

            log_name = module_to_log_name(record.name)

            if should_rotate(log_name):
                existing = self._file_cache.pop(log_name, None)
                self._file_cache[log_name] = _rotate_log_file(
                    self.log_dir, log_name, existing
                )

            stream = self._file_cache.get(log_name)
            if stream is None:
                self.log_dir.mkdir(parents=True, exist_ok=True)
                stream = open(self.log_dir / f"{log_name}.log", "a", encoding="utf-8")
                self._file_cache[log_name] = stream

            stream.write(self.format(record) + "\n")
            stream.flush()

        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close every cached file handle."""
        self.acquire()
        try:
            for stream in self._file_cache.values():
                try:
                    stream.close()
                except OSError:
                    pass
            self._file_cache.clear()
        finally:
            self.release()
        super().close()


class ThirdPartyHandler(logging.FileHandler):
    """Single run-3p.log for third-party library records."""

    LOG_NAME = "run-3p"

    def __init__(self, log_dir: Path, **kwargs):
        self.log_dir = log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        super().__init__(log_dir / f"{self.LOG_NAME}.log", mode="a", encoding="utf-8", **kwargs)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            from core.logging.run_manager import should_rotate

            if should_rotate(self.LOG_NAME):
                self.stream = _rotate_log_file(self.log_dir, self.LOG_NAME, self.stream)

            super().emit(record)

        except Exception:
            self.handleError(record)
