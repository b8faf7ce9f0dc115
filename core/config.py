"""Citation tally configuration and environment setup.

This module provides centralized configuration for the citation tally
tools, including development mode detection and logging setup.
"""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from core.logging import ModuleDispatchHandler, ThirdPartyHandler, start_run

load_dotenv()

THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "asyncio")

_configured = False


def is_dev_mode() -> bool:
    """Check if running in development mode.

    Returns:
        True if CITATION_MODE is set to 'dev', False otherwise.
    """
    return os.getenv("CITATION_MODE", "prod").lower() == "dev"


def get_log_dir() -> Path:
    """Directory for per-module log files (CITATION_LOG_DIR, default 'logs')."""
    return Path(os.getenv("CITATION_LOG_DIR", "logs"))


def configure_logging(run_name: str) -> None:
    """Attach module-dispatch handlers to the root logger and start a run.

    First-party records go to per-module files, third-party libraries
    (httpx, httpcore) go to run-3p.log, and WARNING+ (DEBUG+ in dev mode)
    is echoed to stderr.

    Handlers are installed once per process; later calls only start a new
    run, which rotates each log file on its next write.

    Args:
        run_name: Identifier for this run (e.g., CLI invocation or test module)
    """
    global _configured

    if not _configured:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

        root = logging.getLogger()
        root.setLevel(logging.DEBUG if is_dev_mode() else logging.INFO)

        module_handler = ModuleDispatchHandler(log_dir)
        module_handler.setFormatter(formatter)
        module_handler.addFilter(
            lambda record: not record.name.startswith(THIRD_PARTY_LOGGERS)
        )
        root.addHandler(module_handler)

        third_party_handler = ThirdPartyHandler(log_dir)
        third_party_handler.setFormatter(formatter)
        third_party_handler.addFilter(
            lambda record: record.name.startswith(THIRD_PARTY_LOGGERS)
        )
        root.addHandler(third_party_handler)

        console = logging.StreamHandler(sys.stderr)
        console.setLevel(logging.DEBUG if is_dev_mode() else logging.WARNING)
        console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root.addHandler(console)

        _configured = True

    start_run(run_name)
