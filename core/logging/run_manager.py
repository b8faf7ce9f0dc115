"""Run lifecycle for module-based logging.

A "run" is one CLI invocation or one test module. The first write to each
log file within a run rotates that file, so logs/<name>.log always holds the
latest run and logs/<name>.previous.log the one before.
"""

from contextvars import ContextVar

# ContextVars so concurrent runs in one process do not share rotation state
_current_run_id: ContextVar[str | None] = ContextVar("current_run_id", default=None)
_rotated_this_run: ContextVar[set[str] | None] = ContextVar("rotated_this_run", default=None)

_module_log_cache: dict[str, str] = {}

# Longest prefix wins; anything unmatched goes to misc.log
MODULE_TO_LOG = {
    "workflows.citation_tally": "citation-tally",
    "workflows.citation_tally.traversal": "traversal",
    "workflows.shared": "workflows-shared",
    "arxiv_tools": "arxiv",
    "core.utils": "utils",
    "core.config": "config",
    "core.logging": "logging-internal",
    "scripts": "cli",
    "testing": "testing",
}

_SORTED_PREFIXES = sorted(MODULE_TO_LOG.keys(), key=len, reverse=True)


def start_run(run_id: str) -> None:
    """Begin a run; each log file rotates on its next write.

    Args:
        run_id: Unique identifier for this run (e.g., CLI invocation, test name)
    """
    _current_run_id.set(run_id)
    _rotated_this_run.set(set())


def end_run() -> None:
    """End the current run. Missing calls only delay the next rotation."""
    _current_run_id.set(None)
    _rotated_this_run.set(None)


def get_current_run_id() -> str | None:
    """Get the current run ID, if any."""
    return _current_run_id.get()


def should_rotate(log_name: str) -> bool:
    """Return True exactly once per log file per run.

    Args:
        log_name: The log file name (without .log extension)
    """
    rotated = _rotated_this_run.get()

    if _current_run_id.get() is None or rotated is None:
        return False

    if log_name in rotated:
        return False

    rotated.add(log_name)
    return True


def module_to_log_name(module_name: str) -> str:
    """Resolve a logger name to its log file name (cached).

    Args:
        module_name: Logger name, usually a module __name__
            (e.g., "workflows.citation_tally.fetcher")

    Returns:
        Log file name without extension (e.g., "citation-tally")
    """
    if module_name not in _module_log_cache:
        _module_log_cache[module_name] = _compute_log_name(module_name)
    return _module_log_cache[module_name]


def _compute_log_name(module_name: str) -> str:
    for prefix in _SORTED_PREFIXES:
        if module_name == prefix or module_name.startswith(prefix + "."):
            return MODULE_TO_LOG[prefix]
    return "misc"
