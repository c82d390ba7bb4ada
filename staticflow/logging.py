"""
staticflow Logging

Console logger shared by the build pipeline, the watcher and the dev
server. Each module asks for a named logger; levels can be set globally
or per module name.

Usage:
    from staticflow.logging import get_logger

    log = get_logger('builder')
    log.debug("Scanning %s", pages_dir)
    log.info("Site built in %dms", 12)

Output:
    [builder] INFO: Site built in 12ms

    ERROR and CRIT lines go to stderr, everything else to stdout.

Configuration:
    Environment variables (read at import and by reset_logging()):
        STATICFLOW_LOG_LEVEL=DEBUG       # Global level
        STATICFLOW_LOG_WATCHER=DEBUG     # Level for get_logger('watcher')

    In code:
        configure_logging(level='WARNING', modules={'server': 'INFO'})
"""

import os
import sys
import traceback
from enum import IntEnum
from functools import lru_cache
from typing import Dict, Optional


class LogLevel(IntEnum):
    """Numeric levels, same values as the stdlib logging module."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100


ENV_PREFIX = 'STATICFLOW_LOG_'

# Short labels used in the output prefix
_LABELS = {
    LogLevel.TRACE: 'TRACE',
    LogLevel.DEBUG: 'DEBUG',
    LogLevel.INFO: 'INFO',
    LogLevel.WARNING: 'WARN',
    LogLevel.ERROR: 'ERROR',
    LogLevel.CRITICAL: 'CRIT',
}

_default_level = LogLevel.INFO
_module_levels: Dict[str, LogLevel] = {}


def _module_key(name: str) -> str:
    return name.lower().replace('.', '_').replace('/', '_')


def parse_level(name: str) -> LogLevel:
    """Level from its name, case-insensitive. Unknown names mean INFO."""
    name = name.strip().upper()
    if name == 'WARN':
        return LogLevel.WARNING
    return LogLevel.__members__.get(name, LogLevel.INFO)


def configure_logging(
    level: str = 'INFO',
    modules: Optional[Dict[str, str]] = None,
) -> None:
    """
    Set the global level and, optionally, per-module levels.

    Args:
        level: Level name used by every module without its own setting
        modules: Module name -> level name
    """
    global _default_level
    _default_level = parse_level(level)
    for name, module_level in (modules or {}).items():
        _module_levels[_module_key(name)] = parse_level(module_level)


def _load_env_config() -> None:
    global _default_level
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        suffix = key[len(ENV_PREFIX):]
        if suffix == 'LEVEL':
            _default_level = parse_level(value)
        else:
            _module_levels[_module_key(suffix)] = parse_level(value)


_load_env_config()


class SiteLogger:
    """Named logger; look one up with get_logger()."""

    def __init__(self, module: str):
        self.module = module
        self._key = _module_key(module)

    @property
    def level(self) -> LogLevel:
        return _module_levels.get(self._key, _default_level)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, msg: str, args: tuple) -> None:
        if not self.is_enabled_for(level):
            return

        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        print(f"[{self.module}] {_LABELS[level]}: {msg}", file=stream, flush=True)

    def trace(self, msg: str, *args) -> None:
        self._log(LogLevel.TRACE, msg, args)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, msg, args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, msg, args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, msg, args)

    warn = warning

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, msg, args)

    def critical(self, msg: str, *args) -> None:
        self._log(LogLevel.CRITICAL, msg, args)

    def log_traceback(self, exc: BaseException) -> None:
        """
        Write the traceback of `exc` line by line at DEBUG.

        The command line logs the error message itself; the traceback only
        shows up when this module runs at DEBUG or lower.
        """
        if not self.is_enabled_for(LogLevel.DEBUG):
            return
        text = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        for line in text.splitlines():
            if line.strip():
                self._log(LogLevel.DEBUG, line, ())


@lru_cache(maxsize=64)
def get_logger(module: str) -> SiteLogger:
    """Cached logger for `module`; repeated calls return the same object."""
    return SiteLogger(module)


def disable_logging() -> None:
    """Silence every logger, including module overrides."""
    global _default_level
    _default_level = LogLevel.OFF
    _module_levels.clear()


def reset_logging() -> None:
    """Back to INFO, then re-apply the STATICFLOW_LOG_* environment."""
    global _default_level
    _default_level = LogLevel.INFO
    _module_levels.clear()
    _load_env_config()
