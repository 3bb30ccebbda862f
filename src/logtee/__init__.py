"""
logtee — leveled logging to a Tee of independently thresholded sinks.

Public API:
    TeeLogger          — the logging context (levels, sinks, prefix provider)
    init_tee, get_tee  — process-wide singleton
    debug/info/warning/error/fatal          — leveled calls on the singleton
    pdebug/pinfo/pwarning/perror/pfatal     — same, with OS error appended
    add_sink, add_sink_path, add_level, set_prefix_callback, reset, dump
    DEBUG, INFO, WARNING, ERROR, FATAL      — built-in levels
    epoch_prefix, iso_prefix, pid_prefix    — ready-made prefix providers
    trace              — function tracing decorator
"""

from logtee._version import __version__, __app_name__
from logtee.api import (
    emit, debug, info, warning, error, fatal,
    pdebug, pinfo, pwarning, perror, pfatal,
    add_sink, add_sink_path, add_level, set_prefix_callback, reset, dump,
)
from logtee.errors import (
    TeeError, AllocationFailure, InvalidConfiguration, InvalidPrefix,
    SinkUnavailable,
)
from logtee.levels import DEBUG, INFO, WARNING, ERROR, FATAL, BUILTIN_LEVELS
from logtee.manager import TeeLogger, init_tee, get_tee, LINE_MAX
from logtee.prefixes import epoch_prefix, iso_prefix, pid_prefix
from logtee.trace import trace

__all__ = [
    '__version__', '__app_name__',
    'TeeLogger', 'init_tee', 'get_tee', 'LINE_MAX',
    'emit', 'debug', 'info', 'warning', 'error', 'fatal',
    'pdebug', 'pinfo', 'pwarning', 'perror', 'pfatal',
    'add_sink', 'add_sink_path', 'add_level', 'set_prefix_callback',
    'reset', 'dump',
    'TeeError', 'AllocationFailure', 'InvalidConfiguration', 'InvalidPrefix',
    'SinkUnavailable',
    'DEBUG', 'INFO', 'WARNING', 'ERROR', 'FATAL', 'BUILTIN_LEVELS',
    'epoch_prefix', 'iso_prefix', 'pid_prefix',
    'trace',
]
