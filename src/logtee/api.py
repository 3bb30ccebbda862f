"""
Module-level logging calls bound to the process-wide TeeLogger.

    import logtee

    logtee.add_sink_path(None, logtee.INFO)      # stderr
    logtee.add_sink_path("app.log", logtee.DEBUG)
    logtee.info("started with {} workers\\n", 4)
"""

from typing import Any, NoReturn, Optional, TextIO

from .manager import PrefixProvider, get_tee
from .sinks import SinkEntry


def emit(level: int, message: str, *args: Any, **kwargs: Any) -> None:
    get_tee().emit(level, message, *args, **kwargs)


def debug(message: str, *args: Any, **kwargs: Any) -> None:
    get_tee().debug(message, *args, **kwargs)


def info(message: str, *args: Any, **kwargs: Any) -> None:
    get_tee().info(message, *args, **kwargs)


def warning(message: str, *args: Any, **kwargs: Any) -> None:
    get_tee().warning(message, *args, **kwargs)


def error(message: str, *args: Any, **kwargs: Any) -> None:
    get_tee().error(message, *args, **kwargs)


def fatal(message: str, *args: Any, **kwargs: Any) -> NoReturn:
    get_tee().fatal(message, *args, **kwargs)


def pdebug(message: str, *args: Any, err=None, **kwargs: Any) -> None:
    get_tee().pdebug(message, *args, err=err, **kwargs)


def pinfo(message: str, *args: Any, err=None, **kwargs: Any) -> None:
    get_tee().pinfo(message, *args, err=err, **kwargs)


def pwarning(message: str, *args: Any, err=None, **kwargs: Any) -> None:
    get_tee().pwarning(message, *args, err=err, **kwargs)


def perror(message: str, *args: Any, err=None, **kwargs: Any) -> None:
    get_tee().perror(message, *args, err=err, **kwargs)


def pfatal(message: str, *args: Any, err=None, **kwargs: Any) -> NoReturn:
    get_tee().pfatal(message, *args, err=err, **kwargs)


def add_sink(stream: Optional[TextIO], threshold: int = 0) -> Optional[SinkEntry]:
    return get_tee().add_sink(stream, threshold)


def add_sink_path(path: Optional[str], threshold: int = 0) -> Optional[SinkEntry]:
    return get_tee().add_sink_path(path, threshold)


def add_level(level: int, prefix: str) -> None:
    get_tee().add_level(level, prefix)


def set_prefix_callback(fn: Optional[PrefixProvider]) -> None:
    get_tee().set_prefix_callback(fn)


def reset() -> None:
    get_tee().reset()


def dump(file: Optional[TextIO] = None) -> None:
    get_tee().dump(file)
